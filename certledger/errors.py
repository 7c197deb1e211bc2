"""Exception hierarchy for certledger.

Every failure raised by the contract, the role gate or the store adapter
derives from :class:`CertLedgerError`. Errors are local to a single
operation: nothing is retried and no compensating write is attempted.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class CertLedgerError(Exception):
    """Base class for all certledger errors."""

    code = "certledger_error"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = {k: v for k, v in details.items() if v is not None}

    def to_dict(self) -> Dict[str, Any]:  # convenience for logging / JSON
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class IdentityUnavailable(CertLedgerError):
    """The caller identity could not be resolved."""

    code = "identity_unavailable"


class AccessDenied(CertLedgerError):
    """Caller lacks the role an operation requires."""

    code = "access_denied"

    def __init__(self, client_id: str, required_role: str, message: Optional[str] = None):
        super().__init__(
            message or f"client {client_id} does not have required role: {required_role}",
            client_id=client_id,
            required_role=required_role,
        )
        self.client_id = client_id
        self.required_role = required_role


class MissingRoleAttribute(AccessDenied):
    code = "missing_role_attribute"

    def __init__(self, client_id: str, required_role: str):
        super().__init__(
            client_id,
            required_role,
            message=f"client {client_id} does not have role attribute",
        )


class InvalidArgument(CertLedgerError):
    """An argument is unusable before any state is read."""

    code = "invalid_argument"


class NotFound(CertLedgerError):
    code = "not_found"

    def __init__(self, enterprise_id: str):
        super().__init__(f"the enterprise {enterprise_id} does not exist", enterprise_id=enterprise_id)
        self.enterprise_id = enterprise_id


class Conflict(CertLedgerError):
    """Registration of an existing id or a transition from an incompatible state."""

    code = "conflict"

    def __init__(self, enterprise_id: str, state: Optional[str], message: str):
        super().__init__(message, enterprise_id=enterprise_id, state=state)
        self.enterprise_id = enterprise_id
        self.state = state


class RecoveryDataMissing(CertLedgerError):
    """A blacklisted record carries no usable pre-blacklist state."""

    code = "recovery_data_missing"

    def __init__(self, enterprise_id: str, reason: str = ""):
        message = f"unable to determine previous state for enterprise {enterprise_id}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, enterprise_id=enterprise_id)
        self.enterprise_id = enterprise_id


class StoreFailure(CertLedgerError):
    """Ledger I/O failed."""

    code = "store_failure"


class CorruptRecord(StoreFailure):
    """Stored bytes could not be decoded into a record."""

    code = "corrupt_record"

    def __init__(self, key: str, reason: str):
        super().__init__(f"record {key} is corrupt: {reason}", key=key)
        self.key = key


__all__ = [
    "CertLedgerError",
    "IdentityUnavailable",
    "AccessDenied",
    "MissingRoleAttribute",
    "InvalidArgument",
    "NotFound",
    "Conflict",
    "RecoveryDataMissing",
    "StoreFailure",
    "CorruptRecord",
]
