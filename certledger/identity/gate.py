"""Role gate guarding every mutating contract operation.

A caller is admitted iff the ``role`` attribute bound to its credential equals
the role the operation requires: exact, case-sensitive match, no hierarchy and
no wildcard. An ``admin`` is not implicitly a ``certifier``.
"""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional

from ..errors import AccessDenied, CertLedgerError, IdentityUnavailable, MissingRoleAttribute
from .types import ClientIdentity

logger = logging.getLogger(__name__)

ROLE_ATTRIBUTE = "role"

ROLE_REGISTRAR = "registrar"
ROLE_CERTIFIER = "certifier"
ROLE_ADMIN = "admin"

# One required role per guarded operation
OPERATION_ROLES: Dict[str, str] = {
    "register_enterprise": ROLE_REGISTRAR,
    "certify_enterprise": ROLE_CERTIFIER,
    "revoke_certification": ROLE_CERTIFIER,
    "blacklist_enterprise": ROLE_ADMIN,
    "unblacklist_enterprise": ROLE_ADMIN,
    "assign_organizations": ROLE_ADMIN,
    "assign_channels": ROLE_ADMIN,
}


def resolve_client_id(identity: ClientIdentity) -> str:
    try:
        client_id = identity.get_id()
    except IdentityUnavailable:
        raise
    except Exception as e:
        raise IdentityUnavailable(f"failed to get client identity: {e}")
    if not client_id:
        raise IdentityUnavailable("failed to get client identity: empty id")
    return client_id


def check_role(identity: ClientIdentity, required_role: str) -> str:
    """Admit the caller iff its role attribute equals ``required_role``.

    Args:
        identity: Caller identity of the current transaction
        required_role: Role the operation requires

    Returns:
        The resolved client id, for callers that record who acted.

    Raises:
        IdentityUnavailable: The identity (or its attributes) cannot be read
        MissingRoleAttribute: The credential carries no role attribute
        AccessDenied: The role does not match
    """
    client_id = resolve_client_id(identity)
    try:
        role, present = identity.get_attribute_value(ROLE_ATTRIBUTE)
    except CertLedgerError:
        raise
    except Exception as e:
        raise IdentityUnavailable(f"failed to get role attribute: {e}")
    if not present:
        raise MissingRoleAttribute(client_id, required_role)
    if role != required_role:
        raise AccessDenied(client_id, required_role)
    return client_id


class RoleGate:
    """Maps operation names to required roles and checks callers against them."""

    def __init__(self, roles: Optional[Mapping[str, str]] = None):
        self._roles: Dict[str, str] = dict(OPERATION_ROLES if roles is None else roles)

    def required_role(self, operation: str) -> str:
        try:
            return self._roles[operation]
        except KeyError:
            raise ValueError(f"No role registered for operation '{operation}'")

    def authorize(self, identity: ClientIdentity, operation: str) -> str:
        required = self.required_role(operation)
        try:
            client_id = check_role(identity, required)
        except AccessDenied as e:
            logger.warning("Access denied for %s: %s", operation, e)
            raise
        logger.debug("Client %s admitted to %s", client_id, operation)
        return client_id


__all__ = [
    "ROLE_ATTRIBUTE",
    "ROLE_REGISTRAR",
    "ROLE_CERTIFIER",
    "ROLE_ADMIN",
    "OPERATION_ROLES",
    "resolve_client_id",
    "check_role",
    "RoleGate",
]
