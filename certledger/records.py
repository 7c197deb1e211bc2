"""
Enterprise record types and wire format.

Records are stored as flat JSON objects whose field names are shared with
every other reader of the ledger, so they must not change. Timestamps are
RFC 3339 UTC strings; an unset timestamp is written as the zero value
``0001-01-01T00:00:00Z`` and read back as ``None``.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

DOC_TYPE = "enterprise"
ZERO_TIMESTAMP = "0001-01-01T00:00:00Z"

_FRACTION = re.compile(r"\.(\d+)")


class EnterpriseState(str, Enum):
    REGISTERED = "REGISTERED"
    CERTIFIED = "CERTIFIED"
    REVOKED = "REVOKED"
    BLACKLISTED = "BLACKLISTED"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return ZERO_TIMESTAMP
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp, including nanosecond fractions.

    The zero timestamp (any time in year 1) and empty values map to ``None``.
    """
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError(f"timestamp must be a string, got {type(value).__name__}")
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    # datetime only carries microseconds
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    if parsed.year == 1:
        return None
    return parsed.astimezone(timezone.utc)


def _string_list(value: Any, name: str) -> List[str]:
    # Older writers serialize empty collections as null
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"{name} must be a list")
    if not all(isinstance(v, str) for v in value):
        raise ValueError(f"{name} must contain only strings")
    return list(value)


def _string(data: Dict[str, Any], name: str) -> str:
    value = data.get(name)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string, got {type(value).__name__}")
    return value


@dataclass
class Enterprise:
    """An enterprise certification record."""
    id: str
    name: str = ""
    details: str = ""
    state: EnterpriseState = EnterpriseState.REGISTERED
    certificate_id: str = ""
    certification_date: Optional[datetime] = None
    certified_by: str = ""
    revocation_date: Optional[datetime] = None
    revocation_reason: str = ""
    blacklist_date: Optional[datetime] = None
    blacklist_reason: str = ""
    previous_state: Optional[EnterpriseState] = None
    organizations: List[str] = field(default_factory=list)
    channels: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    doc_type: str = DOC_TYPE

    @property
    def is_blacklisted(self) -> bool:
        return self.state == EnterpriseState.BLACKLISTED

    def copy(self, **changes: Any) -> "Enterprise":
        """Return a new record with ``changes`` applied; collections are copied."""
        changes.setdefault("organizations", list(self.organizations))
        changes.setdefault("channels", list(self.channels))
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "docType": self.doc_type,
            "id": self.id,
            "name": self.name,
            "details": self.details,
            "state": self.state.value,
            "certificateId": self.certificate_id,
            "certificationDate": format_timestamp(self.certification_date),
            "certifiedBy": self.certified_by,
            "revocationDate": format_timestamp(self.revocation_date),
            "revocationReason": self.revocation_reason,
            "blacklistDate": format_timestamp(self.blacklist_date),
            "blacklistReason": self.blacklist_reason,
            "previousState": self.previous_state.value if self.previous_state else "",
            "organizations": list(self.organizations),
            "channels": list(self.channels),
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Enterprise":
        """Create from the wire representation.

        Raises:
            ValueError: A field is missing or has the wrong shape
        """
        if not isinstance(data, dict):
            raise ValueError("record must be a JSON object")
        if not data.get("id"):
            raise ValueError("record has no id")
        if not isinstance(data["id"], str):
            raise ValueError("id must be a string")
        previous = _string(data, "previousState") or None
        return cls(
            id=data["id"],
            name=_string(data, "name"),
            details=_string(data, "details"),
            state=EnterpriseState(data.get("state")),
            certificate_id=_string(data, "certificateId"),
            certification_date=parse_timestamp(data.get("certificationDate")),
            certified_by=_string(data, "certifiedBy"),
            revocation_date=parse_timestamp(data.get("revocationDate")),
            revocation_reason=_string(data, "revocationReason"),
            blacklist_date=parse_timestamp(data.get("blacklistDate")),
            blacklist_reason=_string(data, "blacklistReason"),
            previous_state=EnterpriseState(previous) if previous else None,
            organizations=_string_list(data.get("organizations"), "organizations"),
            channels=_string_list(data.get("channels"), "channels"),
            created_at=parse_timestamp(data.get("createdAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
            doc_type=_string(data, "docType") or DOC_TYPE,
        )

    def to_json(self) -> bytes:
        return json.dumps(self.to_dict(), separators=(",", ":")).encode("utf-8")

    @classmethod
    def from_json(cls, raw: Union[str, bytes]) -> "Enterprise":
        return cls.from_dict(json.loads(raw))


__all__ = [
    "DOC_TYPE",
    "ZERO_TIMESTAMP",
    "EnterpriseState",
    "Enterprise",
    "utc_now",
    "format_timestamp",
    "parse_timestamp",
]
