"""Caller identity abstractions consumed by the role gate."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol, Tuple


class ClientIdentity(Protocol):
    """Identity interface the role gate reads from.

    Mirrors what a ledger peer exposes for the submitting client: a stable
    identifier and string attributes bound to the client's credential.
    """

    def get_id(self) -> str:
        ...  # pragma: no cover - interface placeholder

    def get_attribute_value(self, name: str) -> Tuple[str, bool]:
        ...  # pragma: no cover - interface placeholder


@dataclass
class StaticIdentity:
    """In-process identity with a fixed id and attribute set."""
    client_id: str
    attributes: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def with_role(cls, client_id: str, role: Optional[str]) -> "StaticIdentity":
        attrs = {"role": role} if role is not None else {}
        return cls(client_id=client_id, attributes=attrs)

    def get_id(self) -> str:
        return self.client_id

    def get_attribute_value(self, name: str) -> Tuple[str, bool]:
        if name in self.attributes:
            return self.attributes[name], True
        return "", False


__all__ = ["ClientIdentity", "StaticIdentity"]
