"""Per-invocation transaction context."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..identity.types import ClientIdentity
from ..store.base import Ledger, RecordStore


@dataclass
class TransactionContext:
    """Caller identity and ledger handle for one contract invocation."""
    identity: ClientIdentity
    ledger: Ledger
    store: RecordStore = field(init=False)

    def __post_init__(self):
        self.store = RecordStore(self.ledger)


__all__ = ["TransactionContext"]
