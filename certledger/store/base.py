"""
Ledger collaborator protocol and the typed record store over it.

The ledger only deals in bytes keyed by string; :class:`RecordStore` adds
the Enterprise codec and maps every backend failure onto the certledger
error taxonomy. Nothing here retries.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol

from ..errors import CertLedgerError, CorruptRecord, NotFound, StoreFailure
from ..records import Enterprise

logger = logging.getLogger(__name__)


class Ledger(Protocol):
    """Byte-level key-value ledger with server-side selector queries."""

    async def get(self, key: str) -> Optional[bytes]:
        ...  # pragma: no cover - interface placeholder

    async def put(self, key: str, value: bytes) -> None:
        ...  # pragma: no cover - interface placeholder

    async def query(self, selector: str) -> List[bytes]:
        ...  # pragma: no cover - interface placeholder


class RecordStore:
    """Typed access to Enterprise records held in a :class:`Ledger`."""

    def __init__(self, ledger: Ledger):
        self.ledger = ledger

    async def _read(self, key: str) -> Optional[bytes]:
        try:
            return await self.ledger.get(key)
        except CertLedgerError:
            raise
        except Exception as e:
            logger.error(f"Ledger read failed for {key}: {e}")
            raise StoreFailure(f"failed to read from world state: {e}", key=key)

    async def exists(self, enterprise_id: str) -> bool:
        return bool(await self._read(enterprise_id))

    async def get(self, enterprise_id: str) -> Enterprise:
        raw = await self._read(enterprise_id)
        if not raw:
            raise NotFound(enterprise_id)
        return self._decode(enterprise_id, raw)

    async def put(self, enterprise: Enterprise) -> None:
        payload = enterprise.to_json()
        try:
            await self.ledger.put(enterprise.id, payload)
        except CertLedgerError:
            raise
        except Exception as e:
            logger.error(f"Ledger write failed for {enterprise.id}: {e}")
            raise StoreFailure(f"failed to write to world state: {e}", key=enterprise.id)
        logger.debug("Stored enterprise %s (%s)", enterprise.id, enterprise.state.value)

    async def query(self, selector: str) -> List[Enterprise]:
        try:
            rows = await self.ledger.query(selector)
        except CertLedgerError:
            raise
        except Exception as e:
            logger.error(f"Ledger query failed: {e}")
            raise StoreFailure(f"failed to query world state: {e}")
        return [self._decode("<query result>", raw) for raw in rows]

    @staticmethod
    def _decode(key: str, raw: bytes) -> Enterprise:
        try:
            return Enterprise.from_json(raw)
        except (ValueError, TypeError, KeyError) as e:
            logger.error(f"Decode failure for {key}: {e}")
            raise CorruptRecord(key, str(e))


__all__ = ["Ledger", "RecordStore"]
