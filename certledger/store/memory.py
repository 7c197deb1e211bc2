"""In-memory ledger backend.

Thread-safe dict-backed ledger for tests, scripts and single-process use.
Selector queries are evaluated against every stored JSON document.
"""

from __future__ import annotations

import json
import logging
import threading
from typing import Dict, List, Optional

from .selector import matches, parse_selector

logger = logging.getLogger(__name__)


class MemoryLedger:
    def __init__(self):
        self._lock = threading.Lock()
        self._data: Dict[str, bytes] = {}
        self.writes = 0

    async def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            return self._data.get(key)

    async def put(self, key: str, value: bytes) -> None:
        if not key:
            raise ValueError("key must not be empty")
        with self._lock:
            self._data[key] = bytes(value)
            self.writes += 1

    async def query(self, selector: str) -> List[bytes]:
        predicates = parse_selector(selector)
        with self._lock:
            items = list(self._data.items())
        results: List[bytes] = []
        for key, raw in items:
            try:
                doc = json.loads(raw)
            except ValueError:
                logger.debug("Skipping non-JSON value at %s", key)
                continue
            if isinstance(doc, dict) and matches(doc, predicates):
                results.append(raw)
        return results

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._data.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


__all__ = ["MemoryLedger"]
