"""Redis-backed ledger backend.

Each record is stored as a JSON blob at ``{prefix}:state:{key}``. Selector
queries walk the keyspace with a paged SCAN, fetch candidate values in a
pipeline and keep the documents that satisfy the selector. A query either
sees the whole keyspace or fails: with a positive ``max_scan``, walking that
many keys before the scan completes raises :class:`StoreFailure` instead
of returning a partial result.
"""

from __future__ import annotations

import json
import logging
from typing import List, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from ..config import RedisLedgerConfig
from ..errors import StoreFailure
from .selector import matches, parse_selector

logger = logging.getLogger(__name__)


class RedisLedger:
    def __init__(self, config: Optional[RedisLedgerConfig] = None, client=None):
        self.config = config or RedisLedgerConfig()
        self.prefix = self.config.prefix.rstrip(":")
        self._client = client

    async def _get_client(self):
        if self._client is None:
            self._client = redis.from_url(self.config.url, decode_responses=False)
        return self._client

    # Key helpers
    def _state_key(self, key: str) -> str:
        return f"{self.prefix}:state:{key}"

    def _key_pattern(self) -> str:
        return f"{self.prefix}:state:*"

    async def get(self, key: str) -> Optional[bytes]:
        client = await self._get_client()
        try:
            return await client.get(self._state_key(key))
        except RedisError as e:
            raise StoreFailure(f"failed to read from world state: {e}", key=key)

    async def put(self, key: str, value: bytes) -> None:
        if not key:
            raise ValueError("key must not be empty")
        client = await self._get_client()
        try:
            await client.set(self._state_key(key), value)
        except RedisError as e:
            raise StoreFailure(f"failed to write to world state: {e}", key=key)
        logger.debug("Stored %s", key)

    async def query(self, selector: str) -> List[bytes]:
        predicates = parse_selector(selector)
        client = await self._get_client()
        cursor = 0
        scanned = 0
        out: List[bytes] = []
        try:
            while True:
                cursor, keys = await client.scan(
                    cursor=cursor, match=self._key_pattern(), count=self.config.scan_page_size
                )
                if keys:
                    pipe = client.pipeline()
                    for k in keys:
                        pipe.get(k)
                    raws = await pipe.execute()
                    scanned += len(keys)
                    for raw in raws:
                        if raw and self._matches(raw, predicates):
                            out.append(raw)
                if cursor == 0:
                    break
                if 0 < self.config.max_scan <= scanned:
                    logger.error(f"Selector query aborted after scanning {scanned} keys")
                    raise StoreFailure(
                        f"selector query exceeded max_scan={self.config.max_scan} keys",
                        scanned=scanned,
                    )
        except RedisError as e:
            raise StoreFailure(f"failed to query world state: {e}")
        return out

    @staticmethod
    def _matches(raw: bytes, predicates) -> bool:
        try:
            doc = json.loads(raw)
        except ValueError:
            return False
        return isinstance(doc, dict) and matches(doc, predicates)

    async def delete_all(self) -> int:
        """Remove every key under this ledger's prefix (test helper)."""
        client = await self._get_client()
        cursor = 0
        deleted = 0
        while True:
            cursor, keys = await client.scan(cursor=cursor, match=self._key_pattern(), count=self.config.scan_page_size)
            if keys:
                deleted += await client.delete(*keys)
            if cursor == 0:
                break
        return deleted

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


__all__ = ["RedisLedger"]
