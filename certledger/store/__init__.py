"""
Record store package.

Provides the byte-level ledger protocol, the typed Enterprise record store
on top of it, and in-memory and Redis-based ledger backends.
"""

from .base import Ledger, RecordStore
from .memory import MemoryLedger
from .redis import RedisLedger
from .selector import matches, parse_selector, selector_json

__all__ = [
    "Ledger",
    "RecordStore",
    "MemoryLedger",
    "RedisLedger",
    "matches",
    "parse_selector",
    "selector_json",
]
