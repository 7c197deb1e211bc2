"""Configuration dataclasses for the contract and the Redis ledger backend."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

_TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass
class ContractConfig:
    """Behavioural switches for :class:`EnterpriseContract`."""
    doc_type: str = "enterprise"
    certificate_id_prefix: str = "CERT"
    # Also write the pre-blacklist state into `details` so that readers of the
    # older record layout can still restore blacklisted records.
    legacy_details_encoding: bool = False

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ContractConfig":
        env = os.environ if env is None else env
        return cls(
            doc_type=env.get("CERTLEDGER_DOC_TYPE", cls.doc_type),
            certificate_id_prefix=env.get("CERTLEDGER_CERT_PREFIX", cls.certificate_id_prefix),
            legacy_details_encoding=_env_flag(env, "CERTLEDGER_LEGACY_DETAILS_ENCODING", cls.legacy_details_encoding),
        )


@dataclass
class RedisLedgerConfig:
    url: str = "redis://localhost:6379/0"
    prefix: str = "certledger"
    # SCAN tuning for selector queries
    scan_page_size: int = 500
    # 0 scans the whole keyspace; a positive cap fails the query when exceeded
    max_scan: int = 0

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "RedisLedgerConfig":
        env = os.environ if env is None else env
        return cls(
            url=env.get("CERTLEDGER_REDIS_URL", cls.url),
            prefix=env.get("CERTLEDGER_REDIS_PREFIX", cls.prefix),
            scan_page_size=int(env.get("CERTLEDGER_REDIS_SCAN_PAGE_SIZE", cls.scan_page_size)),
            max_scan=int(env.get("CERTLEDGER_REDIS_MAX_SCAN", cls.max_scan)),
        )


__all__ = ["ContractConfig", "RedisLedgerConfig"]
