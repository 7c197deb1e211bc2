"""
certledger

Role-gated certification lifecycle for Enterprise records kept in a
key-value ledger.
"""

__version__ = "0.1.0"

from .config import ContractConfig, RedisLedgerConfig
from .errors import (
    CertLedgerError,
    IdentityUnavailable,
    AccessDenied,
    MissingRoleAttribute,
    InvalidArgument,
    NotFound,
    Conflict,
    RecoveryDataMissing,
    StoreFailure,
    CorruptRecord,
)
from .records import Enterprise, EnterpriseState
from .identity import StaticIdentity, X509Identity, RoleGate, check_role
from .store import MemoryLedger, RedisLedger, RecordStore
from .contract import EnterpriseContract, TransactionContext, CertificateIdGenerator

__all__ = [
    "ContractConfig",
    "RedisLedgerConfig",
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
    "Enterprise",
    "EnterpriseState",
    "StaticIdentity",
    "X509Identity",
    "RoleGate",
    "check_role",
    "MemoryLedger",
    "RedisLedger",
    "RecordStore",
    "EnterpriseContract",
    "TransactionContext",
    "CertificateIdGenerator",
]
