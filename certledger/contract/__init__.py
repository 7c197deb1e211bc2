"""
Enterprise certification contract: state machine, queries, recovery codec
and certificate id generation.
"""

from .certid import CertificateIdGenerator
from .context import TransactionContext
from .contract import EnterpriseContract
from .query import blacklisted_selector, query_blacklisted, query_by_state, state_selector
from .recovery import RECOVERY_MARKER, decode_previous_state, encode_previous_state, has_marker

__all__ = [
    "CertificateIdGenerator",
    "TransactionContext",
    "EnterpriseContract",
    "blacklisted_selector",
    "state_selector",
    "query_blacklisted",
    "query_by_state",
    "RECOVERY_MARKER",
    "encode_previous_state",
    "decode_previous_state",
    "has_marker",
]
