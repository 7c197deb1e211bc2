"""Read-only multi-record lookups.

These helpers build fixed selectors and pass them straight to the record
store: no pagination, no ordering, no filtering beyond the predicate.
"""

from __future__ import annotations

from typing import List, Union

from ..records import DOC_TYPE, Enterprise, EnterpriseState
from ..store.base import RecordStore
from ..store.selector import selector_json


def state_selector(state: Union[EnterpriseState, str], doc_type: str = DOC_TYPE) -> str:
    value = EnterpriseState(state).value
    return selector_json({"docType": doc_type, "state": value})


def blacklisted_selector(doc_type: str = DOC_TYPE) -> str:
    return state_selector(EnterpriseState.BLACKLISTED, doc_type)


async def query_by_state(
    store: RecordStore, state: Union[EnterpriseState, str], doc_type: str = DOC_TYPE
) -> List[Enterprise]:
    return await store.query(state_selector(state, doc_type))


async def query_blacklisted(store: RecordStore, doc_type: str = DOC_TYPE) -> List[Enterprise]:
    return await store.query(blacklisted_selector(doc_type))


__all__ = ["state_selector", "blacklisted_selector", "query_by_state", "query_blacklisted"]
