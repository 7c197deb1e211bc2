import os
import uuid

import pytest
from prometheus_client import CollectorRegistry
from redis.exceptions import ConnectionError as RedisConnectionError  # type: ignore

from certledger.config import RedisLedgerConfig
from certledger.contract import EnterpriseContract, TransactionContext
from certledger.contract.query import query_blacklisted
from certledger.errors import StoreFailure
from certledger.identity import StaticIdentity
from certledger.monitoring import MetricsRegistry
from certledger.records import Enterprise, EnterpriseState
from certledger.store import RecordStore, RedisLedger

pytestmark = pytest.mark.asyncio

REDIS_URL = os.getenv("REDIS_TEST_URL", "redis://localhost:6379/0")


@pytest.fixture
async def ledger():
    cfg = RedisLedgerConfig(url=REDIS_URL, prefix=f"certledger-test-{uuid.uuid4().hex[:8]}", scan_page_size=50)
    led = RedisLedger(cfg)
    try:
        await led.get("healthcheck")
    except Exception:
        await led.close()
        pytest.skip("Redis server not reachable")
    yield led
    try:
        await led.delete_all()
    except RedisConnectionError:
        pass
    await led.close()


async def test_redis_ledger_crud_and_query(ledger):
    assert await ledger.get("E1") is None
    await ledger.put("E1", b'{"docType":"enterprise","state":"BLACKLISTED","id":"E1"}')
    await ledger.put("E2", b'{"docType":"enterprise","state":"CERTIFIED","id":"E2"}')
    assert await ledger.get("E1") is not None
    found = await ledger.query('{"selector":{"docType":"enterprise","state":"BLACKLISTED"}}')
    assert len(found) == 1


async def test_contract_over_redis(ledger):
    contract = EnterpriseContract(metrics=MetricsRegistry(CollectorRegistry()))
    reg = TransactionContext(StaticIdentity.with_role("r", "registrar"), ledger)
    admin = TransactionContext(StaticIdentity.with_role("a", "admin"), ledger)
    await contract.register_enterprise(reg, "E1", "Acme", "desc")
    await contract.blacklist_enterprise(admin, "E1", "fraud")
    found = await contract.query_blacklisted_enterprises(admin)
    assert [e.id for e in found] == ["E1"]
    restored = await contract.unblacklist_enterprise(admin, "E1")
    assert restored.state == EnterpriseState.REGISTERED
    assert restored.details == "desc"


class PagedRedisClient:
    """In-memory stand-in for the subset of the redis.asyncio client RedisLedger calls."""

    def __init__(self):
        self.data = {}

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value):
        self.data[key] = value

    async def scan(self, cursor=0, match=None, count=10):
        prefix = match.rstrip("*") if match else ""
        keys = sorted(k for k in self.data if k.startswith(prefix))
        page = keys[cursor:cursor + count]
        nxt = cursor + count
        return (0 if nxt >= len(keys) else nxt), page

    def pipeline(self):
        client = self

        class _Pipeline:
            def __init__(self):
                self.keys = []

            def get(self, key):
                self.keys.append(key)

            async def execute(self):
                return [client.data.get(k) for k in self.keys]

        return _Pipeline()


async def _blacklisted_store(config, count):
    ledger = RedisLedger(config, client=PagedRedisClient())
    store = RecordStore(ledger)
    for i in range(count):
        await store.put(Enterprise(id=f"E{i:03d}", state=EnterpriseState.BLACKLISTED,
                                   previous_state=EnterpriseState.REGISTERED))
    await store.put(Enterprise(id="OK", state=EnterpriseState.CERTIFIED))
    return store


async def test_query_returns_every_match_across_scan_pages():
    store = await _blacklisted_store(RedisLedgerConfig(prefix="p", scan_page_size=10), 60)
    found = await query_blacklisted(store)
    assert len(found) == 60
    assert {e.id for e in found} == {f"E{i:03d}" for i in range(60)}


async def test_query_over_scan_cap_fails_instead_of_truncating():
    store = await _blacklisted_store(RedisLedgerConfig(prefix="p", scan_page_size=10, max_scan=20), 60)
    with pytest.raises(StoreFailure):
        await query_blacklisted(store)


async def test_query_within_scan_cap_is_complete():
    store = await _blacklisted_store(RedisLedgerConfig(prefix="p", scan_page_size=10, max_scan=100), 60)
    assert len(await query_blacklisted(store)) == 60
