"""
Example: Enterprise certification lifecycle

Walks one enterprise through registration, certification, blacklisting and
restoration, then shows the role gate rejecting a caller with the wrong role.

Runs against an in-memory ledger by default; set CERTLEDGER_REDIS_URL to use
a Redis server instead.
"""

import asyncio
import logging
import os
import sys

# Add parent directory to path so we can import certledger
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from certledger import (
    AccessDenied,
    ContractConfig,
    EnterpriseContract,
    MemoryLedger,
    RedisLedger,
    RedisLedgerConfig,
    StaticIdentity,
    TransactionContext,
)


async def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    print("Enterprise Certification Demo")
    print("=" * 50)

    if os.getenv("CERTLEDGER_REDIS_URL"):
        ledger = RedisLedger(RedisLedgerConfig.from_env())
        print(f"Using Redis ledger at {ledger.config.url}")
    else:
        ledger = MemoryLedger()
        print("Using in-memory ledger")

    contract = EnterpriseContract(ContractConfig.from_env())
    registrar = TransactionContext(StaticIdentity.with_role("alice", "registrar"), ledger)
    certifier = TransactionContext(StaticIdentity.with_role("bob", "certifier"), ledger)
    admin = TransactionContext(StaticIdentity.with_role("carol", "admin"), ledger)

    await contract.init_ledger(admin)

    print("\n1. Registering E1 (Acme)")
    e = await contract.register_enterprise(registrar, "E1", "Acme", "desc")
    print(f"   state={e.state.value}")

    print("\n2. Certifying E1")
    e = await contract.certify_enterprise(certifier, "E1")
    print(f"   state={e.state.value} certificate={e.certificate_id} by={e.certified_by}")

    print("\n3. Blacklisting E1 for fraud")
    e = await contract.blacklist_enterprise(admin, "E1", "fraud")
    print(f"   state={e.state.value} reason={e.blacklist_reason} previous={e.previous_state.value}")
    blacklisted = await contract.query_blacklisted_enterprises(admin)
    print(f"   blacklisted now: {[b.id for b in blacklisted]}")

    print("\n4. Restoring E1")
    e = await contract.unblacklist_enterprise(admin, "E1")
    print(f"   state={e.state.value} details={e.details!r}")

    print("\n5. Registrar attempting to revoke")
    try:
        await contract.revoke_certification(registrar, "E1", "not allowed")
    except AccessDenied as err:
        print(f"   denied: {err}")

    if isinstance(ledger, RedisLedger):
        await ledger.close()


if __name__ == "__main__":
    asyncio.run(main())
