"""
Enterprise certification contract.

Implements the certification state machine over the record store:

    REGISTERED -> CERTIFIED -> REVOKED
    any non-blacklisted state -> BLACKLISTED -> the state it came from

Every mutating operation follows the same shape: role gate, read the current
record, validate the transition, compute the next record, one ``put``. A
failed check raises before anything is written, so a rejected call never
leaves a partial update behind.
"""

import functools
import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from ..config import ContractConfig
from ..errors import AccessDenied, Conflict, InvalidArgument, RecoveryDataMissing
from ..identity.gate import RoleGate
from ..monitoring.metrics_exporter import MetricsRegistry, get_registry
from ..records import Enterprise, EnterpriseState, utc_now
from .certid import CertificateIdGenerator
from .context import TransactionContext
from .query import query_blacklisted, query_by_state
from .recovery import decode_previous_state, encode_previous_state, has_marker

logger = logging.getLogger(__name__)


def _operation(name: str):
    """Record the outcome of a contract operation in the metrics registry."""

    def decorator(fn):
        @functools.wraps(fn)
        async def wrapper(self, *args, **kwargs):
            try:
                result = await fn(self, *args, **kwargs)
            except Exception as e:
                self.metrics.observe(name, type(e).__name__)
                if isinstance(e, AccessDenied):
                    self.metrics.observe_denied(name)
                raise
            self.metrics.observe(name)
            return result

        return wrapper

    return decorator


class EnterpriseContract:
    """Role-gated lifecycle operations on Enterprise records."""

    def __init__(
        self,
        config: Optional[ContractConfig] = None,
        gate: Optional[RoleGate] = None,
        id_generator: Optional[CertificateIdGenerator] = None,
        now_func: Optional[Callable[[], datetime]] = None,
        metrics: Optional[MetricsRegistry] = None,
    ):
        self.config = config or ContractConfig()
        self.gate = gate or RoleGate()
        self.id_generator = id_generator or CertificateIdGenerator(self.config.certificate_id_prefix)
        self._now = now_func or utc_now
        self.metrics = metrics or get_registry()

    async def init_ledger(self, ctx: TransactionContext) -> None:
        logger.info("Ledger initialization")

    # ------------------------------------------------------------------ writes

    @_operation("register_enterprise")
    async def register_enterprise(
        self, ctx: TransactionContext, enterprise_id: str, name: str, details: str
    ) -> Enterprise:
        """Create a new record in REGISTERED state.

        Raises:
            AccessDenied: Caller is not a registrar
            InvalidArgument: Empty id, or details containing the recovery marker
            Conflict: A record with this id already exists
        """
        self.gate.authorize(ctx.identity, "register_enterprise")
        if not enterprise_id:
            raise InvalidArgument("enterprise id must not be empty")
        if has_marker(details):
            raise InvalidArgument("details must not contain the reserved recovery marker", enterprise_id=enterprise_id)
        if await ctx.store.exists(enterprise_id):
            existing = await ctx.store.get(enterprise_id)
            raise Conflict(enterprise_id, existing.state.value, f"the enterprise {enterprise_id} already exists")

        now = self._now()
        enterprise = Enterprise(
            id=enterprise_id,
            name=name,
            details=details,
            state=EnterpriseState.REGISTERED,
            created_at=now,
            updated_at=now,
            doc_type=self.config.doc_type,
        )
        await ctx.store.put(enterprise)
        logger.info(f"Enterprise registered: {enterprise_id}")
        return enterprise

    @_operation("certify_enterprise")
    async def certify_enterprise(self, ctx: TransactionContext, enterprise_id: str) -> Enterprise:
        client_id = self.gate.authorize(ctx.identity, "certify_enterprise")
        current = await ctx.store.get(enterprise_id)
        self._require_state(current, EnterpriseState.REGISTERED)

        now = self._now()
        updated = current.copy(
            state=EnterpriseState.CERTIFIED,
            certificate_id=self.id_generator.next_id(),
            certification_date=now,
            certified_by=client_id,
            updated_at=now,
        )
        await ctx.store.put(updated)
        logger.info(f"Enterprise certified: {enterprise_id} ({updated.certificate_id})")
        return updated

    @_operation("revoke_certification")
    async def revoke_certification(self, ctx: TransactionContext, enterprise_id: str, reason: str) -> Enterprise:
        self.gate.authorize(ctx.identity, "revoke_certification")
        current = await ctx.store.get(enterprise_id)
        self._require_state(current, EnterpriseState.CERTIFIED)

        now = self._now()
        updated = current.copy(
            state=EnterpriseState.REVOKED,
            revocation_date=now,
            revocation_reason=reason,
            updated_at=now,
        )
        await ctx.store.put(updated)
        logger.info(f"Certification revoked: {enterprise_id} reason={reason!r}")
        return updated

    @_operation("blacklist_enterprise")
    async def blacklist_enterprise(self, ctx: TransactionContext, enterprise_id: str, reason: str) -> Enterprise:
        """Blacklist a record, remembering the state it is leaving.

        The previous state is kept in ``previousState``; with
        ``legacy_details_encoding`` it is also appended to ``details``.

        Raises:
            Conflict: Already blacklisted, or (legacy encoding) details
                already carry the recovery marker
        """
        self.gate.authorize(ctx.identity, "blacklist_enterprise")
        current = await ctx.store.get(enterprise_id)
        if current.is_blacklisted:
            raise Conflict(enterprise_id, current.state.value, f"enterprise {enterprise_id} is already blacklisted")

        previous = current.state
        details = current.details
        if self.config.legacy_details_encoding:
            if has_marker(details):
                raise Conflict(
                    enterprise_id,
                    current.state.value,
                    f"enterprise {enterprise_id} details already contain the recovery marker",
                )
            details = encode_previous_state(details, previous.value)

        now = self._now()
        updated = current.copy(
            state=EnterpriseState.BLACKLISTED,
            previous_state=previous,
            details=details,
            blacklist_date=now,
            blacklist_reason=reason,
            updated_at=now,
        )
        await ctx.store.put(updated)
        logger.info(f"Enterprise blacklisted: {enterprise_id} (was {previous.value}) reason={reason!r}")
        return updated

    @_operation("unblacklist_enterprise")
    async def unblacklist_enterprise(self, ctx: TransactionContext, enterprise_id: str) -> Enterprise:
        """Restore a blacklisted record to the state it held before.

        Raises:
            Conflict: The record is not blacklisted
            RecoveryDataMissing: No valid previous state can be recovered
        """
        self.gate.authorize(ctx.identity, "unblacklist_enterprise")
        current = await ctx.store.get(enterprise_id)
        self._require_state(current, EnterpriseState.BLACKLISTED)

        restored_state, details = self._recover(current)
        now = self._now()
        updated = current.copy(
            state=restored_state,
            previous_state=None,
            details=details,
            blacklist_date=None,
            blacklist_reason="",
            updated_at=now,
        )
        await ctx.store.put(updated)
        logger.info(f"Enterprise unblacklisted: {enterprise_id} restored to {restored_state.value}")
        return updated

    @_operation("assign_organizations")
    async def assign_organizations(
        self, ctx: TransactionContext, enterprise_id: str, organizations: Iterable[str]
    ) -> Enterprise:
        """Replace the organization list wholesale (no merge).

        Raises:
            InvalidArgument: ``organizations`` is a bare string or holds a non-string
        """
        self.gate.authorize(ctx.identity, "assign_organizations")
        organizations = self._string_items(enterprise_id, "organizations", organizations)
        current = await ctx.store.get(enterprise_id)
        updated = current.copy(organizations=organizations, updated_at=self._now())
        await ctx.store.put(updated)
        logger.info(f"Organizations assigned to {enterprise_id}: {len(updated.organizations)}")
        return updated

    @_operation("assign_channels")
    async def assign_channels(self, ctx: TransactionContext, enterprise_id: str, channels: Iterable[str]) -> Enterprise:
        """Replace the channel list wholesale (no merge)."""
        self.gate.authorize(ctx.identity, "assign_channels")
        channels = self._string_items(enterprise_id, "channels", channels)
        current = await ctx.store.get(enterprise_id)
        updated = current.copy(channels=channels, updated_at=self._now())
        await ctx.store.put(updated)
        logger.info(f"Channels assigned to {enterprise_id}: {len(updated.channels)}")
        return updated

    # ------------------------------------------------------------------- reads

    async def query_enterprise(self, ctx: TransactionContext, enterprise_id: str) -> Enterprise:
        return await ctx.store.get(enterprise_id)

    async def enterprise_exists(self, ctx: TransactionContext, enterprise_id: str) -> bool:
        return await ctx.store.exists(enterprise_id)

    async def query_blacklisted_enterprises(self, ctx: TransactionContext) -> List[Enterprise]:
        return await query_blacklisted(ctx.store, self.config.doc_type)

    async def query_enterprises_by_state(self, ctx: TransactionContext, state: EnterpriseState) -> List[Enterprise]:
        return await query_by_state(ctx.store, state, self.config.doc_type)

    # ----------------------------------------------------------------- helpers

    @staticmethod
    def _require_state(enterprise: Enterprise, expected: EnterpriseState) -> None:
        if enterprise.state != expected:
            logger.warning(
                "Rejected transition for %s: state %s, expected %s",
                enterprise.id,
                enterprise.state.value,
                expected.value,
            )
            raise Conflict(
                enterprise.id,
                enterprise.state.value,
                f"enterprise {enterprise.id} is not in {expected.value} state (current: {enterprise.state.value})",
            )

    @staticmethod
    def _string_items(enterprise_id: str, name: str, values: Optional[Iterable[str]]) -> List[str]:
        if values is None:
            return []
        if isinstance(values, (str, bytes)):
            raise InvalidArgument(f"{name} must be a list of strings, not a single string", enterprise_id=enterprise_id)
        items = list(values)
        for item in items:
            if not isinstance(item, str):
                raise InvalidArgument(
                    f"{name} entries must be strings, got {type(item).__name__}", enterprise_id=enterprise_id
                )
        return items

    @staticmethod
    def _recover(enterprise: Enterprise):
        """Work out the restored state and clean details of a blacklisted record."""
        try:
            details, encoded = decode_previous_state(enterprise.details)
        except ValueError as e:
            raise RecoveryDataMissing(enterprise.id, str(e))

        previous = enterprise.previous_state
        if encoded is not None:
            try:
                decoded = EnterpriseState(encoded)
            except ValueError:
                raise RecoveryDataMissing(enterprise.id, f"unknown encoded state {encoded!r}")
            if previous is None:
                previous = decoded
            elif previous != decoded:
                logger.warning(
                    "Enterprise %s previousState %s disagrees with details payload %s; using previousState",
                    enterprise.id,
                    previous.value,
                    decoded.value,
                )

        if previous is None or previous == EnterpriseState.BLACKLISTED:
            raise RecoveryDataMissing(enterprise.id)
        return previous, details


__all__ = ["EnterpriseContract"]
