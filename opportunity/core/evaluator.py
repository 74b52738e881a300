"""
Opportunity progress evaluation.

Runs every phase requirement of a plan against one member's network
snapshot and reports which phases are unlocked.
"""

import asyncio
from collections.abc import Callable, Iterable
from datetime import datetime

from loguru import logger
from pydantic import ValidationError

from opportunity.core.network import MemberNetworkSnapshot, compute_active_counts
from opportunity.core.notifier import OpportunityProgressNotifier
from opportunity.core.plan import OpportunityPlan, OpportunityProgress, PhaseProgress
from opportunity.core.repository import MemberNetworkRepository
from opportunity.core.validators import is_requirement_met
from opportunity.exceptions import (
    MissingSnapshotError,
    PlanValidationError,
    SnapshotValidationError,
)
from opportunity.utils.datetime_utils import ensure_utc, utc_now


class OpportunityProgressService:
    """
    Evaluates member progress through an opportunity plan.

    Holds no state between calls apart from its collaborators. Each
    evaluate() call builds a fresh OpportunityProgress.
    """

    def __init__(
        self,
        plan: OpportunityPlan,
        member_network_repository: MemberNetworkRepository,
        notifier: OpportunityProgressNotifier | None = None,
        now_provider: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Initialize progress service.

        Args:
            plan: Opportunity plan (validated here)
            member_network_repository: Source of network snapshots
            notifier: Unlock notifier, a private one is created if omitted
            now_provider: Clock, defaults to utc_now; naive results are read as UTC

        Raises:
            PlanValidationError: If plan is malformed
        """
        try:
            self.plan = OpportunityPlan.model_validate(plan)
        except ValidationError as exc:
            raise PlanValidationError.from_validation_error(exc) from exc

        self.repository = member_network_repository
        self.notifier = notifier or OpportunityProgressNotifier()
        self.now_provider = now_provider or utc_now
        self.logger = logger.bind(service=self.__class__.__name__, plan_id=self.plan.id)

    async def evaluate(self, member_id: str) -> OpportunityProgress:
        """
        Evaluate phase progress for a member.

        Every satisfied phase is reported to the notifier, also when it
        was already unlocked by a previous evaluation.

        Args:
            member_id: Member identifier

        Returns:
            OpportunityProgress for the member

        Raises:
            MissingSnapshotError: If repository has no snapshot for member
            SnapshotValidationError: If the snapshot is malformed
        """
        raw_snapshot = await self.repository.get_network_snapshot(member_id)
        if raw_snapshot is None:
            self.logger.warning(
                "Member has no network snapshot",
                extra={"member_id": member_id},
            )
            raise MissingSnapshotError(member_id)

        snapshot = self._validate_snapshot(member_id, raw_snapshot)
        counts = compute_active_counts(snapshot)
        now = ensure_utc(self.now_provider())

        phase_progress: list[PhaseProgress] = []
        for phase in self.plan.phases:
            unlocked = is_requirement_met(phase.requirement, snapshot, now)

            self.logger.debug(
                "Phase requirement evaluated",
                extra={
                    "member_id": member_id,
                    "phase_id": phase.id,
                    "requirement": phase.requirement.type,
                    "unlocked": unlocked,
                },
            )

            if unlocked:
                self.notifier.notify_phase_unlocked(member_id, phase.id)

            phase_progress.append(
                PhaseProgress(
                    phase_id=phase.id,
                    is_unlocked=unlocked,
                    unlocked_at=self._resolve_unlock_timestamp(snapshot, now) if unlocked else None,
                )
            )

        current_phase_id = next(
            (item.phase_id for item in reversed(phase_progress) if item.is_unlocked),
            self.plan.phases[0].id,
        )

        progress = OpportunityProgress(
            member_id=member_id,
            current_phase_id=current_phase_id,
            phase_progress=phase_progress,
            total_active_members=counts.total_active_members,
            direct_active_members=counts.direct_active_members,
            second_level_active_members=counts.second_level_active_members,
            qualifying_provider=snapshot.owner.subscription.provider,
        )

        self.logger.info(
            "Opportunity progress evaluated",
            extra={
                "member_id": member_id,
                "current_phase_id": current_phase_id,
                "unlocked_phases": progress.unlocked_phase_ids,
                "total_active_members": counts.total_active_members,
            },
        )

        return progress

    async def evaluate_many(self, member_ids: Iterable[str]) -> list[OpportunityProgress]:
        """
        Evaluate several members concurrently.

        Args:
            member_ids: Member identifiers

        Returns:
            Results in the order of member_ids

        Raises:
            OpportunityError: First failure among the evaluations
        """
        return list(
            await asyncio.gather(*(self.evaluate(member_id) for member_id in member_ids))
        )

    def _validate_snapshot(self, member_id: str, raw_snapshot: object) -> MemberNetworkSnapshot:
        try:
            return MemberNetworkSnapshot.model_validate(raw_snapshot)
        except ValidationError as exc:
            self.logger.warning(
                "Network snapshot failed validation",
                extra={"member_id": member_id, "error_count": exc.error_count()},
            )
            raise SnapshotValidationError.from_validation_error(
                exc, member_id=member_id
            ) from exc

    @staticmethod
    def _resolve_unlock_timestamp(snapshot: MemberNetworkSnapshot, now: datetime) -> datetime:
        """
        Pick the unlock timestamp for an unlocked phase.

        Approximation: owner active_since, else owner last_payment_at,
        else now. Same value for every phase of one evaluation.
        """
        subscription = snapshot.owner.subscription
        return subscription.active_since or subscription.last_payment_at or now
