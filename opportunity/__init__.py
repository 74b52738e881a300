"""
Opportunity Progress Engine.

Standalone package that evaluates which phases of a multi-level
compensation plan a member has unlocked, based on a snapshot of their
referral network.

Example:
    >>> from opportunity import (
    ...     InMemoryMemberNetworkRepository,
    ...     OpportunityProgressService,
    ...     build_default_plan,
    ... )
    >>>
    >>> plan = build_default_plan()
    >>> service = OpportunityProgressService(
    ...     plan, InMemoryMemberNetworkRepository({member_id: snapshot})
    ... )
    >>> progress = await service.evaluate(member_id)
    >>> progress.current_phase_id
    'phase3'
"""

from opportunity.core import (
    ActiveCounts,
    DirectActiveRecruitsRequirement,
    InMemoryMemberNetworkRepository,
    MemberNetworkRepository,
    MemberNetworkSnapshot,
    MemberNode,
    MemberSubscriptionStatus,
    Money,
    NetworkRetentionRequirement,
    OpportunityPhase,
    OpportunityPlan,
    OpportunityProgress,
    OpportunityProgressNotifier,
    OpportunityProgressService,
    PaymentProvider,
    PhaseProgress,
    PhaseRequirement,
    PhaseUnlockObserver,
    PhaseVisibility,
    Reward,
    RewardKind,
    SecondLevelActiveRecruitsRequirement,
    SubscriptionActiveRequirement,
    compute_active_counts,
    is_requirement_met,
    is_within_current_billing_cycle,
)
from opportunity.constants import BILLING_WINDOW_DAYS, build_default_plan
from opportunity.exceptions import (
    MissingSnapshotError,
    OpportunityError,
    PlanValidationError,
    SchemaValidationError,
    SnapshotValidationError,
)
from opportunity.utils import (
    format_money,
    format_progress_summary,
    format_rate,
    setup_logging,
)


__version__ = "1.0.0"
__all__ = [
    # Service
    "OpportunityProgressService",
    "OpportunityProgressNotifier",
    "PhaseUnlockObserver",
    "MemberNetworkRepository",
    "InMemoryMemberNetworkRepository",
    # Network models
    "MemberNetworkSnapshot",
    "MemberNode",
    "MemberSubscriptionStatus",
    "PaymentProvider",
    "ActiveCounts",
    "compute_active_counts",
    # Plan models
    "OpportunityPlan",
    "OpportunityPhase",
    "PhaseRequirement",
    "SubscriptionActiveRequirement",
    "DirectActiveRecruitsRequirement",
    "SecondLevelActiveRecruitsRequirement",
    "NetworkRetentionRequirement",
    "PhaseVisibility",
    "Reward",
    "RewardKind",
    "Money",
    "OpportunityProgress",
    "PhaseProgress",
    # Validators
    "is_requirement_met",
    "is_within_current_billing_cycle",
    # Constants
    "BILLING_WINDOW_DAYS",
    "build_default_plan",
    # Errors
    "OpportunityError",
    "MissingSnapshotError",
    "SchemaValidationError",
    "SnapshotValidationError",
    "PlanValidationError",
    # Utils
    "format_money",
    "format_rate",
    "format_progress_summary",
    "setup_logging",
]
