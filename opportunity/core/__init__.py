"""
Core engine functionality.

Network and plan models, requirement validators, notifier and evaluator.
"""

from opportunity.core.evaluator import OpportunityProgressService
from opportunity.core.network import (
    ActiveCounts,
    MemberNetworkSnapshot,
    MemberNode,
    MemberSubscriptionStatus,
    PaymentProvider,
    compute_active_counts,
)
from opportunity.core.notifier import OpportunityProgressNotifier, PhaseUnlockObserver
from opportunity.core.plan import (
    DirectActiveRecruitsRequirement,
    Money,
    NetworkRetentionRequirement,
    OpportunityPhase,
    OpportunityPlan,
    OpportunityProgress,
    PhaseProgress,
    PhaseRequirement,
    PhaseVisibility,
    Reward,
    RewardKind,
    SecondLevelActiveRecruitsRequirement,
    SubscriptionActiveRequirement,
)
from opportunity.core.repository import (
    InMemoryMemberNetworkRepository,
    MemberNetworkRepository,
)
from opportunity.core.validators import (
    is_requirement_met,
    is_within_current_billing_cycle,
)

__all__ = [
    "OpportunityProgressService",
    "ActiveCounts",
    "MemberNetworkSnapshot",
    "MemberNode",
    "MemberSubscriptionStatus",
    "PaymentProvider",
    "compute_active_counts",
    "OpportunityProgressNotifier",
    "PhaseUnlockObserver",
    "DirectActiveRecruitsRequirement",
    "Money",
    "NetworkRetentionRequirement",
    "OpportunityPhase",
    "OpportunityPlan",
    "OpportunityProgress",
    "PhaseProgress",
    "PhaseRequirement",
    "PhaseVisibility",
    "Reward",
    "RewardKind",
    "SecondLevelActiveRecruitsRequirement",
    "SubscriptionActiveRequirement",
    "InMemoryMemberNetworkRepository",
    "MemberNetworkRepository",
    "is_requirement_met",
    "is_within_current_billing_cycle",
]
