"""
Pydantic models for opportunity plans and evaluation results.

A plan is immutable configuration: an ordered list of phases, each gated by
exactly one requirement from a closed set of variants.
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from opportunity.core.network import PaymentProvider


class PlanModel(BaseModel):
    """Base for plan models: immutable, camelCase wire names."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class PhaseVisibility(str, Enum):
    """Whether a phase is shown to members."""

    VISIBLE = "visible"
    HIDDEN = "hidden"


class RewardKind(str, Enum):
    """Kinds of rewards granted by a phase."""

    ECOMMERCE_COMMISSION = "ecommerce_commission"
    PRODUCT_CREDIT = "product_credit"
    WALLET_CREDIT = "wallet_credit"


class Money(PlanModel):
    """Amount in a given currency."""

    amount: Decimal = Field(..., ge=0, description="Non-negative amount")
    currency: str = Field(..., pattern=r"^[A-Z]{3}$", description="ISO 4217 code")


class Reward(PlanModel):
    """Reward granted when a phase unlocks."""

    kind: RewardKind
    value: Money | None = Field(default=None, description="Monetary value, if any")
    description: str = ""


# === Requirement variants ===


class SubscriptionActiveRequirement(PlanModel):
    """Owner subscription active for at least N calendar months."""

    type: Literal["subscriptionActive"] = "subscriptionActive"
    minimum_consecutive_months: int = Field(..., ge=0)


class DirectActiveRecruitsRequirement(PlanModel):
    """Enough active direct recruits, optionally paid this billing cycle."""

    type: Literal["directActiveRecruits"] = "directActiveRecruits"
    required_active: int = Field(..., ge=0)
    require_paid_invoice_this_cycle: bool = False


class SecondLevelActiveRecruitsRequirement(PlanModel):
    """Enough active second-level recruits, with a minimum per direct branch."""

    type: Literal["secondLevelActiveRecruits"] = "secondLevelActiveRecruits"
    required_active: int = Field(..., ge=0)
    minimum_per_direct: int = Field(..., ge=0)


class NetworkRetentionRequirement(PlanModel):
    """Every member down to the given depth is active and paid this cycle."""

    type: Literal["networkRetention"] = "networkRetention"
    required_levels: int = Field(..., ge=1, le=3)
    require_all_active: bool = True


PhaseRequirement = Annotated[
    Union[
        SubscriptionActiveRequirement,
        DirectActiveRecruitsRequirement,
        SecondLevelActiveRecruitsRequirement,
        NetworkRetentionRequirement,
    ],
    Field(discriminator="type"),
]


class OpportunityPhase(PlanModel):
    """One tier of the compensation plan."""

    id: str = Field(..., min_length=1)
    name: str
    visibility: PhaseVisibility = PhaseVisibility.VISIBLE
    requirement: PhaseRequirement
    description: str = ""
    rewards: list[Reward] = Field(default_factory=list)
    ecommerce_commission_rate: float = Field(..., ge=0, le=1)


class OpportunityPlan(PlanModel):
    """Compensation plan: ordered phases plus billing parameters.

    Phase order is significant. The current phase of a member is the last
    phase in this order whose requirement holds.
    """

    id: str = Field(..., min_length=1)
    name: str
    monthly_fee: Money
    max_network_size: int = Field(..., ge=1)
    payout_currency: str = Field(..., pattern=r"^[A-Z]{3}$")
    supported_providers: list[PaymentProvider] = Field(default_factory=list)
    phases: list[OpportunityPhase] = Field(..., min_length=1)

    @model_validator(mode="after")
    def validate_unique_phase_ids(self) -> "OpportunityPlan":
        """Reject plans that reuse a phase id."""
        seen: set[str] = set()
        for phase in self.phases:
            if phase.id in seen:
                raise ValueError(f"Duplicate phase id: {phase.id}")
            seen.add(phase.id)
        return self

    @property
    def phase_ids(self) -> list[str]:
        return [phase.id for phase in self.phases]

    def get_phase(self, phase_id: str) -> OpportunityPhase | None:
        """
        Get phase by id.

        Args:
            phase_id: Phase identifier

        Returns:
            OpportunityPhase or None if not found
        """
        for phase in self.phases:
            if phase.id == phase_id:
                return phase
        return None

    def visible_phases(self) -> list[OpportunityPhase]:
        """Get phases shown to members, in plan order."""
        return [
            phase for phase in self.phases
            if phase.visibility == PhaseVisibility.VISIBLE
        ]


# === Evaluation results ===


class PhaseProgress(PlanModel):
    """Unlock state of a single phase."""

    phase_id: str
    is_unlocked: bool
    # Proxy timestamp, not the moment the requirement became true
    unlocked_at: AwareDatetime | None = None

    @model_validator(mode="after")
    def validate_unlocked_at(self) -> "PhaseProgress":
        """Locked phases carry no unlock timestamp."""
        if not self.is_unlocked and self.unlocked_at is not None:
            raise ValueError("Locked phase cannot have unlocked_at")
        if self.is_unlocked and self.unlocked_at is None:
            raise ValueError("Unlocked phase requires unlocked_at")
        return self


class OpportunityProgress(PlanModel):
    """Result of evaluating one member against a plan. Never persisted."""

    member_id: str
    current_phase_id: str
    phase_progress: list[PhaseProgress]
    total_active_members: int = Field(..., ge=0)
    direct_active_members: int = Field(..., ge=0)
    second_level_active_members: int = Field(..., ge=0)
    qualifying_provider: PaymentProvider | None = None

    @property
    def unlocked_phase_ids(self) -> list[str]:
        return [item.phase_id for item in self.phase_progress if item.is_unlocked]
