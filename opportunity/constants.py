"""
Engine constants and the default opportunity plan.

The default plan is built on request and passed to the evaluator
explicitly; nothing in the engine looks it up globally.
"""

from decimal import Decimal

from opportunity.core.network import PaymentProvider
from opportunity.core.plan import (
    DirectActiveRecruitsRequirement,
    Money,
    NetworkRetentionRequirement,
    OpportunityPhase,
    OpportunityPlan,
    Reward,
    RewardKind,
    SecondLevelActiveRecruitsRequirement,
    SubscriptionActiveRequirement,
)

# Trailing payment window: one subscription cycle plus grace
BILLING_WINDOW_DAYS = 31

DEFAULT_PLAN_ID = "default-opportunity-plan"
DEFAULT_CURRENCY = "USD"


def _usd(amount: str) -> Money:
    return Money(amount=Decimal(amount), currency=DEFAULT_CURRENCY)


def _phase_rewards(commission_rate: str, product_value: str, wallet_credit: str) -> list[Reward]:
    rewards = [
        Reward(
            kind=RewardKind.ECOMMERCE_COMMISSION,
            description=f"{commission_rate}% commission on store sales",
        ),
    ]
    if Decimal(product_value) > 0:
        rewards.append(
            Reward(
                kind=RewardKind.PRODUCT_CREDIT,
                value=_usd(product_value),
                description="Monthly product credit",
            )
        )
    if Decimal(wallet_credit) > 0:
        rewards.append(
            Reward(
                kind=RewardKind.WALLET_CREDIT,
                value=_usd(wallet_credit),
                description="Monthly wallet credit",
            )
        )
    return rewards


def build_default_plan() -> OpportunityPlan:
    """
    Build the reference four-phase plan.

    Phases:
        phase0: active subscription (registration floor)
        phase1: 2 active direct recruits paid this cycle
        phase2: 4 active second-level recruits, 2 per direct recruit
        phase3: whole network active and paid two levels deep

    Returns:
        Immutable OpportunityPlan
    """
    return OpportunityPlan(
        id=DEFAULT_PLAN_ID,
        name="Affiliate Opportunity",
        monthly_fee=_usd("34.00"),
        max_network_size=7,  # owner + 2 direct + 4 second level
        payout_currency=DEFAULT_CURRENCY,
        supported_providers=[
            PaymentProvider.STRIPE,
            PaymentProvider.PAYPAL,
            PaymentProvider.WALLET,
        ],
        phases=[
            OpportunityPhase(
                id="phase0",
                name="Registration",
                requirement=SubscriptionActiveRequirement(minimum_consecutive_months=0),
                description="Keep your monthly subscription active.",
                rewards=_phase_rewards("8", "0", "0"),
                ecommerce_commission_rate=0.08,
            ),
            OpportunityPhase(
                id="phase1",
                name="Phase 1",
                requirement=DirectActiveRecruitsRequirement(
                    required_active=2,
                    require_paid_invoice_this_cycle=True,
                ),
                description="Invite 2 members who keep their subscription paid.",
                rewards=_phase_rewards("15", "65", "3"),
                ecommerce_commission_rate=0.15,
            ),
            OpportunityPhase(
                id="phase2",
                name="Phase 2",
                requirement=SecondLevelActiveRecruitsRequirement(
                    required_active=4,
                    minimum_per_direct=2,
                ),
                description="Help each of your 2 members invite 2 active members.",
                rewards=_phase_rewards("30", "125", "9"),
                ecommerce_commission_rate=0.30,
            ),
            OpportunityPhase(
                id="phase3",
                name="Phase 3",
                requirement=NetworkRetentionRequirement(
                    required_levels=2,
                    require_all_active=True,
                ),
                description="Keep your whole network active and paid.",
                rewards=_phase_rewards("40", "240", "506"),
                ecommerce_commission_rate=0.40,
            ),
        ],
    )
