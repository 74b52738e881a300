"""
Requirement validators.

One pure predicate per requirement variant. Each takes the requirement,
a validated snapshot and the evaluation instant, and returns a bool.
No I/O, no clock reads, no state.
"""

from datetime import datetime, timedelta
from typing import assert_never

from opportunity.constants import BILLING_WINDOW_DAYS
from opportunity.core.network import MemberNetworkSnapshot, MemberNode, count_active
from opportunity.core.plan import (
    DirectActiveRecruitsRequirement,
    NetworkRetentionRequirement,
    PhaseRequirement,
    SecondLevelActiveRecruitsRequirement,
    SubscriptionActiveRequirement,
)
from opportunity.utils.datetime_utils import subtract_months


def is_within_current_billing_cycle(
    last_payment_at: datetime | None, now: datetime
) -> bool:
    """
    Check whether a payment falls in the trailing billing window.

    The window is a fixed 31 days ending at now, boundary included.
    It is not aligned to calendar months.

    Args:
        last_payment_at: Latest payment timestamp, or None
        now: Evaluation instant

    Returns:
        True if paid within the window, False otherwise (always False for None)

    Example:
        >>> now = datetime(2024, 10, 15, tzinfo=UTC)
        >>> is_within_current_billing_cycle(now - timedelta(days=31), now)
        True
        >>> is_within_current_billing_cycle(None, now)
        False
    """
    if last_payment_at is None:
        return False

    window_start = now - timedelta(days=BILLING_WINDOW_DAYS)
    return last_payment_at >= window_start


def validate_subscription_active(
    requirement: SubscriptionActiveRequirement,
    snapshot: MemberNetworkSnapshot,
    now: datetime,
) -> bool:
    """
    Owner is active and has been since at least N calendar months ago.

    The month rollback clamps to the end of a shorter month: with now on
    Mar 31, one month back is Feb 29 (or Feb 28), never early March.
    """
    subscription = snapshot.owner.subscription
    if not subscription.is_active:
        return False

    if subscription.active_since is None:
        return False

    minimum_start = subtract_months(now, requirement.minimum_consecutive_months)
    return subscription.active_since <= minimum_start


def validate_direct_active_recruits(
    requirement: DirectActiveRecruitsRequirement,
    snapshot: MemberNetworkSnapshot,
    now: datetime,
) -> bool:
    """Count active direct recruits against the threshold."""
    qualifying = [
        direct for direct in snapshot.direct_recruits
        if direct.subscription.is_active
    ]

    if requirement.require_paid_invoice_this_cycle:
        qualifying = [
            direct for direct in qualifying
            if is_within_current_billing_cycle(direct.subscription.last_payment_at, now)
        ]

    return len(qualifying) >= requirement.required_active


def validate_second_level_active_recruits(
    requirement: SecondLevelActiveRecruitsRequirement,
    snapshot: MemberNetworkSnapshot,
    now: datetime,
) -> bool:
    """
    Check second-level depth and per-branch duplication.

    Both must hold:
    - active second-level members in total >= required_active
    - every direct recruit, active or not, has >= minimum_per_direct
      active recruits of their own

    A single weak branch fails the requirement even when the total passes.
    """
    if count_active(snapshot.second_level()) < requirement.required_active:
        return False

    return all(
        count_active(direct.recruits) >= requirement.minimum_per_direct
        for direct in snapshot.direct_recruits
    )


def collect_retention_nodes(
    snapshot: MemberNetworkSnapshot, required_levels: int
) -> list[MemberNode]:
    """
    Collect the owner plus every member down to required_levels.

    Level 1 adds direct recruits, level 2 and above add their recruits.
    The network is read two levels deep, so level 3 collects the same
    members as level 2.
    """
    nodes = [snapshot.owner]

    if required_levels >= 1:
        nodes.extend(snapshot.direct_recruits)

    if required_levels >= 2:
        nodes.extend(snapshot.second_level())

    return nodes


def validate_network_retention(
    requirement: NetworkRetentionRequirement,
    snapshot: MemberNetworkSnapshot,
    now: datetime,
) -> bool:
    """Every collected member is active and paid within the billing window."""
    nodes = collect_retention_nodes(snapshot, requirement.required_levels)

    return all(
        node.subscription.is_active
        and is_within_current_billing_cycle(node.subscription.last_payment_at, now)
        for node in nodes
    )


def is_requirement_met(
    requirement: PhaseRequirement,
    snapshot: MemberNetworkSnapshot,
    now: datetime,
) -> bool:
    """
    Dispatch a requirement to its validator.

    Args:
        requirement: One of the requirement variants
        snapshot: Validated network snapshot
        now: Evaluation instant

    Returns:
        True if the requirement holds for the snapshot

    Raises:
        AssertionError: If requirement is not a known variant
    """
    match requirement:
        case SubscriptionActiveRequirement():
            return validate_subscription_active(requirement, snapshot, now)
        case DirectActiveRecruitsRequirement():
            return validate_direct_active_recruits(requirement, snapshot, now)
        case SecondLevelActiveRecruitsRequirement():
            return validate_second_level_active_recruits(requirement, snapshot, now)
        case NetworkRetentionRequirement():
            return validate_network_retention(requirement, snapshot, now)
        case _:
            assert_never(requirement)
