"""
Unit tests for requirement validators.

Tests cover:
- Billing window boundary (31 days, inclusive)
- Subscription age in calendar months
- Direct recruit counting with and without the paid-this-cycle filter
- Second level totals and the per-branch minimum
- Network retention depth handling
"""

import pytest

from factories import (
    active_subscription,
    inactive_subscription,
    make_full_network,
    make_member,
)
from opportunity import (
    DirectActiveRecruitsRequirement,
    MemberNetworkSnapshot,
    NetworkRetentionRequirement,
    SecondLevelActiveRecruitsRequirement,
    SubscriptionActiveRequirement,
    is_requirement_met,
    is_within_current_billing_cycle,
)
from opportunity.core.validators import (
    collect_retention_nodes,
    validate_direct_active_recruits,
    validate_network_retention,
    validate_second_level_active_recruits,
    validate_subscription_active,
)


class TestBillingWindow:
    """Tests for is_within_current_billing_cycle."""

    def test_exactly_31_days_is_inside(self, now, days_ago):
        """Payment exactly 31 days before now is inside the window."""
        assert is_within_current_billing_cycle(days_ago(31), now) is True

    def test_31_days_and_one_second_is_outside(self, now, days_ago):
        """Payment one second past the 31-day boundary is outside."""
        assert is_within_current_billing_cycle(days_ago(31, seconds=1), now) is False

    def test_recent_payment_is_inside(self, now, days_ago):
        assert is_within_current_billing_cycle(days_ago(1), now) is True

    def test_none_is_outside(self, now):
        """Missing payment never satisfies the window."""
        assert is_within_current_billing_cycle(None, now) is False

    def test_window_is_not_calendar_month(self, now, days_ago):
        """A payment in the previous calendar month still counts."""
        # now is 2024-10-15, 30 days back is 2024-09-15
        assert is_within_current_billing_cycle(days_ago(30), now) is True


class TestSubscriptionActive:
    """Tests for subscriptionActive requirement."""

    def _snapshot(self, subscription) -> MemberNetworkSnapshot:
        return MemberNetworkSnapshot(owner=make_member("Owner", subscription))

    def test_zero_months_active_owner(self, now):
        requirement = SubscriptionActiveRequirement(minimum_consecutive_months=0)
        snapshot = self._snapshot(active_subscription())
        assert validate_subscription_active(requirement, snapshot, now) is True

    def test_inactive_owner_fails(self, now):
        """Inactive owner fails even with an old active_since."""
        requirement = SubscriptionActiveRequirement(minimum_consecutive_months=0)
        snapshot = self._snapshot(
            inactive_subscription(active_since=now.replace(year=2020))
        )
        assert validate_subscription_active(requirement, snapshot, now) is False

    def test_missing_active_since_fails(self, now):
        requirement = SubscriptionActiveRequirement(minimum_consecutive_months=0)
        snapshot = self._snapshot(active_subscription(active_since=None))
        assert validate_subscription_active(requirement, snapshot, now) is False

    def test_exact_month_boundary_passes(self, now):
        """Active since exactly 3 calendar months ago passes."""
        requirement = SubscriptionActiveRequirement(minimum_consecutive_months=3)
        snapshot = self._snapshot(
            active_subscription(active_since=now.replace(month=7))
        )
        assert validate_subscription_active(requirement, snapshot, now) is True

    def test_one_day_short_fails(self, now):
        requirement = SubscriptionActiveRequirement(minimum_consecutive_months=3)
        snapshot = self._snapshot(
            active_subscription(active_since=now.replace(month=7, day=16))
        )
        assert validate_subscription_active(requirement, snapshot, now) is False

    def test_months_are_calendar_months(self, now):
        """3 calendar months back from Oct 15 is Jul 15, not 90 days (Jul 17)."""
        requirement = SubscriptionActiveRequirement(minimum_consecutive_months=3)
        snapshot = self._snapshot(
            active_subscription(active_since=now.replace(month=7, day=16))
        )
        # 91 days before now, which would pass a 90-day rule
        assert (now - snapshot.owner.subscription.active_since).days == 91
        assert validate_subscription_active(requirement, snapshot, now) is False


class TestDirectActiveRecruits:
    """Tests for directActiveRecruits requirement."""

    def test_counts_only_active_directs(self, now):
        snapshot = MemberNetworkSnapshot(
            owner=make_member("Owner"),
            direct_recruits=[
                make_member("A"),
                make_member("B", inactive_subscription()),
            ],
        )
        assert validate_direct_active_recruits(
            DirectActiveRecruitsRequirement(required_active=1), snapshot, now
        ) is True
        assert validate_direct_active_recruits(
            DirectActiveRecruitsRequirement(required_active=2), snapshot, now
        ) is False

    def test_unpaid_active_direct_counts_without_invoice_filter(self, now):
        snapshot = MemberNetworkSnapshot(
            owner=make_member("Owner"),
            direct_recruits=[make_member("A", active_subscription(last_payment_at=None))],
        )
        requirement = DirectActiveRecruitsRequirement(required_active=1)
        assert validate_direct_active_recruits(requirement, snapshot, now) is True

    def test_invoice_filter_drops_stale_and_unpaid(self, now, days_ago):
        snapshot = MemberNetworkSnapshot(
            owner=make_member("Owner"),
            direct_recruits=[
                make_member("Paid", active_subscription(last_payment_at=days_ago(3))),
                make_member("Stale", active_subscription(last_payment_at=days_ago(40))),
                make_member("Never", active_subscription(last_payment_at=None)),
            ],
        )
        assert validate_direct_active_recruits(
            DirectActiveRecruitsRequirement(
                required_active=1, require_paid_invoice_this_cycle=True
            ),
            snapshot,
            now,
        ) is True
        assert validate_direct_active_recruits(
            DirectActiveRecruitsRequirement(
                required_active=2, require_paid_invoice_this_cycle=True
            ),
            snapshot,
            now,
        ) is False

    def test_inactive_direct_with_recent_payment_not_counted(self, now, days_ago):
        """Payment timestamps of inactive members are not trusted."""
        snapshot = MemberNetworkSnapshot(
            owner=make_member("Owner"),
            direct_recruits=[
                make_member("A", inactive_subscription(last_payment_at=days_ago(1))),
            ],
        )
        requirement = DirectActiveRecruitsRequirement(
            required_active=1, require_paid_invoice_this_cycle=True
        )
        assert validate_direct_active_recruits(requirement, snapshot, now) is False

    def test_zero_required_always_passes(self, now):
        snapshot = MemberNetworkSnapshot(owner=make_member("Owner"))
        requirement = DirectActiveRecruitsRequirement(required_active=0)
        assert validate_direct_active_recruits(requirement, snapshot, now) is True


class TestSecondLevelActiveRecruits:
    """Tests for secondLevelActiveRecruits requirement."""

    requirement = SecondLevelActiveRecruitsRequirement(required_active=4, minimum_per_direct=2)

    def test_balanced_branches_pass(self, now, full_network):
        assert validate_second_level_active_recruits(
            self.requirement, full_network, now
        ) is True

    def test_weak_branch_fails_even_when_total_passes(self, now):
        """One direct recruit with zero active children fails the phase."""
        snapshot = MemberNetworkSnapshot(
            owner=make_member("Owner"),
            direct_recruits=[
                make_member("Strong", recruits=[make_member(f"S{i}") for i in range(4)]),
                make_member("Weak"),
            ],
        )
        # Total alone would pass
        assert sum(
            1 for node in snapshot.second_level() if node.subscription.is_active
        ) == 4
        assert validate_second_level_active_recruits(
            self.requirement, snapshot, now
        ) is False

    def test_inactive_children_do_not_count_for_branch(self, now):
        snapshot = MemberNetworkSnapshot(
            owner=make_member("Owner"),
            direct_recruits=[
                make_member("A", recruits=[make_member("A1"), make_member("A2"), make_member("A3")]),
                make_member("B", recruits=[
                    make_member("B1"),
                    make_member("B2", inactive_subscription()),
                ]),
            ],
        )
        assert validate_second_level_active_recruits(
            self.requirement, snapshot, now
        ) is False

    def test_insufficient_total_fails(self, now):
        requirement = SecondLevelActiveRecruitsRequirement(required_active=5, minimum_per_direct=2)
        network = make_full_network()
        assert validate_second_level_active_recruits(requirement, network, now) is False

    def test_inactive_direct_is_still_checked_per_branch(self, now):
        """Every direct recruit is checked, active or not."""
        snapshot = MemberNetworkSnapshot(
            owner=make_member("Owner"),
            direct_recruits=[
                make_member("Active", recruits=[make_member("A1"), make_member("A2")]),
                make_member(
                    "Inactive",
                    inactive_subscription(),
                    recruits=[make_member("I1"), make_member("I2")],
                ),
            ],
        )
        assert validate_second_level_active_recruits(
            self.requirement, snapshot, now
        ) is True

    def test_inactive_direct_without_children_fails_branch_check(self, now):
        snapshot = MemberNetworkSnapshot(
            owner=make_member("Owner"),
            direct_recruits=[
                make_member("A", recruits=[make_member("A1"), make_member("A2")]),
                make_member("B", recruits=[make_member("B1"), make_member("B2")]),
                make_member("Dormant", inactive_subscription()),
            ],
        )
        assert validate_second_level_active_recruits(
            self.requirement, snapshot, now
        ) is False


class TestNetworkRetention:
    """Tests for networkRetention requirement."""

    def test_all_paid_two_levels_passes(self, now, full_network):
        requirement = NetworkRetentionRequirement(required_levels=2)
        assert validate_network_retention(requirement, full_network, now) is True

    def test_stale_grandchild_fails_level_two(self, now, days_ago):
        """One grandchild paid 40 days ago fails even though all are active."""
        snapshot = MemberNetworkSnapshot(
            owner=make_member("Owner"),
            direct_recruits=[
                make_member("A", recruits=[
                    make_member("A1"),
                    make_member("A2", active_subscription(last_payment_at=days_ago(40))),
                ]),
                make_member("B", recruits=[make_member("B1"), make_member("B2")]),
            ],
        )
        requirement = NetworkRetentionRequirement(required_levels=2)
        assert all(node.subscription.is_active for node in snapshot.second_level())
        assert validate_network_retention(requirement, snapshot, now) is False

    def test_stale_grandchild_ignored_at_level_one(self, now, days_ago):
        snapshot = MemberNetworkSnapshot(
            owner=make_member("Owner"),
            direct_recruits=[
                make_member("A", recruits=[
                    make_member("A1", active_subscription(last_payment_at=days_ago(40))),
                ]),
            ],
        )
        requirement = NetworkRetentionRequirement(required_levels=1)
        assert validate_network_retention(requirement, snapshot, now) is True

    def test_stale_owner_fails(self, now, days_ago):
        snapshot = MemberNetworkSnapshot(
            owner=make_member("Owner", active_subscription(last_payment_at=days_ago(32))),
        )
        requirement = NetworkRetentionRequirement(required_levels=1)
        assert validate_network_retention(requirement, snapshot, now) is False

    def test_inactive_direct_fails(self, now):
        snapshot = MemberNetworkSnapshot(
            owner=make_member("Owner"),
            direct_recruits=[make_member("A", inactive_subscription())],
        )
        requirement = NetworkRetentionRequirement(required_levels=1)
        assert validate_network_retention(requirement, snapshot, now) is False

    def test_level_three_matches_level_two(self, now, days_ago):
        """Members below the second level are not checked."""
        stale = make_member("Deep", active_subscription(last_payment_at=days_ago(60)))
        snapshot = MemberNetworkSnapshot(
            owner=make_member("Owner"),
            direct_recruits=[
                make_member("A", recruits=[make_member("A1", recruits=[stale])]),
            ],
        )
        assert validate_network_retention(
            NetworkRetentionRequirement(required_levels=2), snapshot, now
        ) is True
        assert validate_network_retention(
            NetworkRetentionRequirement(required_levels=3), snapshot, now
        ) is True

    @pytest.mark.parametrize(
        "levels,expected_count",
        [(1, 3), (2, 7), (3, 7)],
    )
    def test_collected_node_count(self, full_network, levels, expected_count):
        assert len(collect_retention_nodes(full_network, levels)) == expected_count


class TestRequirementDispatch:
    """Tests for is_requirement_met."""

    def test_dispatches_every_variant(self, now, full_network):
        requirements = [
            SubscriptionActiveRequirement(minimum_consecutive_months=1),
            DirectActiveRecruitsRequirement(required_active=2, require_paid_invoice_this_cycle=True),
            SecondLevelActiveRecruitsRequirement(required_active=4, minimum_per_direct=2),
            NetworkRetentionRequirement(required_levels=2),
        ]
        assert all(is_requirement_met(req, full_network, now) for req in requirements)

    def test_unknown_variant_raises(self, now, full_network):
        """Anything outside the closed set is a programming error."""
        with pytest.raises(AssertionError):
            is_requirement_met(object(), full_network, now)
