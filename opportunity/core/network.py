"""
Pydantic models for member network snapshots.

A snapshot is a read-only, point-in-time view of one member and the
recruitment subtree below them, as delivered by the network repository.
"""

from collections.abc import Iterable, Iterator
from enum import Enum
from typing import NamedTuple

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PaymentProvider(str, Enum):
    """Payment providers that can back a subscription."""

    STRIPE = "stripe"
    PAYPAL = "paypal"
    WALLET = "wallet"
    AUTHORIZE_NET = "authorize_net"
    PAYONEER = "payoneer"


class SnapshotModel(BaseModel):
    """Base for snapshot models: immutable, camelCase wire names."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        revalidate_instances="always",
    )


class MemberSubscriptionStatus(SnapshotModel):
    """Subscription state of one member.

    Payment timestamps are only meaningful while is_active is True.
    """

    is_active: bool = Field(..., description="Whether the subscription is active")
    provider: PaymentProvider | None = Field(
        default=None, description="Provider that charges the subscription"
    )
    last_payment_at: AwareDatetime | None = Field(
        default=None, description="Timestamp of the latest paid invoice"
    )
    active_since: AwareDatetime | None = Field(
        default=None, description="Start of the current uninterrupted subscription"
    )


class MemberNode(SnapshotModel):
    """One member in the network with their direct downline."""

    member_id: str = Field(..., min_length=1, description="Stable member identifier")
    name: str = Field(..., description="Display name")
    subscription: MemberSubscriptionStatus
    recruits: list["MemberNode"] = Field(
        default_factory=list, description="Direct recruits of this member, in order"
    )


class MemberNetworkSnapshot(SnapshotModel):
    """Network snapshot for a single owner.

    Direct recruits are promoted to the top level; owner.recruits is
    conventionally empty. Deeper levels are read from direct_recruits[].recruits.
    """

    owner: MemberNode
    direct_recruits: list[MemberNode] = Field(default_factory=list)

    def second_level(self) -> Iterator[MemberNode]:
        """Iterate over recruits of every direct recruit."""
        for direct in self.direct_recruits:
            yield from direct.recruits


class ActiveCounts(NamedTuple):
    """Active member counts across the first two network levels."""

    total_active_members: int
    direct_active_members: int
    second_level_active_members: int


def count_active(nodes: Iterable[MemberNode]) -> int:
    return sum(1 for node in nodes if node.subscription.is_active)


def compute_active_counts(snapshot: MemberNetworkSnapshot) -> ActiveCounts:
    """
    Count active members of the owner, direct and second level.

    Args:
        snapshot: Validated network snapshot

    Returns:
        ActiveCounts where the total includes the owner
    """
    direct_active = count_active(snapshot.direct_recruits)
    second_level_active = count_active(snapshot.second_level())
    owner_active = 1 if snapshot.owner.subscription.is_active else 0

    return ActiveCounts(
        total_active_members=owner_active + direct_active + second_level_active,
        direct_active_members=direct_active,
        second_level_active_members=second_level_active,
    )
