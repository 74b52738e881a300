"""
Member network repository contract.

Persistence lives outside the engine. The evaluator only needs an object
that returns a snapshot for a member id, or None.
"""

from collections.abc import Mapping
from typing import Any, Protocol

from loguru import logger

from opportunity.core.network import MemberNetworkSnapshot


SnapshotPayload = MemberNetworkSnapshot | Mapping[str, Any]


class MemberNetworkRepository(Protocol):
    """Source of member network snapshots."""

    async def get_network_snapshot(self, member_id: str) -> SnapshotPayload | None:
        """
        Get the network snapshot of a member.

        Args:
            member_id: Member identifier

        Returns:
            Snapshot model or raw mapping, None if the member has no network data
        """
        ...


class InMemoryMemberNetworkRepository:
    """
    Repository backed by a dict of snapshots.

    Example:
        repo = InMemoryMemberNetworkRepository({member_id: snapshot})
        snapshot = await repo.get_network_snapshot(member_id)
    """

    def __init__(self, snapshots: Mapping[str, SnapshotPayload] | None = None) -> None:
        self._snapshots: dict[str, SnapshotPayload] = dict(snapshots or {})

    async def get_network_snapshot(self, member_id: str) -> SnapshotPayload | None:
        snapshot = self._snapshots.get(member_id)
        if snapshot is None:
            logger.debug(
                "No snapshot stored for member",
                extra={"member_id": member_id},
            )
        return snapshot

    def save(self, member_id: str, snapshot: SnapshotPayload) -> None:
        """Store or replace a member snapshot."""
        self._snapshots[member_id] = snapshot

    def __len__(self) -> int:
        return len(self._snapshots)
