"""
Phase unlock notifications.

In-process observer registry. Evaluation publishes one event per unlocked
phase; side effects such as reward issuance subscribe from outside.
"""

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from loguru import logger


@runtime_checkable
class PhaseUnlockObserver(Protocol):
    """Receives phase unlock events."""

    def on_phase_unlocked(self, member_id: str, phase_id: str) -> None:
        ...


class OpportunityProgressNotifier:
    """
    Synchronous fan-out of phase unlock events.

    No ordering across observers, no persistence, no retry. The same
    phase is reported again on every evaluation that finds it unlocked,
    so observers with side effects must be idempotent.

    Example:
        notifier = OpportunityProgressNotifier()
        unsubscribe = notifier.subscribe(reward_issuer)
        ...
        unsubscribe()
    """

    def __init__(self) -> None:
        self._observers: list[PhaseUnlockObserver] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._observers)

    def subscribe(self, observer: PhaseUnlockObserver) -> Callable[[], None]:
        """
        Register an observer.

        Args:
            observer: Object implementing on_phase_unlocked

        Returns:
            Function that removes the observer; calling it again does nothing
        """
        if not isinstance(observer, PhaseUnlockObserver):
            raise TypeError(
                f"Observer {observer!r} does not implement on_phase_unlocked"
            )

        self._observers.append(observer)
        logger.debug(
            "Phase unlock observer subscribed",
            extra={"observer": type(observer).__name__},
        )

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)
                logger.debug(
                    "Phase unlock observer unsubscribed",
                    extra={"observer": type(observer).__name__},
                )

        return unsubscribe

    def notify_phase_unlocked(self, member_id: str, phase_id: str) -> None:
        """Deliver an unlock event to every registered observer."""
        # Copy: observers may unsubscribe while being notified
        for observer in list(self._observers):
            try:
                observer.on_phase_unlocked(member_id, phase_id)
            except Exception:
                logger.opt(exception=True).error(
                    "Phase unlock observer failed",
                    extra={
                        "observer": type(observer).__name__,
                        "member_id": member_id,
                        "phase_id": phase_id,
                    },
                )

    def clear(self) -> None:
        """Remove all observers."""
        self._observers.clear()
