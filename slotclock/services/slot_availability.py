"""
Application services for slot availability.

The service fetches slots through a store adapter and delegates the verdict
to the domain-level ``SlotClock``. The wall clock is injected so the CLI
stays thin and tests can pin "now" to any instant.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Protocol

import pendulum
from pendulum import DateTime

from ..domain.exceptions import OrderingClosedError, SlotNotFoundError
from ..domain.models import MenuItem, SlotAvailability, SlotDefinition
from ..domain.slot_clock import SlotClock

logger = logging.getLogger(__name__)


class SlotStoreProtocol(Protocol):
    """Protocol describing the slot store behaviour needed by the service."""

    def get_active_slots(self) -> List[SlotDefinition]:
        """Return active slots in display order."""

    def get_slot_items(self, slot_id: str) -> List[MenuItem]:
        """Return the available menu items of a slot."""


class SlotAvailabilityService:
    """
    Combines stored slots with the slot clock.

    Every call re-reads the store and evaluates against a fresh instant;
    nothing is cached between calls.
    """

    def __init__(
        self,
        slot_store: SlotStoreProtocol,
        slot_clock: Optional[SlotClock] = None,
        clock: Optional[Callable[[], DateTime]] = None,
        timezone: str = "Asia/Kolkata",
    ) -> None:
        self._slot_store = slot_store
        self._slot_clock = slot_clock or SlotClock()
        self._timezone = timezone
        self._clock = clock or (lambda: pendulum.now(self._timezone))

    def now(self) -> DateTime:
        """Current instant in the configured timezone."""
        return self._clock().in_timezone(self._timezone)

    def list_availability(self, now: Optional[DateTime] = None) -> List[SlotAvailability]:
        """Evaluate every active slot at ``now`` (defaults to the clock)."""
        instant = self._resolve_instant(now)
        slots = self._slot_store.get_active_slots()

        availability = [self._evaluate(slot, instant) for slot in slots]
        logger.debug(
            "Evaluated %d slots at %s, %d open",
            len(availability),
            instant.format("HH:mm"),
            sum(1 for entry in availability if entry.is_ordering_open),
        )
        return availability

    def list_open_slots(self, now: Optional[DateTime] = None) -> List[SlotAvailability]:
        """Only the slots currently accepting orders."""
        return [entry for entry in self.list_availability(now) if entry.is_ordering_open]

    def get_availability(self, slot_id: str, now: Optional[DateTime] = None) -> SlotAvailability:
        """
        Evaluate a single slot.

        Raises:
            SlotNotFoundError: If no active slot has this id
        """
        instant = self._resolve_instant(now)
        return self._evaluate(self._find_slot(slot_id), instant)

    def ensure_ordering_open(self, slot_id: str, now: Optional[DateTime] = None) -> SlotAvailability:
        """
        Gate for adding items to an order of a slot.

        Returns:
            The slot's availability when ordering is open

        Raises:
            SlotNotFoundError: If no active slot has this id
            OrderingClosedError: If the slot is not accepting orders
        """
        availability = self.get_availability(slot_id, now)
        if not availability.is_ordering_open:
            logger.info("Rejected order for closed slot %s", slot_id)
            raise OrderingClosedError(availability)
        return availability

    def get_menu(self, slot_id: str) -> List[MenuItem]:
        """Menu items of an active slot."""
        slot = self._find_slot(slot_id)
        return self._slot_store.get_slot_items(slot.id)

    def _find_slot(self, slot_id: str) -> SlotDefinition:
        for slot in self._slot_store.get_active_slots():
            if slot.id == slot_id:
                return slot
        raise SlotNotFoundError(f"No active slot with id '{slot_id}'")

    def _resolve_instant(self, now: Optional[DateTime]) -> DateTime:
        if now is None:
            return self.now()
        return now.in_timezone(self._timezone)

    def _evaluate(self, slot: SlotDefinition, instant: DateTime) -> SlotAvailability:
        verdict = self._slot_clock.evaluate_at(slot, instant)
        return SlotAvailability(slot=slot, verdict=verdict)
