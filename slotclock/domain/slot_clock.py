"""
Core business logic for deciding whether a slot accepts orders.

Pure domain logic: the current time of day is always passed in, the wall
clock is never read here.
"""

import logging
from datetime import datetime, time
from typing import Union

from .models import MINUTES_PER_DAY, SlotDefinition, StatusLabel, TimeRemaining, Verdict

logger = logging.getLogger(__name__)

DEFAULT_CLOSING_SOON_MINUTES = 60


def minutes_since_midnight(instant: Union[datetime, time]) -> int:
    """Minutes elapsed since local midnight, seconds truncated (0..1439)."""
    return instant.hour * 60 + instant.minute


class SlotClock:
    """
    Evaluates the ordering verdict of a slot at a given time of day.

    Algorithm:
    1. Convert start and end to minutes since midnight
    2. Inside the window: open until the window ends
    3. Window already over for today: closed
    4. Window still ahead: open until the cutoff before its start,
       closed if that cutoff falls on the previous day
    """

    def __init__(self, closing_soon_minutes: int = DEFAULT_CLOSING_SOON_MINUTES):
        if closing_soon_minutes < 0:
            raise ValueError(f"closing_soon_minutes must not be negative, got {closing_soon_minutes}")
        self.closing_soon_minutes = closing_soon_minutes

    def evaluate(self, slot: SlotDefinition, now_minutes: int) -> Verdict:
        """
        Evaluate a slot at a time of day.

        Args:
            slot: Slot definition
            now_minutes: Current time of day in minutes since midnight (0..1439)

        Returns:
            Verdict for this instant
        """
        if not 0 <= now_minutes < MINUTES_PER_DAY:
            raise ValueError(f"now_minutes must be between 0 and {MINUTES_PER_DAY - 1}, got {now_minutes}")

        start = slot.start_minutes
        end = slot.end_minutes

        if self._is_within_window(start, end, now_minutes):
            remaining = end - now_minutes
            if remaining <= 0:
                # Overnight slot: the end is on the next day. Zero only occurs
                # when start == end, the all-day window.
                remaining += MINUTES_PER_DAY
            return self._open_verdict(remaining)

        if not slot.is_overnight and now_minutes >= end:
            logger.debug("Slot %s already ended today", slot.id)
            return Verdict.closed()

        cutoff = start - round(slot.cutoff_hours_before * 60)
        if cutoff < 0:
            # Cutoff fell on the previous day; no cross-midnight tracking
            logger.debug("Slot %s cutoff wraps to the previous day", slot.id)
            return Verdict.closed()

        if now_minutes < cutoff:
            return self._open_verdict(cutoff - now_minutes)

        return Verdict.closed()

    def evaluate_at(self, slot: SlotDefinition, instant: Union[datetime, time]) -> Verdict:
        """Evaluate a slot at the time of day of an instant."""
        return self.evaluate(slot, minutes_since_midnight(instant))

    @staticmethod
    def _is_within_window(start: int, end: int, now_minutes: int) -> bool:
        if end > start:
            return start <= now_minutes < end
        return now_minutes >= start or now_minutes < end

    def _open_verdict(self, remaining_minutes: int) -> Verdict:
        label = (
            StatusLabel.CLOSING_SOON
            if remaining_minutes <= self.closing_soon_minutes
            else StatusLabel.OPEN
        )
        return Verdict(
            is_open=True,
            time_remaining=TimeRemaining.from_minutes(remaining_minutes),
            status_label=label,
        )


_default_clock = SlotClock()


def evaluate_slot(slot: SlotDefinition, now_minutes: int) -> Verdict:
    """Evaluate a slot with the default 60 minute closing-soon threshold."""
    return _default_clock.evaluate(slot, now_minutes)
