"""
Domain-specific exception hierarchy for the slotclock application.
"""


class SlotClockError(Exception):
    """Base class for all application-level errors."""


class SlotDataError(SlotClockError):
    """Raised when a slot record from the store is malformed."""


class SlotStoreError(SlotClockError):
    """Raised when slot data cannot be fetched from the store."""


class SlotNotFoundError(SlotClockError):
    """Raised when a requested slot does not exist or is inactive."""


class OrderingClosedError(SlotClockError):
    """Raised when an order is attempted for a slot that is not accepting orders."""

    def __init__(self, availability):
        self.availability = availability
        slot = availability.slot
        super().__init__(
            f"Ordering for slot '{slot.name or slot.id}' is closed "
            f"(window {slot.start_time:%H:%M} - {slot.end_time:%H:%M}, "
            f"cutoff {slot.cutoff_hours_before:g}h before start)"
        )
