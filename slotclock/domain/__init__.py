"""
Domain layer - Pure business logic without external dependencies.
"""

from .models import MenuItem, SlotAvailability, SlotDefinition, StatusLabel, TimeRemaining, Verdict
from .slot_clock import SlotClock, evaluate_slot, minutes_since_midnight

__all__ = [
    "MenuItem",
    "SlotAvailability",
    "SlotDefinition",
    "StatusLabel",
    "TimeRemaining",
    "Verdict",
    "SlotClock",
    "evaluate_slot",
    "minutes_since_midnight",
]
