"""
Domain models for meal slots and their ordering verdicts.
"""

import math
from dataclasses import dataclass
from datetime import time
from enum import Enum
from typing import Any, Dict, Mapping, Optional

import pendulum
from pendulum.parsing.exceptions import ParserError

from .exceptions import SlotDataError

MINUTES_PER_DAY = 24 * 60

_BOOLEAN_STRINGS = {"true": True, "t": True, "false": False, "f": False}


def _to_number(value: Any, kind: type):
    """Convert a numeric column, refusing booleans and lossy conversions."""
    if isinstance(value, bool) or value is None:
        raise ValueError(f"expected a number, got {value!r}")
    if kind is int and isinstance(value, float) and not value.is_integer():
        raise ValueError(f"expected a whole number, got {value!r}")
    return kind(value)


def _to_bool(value: Any) -> bool:
    """Convert a boolean column; strings must spell true or false."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _BOOLEAN_STRINGS:
        return _BOOLEAN_STRINGS[value.strip().lower()]
    raise ValueError(f"expected a boolean, got {value!r}")


def parse_time_of_day(value: str) -> time:
    """
    Parse an ``HH:MM[:SS]`` string as stored in the slots table.

    Raises:
        SlotDataError: If the string is not a valid time of day
    """
    if isinstance(value, time):
        return value

    text = str(value).strip()
    if not text:
        raise SlotDataError(f"Invalid time of day: {value!r} (expected HH:MM[:SS])")

    try:
        parsed = pendulum.parse(text, exact=True)
    except (ParserError, ValueError, TypeError) as exc:
        raise SlotDataError(f"Invalid time of day: {value!r} ({exc})") from exc

    if not isinstance(parsed, pendulum.Time):
        raise SlotDataError(f"Invalid time of day: {value!r} (expected HH:MM[:SS])")

    return time(hour=parsed.hour, minute=parsed.minute, second=parsed.second)


def format_slot_time(value: time) -> str:
    """Format a time of day on the 12-hour clock, e.g. ``7:30 PM``."""
    period = "PM" if value.hour >= 12 else "AM"
    display_hour = value.hour % 12 or 12
    return f"{display_hour}:{value.minute:02d} {period}"


class StatusLabel(str, Enum):
    """Badge shown next to a slot."""
    OPEN = "open"
    CLOSING_SOON = "closing_soon"
    CLOSED = "closed"


@dataclass(frozen=True)
class TimeRemaining:
    """
    Whole hours and minutes until the next change of a slot's state.

    Invariant: minutes is within 0..59 and hours is non-negative.
    """
    hours: int
    minutes: int

    def __post_init__(self):
        if self.hours < 0 or not 0 <= self.minutes < 60:
            raise ValueError(f"Invalid remaining time: {self.hours}h {self.minutes}m")

    @classmethod
    def from_minutes(cls, total_minutes: int) -> "TimeRemaining":
        """Split a non-negative number of minutes into hours and minutes."""
        hours, minutes = divmod(total_minutes, 60)
        return cls(hours=hours, minutes=minutes)

    @property
    def total_minutes(self) -> int:
        return self.hours * 60 + self.minutes

    def to_dict(self) -> Dict[str, int]:
        return {"hours": self.hours, "minutes": self.minutes}

    def __str__(self) -> str:
        if self.hours:
            return f"{self.hours}h {self.minutes:02d}m"
        return f"{self.minutes}m"


@dataclass(frozen=True)
class Verdict:
    """
    Result of evaluating a slot at one instant.

    Invariant: an open verdict always carries a remaining time and a closed
    one never does.
    """
    is_open: bool
    time_remaining: Optional[TimeRemaining]
    status_label: StatusLabel

    def __post_init__(self):
        if self.is_open != (self.time_remaining is not None):
            raise ValueError("Open verdicts need a remaining time, closed verdicts must not have one")
        if self.is_open == (self.status_label is StatusLabel.CLOSED):
            raise ValueError(f"Status {self.status_label.value} contradicts is_open={self.is_open}")

    @classmethod
    def closed(cls) -> "Verdict":
        return cls(is_open=False, time_remaining=None, status_label=StatusLabel.CLOSED)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the plain structure consumed by the ordering UI."""
        return {
            "is_open": self.is_open,
            "time_remaining": self.time_remaining.to_dict() if self.time_remaining else None,
            "status_label": self.status_label.value,
        }


@dataclass(frozen=True)
class SlotDefinition:
    """
    A recurring daily ordering window.

    A slot whose end time is not after its start time crosses midnight.
    """
    start_time: time
    end_time: time
    cutoff_hours_before: float
    id: str = ""
    name: str = ""
    slot_type: str = ""
    display_order: int = 0
    is_active: bool = True

    def __post_init__(self):
        if not math.isfinite(self.cutoff_hours_before):
            raise SlotDataError(
                f"cutoff_hours_before must be a finite number, got {self.cutoff_hours_before}"
            )
        if self.cutoff_hours_before < 0:
            raise SlotDataError(
                f"cutoff_hours_before must not be negative, got {self.cutoff_hours_before}"
            )

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "SlotDefinition":
        """
        Build a slot from a raw row of the slots table.

        Args:
            record: Mapping with at least start_time, end_time and cutoff_hours_before

        Returns:
            SlotDefinition instance

        Raises:
            SlotDataError: If a field is missing or malformed
        """
        slot_id = str(record.get("id", ""))
        label = slot_id or "<unknown>"

        try:
            start_time = parse_time_of_day(record["start_time"])
            end_time = parse_time_of_day(record["end_time"])
            cutoff = _to_number(record["cutoff_hours_before"], float)
            display_order = record.get("display_order")
            display_order = 0 if display_order is None else _to_number(display_order, int)
            is_active = _to_bool(record.get("is_active", True))
        except KeyError as exc:
            raise SlotDataError(f"Slot {label} is missing field {exc}") from exc
        except (TypeError, ValueError) as exc:
            raise SlotDataError(f"Slot {label}: invalid value ({exc})") from exc
        except SlotDataError as exc:
            raise SlotDataError(f"Slot {label}: {exc}") from exc

        try:
            return cls(
                start_time=start_time,
                end_time=end_time,
                cutoff_hours_before=cutoff,
                id=slot_id,
                name=record.get("name") or "",
                slot_type=record.get("slot_type") or "",
                display_order=display_order,
                is_active=is_active,
            )
        except SlotDataError as exc:
            raise SlotDataError(f"Slot {label}: {exc}") from exc

    @property
    def is_overnight(self) -> bool:
        return self.end_minutes <= self.start_minutes

    @property
    def start_minutes(self) -> int:
        return self.start_time.hour * 60 + self.start_time.minute

    @property
    def end_minutes(self) -> int:
        return self.end_time.hour * 60 + self.end_time.minute

    def window_display(self) -> str:
        return f"{format_slot_time(self.start_time)} - {format_slot_time(self.end_time)}"


@dataclass(frozen=True)
class SlotAvailability:
    """
    A slot together with its verdict at a given moment.
    """
    slot: SlotDefinition
    verdict: Verdict

    @property
    def is_ordering_open(self) -> bool:
        return self.verdict.is_open

    def to_dict(self) -> Dict[str, Any]:
        """Serialize like the customer-facing division record."""
        verdict = self.verdict.to_dict()
        return {
            "id": self.slot.id,
            "name": self.slot.name,
            "slot_type": self.slot.slot_type,
            "start_time": self.slot.start_time.strftime("%H:%M:%S"),
            "end_time": self.slot.end_time.strftime("%H:%M:%S"),
            "cutoff_hours_before": self.slot.cutoff_hours_before,
            "is_ordering_open": verdict["is_open"],
            "time_until_cutoff": verdict["time_remaining"],
            "status_label": verdict["status_label"],
        }

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: Name | 7:00 AM - 10:00 AM | closing_soon (45m left)
        """
        label = self.slot.name or self.slot.id
        status = self.verdict.status_label.value
        if self.verdict.time_remaining is not None:
            status = f"{status} ({self.verdict.time_remaining} left)"
        return f"{label} | {self.slot.window_display()} | {status}"


@dataclass(frozen=True)
class MenuItem:
    """
    A dish offered in a slot.
    """
    id: str
    name: str
    price: float
    slot_id: str
    description: Optional[str] = None
    is_vegetarian: bool = False
    set_size: int = 1
    min_order_sets: int = 1

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "MenuItem":
        """Build an item from a raw row of the items table."""
        try:
            return cls(
                id=str(record["id"]),
                name=record["name"],
                price=float(record["price"]),
                slot_id=str(record.get("cloud_kitchen_slot_id") or ""),
                description=record.get("description"),
                is_vegetarian=bool(record.get("is_vegetarian", False)),
                set_size=int(record.get("set_size") or 1),
                min_order_sets=int(record.get("min_order_sets") or 1),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise SlotDataError(f"Invalid menu item {record.get('id', '<unknown>')}: {exc}") from exc
