"""
Tests for the SlotAvailabilityService orchestration layer.
"""

from typing import Dict, List

import pendulum
import pytest

from slotclock.domain.exceptions import OrderingClosedError, SlotNotFoundError
from slotclock.domain.models import MenuItem, SlotDefinition, StatusLabel
from slotclock.domain.slot_clock import SlotClock
from slotclock.services.slot_availability import SlotAvailabilityService

TZ = "Asia/Kolkata"


class StubSlotStore:
    """Minimal stub matching SlotStoreProtocol."""

    def __init__(self, slots: List[SlotDefinition], items: Dict[str, List[MenuItem]] | None = None):
        self._slots = slots
        self._items = items or {}
        self.slot_calls = 0

    def get_active_slots(self) -> List[SlotDefinition]:
        self.slot_calls += 1
        return list(self._slots)

    def get_slot_items(self, slot_id: str) -> List[MenuItem]:
        return self._items.get(slot_id, [])


def _slots() -> List[SlotDefinition]:
    rows = [
        {"id": "breakfast", "name": "Breakfast", "start_time": "07:00", "end_time": "10:00", "cutoff_hours_before": 10},
        {"id": "lunch", "name": "Lunch", "start_time": "12:00", "end_time": "15:00", "cutoff_hours_before": 3},
        {"id": "late-night", "name": "Late Night", "start_time": "23:00", "end_time": "02:00", "cutoff_hours_before": 1.5},
    ]
    return [SlotDefinition.from_record(row) for row in rows]


def _build_service(hour: int, minute: int, store: StubSlotStore | None = None) -> SlotAvailabilityService:
    fixed = pendulum.datetime(2026, 3, 2, hour, minute, tz=TZ)
    return SlotAvailabilityService(
        slot_store=store or StubSlotStore(_slots()),
        slot_clock=SlotClock(),
        clock=lambda: fixed,
        timezone=TZ,
    )


def test_list_availability_keeps_store_order():
    """Every active slot is evaluated in the order the store returns."""
    service = _build_service(9, 30)

    availability = service.list_availability()

    assert [entry.slot.id for entry in availability] == ["breakfast", "lunch", "late-night"]
    breakfast, lunch, late_night = availability
    assert breakfast.verdict.status_label is StatusLabel.CLOSING_SOON
    assert breakfast.verdict.time_remaining.total_minutes == 30
    assert not lunch.is_ordering_open
    assert late_night.verdict.time_remaining.total_minutes == 12 * 60


def test_list_open_slots_filters_closed():
    service = _build_service(9, 30)

    assert [entry.slot.id for entry in service.list_open_slots()] == ["breakfast", "late-night"]


def test_explicit_now_is_converted_to_configured_timezone():
    """02:00 UTC is 07:30 in Kolkata."""
    service = _build_service(0, 0)
    now_utc = pendulum.datetime(2026, 3, 2, 2, 0, tz="UTC")

    lunch = service.get_availability("lunch", now=now_utc)

    assert lunch.is_ordering_open
    assert lunch.verdict.time_remaining.total_minutes == 90


def test_each_call_reads_the_store_again():
    """No slots are cached between evaluations."""
    store = StubSlotStore(_slots())
    service = _build_service(9, 30, store=store)

    service.list_availability()
    service.list_availability()

    assert store.slot_calls == 2


def test_get_availability_unknown_slot():
    service = _build_service(9, 30)

    with pytest.raises(SlotNotFoundError, match="dessert"):
        service.get_availability("dessert")


def test_ensure_ordering_open_returns_availability():
    service = _build_service(9, 30)

    availability = service.ensure_ordering_open("breakfast")

    assert availability.slot.id == "breakfast"
    assert availability.is_ordering_open


def test_ensure_ordering_open_rejects_closed_slot():
    """Lunch cutoff is 09:00, so at 09:30 it refuses orders."""
    service = _build_service(9, 30)

    with pytest.raises(OrderingClosedError) as excinfo:
        service.ensure_ordering_open("lunch")

    assert excinfo.value.availability.slot.id == "lunch"
    assert excinfo.value.availability.verdict.status_label is StatusLabel.CLOSED


def test_get_menu_for_known_slot():
    item = MenuItem(id="meals", name="Kerala Meals", price=120, slot_id="lunch")
    store = StubSlotStore(_slots(), items={"lunch": [item]})
    service = _build_service(9, 30, store=store)

    assert service.get_menu("lunch") == [item]

    with pytest.raises(SlotNotFoundError):
        service.get_menu("dessert")


def test_now_uses_injected_clock():
    service = _build_service(23, 30)

    assert service.now().hour == 23
    assert service.now().timezone_name == TZ
