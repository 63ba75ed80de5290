"""
Mock slot store client for running without a backend.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

from ..domain.models import MenuItem, SlotDefinition


class MockSlotStoreClient:
    """
    Mock client that serves slots and menu items from a JSON file.

    By default it loads mock_slot_data.json next to this module, which
    holds realistic cloud-kitchen slots including an overnight one.
    """

    def __init__(self, data_file: Path | None = None):
        """
        Initialize the mock client.

        Args:
            data_file: Optional path to a JSON file with "slots" and "items" lists
        """
        self.data_file = data_file or Path(__file__).parent / "mock_slot_data.json"
        self._load_data()

    def _load_data(self):
        """Load mock slot data from JSON file."""
        if self.data_file.exists():
            with open(self.data_file, "r", encoding="utf-8") as f:
                data: Dict[str, Any] = json.load(f)
        else:
            # Fallback to empty if file doesn't exist
            data = {}

        self.slot_rows: List[Dict[str, Any]] = data.get("slots", [])
        self.item_rows: List[Dict[str, Any]] = data.get("items", [])

    def get_active_slots(self) -> List[SlotDefinition]:
        """Return active slots sorted by display order."""
        rows = [row for row in self.slot_rows if row.get("is_active", True)]
        rows.sort(key=lambda row: row.get("display_order") or 0)

        return [SlotDefinition.from_record(row) for row in rows]

    def get_slot_items(self, slot_id: str) -> List[MenuItem]:
        """Return available items of a slot sorted by name."""
        rows = [
            row for row in self.item_rows
            if str(row.get("cloud_kitchen_slot_id")) == slot_id and row.get("is_available", True)
        ]
        rows.sort(key=lambda row: row.get("name", ""))

        return [MenuItem.from_record(row) for row in rows]
