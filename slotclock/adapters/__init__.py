"""
Adapters layer - External integrations (hosted slot store).
"""

from .mock_slot_store_client import MockSlotStoreClient
from .slot_store_client import SlotStoreClient

__all__ = ["SlotStoreClient", "MockSlotStoreClient"]
