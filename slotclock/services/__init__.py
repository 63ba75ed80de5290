"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .slot_availability import SlotAvailabilityService, SlotStoreProtocol

__all__ = ["SlotAvailabilityService", "SlotStoreProtocol"]
