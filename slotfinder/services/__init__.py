"""
Service layer helpers that orchestrate the domain logic.
"""

from .slot_finder import SlotFinderService, find_available_slots, validate_configuration

__all__ = ["SlotFinderService", "find_available_slots", "validate_configuration"]
