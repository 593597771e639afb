"""Storage unit enums."""

from enum import Enum


class StorageUnitStatus(str, Enum):
    """
    Physical unit state.

    Flow: Empty → Occupied → Pending Cleaning → Empty
    """

    EMPTY = "Empty"
    OCCUPIED = "Occupied"
    PENDING_CLEANING = "Pending Cleaning"
