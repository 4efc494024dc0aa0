"""Inventory item kinds."""

from enum import Enum


class ItemType(str, Enum):
    FOOD = "food"
    EQUIPMENT = "equipment"
    WEARABLE = "wearable"
    WEAPON = "weapon"
    AMMO = "ammo"
