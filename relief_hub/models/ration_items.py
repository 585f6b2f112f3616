"""Ration item catalog: stable codes plus display metadata.

The codes are the keys of every needed/donated quantity map in the system, so
they must never be renamed. Labels and icons are display-only.
"""

from enum import Enum
from typing import NamedTuple


class RationItemType(str, Enum):
    DRY_RATIONS = "dry_rations"
    READY_MEALS = "ready_meals"
    MILK_POWDER = "milk_powder"
    BOTTLED_WATER = "bottled_water"
    FIRST_AID = "first_aid"
    MEDICINES = "medicines"
    MOSQUITO_REPELLENT = "mosquito_repellent"
    HYGIENE = "hygiene"
    SANITARY_PADS = "sanitary_pads"
    BABY_DIAPERS = "baby_diapers"
    DISINFECTANT = "disinfectant"
    CLOTHES = "clothes"
    BLANKETS = "blankets"
    TOWELS = "towels"
    TEMPORARY_SHELTERS = "temporary_shelters"
    POLYTHENE_SHEETS = "polythene_sheets"
    FLASHLIGHTS = "flashlights"


class RationItemMetadata(NamedTuple):
    code: RationItemType
    label: str
    icon: str


RATION_ITEMS: list[RationItemMetadata] = [
    RationItemMetadata(RationItemType.DRY_RATIONS, "Dry rations (rice, dhal, canned food)", "🍚"),
    RationItemMetadata(RationItemType.READY_MEALS, "Ready‑to‑eat meals", "🍱"),
    RationItemMetadata(RationItemType.MILK_POWDER, "Milk powder / baby food", "🥛"),
    RationItemMetadata(RationItemType.BOTTLED_WATER, "Bottled water", "💧"),
    RationItemMetadata(RationItemType.FIRST_AID, "First aid kit", "🩹"),
    RationItemMetadata(RationItemType.MEDICINES, "Basic medicines (Panadol / ORS)", "💊"),
    RationItemMetadata(RationItemType.MOSQUITO_REPELLENT, "Mosquito repellent", "🦟"),
    RationItemMetadata(RationItemType.HYGIENE, "Soap / toothpaste / toothbrush", "🧴"),
    RationItemMetadata(RationItemType.SANITARY_PADS, "Sanitary pads", "🩹"),
    RationItemMetadata(RationItemType.BABY_DIAPERS, "Baby diapers", "👶"),
    RationItemMetadata(RationItemType.DISINFECTANT, "Disinfectant / cleaning liquid", "🧽"),
    RationItemMetadata(RationItemType.CLOTHES, "Clothes", "👕"),
    RationItemMetadata(RationItemType.BLANKETS, "Blankets", "🛏️"),
    RationItemMetadata(RationItemType.TOWELS, "Towels", "🧺"),
    RationItemMetadata(RationItemType.TEMPORARY_SHELTERS, "Temporary shelters", "⛺"),
    RationItemMetadata(RationItemType.POLYTHENE_SHEETS, "Polythene sheets", "📦"),
    RationItemMetadata(RationItemType.FLASHLIGHTS, "Flashlights", "🔦"),
]

_BY_CODE = {meta.code.value: meta for meta in RATION_ITEMS}


def get_item_metadata(code: str) -> RationItemMetadata | None:
    """Return label/icon metadata for a code, or None for an unknown code."""
    return _BY_CODE.get(code)


def is_known_item(code: str) -> bool:
    return code in _BY_CODE


def item_label(code: str) -> str:
    meta = _BY_CODE.get(code)
    return meta.label if meta else code
