"""Inventory reconciliation arithmetic.

Every help request and camp declares how much of each ration item it needs.
Donations first land as *pending* and move to *donated* when confirmed. The
functions here are pure; the repository applies them to rows inside a
transaction.

Overcommitment is allowed: pending is never capped by what is still needed, so
several donors can pledge against the same need at the same time. The only
guard is that ``remaining`` is clamped at zero.
"""

from dataclasses import dataclass
from typing import Iterable, Mapping


@dataclass(frozen=True)
class InventoryLine:
    """One (target, item) row reduced to the numbers the summary needs."""

    target_id: int
    item_name: str
    quantity_needed: int
    quantity_donated: int
    quantity_pending: int


def remaining(needed: int, donated: int, pending: int) -> int:
    """Quantity still open for pledges. Never negative."""
    return max(0, needed - donated - pending)


def clean_needs(needs: Mapping[str, int] | None) -> dict[str, int]:
    """Drop entries whose quantity is not a positive integer."""
    if not needs:
        return {}
    cleaned: dict[str, int] = {}
    for code, quantity in needs.items():
        key = getattr(code, "value", code)
        if isinstance(quantity, bool):
            continue
        if isinstance(quantity, int) and quantity > 0:
            cleaned[key] = quantity
    return cleaned


def split_confirmation(pending: int, quantity: int) -> tuple[int, int]:
    """Return (moved_from_pending, new_pending) when confirming ``quantity``."""
    moved = min(quantity, max(pending, 0))
    return moved, pending - moved


def summarize_inventory(lines: Iterable[InventoryLine]) -> dict[str, dict[str, int]]:
    """Aggregate rows per item code.

    quantityRemaining is the sum of each row's clamped remaining, so a target
    that is over-pledged does not hide the open need of another target.
    """
    summary: dict[str, dict[str, int]] = {}
    targets: dict[str, set[int]] = {}
    for line in lines:
        entry = summary.setdefault(
            line.item_name,
            {
                "quantityNeeded": 0,
                "quantityDonated": 0,
                "quantityPending": 0,
                "quantityRemaining": 0,
                "requestCount": 0,
            },
        )
        entry["quantityNeeded"] += line.quantity_needed
        entry["quantityDonated"] += line.quantity_donated
        entry["quantityPending"] += line.quantity_pending
        entry["quantityRemaining"] += remaining(
            line.quantity_needed, line.quantity_donated, line.quantity_pending
        )
        targets.setdefault(line.item_name, set()).add(line.target_id)
    for code, ids in targets.items():
        summary[code]["requestCount"] = len(ids)
    return summary


def count_item_types(summary: Mapping[str, Mapping[str, int]]) -> int:
    """Distinct item codes with a positive need (not a sum of quantities)."""
    return sum(1 for entry in summary.values() if entry.get("quantityNeeded", 0) > 0)
