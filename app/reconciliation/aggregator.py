"""Line item aggregation"""

from typing import Dict, Iterable, List

from app.schemas.order import LineItem


def aggregate(lists: Iterable[Iterable[LineItem]]) -> List[LineItem]:
    """
    Merge line item lists into one list with unique ids.

    Lists are consumed in priority order (destination first, then sources).
    A repeated id adds its quantity to the entry already recorded and keeps
    that entry's price and name; the first list to mention an item sets its
    price. Items without an id are dropped. Output keeps first-appearance
    order.
    """
    merged: Dict[str, LineItem] = {}
    for items in lists:
        for item in items:
            if not item.id:
                continue
            existing = merged.get(item.id)
            if existing is None:
                merged[item.id] = item.model_copy()
            else:
                merged[item.id] = existing.model_copy(
                    update={"quantity": existing.quantity + item.quantity}
                )
    return list(merged.values())
