"""
Packing-list mutations.

Every helper returns a new list and leaves the one passed in untouched, so
callers can compute the next state before persisting it. Indexes are
positions in the list; negative or past-the-end positions raise IndexError.
"""
from typing import Any, Dict, List, Optional

PackingItem = Dict[str, Any]


def normalize_item(item: PackingItem) -> PackingItem:
    return {
        "name": str(item["name"]).strip(),
        "category": item.get("category"),
        "packed": bool(item.get("packed", False)),
    }


def _check_index(items: List[PackingItem], index: int) -> None:
    if index < 0 or index >= len(items):
        raise IndexError(f"Packing item {index} does not exist")


def add_item(items: List[PackingItem], name: str, category: Optional[str] = None) -> List[PackingItem]:
    name = name.strip()
    if not name:
        raise ValueError("Item name cannot be blank")
    return [dict(it) for it in items] + [{"name": name, "category": category, "packed": False}]


def toggle_item(items: List[PackingItem], index: int) -> List[PackingItem]:
    _check_index(items, index)
    return [
        {**it, "packed": not it.get("packed", False)} if i == index else dict(it)
        for i, it in enumerate(items)
    ]


def update_item(items: List[PackingItem], index: int, **changes: Any) -> List[PackingItem]:
    _check_index(items, index)
    if "name" in changes:
        changes["name"] = str(changes["name"]).strip()
        if not changes["name"]:
            raise ValueError("Item name cannot be blank")
    return [{**it, **changes} if i == index else dict(it) for i, it in enumerate(items)]


def remove_item(items: List[PackingItem], index: int) -> List[PackingItem]:
    _check_index(items, index)
    return [dict(it) for i, it in enumerate(items) if i != index]
