"""Presence-aware values for partial updates."""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, List, Mapping


class _Missing:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "MISSING"


MISSING: Any = _Missing()


def is_present(value) -> bool:
    return value is not MISSING


def blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_date(value) -> date:
    """ISO date or datetime string (or date object) -> date; ValueError otherwise."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"not a date: {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return date.fromisoformat(text)
    except ValueError:
        return datetime.fromisoformat(text).date()


def parse_id(value) -> int:
    if isinstance(value, bool):
        raise ValueError("boolean is not an id")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise ValueError(f"not an id: {value!r}")


def parse_member_ids(items: Iterable[Any]) -> List[int]:
    """
    Team entries may be ``{"userId": 1}``, ``{"user_id": 1}`` or a bare id.
    Order is kept, duplicates collapse.
    """
    ids: List[int] = []
    for item in items:
        if isinstance(item, Mapping):
            raw = next((item[k] for k in ("userId", "user_id", "id") if k in item), None)
        else:
            raw = item
        ids.append(parse_id(raw))
    return list(dict.fromkeys(ids))
