from __future__ import annotations

from typing import Literal

Level = Literal["Low", "Medium", "High"]
Difficulty = Literal["Easy", "Medium", "Hard"]

_LEVEL_WORDS = {"low": "Low", "medium": "Medium", "moderate": "Medium", "high": "High"}
_DIFFICULTY_WORDS = {"easy": "Easy", "medium": "Medium", "moderate": "Medium", "hard": "Hard"}


def coerce_level(value: object) -> object:
    """Map 'high', 'High - lots of meetings' and similar onto Low/Medium/High."""
    if not isinstance(value, str):
        return value
    head = value.strip().split(" ", 1)[0].strip(" -:/,.").lower()
    return _LEVEL_WORDS.get(head, value.strip())


def coerce_difficulty(value: object) -> object:
    if not isinstance(value, str):
        return value
    head = value.strip().split(" ", 1)[0].strip(" -:/,.").lower()
    return _DIFFICULTY_WORDS.get(head, value.strip())


def clean_str_list(value: object) -> object:
    if not isinstance(value, list):
        return value
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]
