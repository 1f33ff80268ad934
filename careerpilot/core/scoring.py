from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

_VOCABULARY_CACHE: dict[str, tuple[str, ...]] | None = None
_VOCABULARY_PATH = Path(__file__).resolve().parents[1] / "data" / "skill_vocabulary.yaml"


def load_skill_vocabulary(path: Path | None = None) -> dict[str, tuple[str, ...]]:
    """Read the category -> keywords mapping from YAML."""
    source = path or _VOCABULARY_PATH
    if not source.exists():
        raise RuntimeError(f"Skill vocabulary not found at '{source}'.")

    try:
        parsed: Any = yaml.safe_load(source.read_text(encoding="utf-8"))
    except OSError as exc:
        raise RuntimeError(f"Failed to read skill vocabulary '{source}': {exc}") from exc
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Invalid YAML in skill vocabulary '{source}': {exc}") from exc

    categories = parsed.get("categories") if isinstance(parsed, dict) else None
    if not isinstance(categories, dict):
        raise RuntimeError(f"Invalid skill vocabulary '{source}': expected a 'categories' mapping.")

    vocabulary: dict[str, tuple[str, ...]] = {}
    for category, keywords in categories.items():
        if not isinstance(keywords, list):
            raise RuntimeError(f"Invalid skill vocabulary '{source}': '{category}' must be a list.")
        vocabulary[str(category)] = tuple(str(keyword).strip().lower() for keyword in keywords if str(keyword).strip())
    return vocabulary


def get_skill_vocabulary() -> dict[str, tuple[str, ...]]:
    global _VOCABULARY_CACHE

    if _VOCABULARY_CACHE is None:
        _VOCABULARY_CACHE = load_skill_vocabulary()
    return _VOCABULARY_CACHE
