"""Static mapping from raw classifier labels to canonical ingredient names."""

from __future__ import annotations

import json
import warnings
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional

# Classifier label -> ingredient name. Only a handful of common foods are mapped.
DEFAULT_INGREDIENT_MAP: Mapping[str, str] = MappingProxyType(
    {
        "banana": "banana",
        "Granny Smith": "apple",
        "strawberry": "strawberry",
        "orange": "orange",
        "lemon": "lemon",
        "pineapple": "pineapple",
        "cucumber": "cucumber",
        "carrot": "carrot",
        "broccoli": "broccoli",
        "cauliflower": "cauliflower",
        "bell pepper": "pepper",
        "chili pepper": "pepper",
        "jalapeno": "pepper",
        "potato": "potato",
        "cabbage": "cabbage",
        "lettuce": "lettuce",
        "mushroom": "mushroom",
        "garlic": "garlic",
        "ginger": "ginger",
        "onion": "onion",
        "egg": "egg",
        "bagel": "bread",
        "pretzel": "bread",
        "dough": "bread",
        "pizza": "pizza",
        "bacon": "bacon",
        "hotdog": "hot dog",
        "hamburger": "beef",
        "cheeseburger": "beef",
    }
)


class IngredientVocabulary:
    """Exact-match lookup of raw labels to canonical ingredient names.

    The table is fixed once constructed. Matching is case sensitive and does no
    normalization; callers are expected to split and trim labels themselves.
    """

    def __init__(self, entries: Optional[Mapping[str, str]] = None) -> None:
        table: Dict[str, str] = dict(DEFAULT_INGREDIENT_MAP if entries is None else entries)
        self._entries: Mapping[str, str] = MappingProxyType(table)
        self._values = frozenset(table.values())

    @classmethod
    def with_extra_entries(cls, extra: Mapping[str, str]) -> "IngredientVocabulary":
        merged = dict(DEFAULT_INGREDIENT_MAP)
        merged.update(extra)
        return cls(merged)

    def lookup(self, raw_label: str) -> Optional[str]:
        return self._entries.get(raw_label)

    def values(self) -> frozenset[str]:
        """Canonical ingredient names this vocabulary can produce."""
        return self._values

    def __contains__(self, raw_label: object) -> bool:
        return raw_label in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def load_extra_entries(path: Path | str | None) -> Dict[str, str]:
    """Load optional user-provided label -> ingredient entries from a JSON file."""
    if not path:
        return {}
    path = Path(path)
    if not path.exists():
        warnings.warn(f"Vocabulary file not found: {path}. Using default entries.")
        return {}
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except Exception as exc:
        warnings.warn(f"Failed to load vocabulary entries from {path}: {exc}")
        return {}
    if not isinstance(data, dict):
        warnings.warn(f"Vocabulary file {path} is not a mapping. Ignoring it.")
        return {}
    # Keep only string pairs with a non-empty canonical name
    return {
        key.strip(): value.strip()
        for key, value in data.items()
        if isinstance(key, str) and isinstance(value, str) and key.strip() and value.strip()
    }


def build_vocabulary(extra_entries_path: Path | str | None = None) -> IngredientVocabulary:
    extra = load_extra_entries(extra_entries_path)
    if not extra:
        return IngredientVocabulary()
    return IngredientVocabulary.with_extra_entries(extra)


__all__ = [
    "DEFAULT_INGREDIENT_MAP",
    "IngredientVocabulary",
    "build_vocabulary",
    "load_extra_entries",
]
