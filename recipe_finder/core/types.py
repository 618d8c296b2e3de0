"""Shared dataclasses and type aliases used across recipe finder components."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from PIL import Image


ImageInput = Union[str, Path, Image.Image]


@dataclass(frozen=True)
class Prediction:
    """A single classifier output: raw label and its probability."""

    label: str
    confidence: float


@dataclass(frozen=True)
class RecipeSummary:
    """Minimal representation of one recipe record returned by the service."""

    title: str
    thumbnail_url: str
    detail_url: str


@dataclass
class AnalysisSession:
    """Transient state for one analyze action."""

    image: ImageInput
    generation: int
    in_progress: bool = True
    predictions: List[Prediction] = field(default_factory=list)
    ingredients: List[str] = field(default_factory=list)
    recipes: Dict[str, List[RecipeSummary]] = field(default_factory=dict)
    error: Optional[str] = None

    def all_recipes(self) -> List[RecipeSummary]:
        return [recipe for name in self.ingredients for recipe in self.recipes.get(name, [])]
