"""Ingredient vocabulary, label resolution and shared types."""

from .resolver import DEFAULT_CONFIDENCE_THRESHOLD, LabelResolver, resolve_labels
from .types import AnalysisSession, ImageInput, Prediction, RecipeSummary
from .vocabulary import DEFAULT_INGREDIENT_MAP, IngredientVocabulary, build_vocabulary

__all__ = [
    "AnalysisSession",
    "DEFAULT_CONFIDENCE_THRESHOLD",
    "DEFAULT_INGREDIENT_MAP",
    "ImageInput",
    "IngredientVocabulary",
    "LabelResolver",
    "Prediction",
    "RecipeSummary",
    "build_vocabulary",
    "resolve_labels",
]
