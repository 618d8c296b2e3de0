"""Recognize ingredients in food photos and look up recipes that use them."""

from .classification import ImageNetClassifier
from .core import (
    AnalysisSession,
    IngredientVocabulary,
    LabelResolver,
    Prediction,
    RecipeSummary,
)
from .pipeline import RecipeFinderPipeline, find_recipes
from .recipes import RecipeFetcher
from .utils import load_config

__all__ = [
    "AnalysisSession",
    "ImageNetClassifier",
    "IngredientVocabulary",
    "LabelResolver",
    "Prediction",
    "RecipeFetcher",
    "RecipeFinderPipeline",
    "RecipeSummary",
    "find_recipes",
    "load_config",
]
