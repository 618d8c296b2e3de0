"""Stub collaborators and payload builders shared by the tests."""

from __future__ import annotations

import asyncio
from typing import List, Sequence

from recipe_finder.core.types import Prediction


class StubModel:
    """Classification model returning canned predictions."""

    def __init__(self, predictions: Sequence[Prediction] = (), error: Exception | None = None):
        self.predictions = list(predictions)
        self.error = error
        self.calls: List[object] = []

    async def classify(self, image):
        self.calls.append(image)
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return list(self.predictions)


class StubClassifier:
    def __init__(self, model: StubModel | None = None, error: Exception | None = None):
        self.model = model or StubModel()
        self.error = error
        self.initialize_calls = 0

    async def initialize(self):
        self.initialize_calls += 1
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return self.model


class StubFetcher:
    """Recipe fetcher keyed by ingredient, with optional per-ingredient gates."""

    def __init__(self, recipes: dict | None = None):
        self.recipes = recipes or {}
        self.gates: dict[str, asyncio.Event] = {}
        self.requested: List[str] = []

    async def fetch_recipes(self, ingredient: str):
        self.requested.append(ingredient)
        gate = self.gates.get(ingredient)
        if gate is not None:
            await gate.wait()
        return list(self.recipes.get(ingredient, []))


def meal(idx: int, name: str | None = None) -> dict:
    return {
        "idMeal": str(52700 + idx),
        "strMeal": name or f"Meal {idx}",
        "strMealThumb": f"https://www.themealdb.com/images/media/meals/{idx}.jpg",
    }
