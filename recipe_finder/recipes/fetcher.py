"""Recipe lookup against TheMealDB's public filter endpoint."""

from __future__ import annotations

import logging
from typing import Any, List

import httpx

from ..core.types import RecipeSummary

logger = logging.getLogger(__name__)

MEALDB_FILTER_URL = "https://www.themealdb.com/api/json/v1/1/filter.php"
MEALDB_DETAIL_URL = "https://www.themealdb.com/meal.php?c={id}"
DEFAULT_MAX_RESULTS = 3


class RecipeFetcher:
    """Fetches a bounded list of recipe summaries for one ingredient.

    Every failure (transport error, non-2xx status, malformed body) is logged
    and turned into an empty list so one ingredient never breaks the others.
    """

    def __init__(
        self,
        base_url: str = MEALDB_FILTER_URL,
        detail_url: str = MEALDB_DETAIL_URL,
        max_results: int = DEFAULT_MAX_RESULTS,
        timeout: float | None = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not 0 <= max_results <= DEFAULT_MAX_RESULTS:
            raise ValueError(f"max_results must be between 0 and {DEFAULT_MAX_RESULTS}")
        self.base_url = base_url
        self.detail_url = detail_url
        self.max_results = int(max_results)
        self.timeout = timeout
        self._client = client

    async def fetch_recipes(self, ingredient: str) -> List[RecipeSummary]:
        try:
            data = await self._request(ingredient)
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Recipe request for %s failed with status %s",
                ingredient,
                exc.response.status_code,
            )
            return []
        except Exception as exc:
            logger.warning("Error fetching recipes for %s: %s", ingredient, exc)
            return []

        meals = data.get("meals") if isinstance(data, dict) else None
        if not meals:
            logger.info("No recipes found for %s.", ingredient)
            return []
        if not isinstance(meals, list):
            logger.warning("Unexpected recipe payload for %s: %r", ingredient, type(meals))
            return []

        summaries: List[RecipeSummary] = []
        for meal in meals[: self.max_results]:
            summary = self._to_summary(meal)
            if summary is None:
                logger.warning("Skipping malformed recipe record for %s: %r", ingredient, meal)
                continue
            summaries.append(summary)
        return summaries

    async def _request(self, ingredient: str) -> Any:
        # httpx escapes query parameters, so the ingredient is passed through as-is
        params = {"i": ingredient}
        if self._client is not None:
            response = await self._client.get(self.base_url, params=params)
            response.raise_for_status()
            return response.json()
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(self.base_url, params=params)
            response.raise_for_status()
            return response.json()

    def _to_summary(self, meal: Any) -> RecipeSummary | None:
        if not isinstance(meal, dict):
            return None
        meal_id = meal.get("idMeal")
        title = meal.get("strMeal")
        if meal_id is None or not title:
            return None
        return RecipeSummary(
            title=str(title),
            thumbnail_url=str(meal.get("strMealThumb") or ""),
            detail_url=self.detail_url.format(id=meal_id),
        )

    async def __call__(self, ingredient: str) -> List[RecipeSummary]:
        return await self.fetch_recipes(ingredient)


__all__ = ["DEFAULT_MAX_RESULTS", "MEALDB_DETAIL_URL", "MEALDB_FILTER_URL", "RecipeFetcher"]
