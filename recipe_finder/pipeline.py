"""High-level orchestration wiring classifier, label resolver, and recipe lookup."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Set

from .core.resolver import LabelResolver
from .core.types import AnalysisSession, ImageInput, RecipeSummary
from .io.views import BUSY_LABEL, IDLE_LABEL, LOADING_LABEL, MemoryView, ResultsView
from .recipes.fetcher import RecipeFetcher

if TYPE_CHECKING:
    from .classification.base import ClassificationCollaborator, ClassificationModel

logger = logging.getLogger(__name__)

MODEL_NOT_READY = "Model not loaded yet, please wait."
MODEL_LOAD_FAILED = "The image model could not be loaded."
NO_IMAGE = "Please upload an image first."
ALREADY_ANALYZING = "Analysis already in progress."
CLASSIFICATION_FAILED = "Could not analyze the image. Please try again."
NO_INGREDIENTS = "No recognizable ingredients found."


class ModelState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class RecipeFinderPipeline:
    """Drives one analysis pass per :meth:`analyze` call and renders it on a view.

    The pipeline owns the classification model handle. Analyze requests are
    rejected with a notice until :meth:`initialize` has loaded the model, while
    no image is selected, and while a previous pass is still running.

    Each pass gets a new generation number. Recipe results that arrive for an
    older generation (after :meth:`reset` or a newer pass) are dropped.
    """

    def __init__(
        self,
        classifier: "ClassificationCollaborator",
        fetcher: RecipeFetcher | None = None,
        resolver: LabelResolver | None = None,
        view: ResultsView | None = None,
        wait_for_recipes: bool = True,
    ) -> None:
        self.classifier = classifier
        self.fetcher = fetcher or RecipeFetcher()
        self.resolver = resolver or LabelResolver()
        self.view = view or MemoryView()
        self.wait_for_recipes = bool(wait_for_recipes)

        self.model: Optional["ClassificationModel"] = None
        self.model_state = ModelState.LOADING
        self.image: Optional[ImageInput] = None
        self.session: Optional[AnalysisSession] = None
        self.busy = False
        self._generation = 0
        self._pending: Set[asyncio.Future] = set()

        self.view.set_control(LOADING_LABEL, False)

    @property
    def generation(self) -> int:
        return self._generation

    async def initialize(self) -> "ClassificationModel":
        """Load the classification model once; later calls return the same handle."""
        if self.model_state is ModelState.READY and self.model is not None:
            return self.model

        self.model_state = ModelState.LOADING
        self.view.set_control(LOADING_LABEL, False)
        try:
            model = await self.classifier.initialize()
        except Exception as exc:
            self.model_state = ModelState.FAILED
            logger.error("Model failed to load: %s", exc)
            self.view.notify(MODEL_LOAD_FAILED)
            raise

        self.model = model
        self.model_state = ModelState.READY
        if not self.busy:
            self.view.set_control(IDLE_LABEL, True)
        logger.info("Model loaded")
        return model

    def select_image(self, image: ImageInput) -> None:
        self.image = image
        self.view.show_preview(image)

    def reset(self) -> None:
        """Clear the view and drop results still in flight."""
        self._generation += 1
        self.session = None
        self.view.clear()

    async def analyze(self, image: ImageInput | None = None) -> Optional[AnalysisSession]:
        """Run classification, resolve ingredients and fetch recipes.

        Returns the session, or ``None`` when a precondition was not met.
        """
        if image is not None:
            self.select_image(image)

        if self.model_state is not ModelState.READY or self.model is None:
            self.view.notify(MODEL_NOT_READY)
            return None
        if self.image is None:
            self.view.notify(NO_IMAGE)
            return None
        if self.busy:
            self.view.notify(ALREADY_ANALYZING)
            return None

        self._generation += 1
        session = AnalysisSession(image=self.image, generation=self._generation)
        self.session = session
        self.busy = True
        self.view.clear()
        self.view.set_control(BUSY_LABEL, False)

        try:
            try:
                predictions = await self.model.classify(session.image)
            except Exception as exc:
                logger.exception("Classification failed for %s", session.image)
                session.error = str(exc) or exc.__class__.__name__
                session.in_progress = False
                if self._is_current(session):
                    self.view.notify(CLASSIFICATION_FAILED)
                return session

            session.predictions = list(predictions)
            if not self._is_current(session):
                session.in_progress = False
                return session
            session.ingredients = self.resolver.resolve(session.predictions)
            if not session.ingredients:
                session.in_progress = False
                self.view.show_placeholder(NO_INGREDIENTS)
                return session

            tasks = []
            for ingredient in session.ingredients:
                self.view.add_ingredient(ingredient)
                tasks.append(
                    asyncio.ensure_future(self._fetch_and_render(session, ingredient))
                )
            joined = asyncio.gather(*tasks, return_exceptions=True)
            joined.add_done_callback(lambda fut: self._finish(session, fut))

            if self.wait_for_recipes:
                await joined
                session.in_progress = False
            else:
                self._pending.add(joined)
            return session
        finally:
            self.busy = False
            self.view.set_control(IDLE_LABEL, True)

    async def wait_pending(self) -> None:
        """Wait for recipe fetches left running when ``wait_for_recipes`` is off."""
        while self._pending:
            pending = list(self._pending)
            self._pending.difference_update(pending)
            await asyncio.gather(*pending, return_exceptions=True)

    def _is_current(self, session: AnalysisSession) -> bool:
        return session.generation == self._generation

    async def _fetch_and_render(
        self, session: AnalysisSession, ingredient: str
    ) -> List[RecipeSummary]:
        recipes = await self.fetcher.fetch_recipes(ingredient)
        if not self._is_current(session):
            logger.debug(
                "Dropping %d recipes for %s from stale analysis %d",
                len(recipes),
                ingredient,
                session.generation,
            )
            return recipes
        session.recipes[ingredient] = recipes
        for recipe in recipes:
            self.view.add_recipe(recipe)
        return recipes

    def _finish(self, session: AnalysisSession, joined: asyncio.Future) -> None:
        self._pending.discard(joined)
        session.in_progress = False
        if joined.cancelled():
            return
        for result in joined.result():
            if isinstance(result, BaseException):
                logger.error("Recipe fetch failed unexpectedly: %s", result)


async def find_recipes(
    image: ImageInput,
    classifier: "ClassificationCollaborator",
    fetcher: RecipeFetcher | None = None,
    resolver: LabelResolver | None = None,
) -> AnalysisSession:
    """Functional helper: load the model, analyze one image, return the session."""

    pipeline = RecipeFinderPipeline(classifier, fetcher=fetcher, resolver=resolver)
    await pipeline.initialize()
    session = await pipeline.analyze(image)
    if session is None:  # pragma: no cover - preconditions hold after initialize
        raise RuntimeError("Analysis did not start")
    return session


__all__ = [
    "ALREADY_ANALYZING",
    "CLASSIFICATION_FAILED",
    "MODEL_NOT_READY",
    "NO_IMAGE",
    "NO_INGREDIENTS",
    "ModelState",
    "RecipeFinderPipeline",
    "find_recipes",
]
