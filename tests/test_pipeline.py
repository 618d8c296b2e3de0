import asyncio

import httpx
import pytest

from recipe_finder.core.types import Prediction, RecipeSummary
from recipe_finder.io.views import BUSY_LABEL, IDLE_LABEL, LOADING_LABEL, MemoryView
from recipe_finder.pipeline import (
    ALREADY_ANALYZING,
    CLASSIFICATION_FAILED,
    MODEL_NOT_READY,
    NO_IMAGE,
    NO_INGREDIENTS,
    ModelState,
    RecipeFinderPipeline,
    find_recipes,
)

from .helpers import StubClassifier, StubFetcher, StubModel, meal


def recipe(title: str) -> RecipeSummary:
    return RecipeSummary(title, f"https://img.test/{title}.jpg", f"https://meal.test/{title}")


def make_pipeline(predictions=(), recipes=None, **kwargs):
    view = MemoryView()
    fetcher = StubFetcher(recipes)
    classifier = StubClassifier(StubModel(predictions))
    pipeline = RecipeFinderPipeline(classifier, fetcher=fetcher, view=view, **kwargs)
    return pipeline, view, fetcher


@pytest.mark.asyncio
async def test_initialize_toggles_control_and_loads_once():
    pipeline, view, _ = make_pipeline()
    assert view.control.label == LOADING_LABEL and not view.control.enabled
    assert pipeline.model_state is ModelState.LOADING

    model = await pipeline.initialize()
    again = await pipeline.initialize()

    assert model is again
    assert pipeline.classifier.initialize_calls == 1
    assert pipeline.model_state is ModelState.READY
    assert view.control.label == IDLE_LABEL and view.control.enabled


@pytest.mark.asyncio
async def test_initialize_failure_is_reported_and_raised():
    view = MemoryView()
    classifier = StubClassifier(error=RuntimeError("no weights"))
    pipeline = RecipeFinderPipeline(classifier, fetcher=StubFetcher(), view=view)

    with pytest.raises(RuntimeError):
        await pipeline.initialize()

    assert pipeline.model_state is ModelState.FAILED
    assert not view.control.enabled
    assert view.notices


@pytest.mark.asyncio
async def test_analyze_before_model_ready_is_rejected(image):
    pipeline, view, fetcher = make_pipeline([Prediction("banana", 0.9)])

    assert await pipeline.analyze(image) is None

    assert view.notices == [MODEL_NOT_READY]
    assert fetcher.requested == []


@pytest.mark.asyncio
async def test_analyze_without_image_is_rejected():
    pipeline, view, _ = make_pipeline()
    await pipeline.initialize()

    assert await pipeline.analyze() is None
    assert view.notices == [NO_IMAGE]
    assert view.control.enabled


@pytest.mark.asyncio
async def test_full_pass_renders_ingredients_and_recipes(image):
    predictions = [
        Prediction("banana", 0.9),
        Prediction("Granny Smith", 0.5),
        Prediction("lemon", 0.1),
    ]
    recipes = {
        "banana": [recipe("Banana Pancakes")],
        "apple": [recipe("Apple Frangipan Tart"), recipe("Apple Crumble")],
    }
    pipeline, view, fetcher = make_pipeline(predictions, recipes)
    await pipeline.initialize()
    pipeline.select_image(image)

    session = await pipeline.analyze()

    assert view.preview is image
    assert session.ingredients == ["banana", "apple"]
    assert view.ingredients == ["banana", "apple"]
    assert sorted(fetcher.requested) == ["apple", "banana"]
    assert {r.title for r in view.recipes} == {
        "Banana Pancakes",
        "Apple Frangipan Tart",
        "Apple Crumble",
    }
    assert session.recipes["apple"] == recipes["apple"]
    assert not session.in_progress
    labels = [state.label for state in view.control_history]
    assert labels[-2:] == [BUSY_LABEL, IDLE_LABEL]
    assert view.control.enabled


@pytest.mark.asyncio
async def test_no_recognizable_ingredients_shows_placeholder(image):
    pipeline, view, fetcher = make_pipeline([Prediction("teapot", 0.95)])
    await pipeline.initialize()

    session = await pipeline.analyze(image)

    assert session.ingredients == []
    assert view.placeholder == NO_INGREDIENTS
    assert view.ingredients == []
    assert view.recipes == []
    assert fetcher.requested == []
    assert view.control.label == IDLE_LABEL and view.control.enabled


@pytest.mark.asyncio
async def test_classification_failure_returns_to_idle(image):
    view = MemoryView()
    model = StubModel(error=OSError("corrupt image"))
    pipeline = RecipeFinderPipeline(StubClassifier(model), fetcher=StubFetcher(), view=view)
    await pipeline.initialize()

    session = await pipeline.analyze(image)

    assert session.error == "corrupt image"
    assert view.notices == [CLASSIFICATION_FAILED]
    assert view.control.label == IDLE_LABEL and view.control.enabled
    assert not pipeline.busy


@pytest.mark.asyncio
async def test_new_analysis_clears_previous_results(image):
    pipeline, view, _ = make_pipeline(
        [Prediction("egg", 0.8)], {"egg": [recipe("Shakshuka")]}
    )
    await pipeline.initialize()

    await pipeline.analyze(image)
    pipeline.model.predictions = [Prediction("teapot", 0.8)]
    await pipeline.analyze(image)

    assert view.ingredients == []
    assert view.recipes == []
    assert view.placeholder == NO_INGREDIENTS


@pytest.mark.asyncio
async def test_control_stays_disabled_until_every_fetch_finishes(image):
    pipeline, view, fetcher = make_pipeline(
        [Prediction("banana", 0.9), Prediction("egg", 0.8)],
        {"banana": [recipe("Banana Bread")], "egg": [recipe("Omelette")]},
    )
    fetcher.gates["egg"] = asyncio.Event()
    await pipeline.initialize()

    task = asyncio.create_task(pipeline.analyze(image))
    for _ in range(10):
        await asyncio.sleep(0)

    assert view.ingredients == ["banana", "egg"]
    assert [r.title for r in view.recipes] == ["Banana Bread"]
    assert view.control.label == BUSY_LABEL and not view.control.enabled
    assert await pipeline.analyze(image) is None
    assert view.notices == [ALREADY_ANALYZING]

    fetcher.gates["egg"].set()
    session = await task

    assert [r.title for r in view.recipes] == ["Banana Bread", "Omelette"]
    assert view.control.enabled
    assert not session.in_progress


@pytest.mark.asyncio
async def test_without_join_control_reenables_before_fetches_finish(image):
    pipeline, view, fetcher = make_pipeline(
        [Prediction("egg", 0.8)], {"egg": [recipe("Omelette")]}, wait_for_recipes=False
    )
    fetcher.gates["egg"] = asyncio.Event()
    await pipeline.initialize()

    session = await pipeline.analyze(image)

    assert view.control.enabled
    assert session.in_progress
    assert view.recipes == []

    fetcher.gates["egg"].set()
    await pipeline.wait_pending()

    assert [r.title for r in view.recipes] == ["Omelette"]
    assert not session.in_progress


@pytest.mark.asyncio
async def test_stale_results_are_discarded(image):
    pipeline, view, fetcher = make_pipeline(
        [Prediction("egg", 0.8)], {"egg": [recipe("Omelette")]}, wait_for_recipes=False
    )
    fetcher.gates["egg"] = asyncio.Event()
    await pipeline.initialize()

    stale = await pipeline.analyze(image)
    pipeline.model.predictions = [Prediction("teapot", 0.9)]
    fresh = await pipeline.analyze(image)

    fetcher.gates["egg"].set()
    await pipeline.wait_pending()

    assert fresh.generation > stale.generation
    assert view.recipes == []
    assert stale.recipes == {}
    assert view.placeholder == NO_INGREDIENTS


@pytest.mark.asyncio
async def test_reset_drops_in_flight_results(image):
    pipeline, view, fetcher = make_pipeline(
        [Prediction("egg", 0.8)], {"egg": [recipe("Omelette")]}, wait_for_recipes=False
    )
    fetcher.gates["egg"] = asyncio.Event()
    await pipeline.initialize()

    await pipeline.analyze(image)
    pipeline.reset()
    fetcher.gates["egg"].set()
    await pipeline.wait_pending()

    assert view.ingredients == []
    assert view.recipes == []
    assert pipeline.session is None


@pytest.mark.asyncio
async def test_one_failing_ingredient_does_not_affect_others(image, make_fetcher):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params["i"] == "banana":
            return httpx.Response(500)
        return httpx.Response(200, json={"meals": [meal(i) for i in range(6)]})

    view = MemoryView()
    pipeline = RecipeFinderPipeline(
        StubClassifier(StubModel([Prediction("banana", 0.9), Prediction("egg", 0.6)])),
        fetcher=make_fetcher(handler),
        view=view,
    )
    await pipeline.initialize()

    session = await pipeline.analyze(image)

    assert session.recipes["banana"] == []
    assert len(session.recipes["egg"]) == 3
    assert len(view.recipes) == 3
    assert view.control.enabled


@pytest.mark.asyncio
async def test_failure_of_superseded_classification_is_not_reported(image):
    release = asyncio.Event()

    class SlowFailingModel:
        async def classify(self, image):
            await release.wait()
            raise OSError("decoder crashed")

    view = MemoryView()
    pipeline = RecipeFinderPipeline(
        StubClassifier(SlowFailingModel()), fetcher=StubFetcher(), view=view
    )
    await pipeline.initialize()

    task = asyncio.create_task(pipeline.analyze(image))
    await asyncio.sleep(0)
    pipeline.reset()
    release.set()
    session = await task

    assert session.error == "decoder crashed"
    assert view.notices == []
    assert view.control.enabled


@pytest.mark.asyncio
async def test_find_recipes_helper(image):
    session = await find_recipes(
        image,
        StubClassifier(StubModel([Prediction("bagel, roll, bun", 0.5)])),
        fetcher=StubFetcher({"bread": [recipe("Bread Pudding")]}),
    )
    assert session.ingredients == ["bread"]
    assert session.all_recipes() == [recipe("Bread Pudding")]
