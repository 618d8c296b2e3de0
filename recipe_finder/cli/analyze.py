"""Main analyze command: classify images and look up recipes."""
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Iterable, List, Set

import httpx
from recipe_finder.classification.classifier import ImageNetClassifier
from recipe_finder.core.resolver import LabelResolver
from recipe_finder.core.types import AnalysisSession
from recipe_finder.core.vocabulary import build_vocabulary
from recipe_finder.io.results_writer import ResultsWriter
from recipe_finder.io.views import ConsoleView, ResultsView
from recipe_finder.pipeline import RecipeFinderPipeline
from recipe_finder.recipes.fetcher import MEALDB_DETAIL_URL, MEALDB_FILTER_URL, RecipeFetcher
from recipe_finder.utils.config import resolve_path_relative_to_project


def iter_image_paths(target: Path, extensions: Set[str]) -> Iterable[Path]:
    """Yield ``target`` itself if it is a file, otherwise the images under it."""
    if target.is_file():
        yield target
        return
    for path in sorted(target.rglob("*")):
        if path.is_file() and path.suffix.lower() in extensions:
            yield path


def format_prediction_row(index: int, label: str, confidence: float) -> str:
    return f"{index:>2} | {label:<30} | {confidence:>6.2f}"


def build_pipeline_from_config(
    cfg: dict,
    view: ResultsView | None = None,
    client: httpx.AsyncClient | None = None,
) -> RecipeFinderPipeline:
    """Build the recipe pipeline from a configuration dict."""
    classifier_cfg = cfg.get("classifier", {})
    classifier = ImageNetClassifier(
        backend=str(classifier_cfg.get("backend", "mobilenet_v3_large")),
        device=classifier_cfg.get("device"),
        top_k=int(classifier_cfg.get("top_k", 5)),
    )

    vocab_path = resolve_path_relative_to_project(
        cfg.get("vocabulary", {}).get("extra_entries_path")
    )
    resolver = LabelResolver(
        vocabulary=build_vocabulary(vocab_path),
        confidence_threshold=float(
            cfg.get("resolver", {}).get("confidence_threshold", 0.20)
        ),
    )

    recipes_cfg = cfg.get("recipes", {})
    timeout = recipes_cfg.get("timeout")
    fetcher = RecipeFetcher(
        base_url=str(recipes_cfg.get("base_url", MEALDB_FILTER_URL)),
        detail_url=str(recipes_cfg.get("detail_url", MEALDB_DETAIL_URL)),
        timeout=float(timeout) if timeout is not None else None,
        client=client,
    )

    return RecipeFinderPipeline(
        classifier,
        fetcher=fetcher,
        resolver=resolver,
        view=view or ConsoleView(),
        wait_for_recipes=bool(cfg.get("pipeline", {}).get("wait_for_recipes", True)),
    )


async def analyze_images(
    pipeline: RecipeFinderPipeline, images: List[Path], show_predictions: bool = False
) -> List[AnalysisSession]:
    """Analyze images one after another with a single loaded model."""
    await pipeline.initialize()

    sessions: List[AnalysisSession] = []
    for image_path in images:
        print(f"\n=== {image_path.name} ===")
        session = await pipeline.analyze(image_path)
        if session is None:
            continue
        # the next analyze starts a new generation and would drop these results
        await pipeline.wait_pending()
        if show_predictions:
            for idx, prediction in enumerate(session.predictions, start=1):
                print(format_prediction_row(idx, prediction.label, prediction.confidence))
        sessions.append(session)

    return sessions


async def _run(target: Path, cfg: dict, show_predictions: bool) -> int:
    exts = {
        e.lower()
        for e in cfg.get("io", {}).get("image_extensions", [".jpg", ".jpeg", ".png"])
    }
    images = list(iter_image_paths(target, exts))
    if not images:
        print(f"No images found in {target}")
        return 1

    timeout = cfg.get("recipes", {}).get("timeout")
    async with httpx.AsyncClient(
        timeout=float(timeout) if timeout is not None else None
    ) as client:
        pipeline = build_pipeline_from_config(cfg, client=client)
        try:
            sessions = await analyze_images(pipeline, images, show_predictions)
        except RuntimeError as exc:
            print(f"Failed to load the image model: {exc}")
            return 1

    io_cfg = cfg.get("io", {})
    if io_cfg.get("write_json") or io_cfg.get("write_html"):
        writer = ResultsWriter(
            results_dir=Path(io_cfg.get("results_dir", "results")),
            write_json=bool(io_cfg.get("write_json", False)),
            write_html=bool(io_cfg.get("write_html", False)),
        )
        for session in sessions:
            writer.write_results(session)
        report = writer.write_report(sessions)
        if report is not None:
            print(f"\nHTML report written to: {report}")

    failed = [s for s in sessions if s.error]
    return 1 if sessions and len(failed) == len(sessions) else 0


def run_analysis(target: Path, cfg: dict, show_predictions: bool = False) -> int:
    """Run the full pipeline over one image or every image in a directory.

    Args:
        target: Image file or directory containing images
        cfg: Configuration dictionary
        show_predictions: Print raw classifier predictions per image

    Returns:
        Process exit code
    """
    return asyncio.run(_run(target, cfg, show_predictions))
