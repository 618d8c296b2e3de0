"""Utility for writing analysis outputs to disk.

Keeps filesystem concerns out of the orchestrator and the CLI command.
"""

from __future__ import annotations

import json
import warnings
from dataclasses import asdict
from pathlib import Path
from typing import Iterable, List

from PIL import Image

from ..core.types import AnalysisSession
from .html_report import HTMLReportGenerator


class ResultsWriter:
    """Writes per-image JSON payloads and an HTML report of recipe cards."""

    def __init__(
        self,
        results_dir: Path | str,
        write_json: bool = True,
        write_html: bool = False,
    ) -> None:
        self.results_dir = Path(results_dir)
        self.write_json = bool(write_json)
        self.write_html = bool(write_html)
        self.results_dir.mkdir(parents=True, exist_ok=True)

    def session_payload(self, session: AnalysisSession) -> dict:
        image = session.image
        if isinstance(image, Image.Image):
            image = getattr(image, "filename", "") or "<in-memory image>"
        return {
            "image": str(image),
            "generation": session.generation,
            "error": session.error,
            "predictions": [asdict(p) for p in session.predictions],
            "ingredients": list(session.ingredients),
            "recipes": {
                name: [asdict(r) for r in session.recipes.get(name, [])]
                for name in session.ingredients
            },
        }

    def write_results(self, session: AnalysisSession) -> Path | None:
        """Write one JSON file named after the analyzed image."""
        if not self.write_json:
            return None
        payload = self.session_payload(session)
        output_path = self.results_dir / f"{Path(payload['image']).stem or 'image'}.json"
        try:
            with output_path.open("w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2)
        except Exception as exc:
            warnings.warn(f"Failed to write results JSON for {payload['image']}: {exc}")
            return None
        return output_path

    def write_report(self, sessions: Iterable[AnalysisSession]) -> Path | None:
        if not self.write_html:
            return None
        collected: List[AnalysisSession] = list(sessions)
        report_path = self.results_dir / "recipes_report.html"
        try:
            HTMLReportGenerator().write(collected, report_path)
        except Exception as exc:
            warnings.warn(f"Failed to write HTML report: {exc}")
            return None
        return report_path
