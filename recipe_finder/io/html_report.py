"""HTML report generator listing recognized ingredients and recipe cards."""

from __future__ import annotations

import base64
import io
from html import escape
from pathlib import Path
from typing import List

from PIL import Image

from ..core.types import AnalysisSession, RecipeSummary


class HTMLReportGenerator:
    """Builds a standalone HTML page for one or more analysis sessions."""

    def __init__(self, preview_size: int = 320):
        self.preview_size = int(preview_size)

    def generate(self, sessions: List[AnalysisSession], title: str = "Recipe Finder") -> str:
        """Generate complete HTML report content."""
        html = self._build_header(title)
        html += self._build_styles()
        html += self._build_body_start(title)
        for session in sessions:
            html += self._build_session(session)
        html += self._build_footer()
        return html

    def write(self, sessions: List[AnalysisSession], path: Path | str) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.generate(sessions), encoding="utf-8")
        return path

    def _build_header(self, title: str) -> str:
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(title)}</title>
"""

    def _build_styles(self) -> str:
        return """    <style>
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            background: #f5f5f5;
            padding: 20px;
            line-height: 1.6;
        }

        .session {
            max-width: 1000px;
            margin: 0 auto 30px;
            background: white;
            border-radius: 8px;
            box-shadow: 0 2px 8px rgba(0,0,0,0.1);
            padding: 20px;
        }

        .preview img {
            max-width: 100%;
            border-radius: 6px;
        }

        .recipes {
            display: grid;
            grid-template-columns: repeat(auto-fill, minmax(220px, 1fr));
            gap: 16px;
        }

        .recipe-card {
            border: 1px solid #e5e7eb;
            border-radius: 8px;
            overflow: hidden;
        }

        .recipe-card img {
            width: 100%;
            display: block;
        }

        .recipe-info {
            padding: 10px;
        }

        .error {
            color: #b91c1c;
        }
    </style>
</head>
"""

    def _build_body_start(self, title: str) -> str:
        return f"""<body>
    <h1>{escape(title)}</h1>
"""

    def _build_session(self, session: AnalysisSession) -> str:
        parts = ['    <section class="session">\n']
        parts.append(f"        <h2>{escape(_image_name(session.image))}</h2>\n")
        preview = self._encode_preview(session)
        if preview:
            parts.append(
                f'        <div class="preview"><img src="{preview}" alt="preview"></div>\n'
            )
        if session.error:
            parts.append(f'        <p class="error">{escape(session.error)}</p>\n')

        parts.append('        <ul class="ingredient-list">\n')
        if session.ingredients:
            for name in session.ingredients:
                parts.append(f"            <li>{escape(name)}</li>\n")
        elif not session.error:
            parts.append("            <li>No recognizable ingredients found.</li>\n")
        parts.append("        </ul>\n")

        parts.append('        <div class="recipes">\n')
        for recipe in session.all_recipes():
            parts.append(self._build_card(recipe))
        parts.append("        </div>\n")
        parts.append("    </section>\n")
        return "".join(parts)

    def _build_card(self, recipe: RecipeSummary) -> str:
        title = escape(recipe.title)
        return f"""            <div class="recipe-card">
                <img src="{escape(recipe.thumbnail_url, quote=True)}" alt="{title}">
                <div class="recipe-info">
                    <h3>{title}</h3>
                    <a href="{escape(recipe.detail_url, quote=True)}" target="_blank" rel="noopener noreferrer">View recipe</a>
                </div>
            </div>
"""

    def _encode_preview(self, session: AnalysisSession) -> str | None:
        """Inline a downscaled JPEG of the analyzed image as a data URL."""
        try:
            if isinstance(session.image, Image.Image):
                image = session.image.copy()
            else:
                with Image.open(session.image) as opened:
                    image = opened.copy()
        except Exception:
            return None
        image = image.convert("RGB")
        image.thumbnail((self.preview_size, self.preview_size))
        buffer = io.BytesIO()
        image.save(buffer, format="JPEG", quality=85)
        return "data:image/jpeg;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")

    def _build_footer(self) -> str:
        return """</body>
</html>
"""


def _image_name(image: object) -> str:
    if isinstance(image, Image.Image):
        return getattr(image, "filename", "") or "uploaded image"
    return Path(str(image)).name


__all__ = ["HTMLReportGenerator"]
