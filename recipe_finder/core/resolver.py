"""Turn classifier predictions into a deduplicated set of canonical ingredients."""

from __future__ import annotations

from typing import Iterable, List

from .types import Prediction
from .vocabulary import IngredientVocabulary

DEFAULT_CONFIDENCE_THRESHOLD = 0.20


class LabelResolver:
    """Maps raw predictions onto the ingredient vocabulary.

    Classifier labels may list synonyms separated by commas ("bagel, roll"),
    so every part is trimmed and looked up on its own. Predictions at or below
    the threshold are ignored entirely.
    """

    def __init__(
        self,
        vocabulary: IngredientVocabulary | None = None,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
    ) -> None:
        self.vocabulary = vocabulary or IngredientVocabulary()
        self.confidence_threshold = float(confidence_threshold)

    def resolve(
        self,
        predictions: Iterable[Prediction],
        confidence_threshold: float | None = None,
    ) -> List[str]:
        """Return recognized ingredient names in first-seen order, without duplicates."""
        threshold = (
            self.confidence_threshold
            if confidence_threshold is None
            else float(confidence_threshold)
        )
        # dict keeps insertion order for display
        recognized: dict[str, None] = {}
        for prediction in predictions:
            if not prediction.confidence > threshold:
                continue
            for part in prediction.label.split(","):
                canonical = self.vocabulary.lookup(part.strip())
                if canonical is not None:
                    recognized.setdefault(canonical, None)
        return list(recognized)


def resolve_labels(
    predictions: Iterable[Prediction],
    confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
) -> List[str]:
    """Functional helper mirroring :meth:`LabelResolver.resolve`."""

    return LabelResolver(confidence_threshold=confidence_threshold).resolve(predictions)


__all__ = ["DEFAULT_CONFIDENCE_THRESHOLD", "LabelResolver", "resolve_labels"]
