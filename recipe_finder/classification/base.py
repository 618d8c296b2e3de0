"""Protocols for the image classification collaborator."""
from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from ..core.types import ImageInput, Prediction


@runtime_checkable
class ClassificationModel(Protocol):
    """A loaded model that labels whole images."""

    async def classify(self, image: ImageInput) -> Sequence[Prediction]:
        """Classify an image.

        Args:
            image: PIL image or path to an image file

        Returns:
            Predictions ordered by descending confidence
        """
        ...


@runtime_checkable
class ClassificationCollaborator(Protocol):
    """Loads a :class:`ClassificationModel` once per process."""

    async def initialize(self) -> ClassificationModel:
        ...


