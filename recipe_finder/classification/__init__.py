"""Image classification collaborator."""

from .base import ClassificationCollaborator, ClassificationModel
from .classifier import ImageNetClassifier, ImageNetModel, load_image

__all__ = [
    "ClassificationCollaborator",
    "ClassificationModel",
    "ImageNetClassifier",
    "ImageNetModel",
    "load_image",
]
