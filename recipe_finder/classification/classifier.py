"""ImageNet classifier used to recognize ingredients in whole photos."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable, List, Sequence

import torch
from PIL import Image, UnidentifiedImageError
from torchvision.models import (
    MobileNet_V2_Weights,
    MobileNet_V3_Large_Weights,
    mobilenet_v2,
    mobilenet_v3_large,
)

from ..core.types import ImageInput, Prediction

logger = logging.getLogger(__name__)

# backend name -> (builder, weights enum)
_BACKENDS = {
    "mobilenet_v3_large": (mobilenet_v3_large, MobileNet_V3_Large_Weights.DEFAULT),
    "mobilenet_v2": (mobilenet_v2, MobileNet_V2_Weights.DEFAULT),
}


class ImageNetModel:
    """A loaded ImageNet network returning ranked label predictions."""

    def __init__(
        self,
        network: torch.nn.Module,
        preprocess: Callable[[Image.Image], torch.Tensor],
        labels: Sequence[str],
        device: str = "cpu",
        top_k: int = 5,
    ) -> None:
        if not labels:
            raise ValueError("ImageNetModel requires a non-empty labels list")
        self.network = network
        self.preprocess = preprocess
        self.labels = list(labels)
        self.device = device
        self.top_k = int(top_k)

    def predict(self, image: ImageInput) -> List[Prediction]:
        image = load_image(image).convert("RGB")
        tensor = self.preprocess(image)
        with torch.inference_mode():
            logits = self.network(tensor.unsqueeze(0).to(self.device))
            probs = torch.nn.functional.softmax(logits, dim=1)[0]
        k = min(self.top_k, probs.shape[0], len(self.labels))
        conf, idx = probs.topk(k)
        return [
            Prediction(label=self.labels[int(i)], confidence=float(c))
            for c, i in zip(conf.tolist(), idx.tolist())
        ]

    async def classify(self, image: ImageInput) -> List[Prediction]:
        return await asyncio.to_thread(self.predict, image)


class ImageNetClassifier:
    """Loads a pre-trained torchvision MobileNet and its category names.

    Loading downloads weights on first use, so it is done off the event loop.
    """

    def __init__(
        self,
        backend: str = "mobilenet_v3_large",
        device: str | None = None,
        top_k: int = 5,
    ) -> None:
        if backend not in _BACKENDS:
            raise ValueError(
                f"Unsupported classifier backend: {backend}. "
                f"Choose one of {', '.join(sorted(_BACKENDS))}."
            )
        self.backend = backend
        self.device = device or ("cuda" if torch.cuda.is_available() else "cpu")
        self.top_k = int(top_k)

    def load(self) -> ImageNetModel:
        builder, weights = _BACKENDS[self.backend]
        try:
            network = builder(weights=weights)
            network.to(self.device).eval()
        except Exception as exc:  # pragma: no cover - depends on weights download
            raise RuntimeError(f"Classifier backend initialization failed: {exc}") from exc
        labels = list(weights.meta.get("categories") or [])
        logger.info("Loaded %s with %d categories on %s", self.backend, len(labels), self.device)
        return ImageNetModel(
            network=network,
            preprocess=weights.transforms(),
            labels=labels,
            device=self.device,
            top_k=self.top_k,
        )

    async def initialize(self) -> ImageNetModel:
        return await asyncio.to_thread(self.load)


def load_image(image_input: ImageInput) -> Image.Image:
    if isinstance(image_input, Image.Image):
        return image_input
    path = Path(image_input)
    if not path.exists():
        raise FileNotFoundError(path)
    try:
        return Image.open(path)
    except UnidentifiedImageError as exc:
        raise UnidentifiedImageError(f"Unsupported image file: {path}") from exc


__all__ = ["ImageNetClassifier", "ImageNetModel", "load_image"]
