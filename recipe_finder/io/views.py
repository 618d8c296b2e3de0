"""User-facing surfaces the orchestrator renders analysis results onto."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..core.types import ImageInput, RecipeSummary

logger = logging.getLogger(__name__)

LOADING_LABEL = "Loading model..."
IDLE_LABEL = "Analyze Ingredients"
BUSY_LABEL = "Analyzing..."


@dataclass
class ControlState:
    """Label text and enabled flag of the analyze trigger."""

    label: str = LOADING_LABEL
    enabled: bool = False


class ResultsView(ABC):
    """Abstract display surface: analyze control, ingredient list, recipe cards."""

    def __init__(self) -> None:
        self.control = ControlState()

    def set_control(self, label: str, enabled: bool) -> None:
        self.control = ControlState(label=label, enabled=enabled)

    @abstractmethod
    def notify(self, message: str) -> None:
        """Surface a notice the user has to acknowledge."""

    @abstractmethod
    def show_preview(self, image: ImageInput) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove previously rendered ingredients and recipes."""

    @abstractmethod
    def add_ingredient(self, name: str) -> None:
        pass

    @abstractmethod
    def show_placeholder(self, message: str) -> None:
        pass

    @abstractmethod
    def add_recipe(self, recipe: RecipeSummary) -> None:
        pass


class MemoryView(ResultsView):
    """Keeps everything rendered in lists; used for reports and tests."""

    def __init__(self) -> None:
        super().__init__()
        self.preview: Optional[ImageInput] = None
        self.notices: List[str] = []
        self.ingredients: List[str] = []
        self.placeholder: Optional[str] = None
        self.recipes: List[RecipeSummary] = []
        self.control_history: List[ControlState] = [self.control]

    def set_control(self, label: str, enabled: bool) -> None:
        super().set_control(label, enabled)
        self.control_history.append(self.control)

    def notify(self, message: str) -> None:
        self.notices.append(message)

    def show_preview(self, image: ImageInput) -> None:
        self.preview = image

    def clear(self) -> None:
        self.ingredients = []
        self.placeholder = None
        self.recipes = []

    def add_ingredient(self, name: str) -> None:
        self.ingredients.append(name)

    def show_placeholder(self, message: str) -> None:
        self.placeholder = message

    def add_recipe(self, recipe: RecipeSummary) -> None:
        self.recipes.append(recipe)


class ConsoleView(ResultsView):
    """Prints results as they arrive."""

    def __init__(self, echo: Callable[[str], None] = print) -> None:
        super().__init__()
        self.echo = echo

    def set_control(self, label: str, enabled: bool) -> None:
        super().set_control(label, enabled)
        logger.debug("Control: %s (%s)", label, "enabled" if enabled else "disabled")

    def notify(self, message: str) -> None:
        self.echo(f"! {message}")

    def show_preview(self, image: ImageInput) -> None:
        self.echo(f"Image: {getattr(image, 'filename', None) or image}")

    def clear(self) -> None:
        pass

    def add_ingredient(self, name: str) -> None:
        self.echo(f"  - {name}")

    def show_placeholder(self, message: str) -> None:
        self.echo(f"  {message}")

    def add_recipe(self, recipe: RecipeSummary) -> None:
        self.echo(f"    * {recipe.title:<40} {recipe.detail_url}")


class CompositeView(ResultsView):
    """Fans every call out to several views."""

    def __init__(self, *views: ResultsView) -> None:
        super().__init__()
        self.views = list(views)

    def set_control(self, label: str, enabled: bool) -> None:
        super().set_control(label, enabled)
        for view in self.views:
            view.set_control(label, enabled)

    def notify(self, message: str) -> None:
        for view in self.views:
            view.notify(message)

    def show_preview(self, image: ImageInput) -> None:
        for view in self.views:
            view.show_preview(image)

    def clear(self) -> None:
        for view in self.views:
            view.clear()

    def add_ingredient(self, name: str) -> None:
        for view in self.views:
            view.add_ingredient(name)

    def show_placeholder(self, message: str) -> None:
        for view in self.views:
            view.show_placeholder(message)

    def add_recipe(self, recipe: RecipeSummary) -> None:
        for view in self.views:
            view.add_recipe(recipe)


__all__ = [
    "BUSY_LABEL",
    "CompositeView",
    "ConsoleView",
    "ControlState",
    "IDLE_LABEL",
    "LOADING_LABEL",
    "MemoryView",
    "ResultsView",
]
