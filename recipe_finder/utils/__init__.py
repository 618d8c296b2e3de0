"""Shared utilities and configuration handling."""

from .config import DEFAULTS, load_config, resolve_path_relative_to_project

__all__ = ["DEFAULTS", "load_config", "resolve_path_relative_to_project"]
