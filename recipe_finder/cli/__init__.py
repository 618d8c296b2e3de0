"""CLI commands for recipe finder."""

from .analyze import build_pipeline_from_config, run_analysis

__all__ = ["build_pipeline_from_config", "run_analysis"]
