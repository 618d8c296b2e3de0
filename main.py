"""CLI entry point: find recipes for the ingredients recognized in photos.

Delegates to the analyze command module.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from recipe_finder.cli import run_analysis
from recipe_finder.utils.config import load_config


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Recognize ingredients in food photos and look up matching recipes."
    )
    parser.add_argument(
        "target",
        help="Image file, or directory containing images to analyze",
    )
    parser.add_argument(
        "--config", dest="config", default=None,
        help="Path to JSON/YAML config file"
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Minimum classifier confidence for a label to count (exclusive)",
    )
    parser.add_argument(
        "--vocabulary",
        default=None,
        help="JSON file with extra classifier label -> ingredient entries",
    )
    parser.add_argument(
        "--results-dir",
        default=None,
        help="Where to write JSON/HTML outputs (overrides config)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Write a JSON result file per image",
    )
    parser.add_argument(
        "--html",
        action="store_true",
        help="Write an HTML report with recipe cards",
    )
    parser.add_argument(
        "--no-wait",
        action="store_true",
        help="Re-enable analysis as soon as all recipe lookups are started",
    )
    parser.add_argument(
        "--show-predictions",
        action="store_true",
        help="Print raw classifier predictions",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def apply_overrides(cfg: dict, args: argparse.Namespace) -> dict:
    """Apply command line overrides to configuration."""
    cfg = json.loads(json.dumps(cfg))  # deep copy

    if args.threshold is not None:
        cfg.setdefault("resolver", {})["confidence_threshold"] = float(args.threshold)
    if args.vocabulary is not None:
        cfg.setdefault("vocabulary", {})["extra_entries_path"] = str(args.vocabulary)
    if args.results_dir is not None:
        cfg.setdefault("io", {})["results_dir"] = str(args.results_dir)
    if args.json:
        cfg.setdefault("io", {})["write_json"] = True
    if args.html:
        cfg.setdefault("io", {})["write_html"] = True
    if args.no_wait:
        cfg.setdefault("pipeline", {})["wait_for_recipes"] = False

    return cfg


def main(argv: list[str]) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    target = Path(args.target)
    if not target.exists():
        print(f"Path not found: {target}")
        return 1

    cfg = load_config(args.config)
    cfg = apply_overrides(cfg, args)

    return run_analysis(target, cfg, show_predictions=args.show_predictions)


def _console_main() -> int:
    return main(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
