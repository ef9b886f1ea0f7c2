from __future__ import annotations

import argparse
import logging
from typing import Sequence

from geocoin.cli.pygame_viewer import run_pygame_viewer
from geocoin.content.config import DEFAULT_GAMEPLAY_CONFIG_PATH

DEFAULT_SAVE_PATH = "saves/geocoin_save.json"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="geocoin-play", description="Canonical Geocoin launcher.")
    parser.add_argument("--save-path", default=DEFAULT_SAVE_PATH, help="Save file loaded at startup and kept up to date.")
    parser.add_argument("--config-path", default=DEFAULT_GAMEPLAY_CONFIG_PATH, help="Gameplay config JSON path.")
    parser.add_argument("--headless", action="store_true", help="Run startup path in headless mode.")
    parser.add_argument("--log-level", default="WARNING", help="Python logging level for core modules.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())
    return run_pygame_viewer(
        config_path=args.config_path,
        headless=args.headless,
        save_path=args.save_path,
    )


if __name__ == "__main__":
    raise SystemExit(main())
