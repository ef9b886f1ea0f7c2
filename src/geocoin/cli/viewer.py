from __future__ import annotations

import argparse
import logging
from typing import Sequence

from geocoin.content.config import DEFAULT_GAMEPLAY_CONFIG_PATH, GameplayConfig, load_gameplay_config_or_default
from geocoin.content.io import JsonFileStorage, MemoryStorage
from geocoin.sim.cache import Coin
from geocoin.sim.state import GameStateController

DEFAULT_SAVE_PATH = "saves/geocoin_save.json"
HELP_TEXT = "Commands: show | n|s|e|w | collect <i> <j> <serial> | deposit <i> <j> | save | reset | quit"


class AsciiViewer:
    """Read-only projection of the neighborhood around the player."""

    def render(self, controller: GameStateController) -> str:
        state = controller.state
        precision = state.config.coord_precision
        player = state.player
        origin = state.current_cell()
        lines = [
            f"player=({player.location.lat:.{precision}f},{player.location.lng:.{precision}f}) "
            f"cell={origin.key} moves={len(player.move_history)}"
        ]

        caches = {cell.key: cache for cell, cache in state.visible_caches()}
        radius = state.board.visibility_radius
        # North at the top: latitude index decreases down the screen.
        for di in range(radius, -radius - 1, -1):
            row = []
            for dj in range(-radius, radius + 1):
                key = f"{origin.i + di},{origin.j + dj}"
                if di == 0 and dj == 0:
                    row.append("@")
                elif key in caches:
                    row.append("C" if caches[key].coins else "c")
                else:
                    row.append(".")
            lines.append(" ".join(row))

        for key in sorted(caches):
            cache = caches[key]
            coins = " ".join(f"[{coin}]" for coin in cache.coins) or "<empty>"
            lines.append(f"cache[{key}] {coins}")
        lines.append(f"inventory: {player.inventory_text() or '<empty>'}")
        return "\n".join(lines)


class GameController:
    """Small command adapter; issues commands to the state controller but does not own state."""

    def __init__(self, controller: GameStateController) -> None:
        self.controller = controller

    def move(self, direction: str) -> None:
        self.controller.move(direction)

    def collect(self, i: int, j: int, serial: int) -> bool:
        return self.controller.collect(i, j, Coin(i=i, j=j, serial=serial))

    def deposit(self, i: int, j: int) -> Coin | None:
        return self.controller.deposit(i, j)

    def save(self) -> None:
        self.controller.save()

    def reset(self, confirmed: bool) -> bool:
        return self.controller.reset(confirm=lambda _prompt: confirmed)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="geocoin-viewer", description="Terminal Geocoin session.")
    parser.add_argument("--config", default=DEFAULT_GAMEPLAY_CONFIG_PATH, help="Gameplay config JSON path.")
    parser.add_argument("--save-path", default=DEFAULT_SAVE_PATH, help="Save file used for load on start and autosave.")
    parser.add_argument("--no-save", action="store_true", help="Keep the session in memory only.")
    parser.add_argument("--log-level", default="WARNING", help="Python logging level for core modules.")
    return parser


def run_demo(
    config: GameplayConfig | None = None,
    save_path: str | None = DEFAULT_SAVE_PATH,
) -> None:
    storage = JsonFileStorage(save_path) if save_path else MemoryStorage()
    controller = GameStateController.create(config, storage)
    view = AsciiViewer()
    commands = GameController(controller)

    print(f"Geocoin demo. {HELP_TEXT}")
    print(view.render(controller))

    while True:
        raw = input("> ").strip()
        if raw in {"quit", "exit"}:
            break
        if raw == "show":
            print(view.render(controller))
            continue
        if raw == "save":
            commands.save()
            print("saved")
            continue
        if raw == "reset":
            answer = input("Reset the game? [y/N] ").strip().lower()
            if commands.reset(answer in {"y", "yes"}):
                print(view.render(controller))
            else:
                print("reset cancelled")
            continue

        parts = raw.split()
        if len(parts) == 1 and parts[0] in {"n", "s", "e", "w"}:
            commands.move(parts[0])
            print(view.render(controller))
            continue
        if len(parts) == 4 and parts[0] == "collect":
            if commands.collect(int(parts[1]), int(parts[2]), int(parts[3])):
                print(view.render(controller))
            else:
                print("no such coin here")
            continue
        if len(parts) == 3 and parts[0] == "deposit":
            coin = commands.deposit(int(parts[1]), int(parts[2]))
            print(f"deposited {coin}" if coin is not None else "nothing to deposit")
            continue

        print("unknown command")


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())
    config = load_gameplay_config_or_default(args.config)
    run_demo(config, None if args.no_save else args.save_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
