from __future__ import annotations

import argparse
import importlib.metadata
import logging
import math
import os
import platform
import sys
from typing import Any

from geocoin.content.config import DEFAULT_GAMEPLAY_CONFIG_PATH, load_gameplay_config_or_default
from geocoin.content.io import JsonFileStorage
from geocoin.sim.cache import Cache
from geocoin.sim.grid import Cell, LatLng
from geocoin.sim.hash import game_hash
from geocoin.sim.sensors import always_confirm
from geocoin.sim.state import RESET_PROMPT, GameStateController

CELL_PIXELS = 36
WINDOW_SIZE = (1120, 680)
PANEL_WIDTH = 420
PANEL_MARGIN = 12
DEFAULT_SAVE_PATH = "saves/geocoin_session.json"

CELL_COLOR = (46, 52, 60)
CELL_BORDER_COLOR = (30, 32, 38)
CACHE_COLOR = (222, 176, 62)
EMPTY_CACHE_COLOR = (120, 100, 58)
PLAYER_COLOR = (120, 210, 255)
PATH_COLOR = (230, 90, 90)

pygame: Any | None = None


def _viewport_center() -> tuple[float, float]:
    viewport_width = WINDOW_SIZE[0] - PANEL_WIDTH
    return (viewport_width / 2.0, WINDOW_SIZE[1] / 2.0)


def _cell_top_left(cell: Cell, origin: Cell, center: tuple[float, float]) -> tuple[float, float]:
    # Screen y grows downward while cell row i grows northward.
    left = center[0] + (cell.j - origin.j - 0.5) * CELL_PIXELS
    top = center[1] - (cell.i - origin.i + 0.5) * CELL_PIXELS
    return (left, top)


def _cell_at_pixel(pixel_x: float, pixel_y: float, origin: Cell, center: tuple[float, float]) -> tuple[int, int]:
    dj = math.floor((pixel_x - center[0]) / CELL_PIXELS + 0.5)
    di = math.floor((center[1] - pixel_y) / CELL_PIXELS + 0.5)
    return (origin.i + di, origin.j + dj)


def _point_to_pixel(point: LatLng, tile_width: float, origin: Cell, center: tuple[float, float]) -> tuple[float, float]:
    x = center[0] + (point.lng / tile_width - origin.j - 0.5) * CELL_PIXELS
    y = center[1] - (point.lat / tile_width - origin.i - 0.5) * CELL_PIXELS
    return (x, y)


def _cache_label(cache: Cache) -> str:
    coins = ", ".join(f"({coin})" for coin in cache.coins)
    return f"{cache.key}: {coins or '<empty>'}"


def _visible_cache_map(controller: GameStateController) -> dict[str, Cache]:
    """Caches around the player keyed by cell, in row-major order; built once per frame."""
    return {cell.key: cache for cell, cache in controller.state.visible_caches()}


def _draw_world(
    screen: Any,
    controller: GameStateController,
    caches: dict[str, Cache],
    center: tuple[float, float],
) -> None:
    state = controller.state
    origin = state.current_cell()
    for cell in state.visible_cells():
        left, top = _cell_top_left(cell, origin, center)
        rect = pygame.Rect(int(left), int(top), CELL_PIXELS, CELL_PIXELS)
        cache = caches.get(cell.key)
        if cache is None:
            color = CELL_COLOR
        else:
            color = CACHE_COLOR if cache.coins else EMPTY_CACHE_COLOR
        pygame.draw.rect(screen, color, rect)
        pygame.draw.rect(screen, CELL_BORDER_COLOR, rect, 1)

    history = state.player.move_history
    if len(history) > 1:
        points = [_point_to_pixel(point, state.config.tile_degrees, origin, center) for point in history]
        pygame.draw.lines(screen, PATH_COLOR, False, points, 2)

    player_x, player_y = _point_to_pixel(state.player.location, state.config.tile_degrees, origin, center)
    pygame.draw.circle(screen, PLAYER_COLOR, (int(player_x), int(player_y)), 7)
    pygame.draw.circle(screen, (15, 15, 15), (int(player_x), int(player_y)), 7, 1)


def _draw_panel(
    screen: Any,
    controller: GameStateController,
    caches: dict[str, Cache],
    font: Any,
    status_message: str | None,
) -> None:
    state = controller.state
    precision = state.config.coord_precision
    panel_rect = pygame.Rect(WINDOW_SIZE[0] - PANEL_WIDTH, 0, PANEL_WIDTH, WINDOW_SIZE[1])
    pygame.draw.rect(screen, (24, 26, 36), panel_rect)
    pygame.draw.rect(screen, (95, 98, 110), panel_rect, 1)

    location = state.player.location
    lines = [
        f"at {location.lat:.{precision}f}, {location.lng:.{precision}f}",
        f"cell {state.current_cell().key} | moves {len(state.player.move_history)}",
        f"inventory: {state.player.inventory_text() or '<empty>'}",
        "arrows move | LMB collect | RMB deposit",
        "F5 save | R reset | ESC quit",
    ]
    if status_message:
        lines.append(f"status: {status_message}")
    lines.append("")
    lines.extend(_cache_label(cache) for cache in caches.values())

    y = PANEL_MARGIN
    for line in lines:
        if y > WINDOW_SIZE[1] - PANEL_MARGIN:
            break
        surface = font.render(line, True, (235, 235, 235))
        screen.blit(surface, (panel_rect.x + PANEL_MARGIN, y))
        y += 20


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="geocoin-viewer-gui",
        description="Run the Geocoin pygame viewer.",
    )
    parser.add_argument(
        "--config-path",
        default=DEFAULT_GAMEPLAY_CONFIG_PATH,
        help="Gameplay config JSON; defaults apply when the file is absent.",
    )
    parser.add_argument(
        "--save-path",
        default=DEFAULT_SAVE_PATH,
        help="Save file loaded on startup and rewritten after every action.",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Force SDL dummy video driver for CI/testing and exit without opening a real window.",
    )
    parser.add_argument("--log-level", default="WARNING", help="Python logging level for core modules.")
    return parser


def _env_flag_enabled(var_name: str) -> bool:
    return os.environ.get(var_name, "").strip().lower() in {"1", "true", "yes", "on"}


def _print_startup_banner() -> None:
    try:
        pygame_version = importlib.metadata.version("pygame")
    except importlib.metadata.PackageNotFoundError:
        pygame_version = "not-installed"
    print(
        "[geocoin.viewer] startup "
        f"python={platform.python_version()} "
        f"pygame={pygame_version} "
        f"platform={platform.platform()}"
    )
    for name in ("SDL_VIDEODRIVER", "SDL_AUDIODRIVER"):
        value = os.environ.get(name, "<unset>")
        print(f"[geocoin.viewer] env {name}={value}")


def _ensure_pygame_imported() -> Any:
    global pygame
    if pygame is None:
        import pygame as pygame_module

        pygame = pygame_module
    return pygame


def _build_controller(config_path: str | None, save_path: str) -> GameStateController:
    config = load_gameplay_config_or_default(config_path)
    controller = GameStateController.create(config, JsonFileStorage(save_path))
    print(
        "[geocoin.viewer] loaded "
        f"path={save_path} caches={len(controller.state.store)} "
        f"inventory={len(controller.state.player.inventory)} "
        f"game_hash={game_hash(controller.state)}"
    )
    return controller


def run_pygame_viewer(
    config_path: str | None = DEFAULT_GAMEPLAY_CONFIG_PATH,
    *,
    headless: bool = False,
    save_path: str = DEFAULT_SAVE_PATH,
) -> int:
    if headless:
        os.environ["SDL_VIDEODRIVER"] = "dummy"
        print("[geocoin.viewer] warning: headless mode active; no window will open.")

    _print_startup_banner()
    pygame_module = _ensure_pygame_imported()

    try:
        pygame_module.init()
    except Exception as exc:
        print(
            "[geocoin.viewer] failed during pygame.init(): "
            f"{exc}. Hint: verify a working SDL video driver (set SDL_VIDEODRIVER=dummy for headless mode).",
            file=sys.stderr,
        )
        return 1

    try:
        controller = _build_controller(config_path, save_path)
    except (OSError, ValueError) as exc:
        print(f"[geocoin.viewer] failed to initialize game: {exc}", file=sys.stderr)
        pygame_module.quit()
        return 1

    try:
        pygame_module.display.set_caption("Geocoin Carrier")
        screen = pygame_module.display.set_mode(WINDOW_SIZE)
    except Exception as exc:
        print(
            "[geocoin.viewer] failed during pygame.display.set_mode(...): "
            f"{exc}. Hint: GUI sessions require a valid display; use --headless or GEOCOIN_HEADLESS=1.",
            file=sys.stderr,
        )
        pygame_module.quit()
        return 1

    print(f"[geocoin.viewer] display initialized: {pygame_module.display.get_driver()}, window size={WINDOW_SIZE}")

    if headless:
        controller.refresh()
        pygame_module.quit()
        return 0

    key_directions = {
        pygame_module.K_UP: "north",
        pygame_module.K_DOWN: "south",
        pygame_module.K_RIGHT: "east",
        pygame_module.K_LEFT: "west",
    }
    clock = pygame_module.time.Clock()
    font = pygame_module.font.SysFont("consolas", 16)
    center = _viewport_center()
    status_message: str | None = None
    pending_reset = False
    running = True

    while running:
        clock.tick(30)
        for event in pygame_module.event.get():
            if event.type == pygame_module.QUIT:
                running = False
            elif event.type != pygame_module.KEYDOWN and event.type != pygame_module.MOUSEBUTTONDOWN:
                continue
            elif pending_reset and event.type == pygame_module.KEYDOWN:
                pending_reset = False
                if event.key == pygame_module.K_y:
                    controller.reset(confirm=always_confirm)
                    status_message = "game reset"
                    print(f"[geocoin.viewer] reset game_hash={game_hash(controller.state)}")
                else:
                    status_message = "reset cancelled"
            elif event.type == pygame_module.KEYDOWN and event.key == pygame_module.K_ESCAPE:
                running = False
            elif event.type == pygame_module.KEYDOWN and event.key in key_directions:
                controller.move(key_directions[event.key])
                status_message = None
            elif event.type == pygame_module.KEYDOWN and event.key == pygame_module.K_F5:
                controller.save()
                status_message = f"saved {save_path}"
                print(f"[geocoin.viewer] saved path={save_path} game_hash={game_hash(controller.state)}")
            elif event.type == pygame_module.KEYDOWN and event.key == pygame_module.K_r:
                pending_reset = True
                status_message = f"{RESET_PROMPT} [Y/N]"
            elif event.type == pygame_module.MOUSEBUTTONDOWN and event.button in (1, 3):
                if event.pos[0] >= WINDOW_SIZE[0] - PANEL_WIDTH:
                    continue
                origin = controller.state.current_cell()
                i, j = _cell_at_pixel(event.pos[0], event.pos[1], origin, center)
                cache = controller.state.store.get_cache(i, j)
                if max(abs(i - origin.i), abs(j - origin.j)) > controller.state.board.visibility_radius:
                    status_message = f"{i},{j} is out of reach"
                elif cache is None:
                    status_message = f"no cache at {i},{j}"
                elif event.button == 1:
                    if cache.coins and controller.collect(i, j, cache.coins[0]):
                        status_message = f"collected {cache.coins[0]}"
                    else:
                        status_message = f"cache {cache.key} is empty"
                else:
                    coin = controller.deposit(i, j)
                    status_message = f"deposited {coin}" if coin is not None else "inventory is empty"

        screen.fill((17, 18, 25))
        caches = _visible_cache_map(controller)
        _draw_world(screen, controller, caches, center)
        _draw_panel(screen, controller, caches, font, status_message)
        pygame_module.display.flip()

    pygame_module.quit()
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())
    headless = args.headless or _env_flag_enabled("GEOCOIN_HEADLESS")
    raise SystemExit(
        run_pygame_viewer(
            config_path=args.config_path,
            headless=headless,
            save_path=args.save_path,
        )
    )


if __name__ == "__main__":
    main()
