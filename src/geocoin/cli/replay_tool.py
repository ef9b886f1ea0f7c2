from __future__ import annotations

import argparse
from typing import Sequence

from geocoin.content.config import load_gameplay_config_or_default
from geocoin.content.io import JsonFileStorage, MemoryStorage
from geocoin.sim.hash import game_hash
from geocoin.sim.sensors import load_track_json
from geocoin.sim.state import GameStateController

REPLAY_PRINT_CACHE_LIMIT = 20


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="geocoin-replay",
        description=(
            "Deterministic replay tool. Feeds a recorded position track through a fresh game "
            "(or a copy of a saved game) and reports state hashes before and after."
        ),
    )
    parser.add_argument("track_path", help="Path to position track JSON")
    parser.add_argument("--save-path", help="Optional save file to start from; it is read, never modified")
    parser.add_argument("--config-path", help="Optional gameplay config JSON")
    parser.add_argument(
        "--per-sample",
        action="store_true",
        help="Print the player cell and game hash after each replayed sample",
    )
    parser.add_argument(
        "--print-caches",
        action="store_true",
        help="Print caches that hold coins after replay",
    )
    parser.add_argument(
        "--dump-final-save",
        help="Optional path to write the final save after replay",
    )
    return parser


def _print_header(controller: GameStateController, sample_count: int) -> None:
    state = controller.state
    print(
        "header "
        f"samples={sample_count} "
        f"caches={len(state.store)} "
        f"inventory={len(state.player.inventory)} "
        f"moves={len(state.player.move_history)}"
    )


def _print_caches(controller: GameStateController) -> None:
    caches = [cache for cache in controller.state.store.iter_caches() if cache.coins]
    caches.sort(key=lambda cache: (cache.i, cache.j))
    print(f"caches.limit={REPLAY_PRINT_CACHE_LIMIT}")
    if not caches:
        print("cache none")
    for cache in caches[:REPLAY_PRINT_CACHE_LIMIT]:
        print(f"cache key={cache.key} coins={len(cache.coins)}")


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_gameplay_config_or_default(args.config_path)
        storage = MemoryStorage()
        if args.save_path:
            saved = JsonFileStorage(args.save_path).get(config.storage_key)
            if saved is not None:
                storage.set(config.storage_key, saved)
        controller = GameStateController.create(config, storage)
        source = load_track_json(args.track_path)

        _print_header(controller, len(source.samples))
        print(f"start_hash={game_hash(controller.state)}")

        controller.follow(source)
        if args.per_sample:
            replayed = 0

            def report(_lat: float, _lng: float) -> None:
                nonlocal replayed
                replayed += 1
                print(
                    f"sample={replayed} "
                    f"cell={controller.state.current_cell().key} "
                    f"hash={game_hash(controller.state)}"
                )

            source.subscribe(report)
        source.play()
        controller.stop_following()

        print(f"end_hash={game_hash(controller.state)}")
        print(f"total_coins={controller.state.total_coins()} visible_caches={len(controller.state.visible_caches())}")

        if args.print_caches:
            _print_caches(controller)

        if args.dump_final_save:
            controller.save()
            JsonFileStorage(args.dump_final_save).set(config.storage_key, storage.get(config.storage_key) or "{}")
            print(f"dumped_final_save={args.dump_final_save}")

    except (OSError, ValueError) as exc:
        print(f"error: {exc}")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
