"""Headless runner: ``python -m tick_dungeon``."""
from __future__ import annotations

import argparse
import logging

from tick_dungeon.config import DungeonConfig
from tick_dungeon.events import Event
from tick_dungeon.simulation import Simulation


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the dungeon simulation headless")
    parser.add_argument("--seed", type=int, help="RNG seed (random if omitted)")
    parser.add_argument(
        "--ticks", type=int, help="Run this many fixed-interval ticks and exit"
    )
    parser.add_argument(
        "--seconds",
        type=float,
        help="Simulated seconds to run as fast as possible (overrides --ticks)",
    )
    parser.add_argument(
        "--realtime",
        action="store_true",
        help="Tick against the wall clock until interrupted",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser.parse_args(argv)


def _print_event(event: Event) -> None:
    print(f"[{event.time:7.1f}s] {event.message}")


def _print_summary(sim: Simulation) -> None:
    status = sim.dungeon_status()
    resources = ", ".join(f"{k}={v:g}" for k, v in sim.resources().items())
    print(f"seed: {sim.seed}")
    print(f"game time: {status['game_time']:.1f}s  level: {status['level']}  "
          f"core: {status['health']:g}/{status['max_health']}")
    print(f"resources: {resources}")
    for group in sim.roster(grouped=True):
        print(f"  {group['count']:3d} x {group['name']}")


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    config = DungeonConfig()
    sim = Simulation(config, seed=args.seed)
    sim.log.subscribe(_print_event)

    if args.realtime:
        try:
            sim.run_forever()
        except KeyboardInterrupt:
            sim.stop()
    else:
        if args.seconds is not None:
            ticks = round(args.seconds / config.update_interval)
        elif args.ticks is not None:
            ticks = args.ticks
        else:
            ticks = round(600 / config.update_interval)
        sim.run(ticks)

    _print_summary(sim)


if __name__ == "__main__":
    main()
