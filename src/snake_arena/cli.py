"""CLI for running headless Snake Arena sessions."""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snake-arena",
        description="Snake Arena headless simulation tools.",
    )
    parser.add_argument(
        "--log-level", type=str, default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Run a session without a UI and print a summary.",
    )
    sim_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file.",
    )
    sim_p.add_argument("--seed", type=int, default=None)
    sim_p.add_argument(
        "--duration", type=float, default=10.0,
        help="Simulated seconds to run.",
    )
    sim_p.add_argument("--fps", type=float, default=60.0)
    sim_p.add_argument("--opponents", type=int, default=None)
    sim_p.add_argument(
        "--event", action="append", default=[], metavar="MS:ACTION",
        help="Scripted input, e.g. 500:up or 0:faster. Repeatable.",
    )
    sim_p.add_argument(
        "--no-autostart", action="store_true",
        help="Do not press start at t=0.",
    )

    # --- config ---
    cfg_p = sub.add_parser(
        "config", help="Write the default configuration as JSON.",
    )
    cfg_p.add_argument("output", help="Destination path for the JSON file.")

    return parser


def _run_simulate(args: argparse.Namespace) -> int:
    from snake_arena.config import GameConfig
    from snake_arena.headless import InputEvent, run_session

    overrides: dict = {}
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.opponents is not None:
        overrides["autonomous_count"] = args.opponents
    try:
        config = GameConfig.load(args.config) if args.config else GameConfig()
        if overrides:
            config = dataclasses.replace(config, **overrides)
        events = [InputEvent.parse(text) for text in args.event]
    except (OSError, ValueError) as exc:
        logger.error("%s", exc)
        return 2

    summary = run_session(
        config,
        duration_ms=args.duration * 1000.0,
        fps=args.fps,
        events=events,
        autostart=not args.no_autostart,
    )
    print(json.dumps(summary, indent=2))  # noqa: T201
    return 0


def _run_config(args: argparse.Namespace) -> int:
    from snake_arena.config import GameConfig

    GameConfig().save(args.output)
    print(f"Wrote default config to {args.output}")  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``snake-arena`` CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "simulate": _run_simulate,
        "config": _run_config,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
