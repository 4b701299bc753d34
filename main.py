#!/usr/bin/env python3
"""Farming Simulator 19 mod support — developer entry point

Drives the host callbacks from the command line:

    python main.py describe
    python main.py find
    python main.py version <game_path>
    python main.py launcher <game_path>
    python main.py plan <staging_dir>
"""

import argparse
import asyncio
import faulthandler
import json
import logging
import os
import sys
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path

from game_config import GameConfig
from fs19_plugin import GameSupport, init_plugin
from store_locator import GameNotFoundError


def setup_logging(debug: bool = False) -> tuple[logging.Logger, Path]:
    log_dir = Path(os.environ.get("APPDATA", "~")).expanduser() / "FS19ModSupport"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "fs19modsupport.log"

    handler = RotatingFileHandler(
        log_file,
        maxBytes=1 * 1024 * 1024,  # 1 MB
        backupCount=2,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter("%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"))

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)

    if debug:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter("%(levelname)s - %(name)s - %(message)s"))
        logger.addHandler(console)
    return logger, log_dir


def install_crash_handler(logger: logging.Logger, log_dir: Path):
    def handle_exception(exc_type, exc_value, exc_tb):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_tb)
            return
        logger.critical(
            "Unhandled exception:\n%s",
            "".join(traceback.format_exception(exc_type, exc_value, exc_tb)),
        )

    sys.excepthook = handle_exception

    # faulthandler can't use logging after a hard crash
    crash_file = log_dir / "crash.log"
    faulthandler.enable(open(crash_file, "a"), all_threads=True)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Farming Simulator 19 mod support")
    parser.add_argument("--mods-dir", help="Override the game's mods folder")
    parser.add_argument("--debug", action="store_true", help="Also log to stderr")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("describe", help="Print the game and installer registration")
    sub.add_parser("find", help="Locate the installed game through the stores")
    version = sub.add_parser("version", help="Read the game version")
    version.add_argument("game_path")
    launcher = sub.add_parser("launcher", help="Show the launcher the game needs, if any")
    launcher.add_argument("game_path")
    plan = sub.add_parser("plan", help="Plan the install of a staged mod directory")
    plan.add_argument("staging_dir")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> GameConfig:
    if args.mods_dir:
        return GameConfig(mods_path=Path(args.mods_dir))
    return GameConfig.from_environment()


def staged_files(staging_dir: Path) -> list[str]:
    return [str(p) for p in sorted(staging_dir.rglob("*")) if p.is_file()]


async def run(args: argparse.Namespace) -> int:
    config = build_config(args)
    support = GameSupport(config)

    if args.command == "describe":
        print(json.dumps(init_plugin(config).describe(), indent=2))
    elif args.command == "find":
        try:
            print(await support.find_game())
        except GameNotFoundError as exc:
            print(f"ERROR: {exc}")
            return 1
    elif args.command == "version":
        version = await support.get_game_version(args.game_path)
        print(version if version is not None else "unknown")
    elif args.command == "launcher":
        info = await support.requires_launcher(args.game_path)
        print(json.dumps(info.model_dump(by_alias=True) if info else None, indent=2))
    elif args.command == "plan":
        staging_dir = Path(args.staging_dir).resolve()
        plan = await support.install_content(staged_files(staging_dir), str(staging_dir))
        print(json.dumps(plan.model_dump(by_alias=True), indent=2))
    return 0


if __name__ == "__main__":
    args = parse_args()
    logger, log_dir = setup_logging(debug=args.debug)
    install_crash_handler(logger, log_dir)
    logger.info("Running %s", args.command)
    raise SystemExit(asyncio.run(run(args)))
