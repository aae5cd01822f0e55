"""
Launcher for the credential manager.

Usage:
    python -m credvault              # tray icon + global hotkey
    python -m credvault --show       # also open the window right away
    python -m credvault --debug
"""

import sys
import argparse
import logging
from dataclasses import replace

import yaml

from .config import get_settings, reset_settings

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="credvault",
        description="Manage named logins in the OS credential store",
    )
    parser.add_argument("--show", action="store_true", help="Open the credential window at start-up")
    parser.add_argument("--prefix", help="Override the name prefix for this session")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )

    try:
        settings = get_settings()
        if args.prefix:
            settings = replace(settings, prefix=args.prefix)
            reset_settings(settings)
    except (ValueError, yaml.YAMLError) as e:
        logger.error(f"Invalid settings: {e}")
        return 2

    logger.info(f"Starting credential manager (prefix '{settings.prefix}', hotkey {settings.hotkey})")

    # Qt is only needed for the UI
    from .vault.app import run

    return run(settings, show=args.show)


if __name__ == "__main__":
    sys.exit(main())
