"""Command line entry point: ``python -m txkv`` / ``txkv``."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from .app import Application

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="txkv", description="Transactional key value store shell"
    )
    parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="Read commands from file instead of stdin",
    )
    parser.add_argument(
        "--log-level",
        choices=_LOG_LEVELS,
        default="WARNING",
        help="Diagnostics level (stderr)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = Application()
    if args.input is not None:
        with open(args.input, encoding="utf-8") as fp:
            app.start(fp)
    else:
        app.start()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
