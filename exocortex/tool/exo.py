"""Command line tool for reading, writing, searching and syncing a git backed wiki."""

import argparse
import asyncio
import logging
import pathlib
import sys
import traceback

from exocortex.exceptions import ExoException
from . import page, repo, search, sync

_LOGGER = logging.getLogger(__name__)


def _make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Command line utility for a personal wiki stored in git.",
    )
    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    )
    parser.add_argument(
        "--repo",
        help="Path to the wiki repository",
        type=pathlib.Path,
        default=pathlib.Path.cwd(),
    )

    subparsers = parser.add_subparsers(dest="command", help="Command", required=True)

    repo.InitAction.register(subparsers)
    repo.CheckAction.register(subparsers)
    repo.StatusAction.register(subparsers)
    page.LsAction.register(subparsers)
    page.ViewAction.register(subparsers)
    page.WriteAction.register(subparsers)
    page.RmAction.register(subparsers)
    search.GrepAction.register(subparsers)
    sync.SyncAction.register(subparsers)
    return parser


def main(argv: list[str] | None = None) -> None:
    """Exo command line tool main entry point."""
    parser = _make_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        logging.basicConfig(level=args.log_level)

    action = args.cls()
    try:
        asyncio.run(action.run(**vars(args)))
    except (ExoException, OSError) as err:
        if args.log_level == "DEBUG":
            traceback.print_exc(file=sys.stderr)
        print("exo error: ", err, file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
