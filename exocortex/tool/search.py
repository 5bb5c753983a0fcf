"""Command line action for searching the wiki."""

import logging
import pathlib
from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
from typing import cast

from exocortex.store import Store

from .format import OUTPUT_CHOICES, OUTPUT_TABLE, make_formatter

_LOGGER = logging.getLogger(__name__)

RESULT_KEYS = ["page", "line_number", "content"]


class GrepAction:
    """Exo grep action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "grep",
                help="Search pages for text",
                description="Case insensitive search of all committed text files.",
            ),
        )
        args.add_argument("pattern", help="Text to search for")
        args.add_argument(
            "--output",
            "-o",
            choices=OUTPUT_CHOICES,
            default=OUTPUT_TABLE,
            help="Output format of the command",
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        repo: pathlib.Path,
        pattern: str,
        output: str,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        store = await Store.load(repo)
        results = await store.grep(pattern)
        if not results and output == OUTPUT_TABLE:
            print("No matches found")
            return
        make_formatter(output, RESULT_KEYS).print(
            [result.to_dict() for result in results]
        )
