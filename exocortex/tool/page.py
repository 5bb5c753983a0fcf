"""Command line actions for listing, reading and changing wiki pages."""

import logging
import pathlib
import sys
from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
from typing import cast

from exocortex.model import Page
from exocortex.store import Store

from .format import OUTPUT_CHOICES, OUTPUT_TABLE, make_formatter

_LOGGER = logging.getLogger(__name__)


class LsAction:
    """Exo ls action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "ls",
                help="List pages in the wiki",
                description=(
                    "List the pages committed to the wiki. With a pattern, list "
                    "all tracked files under that path including reserved files."
                ),
            ),
        )
        args.add_argument(
            "pattern",
            help="Optional path or directory to list",
            default=None,
            nargs="?",
        )
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
        pattern: str | None,
        output: str,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        store = await Store.load(repo)
        if pattern:
            paths = await store.ls_pattern(pattern)
        else:
            paths = await store.ls()
        if output == OUTPUT_TABLE:
            for path in paths:
                print(path)
            return
        make_formatter(output).print([{"page": path} for path in paths])


class ViewAction:
    """Exo view action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "view",
                help="Print the contents of a page",
            ),
        )
        args.add_argument("path", help="Path of the page, the .md suffix is optional")
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        repo: pathlib.Path,
        path: str,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        store = await Store.load(repo)
        print(await store.view(path), end="")


class WriteAction:
    """Exo write action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "write",
                help="Write and commit a page",
                description=(
                    "Write the page body to the wiki and commit it. The body is "
                    "read from stdin unless --body is given."
                ),
            ),
        )
        args.add_argument("path", help="Path of the page, the .md suffix is optional")
        args.add_argument(
            "--body",
            help="Contents of the page",
            default=None,
        )
        args.add_argument(
            "--message",
            "-m",
            help="Commit message, generated when omitted",
            default=None,
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        repo: pathlib.Path,
        path: str,
        body: str | None,
        message: str | None,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        if body is None:
            body = sys.stdin.read()
        store = await Store.load(repo)
        await store.write_page(Page(prefix=path, body=body, message=message))


class RmAction:
    """Exo rm action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "rm",
                help="Delete a page and commit the deletion",
            ),
        )
        args.add_argument("path", help="Path of the file relative to the repository")
        args.add_argument(
            "--message",
            "-m",
            help="Commit message, generated when omitted",
            default=None,
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        repo: pathlib.Path,
        path: str,
        message: str | None,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        store = await Store.load(repo)
        await store.remove(path, message or "")
