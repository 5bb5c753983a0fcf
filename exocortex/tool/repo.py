"""Command line actions for setting up and inspecting the wiki repository."""

import logging
import pathlib
from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
from typing import cast

from exocortex.config import CONFIG_FILENAME, Config, write_config
from exocortex.store import Store
from exocortex.util import exists

_LOGGER = logging.getLogger(__name__)

OK = "[EXO OK]"


class InitAction:
    """Exo init action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "init",
                help="Create a new wiki repository",
                description=(
                    "Initialize a git repository for the wiki and write a default "
                    "config file. Fails if the repository already exists."
                ),
            ),
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        repo: pathlib.Path,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        store = await Store.load(repo)
        await store.init()
        config_path = store.repo / CONFIG_FILENAME
        if not await exists(config_path):
            config_path = await write_config(store.repo, Config())
            _LOGGER.debug("Wrote default config to %s", config_path)
        print(f"Initialized wiki repository in {store.repo}")


class CheckAction:
    """Exo check action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "check",
                help="Verify git is installed and the wiki repository exists",
            ),
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        repo: pathlib.Path,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        store = await Store.load(repo)
        await store.ensure_valid_environment()
        version = await store.version()
        print(f"{OK}: git {version}, repository {store.repo}")


class StatusAction:
    """Exo status action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "status",
                help="Print the git status of the wiki repository",
            ),
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        repo: pathlib.Path,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        store = await Store.load(repo)
        print(await store.status(), end="")
