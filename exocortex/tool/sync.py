"""Command line action for replicating the wiki with its remote."""

import asyncio
import logging
import pathlib
import signal
from argparse import ArgumentParser, _SubParsersAction as SubParsersAction
from typing import cast

from exocortex.config import read_config
from exocortex.store import Store
from exocortex.sync import SyncService

_LOGGER = logging.getLogger(__name__)


class SyncAction:
    """Exo sync action."""

    @classmethod
    def register(
        cls, subparsers: SubParsersAction  # type: ignore[type-arg]
    ) -> ArgumentParser:
        """Register the subparser commands."""
        args = cast(
            ArgumentParser,
            subparsers.add_parser(
                "sync",
                help="Periodically pull and push the wiki",
                description=(
                    "Pull from and push to the configured remote branch every "
                    "interval until interrupted. Failures are logged at DEBUG."
                ),
            ),
        )
        args.add_argument(
            "--interval",
            help="Seconds between sync cycles, overriding the config file",
            type=int,
            default=None,
        )
        args.add_argument(
            "--once",
            help="Run a single pull and push then exit",
            action="store_true",
        )
        args.set_defaults(cls=cls)
        return args

    async def run(  # type: ignore[no-untyped-def]
        self,
        repo: pathlib.Path,
        interval: int | None,
        once: bool,
        **kwargs,  # pylint: disable=unused-argument
    ) -> None:
        """Async Action implementation."""
        config = await read_config(repo)
        store = Store.from_config(repo, config)
        await store.ensure_valid_environment()
        if once:
            if not await store.sync_once():
                print("Sync failed, run with --log-level DEBUG for details")
            return

        shutdown = asyncio.Event()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, shutdown.set)
        try:
            async with SyncService(store, interval or config.sync_interval):
                await shutdown.wait()
        finally:
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.remove_signal_handler(sig)
