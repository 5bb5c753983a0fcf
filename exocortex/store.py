"""A wiki store backed by a local git repository.

Every operation shells out to the `git` binary inside the repository
directory. Pages are plain files in the working tree and each write is
committed immediately, so the history of the wiki is the history of the
repository.

Example usage:

```python
from exocortex.model import Page
from exocortex.store import Store

store = await Store.load(Path("~/wiki").expanduser())
await store.ensure_valid_environment()
await store.write_page(Page(prefix="notes/todo", body="- buy milk"))
for result in await store.grep("milk"):
    print(f"{result.page}:{result.line_number}: {result.content}")
```

Writes and sync cycles for the same repository are serialized with a lock that
is shared by every `Store` pointing at that directory. Reads are not locked.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime
import logging
import os
from pathlib import Path
import re
from time import perf_counter
import weakref

import aiofiles
import aiofiles.os

from . import command
from .command import Command
from .config import (
    CONFIG_FILENAME,
    DEFAULT_BRANCH,
    DEFAULT_REMOTE,
    Config,
    read_config,
)
from .exceptions import (
    CommandException,
    ExoException,
    InputException,
    MalformedOutputError,
    NoRepositoryError,
    RepoExistsError,
)
from .model import Page, SearchResult
from .util import ensure_dir_exists, ensure_md_path, exists

__all__ = [
    "PREFIX_IGNORE",
    "Store",
]

_LOGGER = logging.getLogger(__name__)

GIT_BIN = "git"
GIT_DIR = ".git"

# Files that are never returned when listing pages
PREFIX_IGNORE = frozenset(
    {
        ".gitignore",
        CONFIG_FILENAME,
        "readme.md",
        "",
    }
)

UNKNOWN_AUTHOR = "Unknown"
ACTION_UPDATED = "Updated"
ACTION_DELETED = "Deleted"

# Never block on credential prompts from pull/push, and print non-ASCII paths
# verbatim instead of C-quoted
_GIT_ENV = {
    "GIT_TERMINAL_PROMPT": "0",
    "GIT_CONFIG_COUNT": "1",
    "GIT_CONFIG_KEY_0": "core.quotePath",
    "GIT_CONFIG_VALUE_0": "false",
}

# Exit status of `git grep` when nothing matched
_GREP_NO_MATCH = 1

# Locks are bound to an event loop, so each running loop gets its own set
_REPO_LOCKS: weakref.WeakKeyDictionary[
    asyncio.AbstractEventLoop, dict[Path, asyncio.Lock]
] = weakref.WeakKeyDictionary()

# Output line of `git grep -n`; the line number is the first all-digit field
_GREP_LINE_RE = re.compile(r"(.+?):(\d+):(.*)")


def _repo_lock(repo: Path) -> asyncio.Lock:
    """Return the lock guarding writes to the repository at this path."""
    locks = _REPO_LOCKS.setdefault(asyncio.get_running_loop(), {})
    return locks.setdefault(repo.resolve(), asyncio.Lock())


def kitchen_time(now: datetime) -> str:
    """Format a time of day on a 12 hour clock, e.g. `3:04PM`."""
    hour = now.hour % 12 or 12
    meridiem = "AM" if now.hour < 12 else "PM"
    return f"{hour}:{now.minute:02d}{meridiem}"


def parse_grep_output(output: str, cmd: str = "git grep") -> list[SearchResult]:
    """Parse `git grep -n` output lines of the form `page:line:content`."""
    results = []
    for line in output.splitlines():
        if not line:
            continue
        if not (match := _GREP_LINE_RE.fullmatch(line)):
            raise MalformedOutputError(cmd, line)
        page, line_number, content = match.groups()
        results.append(
            SearchResult(page=page, line_number=line_number, content=content)
        )
    return results


def parse_version_output(output: str, cmd: str = "git --version") -> str:
    """Parse the version number from output like `git version 2.43.0`."""
    tokens = output.split()
    if len(tokens) < 3 or tokens[0] != GIT_BIN or tokens[1] != "version":
        raise MalformedOutputError(cmd, output)
    return tokens[2]


@dataclass(frozen=True)
class Store:
    """Wiki storage in a local git repository."""

    repo: Path
    """Path to the directory holding the repository."""

    remote: str = DEFAULT_REMOTE
    """Git remote to push to and pull from."""

    branch: str = DEFAULT_BRANCH
    """Branch to push to and pull from."""

    @classmethod
    def from_config(cls, repo: Path, config: Config) -> "Store":
        """Create a store for the repository using the remote and branch in the config."""
        return cls(repo=repo, remote=config.remote, branch=config.branch)

    @classmethod
    async def load(cls, repo: Path) -> "Store":
        """Create a store for the repository from its config file."""
        return cls.from_config(repo, await read_config(repo))

    @property
    def git_dir(self) -> Path:
        """Path to the git metadata directory."""
        return self.repo / GIT_DIR

    @property
    def lock(self) -> asyncio.Lock:
        """Lock held around writes and sync cycles."""
        return _repo_lock(self.repo)

    async def _require_repo(self) -> None:
        if not await exists(self.git_dir):
            raise NoRepositoryError(f"No git repository found at {self.repo}")

    async def _exec(
        self,
        *args: str,
        retcodes: list[int] | None = None,
        require_repo: bool = True,
    ) -> str:
        """Run git with the arguments in the repository directory and return stdout."""
        if require_repo:
            await self._require_repo()
        return await command.run(
            Command(
                [GIT_BIN, *args],
                cwd=self.repo,
                retcodes=retcodes,
                env=_GIT_ENV,
            )
        )

    def _page_path(self, path: str) -> tuple[str, Path]:
        """Return the normalized relative path and absolute path of a page."""
        rel_path = ensure_md_path(path)
        abs_path = self.repo / rel_path
        if not abs_path.resolve().is_relative_to(self.repo.resolve()):
            raise InputException(f"Page path '{path}' is outside of the repository")
        return rel_path, abs_path

    async def init(self) -> None:
        """Initialize a git repository, refusing if one already exists."""
        if await exists(self.git_dir):
            raise RepoExistsError(f"Git repo already exists at {self.repo}")
        await aiofiles.os.makedirs(self.repo, exist_ok=True)
        await self._exec("init", require_repo=False)

    async def status(self) -> str:
        """Return the verbose status of the repository."""
        return await self._exec("status", "-v")

    async def commit(self, path: str, msg: str = "") -> str:
        """Commit the path, generating a message when none is provided."""
        async with self.lock:
            return await self._commit(path, msg)

    async def _commit(self, path: str, msg: str) -> str:
        if not msg:
            msg = await self.exo_message(path, ACTION_UPDATED)
        return await self._exec("commit", "-m", msg, "--", path)

    async def add(self, path: str, msg: str = "") -> str:
        """Stage the path and commit it."""
        async with self.lock:
            return await self._add(path, msg)

    async def _add(self, path: str, msg: str) -> str:
        await self._exec("add", "--", path)
        return await self._commit(path, msg)

    async def remove(self, path: str, msg: str = "") -> None:
        """Delete the path from the wiki and commit the deletion.

        If the commit fails the staged deletion is undone and the file is
        restored before the error is raised.
        """
        async with self.lock:
            await self._exec("rm", "--", path)
            if not msg:
                msg = await self.exo_message(path, ACTION_DELETED)
            try:
                await self._commit(path, msg)
            except CommandException:
                await self._restore(path)
                raise

    async def _restore(self, path: str) -> None:
        """Unstage a deletion and restore the file from the last commit."""
        try:
            await self._exec("reset", "-q", "HEAD", "--", path)
            await self._exec("checkout", "HEAD", "--", path)
        except CommandException as err:
            _LOGGER.warning("Unable to restore '%s' after failed commit: %s", path, err)

    async def ls_pattern(self, pattern: str) -> list[str]:
        """List files tracked at HEAD matching the path pattern."""
        args = ["ls-tree", "--name-only", "-r", "HEAD"]
        if pattern:
            args.extend(["--", pattern])
        output = await self._exec(*args)
        return [path for path in output.split("\n") if path]

    async def ls(self) -> list[str]:
        """List all pages tracked at HEAD, excluding reserved files."""
        return [
            path for path in await self.ls_pattern("") if path not in PREFIX_IGNORE
        ]

    async def current_user(self) -> str:
        """Return the author name from the git config."""
        output = await self._exec("config", "--get", "user.name")
        return output.strip()

    async def view(self, path: str) -> str:
        """Return the contents of the page from the working tree."""
        await self._require_repo()
        _, resolved_path = self._page_path(path)
        _LOGGER.debug("Resolved path: %s", resolved_path)
        async with aiofiles.open(resolved_path, mode="r", encoding="utf-8") as page_file:
            try:
                return await page_file.read()
            except UnicodeDecodeError as err:
                raise InputException(f"Page '{path}' is not UTF-8 text: {err}") from err

    async def grep(self, pattern: str) -> list[SearchResult]:
        """Search tracked text files for a case insensitive fixed string."""
        args = ["grep", "--no-color", "-F", "-n", "-i", "-I", "-e", pattern]
        output = await self._exec(*args, retcodes=[_GREP_NO_MATCH])
        return parse_grep_output(output, cmd=" ".join([GIT_BIN, *args]))

    async def write_page(self, page: Page) -> None:
        """Write the page body to disk and commit it."""
        path, abs_path = self._page_path(page.prefix)
        await self._require_repo()
        async with self.lock:
            await ensure_dir_exists(abs_path)
            async with aiofiles.open(
                abs_path,
                mode="w",
                encoding="utf-8",
                opener=lambda name, flags: os.open(name, flags, 0o600),
            ) as page_file:
                await page_file.write(page.body)
            await self._add(path, page.message or "")

    async def pull(self) -> str:
        """Pull the latest changes from the tracked remote branch."""
        async with self.lock:
            return await self._pull()

    async def _pull(self) -> str:
        return await self._exec("pull", self.remote, self.branch)

    async def push(self) -> str:
        """Push local commits to the tracked remote branch."""
        async with self.lock:
            return await self._push()

    async def _push(self) -> str:
        return await self._exec("push", self.remote, self.branch)

    async def sync_once(self) -> bool:
        """Pull then push once, logging failures.

        Returns True if both the pull and the push succeeded.
        """
        _LOGGER.debug(
            "Starting sync for remote '%s' and branch '%s'", self.remote, self.branch
        )
        start = perf_counter()
        success = True
        async with self.lock:
            for step in (self._pull, self._push):
                try:
                    await step()
                except ExoException as err:
                    _LOGGER.debug(str(err))
                    success = False
        _LOGGER.debug("Finished sync in: %0.2fs", perf_counter() - start)
        return success

    async def sync(self, interval: float, stop: asyncio.Event | None = None) -> None:
        """Pull and push every interval seconds until the stop event is set.

        Failures are logged and never raised. Without a stop event this runs
        until the task is cancelled.
        """
        if stop is None:
            stop = asyncio.Event()
        while not stop.is_set():
            try:
                await asyncio.wait_for(stop.wait(), interval)
            except asyncio.TimeoutError:
                await self.sync_once()

    async def exo_message(self, page: str, action: str) -> str:
        """Return the uniform commit message used for page changes."""
        try:
            author = await self.current_user()
        except ExoException:
            author = UNKNOWN_AUTHOR
        return f"exo: {action} {page} by {author} at {kitchen_time(datetime.now())}"

    async def version(self) -> str:
        """Return the installed git version."""
        output = await command.run(Command([GIT_BIN, "--version"]))
        return parse_version_output(output)

    async def ensure_valid_environment(self) -> None:
        """Check that git is installed and the directory holds a repository.

        Callers should bail out before doing anything else when this raises.
        """
        try:
            await self.version()
        except CommandException as err:
            raise CommandException(
                f"failed to get git version: {err}",
                command=err.command,
                returncode=err.returncode,
                stderr=err.stderr,
            ) from err
        if not await exists(self.repo) or not await exists(self.git_dir):
            raise NoRepositoryError(f"no git repository found at {self.repo}")
