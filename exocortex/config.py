"""Configuration objects for exocortex.

The configuration lives in an `exocortex.json` file at the root of the wiki
repository, e.g.:

```json
{
  "remote": "origin",
  "branch": "master",
  "sync_interval": 60
}
```

Missing keys fall back to the defaults below and unknown keys are ignored.
"""

from dataclasses import dataclass
import json
import logging
from pathlib import Path

import aiofiles
from mashumaro import DataClassDictMixin

from .exceptions import InputException

__all__ = [
    "CONFIG_FILENAME",
    "Config",
    "read_config",
    "write_config",
]

_LOGGER = logging.getLogger(__name__)

CONFIG_FILENAME = "exocortex.json"

DEFAULT_REMOTE = "origin"
DEFAULT_BRANCH = "master"
DEFAULT_SYNC_INTERVAL = 60


@dataclass
class Config(DataClassDictMixin):
    """Configuration for a wiki repository."""

    remote: str = DEFAULT_REMOTE
    """Git remote to push to and pull from."""

    branch: str = DEFAULT_BRANCH
    """Branch to push to and pull from."""

    sync_interval: int = DEFAULT_SYNC_INTERVAL
    """Seconds between background sync cycles."""

    @classmethod
    def parse_json(cls, content: str) -> "Config":
        """Parse the contents of a config file."""
        try:
            doc = json.loads(content)
        except ValueError as err:
            raise InputException(f"Unable to parse config file: {err}") from err
        if not isinstance(doc, dict):
            raise InputException(f"Config file must contain an object: {doc}")
        try:
            config = cls.from_dict(doc)
        except (ValueError, TypeError, LookupError) as err:
            raise InputException(f"Invalid config file: {err}") from err
        config.validate()
        return config

    def validate(self) -> None:
        """Raise an InputException if any value is out of range."""
        for name in ("remote", "branch"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise InputException(f"Config '{name}' must be a non-empty string")
        if isinstance(self.sync_interval, bool) or not isinstance(
            self.sync_interval, int
        ):
            raise InputException("Config 'sync_interval' must be an integer")
        if self.sync_interval <= 0:
            raise InputException("Config 'sync_interval' must be positive")

    def json(self) -> str:
        """Return the serialized config file contents."""
        return json.dumps(self.to_dict(), indent=2) + "\n"


async def read_config(repo: Path) -> Config:
    """Read the config file from the repository, or the defaults if it is absent."""
    path = repo / CONFIG_FILENAME
    try:
        async with aiofiles.open(path, mode="r", encoding="utf-8") as config_file:
            content = await config_file.read()
    except FileNotFoundError:
        _LOGGER.debug("No config file at %s, using defaults", path)
        return Config()
    return Config.parse_json(content)


async def write_config(repo: Path, config: Config) -> Path:
    """Write the config file into the repository and return its path."""
    path = repo / CONFIG_FILENAME
    async with aiofiles.open(path, mode="w", encoding="utf-8") as config_file:
        await config_file.write(config.json())
    return path
