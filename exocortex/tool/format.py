"""Library for formatting command output."""

from abc import ABC, abstractmethod
import json
import sys
from typing import Any, Generator, TextIO

import yaml

PADDING = 4

OUTPUT_TABLE = "table"
OUTPUT_JSON = "json"
OUTPUT_YAML = "yaml"
OUTPUT_CHOICES = [OUTPUT_TABLE, OUTPUT_JSON, OUTPUT_YAML]


def format_columns(
    headers: list[str], rows: list[list[str]]
) -> Generator[str, None, None]:
    """Yield the header and rows aligned in columns as wide as their longest value."""
    if not headers:
        return
    widths = [len(header) for header in headers]
    for row in rows:
        widths = [max(width, len(value)) for width, value in zip(widths, row)]
    for row in [headers] + rows:
        yield "".join(value.ljust(width + PADDING) for value, width in zip(row, widths))


class Formatter(ABC):
    """Renders a list of records for the console."""

    @abstractmethod
    def format(self, data: list[dict[str, Any]]) -> Generator[str, None, None]:
        """Yield the output lines for the records."""

    def print(self, data: list[dict[str, Any]], file: TextIO = sys.stdout) -> None:
        """Write the records to the file."""
        for line in self.format(data):
            print(line, file=file)


class PrintFormatter(Formatter):
    """Human readable columns with one record per row."""

    def __init__(self, keys: list[str] | None = None) -> None:
        """Initialize the formatter with the keys to print, or all keys."""
        self._keys = keys

    def format(self, data: list[dict[str, Any]]) -> Generator[str, None, None]:
        if not data:
            return
        keys = self._keys if self._keys is not None else list(data[0])
        rows = [[str(record[key]) for key in keys] for record in data]
        yield from format_columns([key.upper() for key in keys], rows)


class JsonFormatter(Formatter):
    """A json list of records."""

    def format(self, data: list[dict[str, Any]]) -> Generator[str, None, None]:
        yield from json.dumps(data, indent=2, sort_keys=False).split("\n")


class YamlFormatter(Formatter):
    """A yaml list of records."""

    def format(self, data: list[dict[str, Any]]) -> Generator[str, None, None]:
        content = yaml.safe_dump(data, sort_keys=False, explicit_start=True)
        yield from content.rstrip("\n").split("\n")


def make_formatter(output: str, keys: list[str] | None = None) -> Formatter:
    """Return the formatter for the output flag value."""
    if output == OUTPUT_JSON:
        return JsonFormatter()
    if output == OUTPUT_YAML:
        return YamlFormatter()
    return PrintFormatter(keys)
