"""Test helpers for the exo command line tool."""

from pathlib import Path
import sys

from exocortex.command import Command, run

EXO_BIN = [sys.executable, "-m", "exocortex"]


async def run_command(
    repo: Path, args: list[str], stdin: bytes | None = None
) -> str:
    return await run(Command(EXO_BIN + ["--repo", str(repo)] + args), stdin)
