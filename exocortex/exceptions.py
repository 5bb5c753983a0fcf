"""Exceptions related to exocortex."""

__all__ = [
    "ExoException",
    "InputException",
    "CommandException",
    "MalformedOutputError",
    "RepoExistsError",
    "NoRepositoryError",
]


class ExoException(Exception):
    """Generic base exception used for this library."""


class InputException(ExoException):
    """Raised when the config file or arguments are not formatted as expected."""


class CommandException(ExoException):
    """Raised when there is a failure running a git subcommand."""

    def __init__(
        self,
        message: str,
        command: str | None = None,
        returncode: int | None = None,
        stderr: str | None = None,
    ) -> None:
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class MalformedOutputError(ExoException):
    """Raised when the output of a git command is not in the expected format."""

    def __init__(self, command: str, output: str) -> None:
        super().__init__(f"Unexpected output from '{command}': {output!r}")
        self.command = command
        self.output = output


class RepoExistsError(ExoException):
    """Raised when initializing a repository that already exists."""


class NoRepositoryError(ExoException):
    """Raised when the wiki directory is not a git repository."""
