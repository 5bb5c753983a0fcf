"""Fixtures for tests that run against real git repositories."""

from collections.abc import Generator
from pathlib import Path
import tempfile

import git
import pytest

from exocortex.store import Store

AUTHOR = "myusername"


def configure_repo(repo: git.Repo) -> None:
    """Set the identity used for commits in a test repository."""
    with repo.config_writer() as writer:
        writer.set_value("user", "name", AUTHOR)
        writer.set_value("user", "email", "myemail@example.com")
        writer.set_value("commit", "gpgsign", "false")
        writer.set_value("pull", "rebase", "false")


@pytest.fixture(name="tmp_dir")
def tmp_dir_fixture() -> Generator[Path, None, None]:
    """Create a temporary directory for test repositories."""
    with tempfile.TemporaryDirectory() as td:
        yield Path(td)


@pytest.fixture(name="repo_dir")
def repo_dir_fixture(tmp_dir: Path) -> Path:
    """Create an empty git repository with a commit identity."""
    repo_path = tmp_dir / "wiki"
    repo_path.mkdir()
    configure_repo(git.Repo.init(repo_path))
    return repo_path


@pytest.fixture(name="seeded_repo_dir")
def seeded_repo_dir_fixture(repo_dir: Path) -> Path:
    """Create a repository with pages and reserved files already committed."""
    (repo_dir / ".gitignore").write_text("*.swp\n")
    (repo_dir / "exocortex.json").write_text('{"remote": "origin"}\n')
    (repo_dir / "readme.md").write_text("# My wiki\n")
    (repo_dir / "index.md").write_text("# Index\n\nhello world\n")
    (repo_dir / "notes").mkdir()
    (repo_dir / "notes" / "ideas.md").write_text("Ideas: write more\nHELLO again\n")

    repo = git.Repo(repo_dir)
    repo.git.add(".")
    repo.git.commit(m="Initial commit")
    return repo_dir


@pytest.fixture(name="store")
def store_fixture(seeded_repo_dir: Path) -> Store:
    """Create a store for the seeded repository."""
    return Store(repo=seeded_repo_dir)
