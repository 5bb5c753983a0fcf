"""
A personal wiki stored in a local git repository.

The `store` module holds `Store`, which writes, lists, searches and
synchronizes pages by running `git` in the repository directory. The `sync`
module runs the periodic pull and push in the background and `tool` is the
`exo` command line interface.
"""

__all__ = [
    "store",
    "sync",
    "model",
    "config",
    "exceptions",
    # Note this is exposed for CLI documentation, not to be used as a library
    "tool",
]
