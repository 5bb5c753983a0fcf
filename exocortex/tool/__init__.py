"""Command line tool for working with an exocortex wiki repository."""
