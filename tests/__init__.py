"""Tests for exocortex."""
