"""Rebuild a local branch as upstream plus a curated list of squashed pull requests."""

__version__ = "0.1.0"
