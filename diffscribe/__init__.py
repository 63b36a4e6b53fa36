"""Commit message suggestions from git diffs, heuristics and LLMs."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("diffscribe")
except PackageNotFoundError:
    # Fallback for development mode
    __version__ = "0.0.0-dev"
