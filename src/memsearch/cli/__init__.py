"""CLI module for memsearch."""

from .main import cli

__all__ = ["cli"]
