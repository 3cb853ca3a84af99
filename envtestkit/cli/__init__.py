"""Command-line interface for envtestkit."""

from .parser import CLI, main

__all__ = ["CLI", "main"]
