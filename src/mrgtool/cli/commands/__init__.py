"""CLI command modules for mrgtool."""

from .generate import generate, versions

__all__ = ["generate", "versions"]
