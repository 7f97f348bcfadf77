"""
Command line interface for building and inspecting snapshots.
"""

from .main import cli, main

__all__ = ["cli", "main"]
