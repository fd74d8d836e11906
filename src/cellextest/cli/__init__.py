"""Command line interface for cellextest."""
from .main import cli, main

__all__ = ["cli", "main"]
