"""Command-line interface module for XML to Avro conversion."""

from .main import main

__all__ = ["main"]
