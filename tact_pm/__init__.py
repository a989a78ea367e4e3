"""Tact Package Manager."""

__version__ = "1.0.0"
