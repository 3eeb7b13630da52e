"""Condense media down to its spoken parts using subtitle timing."""

__version__ = "0.3.0"
