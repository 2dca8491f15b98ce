"""
Configuration Layer.

This package turns step inputs and command-line options into a validated
run configuration.
"""

from .input_loader import InputLoader

__all__ = ["InputLoader"]
