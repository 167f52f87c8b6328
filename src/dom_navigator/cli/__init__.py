"""Command-line interface module for DOM Navigator.

This module provides the dom-navigator CLI: running the navigation transducer
over a file or stdin, and printing the structure of a markup block.
"""

from .main import main

__all__ = ["main"]
