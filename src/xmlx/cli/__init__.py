"""Command-line interface module for xmlx.

This module provides the ``xmlx`` tool for reformatting, querying and
checking XML files.
"""

from .main import main

__all__ = ["main"]
