"""Shared utilities for xmlx.

This module provides the value types, configuration objects, exceptions and
logging helpers used across the character, tokenization, tree and API layers.
"""

from .config import SerializerConfig
from .errors import XMLSyntaxError, XMLxError
from .logging import CorrelationLogger, configure_logging, get_logger
from .names import Attribute, QualifiedName

__all__ = [
    "Attribute",
    "CorrelationLogger",
    "QualifiedName",
    "SerializerConfig",
    "XMLSyntaxError",
    "XMLxError",
    "configure_logging",
    "get_logger",
]
