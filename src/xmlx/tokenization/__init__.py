"""Tokenization engine for xmlx.

This module converts decoded document text into the XML event stream the tree
builder consumes.

Key Components:
    XMLTokenizer: Iterable tokenizer over document text
    Token: A single XML event with its position
    TokenType: Enumeration of the event kinds
    TokenPosition: Line/column/offset of a token
"""

from .tokenizer import (
    PREDEFINED_ENTITIES,
    Token,
    TokenPosition,
    TokenType,
    XMLTokenizer,
)

__all__ = [
    "PREDEFINED_ENTITIES",
    "Token",
    "TokenPosition",
    "TokenType",
    "XMLTokenizer",
]
