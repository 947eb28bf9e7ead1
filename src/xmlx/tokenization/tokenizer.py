"""Core XML tokenization implementation.

This module converts decoded document text into a flat stream of XML events:
start and end elements, character data, comments, directives and processing
instructions. It is strict about well-formedness and raises ``XMLSyntaxError``
for malformed markup, including an end tag that does not match the innermost
open element. An end tag with no element open is passed through; what to do
with it is up to whoever consumes the events.

Namespace prefixes are translated to URIs with ordinary per-element scoping,
so a prefixed name arrives carrying the URI it was bound to.
"""

import bisect
import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from xmlx.shared.errors import XMLSyntaxError
from xmlx.shared.names import Attribute, QualifiedName

XMLNS_PREFIX = "xmlns"
XML_PREFIX = "xml"

CDATA_OPEN = "<![CDATA["
CDATA_CLOSE = "]]>"
COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"

PREDEFINED_ENTITIES: Dict[str, str] = {
    "lt": "<",
    "gt": ">",
    "amp": "&",
    "apos": "'",
    "quot": '"',
}

_NAME_START_CHARS = (
    ":A-Z_a-z\u00C0-\u00D6\u00D8-\u00F6\u00F8-\u02FF\u0370-\u037D"
    "\u037F-\u1FFF\u200C-\u200D\u2070-\u218F\u2C00-\u2FEF\u3001-\uD7FF"
    "\uF900-\uFDCF\uFDF0-\uFFFD\U00010000-\U000EFFFF"
)
_NAME_CHARS = _NAME_START_CHARS + "\\-.0-9\u00B7\u0300-\u036F\u203F-\u2040"

NAME_PATTERN = re.compile(f"[{_NAME_START_CHARS}][{_NAME_CHARS}]*")
_SPACE_PATTERN = re.compile(r"[ \t\n]*")


class TokenType(Enum):
    """XML token types produced by the tokenizer."""

    START_ELEMENT = auto()   # <name attr="v"> (and the opening half of <name/>)
    END_ELEMENT = auto()     # </name> (and the closing half of <name/>)
    CHAR_DATA = auto()       # Text and CDATA content, entities resolved
    COMMENT = auto()         # <!-- ... -->
    DIRECTIVE = auto()       # <!DOCTYPE ...> and other <!...> markup
    PROC_INST = auto()       # <?target ...?>, including the XML declaration


@dataclass(frozen=True)
class TokenPosition:
    """Position information for XML tokens."""

    line: int
    column: int
    offset: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")


@dataclass
class Token:
    """A single XML event.

    Only the fields relevant to the token type are populated: ``name`` for
    elements, ``attributes`` for start elements, ``target`` for processing
    instructions and ``value`` for everything else.
    """

    type: TokenType
    value: str = ""
    name: QualifiedName = field(default_factory=QualifiedName)
    attributes: List[Attribute] = field(default_factory=list)
    target: str = ""
    position: Optional[TokenPosition] = None

    @classmethod
    def start(
        cls, name: QualifiedName, attributes: Optional[List[Attribute]] = None
    ) -> "Token":
        return cls(TokenType.START_ELEMENT, name=name, attributes=attributes or [])

    @classmethod
    def end(cls, name: QualifiedName) -> "Token":
        return cls(TokenType.END_ELEMENT, name=name)

    @classmethod
    def char_data(cls, value: str) -> "Token":
        return cls(TokenType.CHAR_DATA, value=value)

    @classmethod
    def comment(cls, value: str) -> "Token":
        return cls(TokenType.COMMENT, value=value)

    @classmethod
    def directive(cls, value: str) -> "Token":
        return cls(TokenType.DIRECTIVE, value=value)

    @classmethod
    def proc_inst(cls, target: str, value: str) -> "Token":
        return cls(TokenType.PROC_INST, target=target, value=value)


def _is_xml_char(codepoint: int) -> bool:
    return (
        codepoint in (0x9, 0xA, 0xD)
        or 0x20 <= codepoint <= 0xD7FF
        or 0xE000 <= codepoint <= 0xFFFD
        or 0x10000 <= codepoint <= 0x10FFFF
    )


class XMLTokenizer:
    """Lexical XML tokenizer over decoded text.

    Iterating the tokenizer yields ``Token`` objects in document order and
    raises ``XMLSyntaxError`` at the first malformed construct. Iteration
    always restarts from the beginning of the text.

    Example:
        >>> [t.type.name for t in XMLTokenizer("<a>hi</a>")]
        ['START_ELEMENT', 'CHAR_DATA', 'END_ELEMENT']
    """

    def __init__(
        self, text: str, entity: Optional[Mapping[str, str]] = None
    ) -> None:
        """Initialize the tokenizer.

        Args:
            text: Decoded document text
            entity: Extra named entities substituted in text and attribute values
        """
        self.text = text.replace("\r\n", "\n").replace("\r", "\n")
        self.entity: Mapping[str, str] = entity if entity is not None else {}
        self._line_starts = [0] + [m.end() for m in re.finditer("\n", self.text)]
        self._reset_state()

    def _reset_state(self) -> None:
        self._pos = 0
        self._scopes: List[Dict[str, str]] = []
        self._open: List[str] = []

    def __iter__(self) -> Iterator[Token]:
        return self.tokens()

    def tokens(self) -> Iterator[Token]:
        """Generate tokens for the whole text."""
        self._reset_state()
        text = self.text
        length = len(text)
        pending: List[str] = []
        pending_start = 0

        while self._pos < length:
            start = self._pos
            if text.startswith(CDATA_OPEN, start):
                end = text.find(CDATA_CLOSE, start + len(CDATA_OPEN))
                if end < 0:
                    raise self._error("unexpected EOF in CDATA section", start)
                if not pending:
                    pending_start = start
                pending.append(text[start + len(CDATA_OPEN):end])
                self._pos = end + len(CDATA_CLOSE)
                continue

            if text[start] != "<":
                end = text.find("<", start)
                if end < 0:
                    end = length
                if not pending:
                    pending_start = start
                pending.append(self._decode_text(start, end))
                self._pos = end
                continue

            if pending:
                token = self._char_data(pending, pending_start)
                pending = []
                if token is not None:
                    yield token
            yield from self._markup()

        if pending:
            token = self._char_data(pending, pending_start)
            if token is not None:
                yield token

    # Markup

    def _markup(self) -> Iterator[Token]:
        text = self.text
        start = self._pos
        if text.startswith("</", start):
            yield self._end_tag()
        elif text.startswith(COMMENT_OPEN, start):
            yield self._comment()
        elif text.startswith("<!", start):
            yield self._directive()
        elif text.startswith("<?", start):
            yield self._proc_inst()
        else:
            yield from self._start_tag()

    def _char_data(self, pieces: List[str], start: int) -> Optional[Token]:
        value = "".join(pieces)
        if not value:
            return None
        return Token(TokenType.CHAR_DATA, value=value, position=self._position(start))

    def _start_tag(self) -> Iterator[Token]:
        start = self._pos
        self._pos += 1
        raw_name = self._read_name("expected element name after <")

        raw_attributes: List[Tuple[QualifiedName, str]] = []
        while True:
            had_space = self._skip_space()
            if self.text.startswith("/>", self._pos):
                self._pos += 2
                empty = True
                break
            if self.text.startswith(">", self._pos):
                self._pos += 1
                empty = False
                break
            if self._pos >= len(self.text):
                raise self._error(f"unexpected EOF in element <{raw_name}>", start)
            if not had_space:
                raise self._error(
                    f"expected whitespace before attribute in element <{raw_name}>",
                    self._pos
                )
            attr_name = self._read_name(
                f"expected attribute name in element <{raw_name}>"
            )
            self._skip_space()
            self._expect("=", f"attribute {attr_name} without = in element")
            self._skip_space()
            raw_attributes.append(
                (QualifiedName.parse(attr_name), self._read_attribute_value())
            )

        scope: Dict[str, str] = {}
        for attr_name, value in raw_attributes:
            if attr_name.space == "" and attr_name.local == XMLNS_PREFIX:
                scope[""] = value
            elif attr_name.space == XMLNS_PREFIX:
                scope[attr_name.local] = value
        self._scopes.append(scope)

        name = self._translate(QualifiedName.parse(raw_name), is_element=True)
        attributes = [
            Attribute(self._translate(attr_name, is_element=False), value)
            for attr_name, value in raw_attributes
        ]
        position = self._position(start)
        yield Token(
            TokenType.START_ELEMENT,
            name=name,
            attributes=attributes,
            position=position
        )
        if empty:
            self._scopes.pop()
            yield Token(TokenType.END_ELEMENT, name=name, position=position)
        else:
            self._open.append(raw_name)

    def _end_tag(self) -> Token:
        start = self._pos
        self._pos += 2
        raw_name = self._read_name("expected element name after </")
        self._skip_space()
        self._expect(">", f"invalid characters between </{raw_name} and >")

        name = self._translate(QualifiedName.parse(raw_name), is_element=True)
        if self._open:
            expected = self._open.pop()
            if expected != raw_name:
                raise self._error(f"element <{expected}> closed by </{raw_name}>", start)
            self._scopes.pop()
        return Token(TokenType.END_ELEMENT, name=name, position=self._position(start))

    def _comment(self) -> Token:
        start = self._pos
        body_start = start + len(COMMENT_OPEN)
        end = self.text.find(COMMENT_CLOSE, body_start)
        if end < 0:
            raise self._error("unexpected EOF in comment", start)

        body = self.text[body_start:end]
        if "--" in body or body.endswith("-"):
            raise self._error('invalid sequence "--" not allowed in comments', start)
        self._pos = end + len(COMMENT_CLOSE)
        return Token(TokenType.COMMENT, value=body, position=self._position(start))

    def _directive(self) -> Token:
        text = self.text
        start = self._pos
        index = start + 2
        depth = 0
        quote: Optional[str] = None

        while index < len(text):
            char = text[index]
            if quote is not None:
                if char == quote:
                    quote = None
            elif char in "'\"":
                quote = char
            elif text.startswith(COMMENT_OPEN, index):
                end = text.find(COMMENT_CLOSE, index + len(COMMENT_OPEN))
                if end < 0:
                    raise self._error("unexpected EOF in comment", index)
                index = end + len(COMMENT_CLOSE)
                continue
            elif char == "<":
                depth += 1
            elif char == ">":
                if depth == 0:
                    break
                depth -= 1
            index += 1
        else:
            raise self._error("unexpected EOF in directive", start)

        self._pos = index + 1
        return Token(
            TokenType.DIRECTIVE,
            value=text[start + 2:index],
            position=self._position(start)
        )

    def _proc_inst(self) -> Token:
        start = self._pos
        self._pos += 2
        target = self._read_name("expected target name after <?")

        end = self.text.find("?>", self._pos)
        if end < 0:
            raise self._error(f"unexpected EOF in <?{target}", start)
        content = self.text[self._pos:end]
        if content and content[0] not in " \t\n":
            raise self._error(f"invalid characters after <?{target}", self._pos)

        self._pos = end + 2
        return Token(
            TokenType.PROC_INST,
            target=target,
            value=content.lstrip(" \t\n"),
            position=self._position(start)
        )

    # Lexical helpers

    def _read_name(self, message: str) -> str:
        match = NAME_PATTERN.match(self.text, self._pos)
        if not match:
            raise self._error(message, self._pos)
        self._pos = match.end()
        return match.group()

    def _skip_space(self) -> bool:
        end = _SPACE_PATTERN.match(self.text, self._pos).end()
        skipped = end > self._pos
        self._pos = end
        return skipped

    def _expect(self, literal: str, message: str) -> None:
        if not self.text.startswith(literal, self._pos):
            raise self._error(message, self._pos)
        self._pos += len(literal)

    def _read_attribute_value(self) -> str:
        start = self._pos
        quote = self.text[start:start + 1]
        if quote not in ('"', "'"):
            raise self._error("unquoted or missing attribute value in element", start)

        end = self.text.find(quote, start + 1)
        if end < 0:
            raise self._error("unexpected EOF in attribute value", start)
        raw = self.text[start + 1:end]
        bracket = raw.find("<")
        if bracket >= 0:
            raise self._error("unescaped < inside quoted string", start + 1 + bracket)

        self._pos = end + 1
        return self._replace_references(raw, start + 1)

    def _decode_text(self, start: int, end: int) -> str:
        segment = self.text[start:end]
        marker = segment.find(CDATA_CLOSE)
        if marker >= 0:
            raise self._error("unescaped ]]> not in CDATA section", start + marker)
        return self._replace_references(segment, start)

    def _replace_references(self, segment: str, offset: int) -> str:
        if "&" not in segment:
            return segment

        parts: List[str] = []
        index = 0
        while True:
            amp = segment.find("&", index)
            if amp < 0:
                parts.append(segment[index:])
                break
            parts.append(segment[index:amp])
            semi = segment.find(";", amp + 1)
            if semi < 0:
                raise self._error(
                    "invalid character entity (no semicolon)", offset + amp
                )
            parts.append(self._resolve_reference(segment[amp + 1:semi], offset + amp))
            index = semi + 1
        return "".join(parts)

    def _resolve_reference(self, reference: str, offset: int) -> str:
        if reference.startswith("#"):
            try:
                if reference.startswith("#x"):
                    codepoint = int(reference[2:], 16)
                else:
                    codepoint = int(reference[1:], 10)
            except ValueError:
                codepoint = -1
            if not _is_xml_char(codepoint):
                raise self._error(f"invalid character entity &{reference};", offset)
            return chr(codepoint)

        if reference in PREDEFINED_ENTITIES:
            return PREDEFINED_ENTITIES[reference]
        if reference in self.entity:
            return self.entity[reference]
        raise self._error(f"invalid character entity &{reference};", offset)

    # Namespaces

    def _translate(self, name: QualifiedName, is_element: bool) -> QualifiedName:
        if name.space == XMLNS_PREFIX or name.space == XML_PREFIX:
            return name
        if name.space == "" and (not is_element or name.local == XMLNS_PREFIX):
            return name
        uri = self._lookup(name.space)
        if uri is None:
            return name
        return name.with_space(uri)

    def _lookup(self, prefix: str) -> Optional[str]:
        for scope in reversed(self._scopes):
            if prefix in scope:
                return scope[prefix]
        return None

    # Positions

    def _position(self, offset: int) -> TokenPosition:
        line_index = bisect.bisect_right(self._line_starts, offset) - 1
        return TokenPosition(
            line=line_index + 1,
            column=offset - self._line_starts[line_index] + 1,
            offset=offset
        )

    def _error(self, message: str, offset: int) -> XMLSyntaxError:
        position = self._position(offset)
        return XMLSyntaxError(message, position.line, position.column)
