"""
Nickel Parser - Recursive-descent reader for Nickel source text.

Handles:
- Lists [ ... ] (the only compound form)
- Integers, with an optional leading '-'
- Strings with backslash escapes
- Names (any other run of characters)
- ; comments to end of line
"""

from typing import Optional, List

from .ast_nodes import Node, NodeKind, clamp_int64
from ..errors import ParseError


WHITESPACE = ' \t\n\r\v\f'

# C isdigit: ASCII only
DIGITS = '0123456789'

ESCAPES = {
    'n': '\n',
    'r': '\r',
    't': '\t',
    '0': '\0',
    '"': '"',
    '\\': '\\',
}


class Parser:
    """Parses Nickel source text into Nodes."""

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1

    def error(self, message: str):
        """Raise a parse error with location information."""
        raise ParseError(message, self.line, self.filename)

    def peek(self, offset: int = 0) -> Optional[str]:
        """Peek at character at current position + offset."""
        pos = self.pos + offset
        if pos < len(self.source):
            return self.source[pos]
        return None

    def advance(self) -> Optional[str]:
        """Consume and return current character."""
        if self.pos >= len(self.source):
            return None

        ch = self.source[self.pos]
        self.pos += 1

        if ch == '\n':
            self.line += 1

        return ch

    def skip_whitespace(self):
        """Skip whitespace and ; comments, in any order."""
        while self.peek() is not None:
            if self.peek() in WHITESPACE:
                self.advance()
            elif self.peek() == ';':
                while self.peek() is not None and self.peek() != '\n':
                    self.advance()
            else:
                break

    def at_end(self) -> bool:
        return self.pos >= len(self.source)

    def parse_node(self) -> Node:
        """
        Parse a single node.

        Returns:
            The parsed node, or an INVALID node at end of input
        """
        self.skip_whitespace()

        ch = self.peek()

        if ch is None:
            return Node.make_invalid()
        elif ch in DIGITS or (ch == '-' and self.peek(1) is not None and self.peek(1) in DIGITS):
            return self.parse_integer()
        elif ch == '[':
            return self.parse_list()
        elif ch == '"':
            return self.parse_string()
        elif ch != ']':
            return self.parse_name()

        self.error(f"unexpected character '{ch}'")

    def parse_integer(self) -> Node:
        """Parse a decimal integer with an optional leading '-'."""
        line = self.line
        start = self.pos
        if self.peek() == '-':
            self.advance()
        while self.peek() is not None and self.peek() in DIGITS:
            self.advance()

        text = self.source[start:self.pos]
        try:
            value = int(text, 10)
        except ValueError:
            self.error("bad integer")
        return Node.make_int(clamp_int64(value), line)

    def parse_list(self) -> Node:
        """Parse a list [...]."""
        assert self.peek() == '['
        line = self.line
        self.advance()

        children: List[Node] = []
        while True:
            self.skip_whitespace()
            if self.peek() == ']':
                self.advance()
                return Node.make_list(children, line)
            child = self.parse_node()
            if not child.is_valid:
                self.error("expected closing ']'")
            children.append(child)

    def parse_string(self) -> Node:
        """Parse a string "..." with backslash escapes."""
        assert self.peek() == '"'
        line = self.line
        self.advance()

        result = []
        while self.peek() is not None:
            ch = self.advance()
            if ch == '"':
                return Node.make_string(''.join(result), line)
            elif ch == '\\':
                escaped = self.advance()
                if escaped is None:
                    break
                if escaped in ESCAPES:
                    result.append(ESCAPES[escaped])
                else:
                    # Unknown escape: keep the backslash too
                    result.append('\\')
                    result.append(escaped)
            else:
                result.append(ch)

        self.error("expected closing '\"'")

    def parse_name(self) -> Node:
        """Parse a name: everything up to whitespace or ']'."""
        line = self.line
        start = self.pos
        while self.peek() is not None and self.peek() not in WHITESPACE and self.peek() != ']':
            self.advance()
        return Node.make_name(self.source[start:self.pos], line)

    def parse_program(self) -> Node:
        """Parse all top-level nodes into a PROGRAM node."""
        program = Node.make_program()
        while True:
            node = self.parse_node()
            if not node.is_valid:
                break
            program.children.append(node)
        return program


def parse(source: str, filename: str = "<input>") -> Node:
    """Parse source text into a PROGRAM node."""
    return Parser(source, filename).parse_program()
