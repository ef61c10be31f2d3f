"""
Syntax tree node definitions for Nickel.

A single tagged Node type covers the program root, lists and the three
atom kinds. Nodes have value semantics: copy() duplicates the whole tree.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union
from enum import Enum, auto


INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1


class NodeKind(Enum):
    """Node kinds."""
    INVALID = auto()       # end of input / nothing parsed
    PROGRAM = auto()       # root: top-level forms in file order
    LIST = auto()          # [ ... ]
    INT_ATOM = auto()      # 123, -456
    STRING_ATOM = auto()   # "text"
    NAME_ATOM = auto()     # anything else, including :N references


def wrap_int64(value: int) -> int:
    """Wrap an integer to the signed 64-bit range (two's complement)."""
    value &= 0xFFFFFFFFFFFFFFFF
    if value > INT64_MAX:
        value -= 1 << 64
    return value


def clamp_int64(value: int) -> int:
    """Clamp an integer to the signed 64-bit range, as strtoll does."""
    return max(INT64_MIN, min(INT64_MAX, value))


@dataclass(eq=False)
class Node:
    """One syntax element or value."""
    kind: NodeKind
    value: Union[int, str, None] = None
    children: List['Node'] = field(default_factory=list)
    line: int = 0

    @classmethod
    def make_invalid(cls) -> 'Node':
        return cls(NodeKind.INVALID)

    @classmethod
    def make_program(cls, children: Optional[List['Node']] = None) -> 'Node':
        return cls(NodeKind.PROGRAM, children=list(children or []))

    @classmethod
    def make_list(cls, children: Optional[List['Node']] = None, line: int = 0) -> 'Node':
        return cls(NodeKind.LIST, children=list(children or []), line=line)

    @classmethod
    def make_int(cls, value: int, line: int = 0) -> 'Node':
        return cls(NodeKind.INT_ATOM, wrap_int64(value), line=line)

    @classmethod
    def make_string(cls, text: str, line: int = 0) -> 'Node':
        return cls(NodeKind.STRING_ATOM, text, line=line)

    @classmethod
    def make_name(cls, text: str, line: int = 0) -> 'Node':
        return cls(NodeKind.NAME_ATOM, text, line=line)

    @property
    def is_valid(self) -> bool:
        return self.kind != NodeKind.INVALID

    def copy(self) -> 'Node':
        """Return a fully independent duplicate of this node and its children."""
        return Node(self.kind, self.value,
                    [child.copy() for child in self.children], self.line)

    def structurally_equals(self, other: 'Node') -> bool:
        """Check kind and payload recursively (line numbers are ignored)."""
        if not isinstance(other, Node) or self.kind != other.kind:
            return False
        if self.kind in (NodeKind.PROGRAM, NodeKind.LIST):
            if len(self.children) != len(other.children):
                return False
            return all(a.structurally_equals(b)
                       for a, b in zip(self.children, other.children))
        return self.value == other.value

    def __eq__(self, other):
        return self.structurally_equals(other)

    def __repr__(self):
        if self.kind == NodeKind.PROGRAM:
            return f"Program({self.children!r})"
        elif self.kind == NodeKind.LIST:
            return f"List({self.children!r})"
        elif self.kind == NodeKind.INT_ATOM:
            return f"Int({self.value})"
        elif self.kind == NodeKind.STRING_ATOM:
            return f"String({self.value!r})"
        elif self.kind == NodeKind.NAME_ATOM:
            return f"Name({self.value})"
        return "Invalid()"
