"""
Textual rendering of nodes and the fmt/pfmt template language.

Templates use {conv} placeholders where conv is the body of a printf-style
conversion. A conv that does not end in a conversion letter renders the
argument the way print does.
"""

import re
from typing import List

from ..parser.ast_nodes import Node, NodeKind
from ..errors import ArgumentTypeError, FormatError


# C length modifiers; Python's % operator has no use for them
LENGTH_MODIFIER = re.compile(r'(hh|h|ll|l|L|q|j|z|t)(?=[A-Za-z]$)')

UNSIGNED_CONVERSIONS = 'uoxX'


def node_to_string(node: Node) -> str:
    """Render a node the way print shows it."""
    parts: List[str] = []
    _render(parts, node)
    return ''.join(parts)


def _render(parts: List[str], node: Node):
    if node.kind == NodeKind.PROGRAM:
        for child in node.children:
            _render(parts, child)
            parts.append('\n')
    elif node.kind == NodeKind.LIST:
        parts.append('[ ')
        for child in node.children:
            _render(parts, child)
            parts.append(' ')
        parts.append(']')
    elif node.kind == NodeKind.INT_ATOM:
        parts.append(str(node.value))
    elif node.kind == NodeKind.STRING_ATOM:
        parts.append(node.value)
    elif node.kind == NodeKind.NAME_ATOM:
        parts.append(f"<name {node.value}>")
    # INVALID renders as nothing


def raw_value(node: Node, conversion: str):
    """Payload handed to an explicit printf conversion."""
    if node.kind == NodeKind.INT_ATOM:
        if conversion[-1] in UNSIGNED_CONVERSIONS:
            return node.value & 0xFFFFFFFFFFFFFFFF
        return node.value
    elif node.kind in (NodeKind.STRING_ATOM, NodeKind.NAME_ATOM):
        return node.value
    return node_to_string(node)


def format_template(nodes: List[Node]) -> str:
    """
    Render a fmt/pfmt call.

    Args:
        nodes: Evaluated call: [name, template, arg1, arg2, ...]

    Returns:
        The rendered text
    """
    function = nodes[0].value
    template = nodes[1].value

    out: List[str] = []
    node_idx = 2
    last = ''
    pos = 0

    while pos < len(template):
        c = template[pos]
        if c == '{':
            if last == '\\':
                out.pop()
                out.append(c)
            else:
                end = template.find('}', pos + 1)
                if end < 0:
                    # Unterminated placeholder ends the output
                    break
                conv = template[pos + 1:end]
                pos = end
                c = '}'

                var_width = 1 if '*' in conv else 0
                if len(nodes) <= node_idx + var_width:
                    raise FormatError("format missing argument", function)

                conversion = LENGTH_MODIFIER.sub('', '%' + conv)
                arg = nodes[node_idx + var_width]
                if not conversion[-1].isalpha():
                    conversion += 's'
                    value = node_to_string(arg)
                else:
                    value = raw_value(arg, conversion)

                if var_width:
                    width = nodes[node_idx]
                    if width.kind != NodeKind.INT_ATOM:
                        raise ArgumentTypeError(function, node_idx)
                    values = (width.value, value)
                else:
                    values = (value,)
                node_idx += 1 + var_width

                try:
                    out.append(conversion % values)
                except (TypeError, ValueError, OverflowError) as e:
                    raise FormatError(f"cannot format {{{conv}}}: {e}", function)
        else:
            out.append(c)
        last = c
        pos += 1

    return ''.join(out)
