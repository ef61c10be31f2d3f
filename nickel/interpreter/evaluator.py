"""
Nickel Evaluator - Reduces syntax tree nodes to value nodes.

Lists are always function applications. The head is evaluated first; the
special forms (if, define) then decide which of the remaining elements get
evaluated, every other function receives all of them evaluated left to right.

Values are never shared: every result is a fresh copy, so a function that
redefines itself keeps running the body it was called with.
"""

import operator
import re
from typing import Callable, Dict, List, Optional

from ..parser.ast_nodes import Node, NodeKind
from ..errors import (
    EvaluationError, ArgumentCountError, ArgumentTypeError,
    UnknownFunctionError, ArgumentReferenceError, EmptyListError,
)
from .context import Context
from .formatting import node_to_string, format_template


ARGUMENT_INDEX = re.compile(r':([+-]?[0-9]+)')


def c_div(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return -q if (a < 0) != (b < 0) else q


def c_mod(a: int, b: int) -> int:
    """Remainder with the sign of the dividend."""
    return a - b * c_div(a, b)


BINARY_OPERATORS: Dict[str, Callable[[int, int], int]] = {
    '+': operator.add,
    '-': operator.sub,
    '*': operator.mul,
    '/': c_div,
    '%': c_mod,
    '==': operator.eq,
    '!=': operator.ne,
    '<': operator.lt,
    '<=': operator.le,
    '>': operator.gt,
    '>=': operator.ge,
}


class Evaluator:
    """Tree-walking evaluator for Nickel programs."""

    def __init__(self, ctx: Optional[Context] = None):
        self.ctx = ctx if ctx is not None else Context()

    def interpret(self, node: Node) -> Node:
        """Evaluate a node and return a new value node owned by the caller."""
        if node.kind == NodeKind.PROGRAM:
            for child in node.children:
                try:
                    self.interpret(child)
                except EvaluationError as e:
                    if e.line is None:
                        e.line = child.line
                    raise
            return Node.make_invalid()
        elif node.kind == NodeKind.LIST:
            return self.apply(node)
        elif node.kind in (NodeKind.INT_ATOM, NodeKind.STRING_ATOM):
            return node.copy()
        elif node.kind == NodeKind.NAME_ATOM:
            if node.value.startswith(':'):
                return self.argument_reference(node)
            return node.copy()

        raise EvaluationError("bad node")

    def argument_reference(self, node: Node) -> Node:
        """Resolve :N against the innermost call frame."""
        frame = self.ctx.current_frame()
        if frame is None:
            raise ArgumentReferenceError("argument references are only valid within a function")

        match = ARGUMENT_INDEX.match(node.value)
        if not match:
            raise ArgumentReferenceError(f"unable to parse argument index from '{node.value}'")

        idx = int(match.group(1))
        if idx < 0 or idx >= len(frame):
            raise ArgumentReferenceError(f"argument reference invalid ({idx})")

        return frame[idx].copy()

    def apply(self, node: Node) -> Node:
        """Apply the function named by the first element of a list."""
        if not node.children:
            raise EvaluationError(
                "no function to apply in empty list "
                "(did you mean to create an empty list? [list])"
            )

        first = self.interpret(node.children[0])
        if first.kind != NodeKind.NAME_ATOM:
            raise EvaluationError(
                "expected function name as first element in list-function application"
            )

        name = first.value

        # Special forms see their arguments unevaluated
        if name == 'if':
            return self.interpret_if(node)
        elif name == 'define':
            return self.interpret_define(node)

        args = [first]
        for child in node.children[1:]:
            args.append(self.interpret(child))

        return self.apply_builtin(name, args)

    # =========================================================================
    # Special forms
    # =========================================================================

    def interpret_if(self, node: Node) -> Node:
        """Evaluate the condition, then exactly one branch."""
        if len(node.children) < 3:
            raise EvaluationError("if expects a condition and at least a true expression")

        cond = self.interpret(node.children[1])
        if cond.kind != NodeKind.INT_ATOM:
            raise EvaluationError("if condition must evaluate to an integer")

        if cond.value:
            return self.interpret(node.children[2])
        elif len(node.children) >= 4:
            return self.interpret(node.children[3])

        return Node.make_int(0)

    def interpret_define(self, node: Node) -> Node:
        """Store copies of the body expressions under the (unevaluated) name."""
        if len(node.children) < 3:
            raise EvaluationError("define expects a name and at least one expression")

        name = node.children[1]
        if name.kind != NodeKind.NAME_ATOM:
            raise ArgumentTypeError('define', 1, "function name must be a name")

        body = [expr.copy() for expr in node.children[2:]]
        self.ctx.define_function(name.value, body)
        return name.copy()

    # =========================================================================
    # Built-ins and user functions
    # =========================================================================

    def check(self, args: List[Node], arity: int, *kinds: Optional[NodeKind]):
        """
        Check the arguments of an application.

        Args:
            args: Evaluated application, element 0 being the function name
            arity: Expected argument count
            kinds: Expected kind of each argument, None for any
        """
        name = args[0].value
        n_args = len(args) - 1
        if n_args != arity:
            raise ArgumentCountError(name, arity, n_args)

        for i, expected in enumerate(kinds, start=1):
            if expected is not None and args[i].kind != expected:
                raise ArgumentTypeError(name, i)

    def apply_builtin(self, name: str, args: List[Node]) -> Node:
        """Apply a built-in function, or a user function if no built-in matches."""
        if name in BINARY_OPERATORS:
            return self.builtin_binary(name, args)
        elif name == 'list':
            return self.builtin_list(args)
        elif name == 'len':
            return self.builtin_len(args)
        elif name == 'append':
            return self.builtin_append(args)
        elif name == 'car':
            return self.builtin_car(args)
        elif name == 'cdr':
            return self.builtin_cdr(args)
        elif name == 'rand':
            return self.builtin_rand(args)
        elif name == 'print':
            return self.builtin_print(args)
        elif name == 'fmt':
            return self.builtin_fmt(args)
        elif name == 'pfmt':
            return self.builtin_pfmt(args)

        body = self.ctx.get_function(name)
        if body is not None:
            return self.apply_function(body, args)

        raise UnknownFunctionError(name)

    def apply_function(self, body: List[Node], args: List[Node]) -> Node:
        """Apply a user-defined function."""
        frame = [arg.copy() for arg in args]
        # The body may be replaced by a define inside the call
        exprs = [expr.copy() for expr in body]

        self.ctx.push_frame(frame)
        try:
            result = Node.make_invalid()
            for expr in exprs:
                result = self.interpret(expr)
            return result
        finally:
            self.ctx.pop_frame()

    def builtin_binary(self, name: str, args: List[Node]) -> Node:
        self.check(args, 2, NodeKind.INT_ATOM, NodeKind.INT_ATOM)
        a = args[1].value
        b = args[2].value
        if name in ('/', '%') and b == 0:
            raise EvaluationError("division by zero", name)
        return Node.make_int(int(BINARY_OPERATORS[name](a, b)))

    def builtin_list(self, args: List[Node]) -> Node:
        return Node.make_list([arg.copy() for arg in args[1:]])

    def builtin_len(self, args: List[Node]) -> Node:
        self.check(args, 1, NodeKind.LIST)
        return Node.make_int(len(args[1].children))

    def builtin_append(self, args: List[Node]) -> Node:
        self.check(args, 2, NodeKind.LIST, NodeKind.LIST)
        children = [child.copy() for child in args[1].children]
        children.extend(child.copy() for child in args[2].children)
        return Node.make_list(children)

    def builtin_car(self, args: List[Node]) -> Node:
        self.check(args, 1, NodeKind.LIST)
        if not args[1].children:
            raise EmptyListError("car expects a non-empty list")
        return args[1].children[0].copy()

    def builtin_cdr(self, args: List[Node]) -> Node:
        self.check(args, 1, NodeKind.LIST)
        return Node.make_list([child.copy() for child in args[1].children[1:]])

    def builtin_rand(self, args: List[Node]) -> Node:
        self.check(args, 0)
        return Node.make_int(self.ctx.rand())

    def builtin_print(self, args: List[Node]) -> Node:
        self.check(args, 1, None)
        self.ctx.write(node_to_string(args[1]) + '\n')
        return args[1].copy()

    def check_format_args(self, args: List[Node]):
        name = args[0].value
        if len(args) < 2:
            raise EvaluationError("expected at least 1 argument, but got 0", name)
        if args[1].kind != NodeKind.STRING_ATOM:
            raise ArgumentTypeError(name, 1, "first argument must be a string")

    def builtin_fmt(self, args: List[Node]) -> Node:
        self.check_format_args(args)
        return Node.make_string(format_template(args))

    def builtin_pfmt(self, args: List[Node]) -> Node:
        self.check_format_args(args)
        result = Node.make_string(format_template(args))
        self.ctx.write(result.value)
        return result
