"""
Test infrastructure for Nickel evaluator tests.

This module provides:
- evaluate(): Evaluate source text and return the last top-level result
- eval_and_assert(): Evaluate source text and check the result
- eval_and_catch(): Evaluate source text and expect an exception
- run_and_capture(): Evaluate source text and return what it printed
- Shorthand node constructors: Int, Str, Name, Lst
"""

import io
import pytest
from typing import Callable, Optional, Type

from nickel.parser import Parser, Node, NodeKind
from nickel.interpreter import Context, Evaluator
from nickel.errors import (
    NickelError, ParseError, EvaluationError, ArgumentCountError,
    ArgumentTypeError, UnknownFunctionError, ArgumentReferenceError,
    EmptyListError, FormatError,
)


def Int(value: int) -> Node:
    return Node.make_int(value)


def Str(text: str) -> Node:
    return Node.make_string(text)


def Name(text: str) -> Node:
    return Node.make_name(text)


def Lst(*children: Node) -> Node:
    return Node.make_list(list(children))


def new_context(seed: int = 1234) -> Context:
    """Context whose output goes to a StringIO."""
    return Context(output=io.StringIO(), seed=seed)


# =============================================================================
# Test helper functions
# =============================================================================

def evaluate(source: str, ctx: Optional[Context] = None) -> Node:
    """
    Evaluate every top-level form of source and return the last result.
    """
    if ctx is None:
        ctx = new_context()

    program = Parser(source).parse_program()
    evaluator = Evaluator(ctx)

    result = Node.make_invalid()
    for form in program.children:
        result = evaluator.interpret(form)
    return result


def eval_and_assert(source: str, expected: Node, ctx: Optional[Context] = None):
    """
    Evaluate source and assert the result equals expected.
    """
    actual = evaluate(source, ctx)
    if not actual.structurally_equals(expected):
        raise AssertionError(
            f"EvalAndAssert failed. Expected: {expected}. Actual: {actual}. "
            f"Expression was: {source}"
        )


def eval_and_catch(
    source: str,
    exception_type: Type[Exception],
    predicate: Optional[Callable[[Exception], bool]] = None,
    ctx: Optional[Context] = None
):
    """
    Evaluate source and expect it to raise exception_type.
    """
    with pytest.raises(exception_type) as info:
        evaluate(source, ctx)
    if predicate is not None and not predicate(info.value):
        raise AssertionError(
            f"EvalAndCatch failed. Predicate returned false. Exception: {info.value}"
        )


def run_and_capture(source: str, ctx: Optional[Context] = None) -> str:
    """
    Evaluate source as a whole program and return everything it printed.
    """
    if ctx is None:
        ctx = new_context()
    Evaluator(ctx).interpret(Parser(source).parse_program())
    return ctx.output.getvalue()


# Pytest fixtures

@pytest.fixture
def ctx():
    """Create a fresh interpreter context with captured output."""
    return new_context()
