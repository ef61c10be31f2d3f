"""
Tests for atom evaluation.

These tests verify that:
- Integers and strings evaluate to independent copies of themselves
- Bare names are literal tokens
- :N references resolve against the innermost call frame
"""

import pytest
from .conftest import (
    Context, Evaluator, Node, NodeKind, Int, Str, Name, Lst,
    ArgumentReferenceError, EvaluationError,
    eval_and_assert, eval_and_catch, evaluate, new_context
)


class TestSelfEvaluation:
    """Tests for atoms that evaluate to themselves."""

    def test_integers(self):
        eval_and_assert("42", Int(42))
        eval_and_assert("-7", Int(-7))
        eval_and_assert("0", Int(0))

    def test_strings(self):
        eval_and_assert('"hello"', Str("hello"))
        eval_and_assert('""', Str(""))

    def test_result_is_an_independent_copy(self):
        """The result does not share storage with the source node."""
        source = Node.make_string("abc")
        result = Evaluator(new_context()).interpret(source)
        assert result is not source
        assert result.structurally_equals(source)

        source.value = "changed"
        assert result.value == "abc"

    def test_names_are_literal(self):
        """Bare names are not looked up; they evaluate to themselves."""
        eval_and_assert("foo", Name("foo"))
        eval_and_assert("if", Name("if"))

    def test_evaluation_does_not_mutate_source(self):
        """Evaluating a program leaves the parsed tree untouched."""
        from nickel.parser import Parser
        program = Parser('[define f [list :1 :1]] [f "x"]').parse_program()
        before = program.copy()
        Evaluator(new_context()).interpret(program)
        assert program.structurally_equals(before)

    def test_invalid_node_is_rejected(self):
        with pytest.raises(EvaluationError):
            Evaluator(new_context()).interpret(Node.make_invalid())


class TestArgumentReferences:
    """Tests for :N argument references."""

    def test_outside_a_function_fails(self):
        eval_and_catch(
            ":1",
            ArgumentReferenceError,
            lambda ex: "only valid within a function" in str(ex)
        )

    def test_zero_is_the_function_name(self):
        eval_and_assert("[define me :0] [me]", Name("me"))

    def test_arguments_start_at_one(self):
        ctx = new_context()
        evaluate("[define second :2]", ctx)
        eval_and_assert("[second 10 20 30]", Int(20), ctx)

    def test_out_of_range_fails(self):
        eval_and_catch(
            "[define f :3] [f 1 2]",
            ArgumentReferenceError,
            lambda ex: "(3)" in str(ex)
        )

    def test_negative_index_fails(self):
        eval_and_catch("[define f :-1] [f 1]", ArgumentReferenceError)

    def test_unparsable_index_fails(self):
        eval_and_catch(
            "[define f :x] [f 1]",
            ArgumentReferenceError,
            lambda ex: "unable to parse" in str(ex)
        )

    def test_non_ascii_digit_index_fails(self):
        eval_and_catch(
            "[define f :\u0661] [f 1]",
            ArgumentReferenceError,
            lambda ex: "unable to parse" in str(ex)
        )

    def test_trailing_characters_are_ignored(self):
        """Only the leading digits form the index."""
        eval_and_assert("[define f :1abc] [f 5]", Int(5))

    def test_innermost_frame_is_used(self):
        ctx = new_context()
        evaluate("[define inner [list :0 :1]]", ctx)
        evaluate("[define outer [inner [+ :1 1]]]", ctx)
        eval_and_assert("[outer 1]", Lst(Name("inner"), Int(2)), ctx)

    def test_reference_returns_a_copy(self):
        """Changing the result does not change the frame."""
        ctx = new_context()
        evaluator = Evaluator(ctx)
        ctx.push_frame([Name("f"), Lst(Int(1))])
        result = evaluator.interpret(Name(":1"))
        result.children.append(Int(2))
        assert len(ctx.current_frame()[1].children) == 1
