"""
Nickel error types.

Every error is fatal for the program being run: evaluation stops at the
first one and the exception propagates to whoever called the interpreter.
"""

from typing import Optional


class NickelError(Exception):
    """Base exception for all Nickel errors."""
    pass


class ParseError(NickelError):
    """Malformed source text."""

    def __init__(self, message: str, line: int = 0, filename: str = "<input>"):
        self.message = message
        self.line = line
        self.filename = filename
        super().__init__(f"{filename}:{line}: {message}")


class EvaluationError(NickelError):
    """Evaluation of a node failed."""

    def __init__(self, message: str, function: Optional[str] = None):
        self.message = message
        self.function = function
        self.line: Optional[int] = None  # top-level form being evaluated
        if function is not None:
            message = f"in application of function '{function}': {message}"
        super().__init__(message)


class ArgumentCountError(EvaluationError):
    """Wrong number of arguments."""

    def __init__(self, function: str, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"expected {expected} arguments, but got {actual}", function)


class ArgumentTypeError(EvaluationError):
    """Argument of the wrong kind."""

    def __init__(self, function: str, position: int, message: str = "incorrect type"):
        self.position = position
        super().__init__(f"{message} (argument {position})", function)


class UnknownFunctionError(EvaluationError):
    """Name is neither a built-in nor a defined function."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"unknown function '{name}'")


class ArgumentReferenceError(EvaluationError):
    """Invalid or out-of-range :N reference."""
    pass


class EmptyListError(EvaluationError):
    """Operation needs a non-empty list."""
    pass


class FormatError(EvaluationError):
    """fmt/pfmt template could not be rendered."""
    pass
