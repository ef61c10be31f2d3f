"""Nickel Interpreter - Evaluates syntax trees."""

from .context import Context
from .evaluator import Evaluator
from .formatting import node_to_string, format_template

__all__ = ['Context', 'Evaluator', 'node_to_string', 'format_template']
