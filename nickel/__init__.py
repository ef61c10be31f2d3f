"""
Nickel - an interpreter for Nickel, a tiny LISP used to teach programming
language concepts.

This package provides the reader (source text to syntax tree) and a
tree-walking evaluator with positional argument references.
"""

__version__ = "0.1.0"
__author__ = "Nickel Project"
