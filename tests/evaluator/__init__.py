"""
Tests for the Nickel evaluator.

These tests verify that the evaluator correctly handles:
- Self-evaluating atoms and :N argument references
- Integer arithmetic and comparison
- List primitives (list, len, append, car, cdr)
- The if and define special forms
- User function calls, recursion and redefinition
- Output (print, fmt, pfmt) and rand
"""
