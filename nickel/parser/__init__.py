"""Nickel Parser - Builds the syntax tree from source text."""

from .parser import Parser
from .ast_nodes import *

__all__ = ['Parser', 'Node', 'NodeKind']
