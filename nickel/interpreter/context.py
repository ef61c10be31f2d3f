"""
Interpreter state: the function table, the argument-frame stack, the
output stream and the random generator.
"""

import random
import sys
import time
from typing import Dict, Iterator, List, Optional, TextIO

from ..parser.ast_nodes import Node


# rand() range on the platforms the language was written for
RAND_MAX = 2147483647


class Context:
    """Nickel interpreter context."""

    def __init__(self, output: Optional[TextIO] = None, seed: Optional[int] = None):
        self._functions: Dict[str, List[Node]] = {}  # User-defined functions
        self._frames: List[List[Node]] = []  # One frame per active call
        self._output = output
        if seed is None:
            seed = int(time.time())
        self.seed = seed
        self.rng = random.Random(seed)

    @property
    def output(self) -> TextIO:
        # sys.stdout is looked up on every write
        if self._output is None:
            return sys.stdout
        return self._output

    def write(self, text: str):
        self.output.write(text)

    def rand(self) -> int:
        return self.rng.randint(0, RAND_MAX)

    # Function table

    def define_function(self, name: str, body: List[Node]):
        """Insert or replace the body stored under name."""
        self._functions[name] = body

    def get_function(self, name: str) -> Optional[List[Node]]:
        return self._functions.get(name)

    def undefine_function(self, name: str) -> bool:
        """Remove a function. Returns whether it existed."""
        return self._functions.pop(name, None) is not None

    def function_names(self) -> Iterator[str]:
        return iter(list(self._functions))

    # Argument frames

    def push_frame(self, frame: List[Node]):
        """Push the evaluated arguments of a call (element 0 is the callee name)."""
        self._frames.append(frame)

    def pop_frame(self) -> List[Node]:
        return self._frames.pop()

    def current_frame(self) -> Optional[List[Node]]:
        if self._frames:
            return self._frames[-1]
        return None

    @property
    def depth(self) -> int:
        return len(self._frames)
