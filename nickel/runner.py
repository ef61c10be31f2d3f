"""
Main Nickel runner.

Coordinates reading, parsing and evaluation of a source file.
"""

import sys
import threading
from typing import Callable, Optional, TextIO

from .parser import Parser, Node
from .interpreter import Context, Evaluator, node_to_string
from .errors import NickelError, EvaluationError


# Thread stack for evaluation when the recursion limit is raised
STACK_SIZE = 512 * 1024 * 1024


def call_with_large_stack(func: Callable, *args):
    """Run func on a thread with a STACK_SIZE stack and return its result.

    Exceptions raised by func are re-raised in the calling thread.
    """
    outcome = {}

    def target():
        try:
            outcome['result'] = func(*args)
        except Exception as e:
            outcome['error'] = e

    old_size = threading.stack_size(STACK_SIZE)
    try:
        thread = threading.Thread(target=target, name="nickel-eval")
        thread.start()
    finally:
        threading.stack_size(old_size)
    thread.join()

    if 'error' in outcome:
        raise outcome['error']
    return outcome['result']


class NickelRunner:
    """Runs Nickel programs."""

    def __init__(self, verbose: bool = False, seed: Optional[int] = None,
                 output: Optional[TextIO] = None, recursion_limit: Optional[int] = None):
        self.verbose = verbose
        self.seed = seed  # rand seed; wall-clock time when None
        self.output = output
        self.recursion_limit = recursion_limit  # when set, evaluation runs on a large-stack thread

    def log(self, message: str):
        """Print log message if verbose mode is enabled."""
        if self.verbose:
            print(f"[nickel] {message}", file=sys.stderr)

    def error(self, message: str):
        """Report a fatal error; with verbose output also the traceback."""
        print(f"Nickel: error: {message}", file=sys.stderr)
        if self.verbose and sys.exc_info()[0] is not None:
            import traceback
            traceback.print_exc()

    def parse(self, source: str, filename: str = "<input>") -> Node:
        program = Parser(source, filename).parse_program()
        self.log(f"Parsed {len(program.children)} top-level forms from {filename}")
        return program

    def execute(self, source: str, filename: str = "<input>") -> Context:
        """
        Parse and evaluate a program.

        Args:
            source: Program text
            filename: Name used in parse error messages

        Returns:
            The interpreter context after the run

        Raises:
            NickelError: on the first parse or evaluation error
        """
        if self.recursion_limit is None:
            return self._execute(source, filename)

        old_limit = sys.getrecursionlimit()
        sys.setrecursionlimit(max(old_limit, self.recursion_limit))
        try:
            return call_with_large_stack(self._execute, source, filename)
        finally:
            sys.setrecursionlimit(old_limit)

    def _execute(self, source: str, filename: str) -> Context:
        program = self.parse(source, filename)

        ctx = Context(output=self.output, seed=self.seed)
        self.log(f"Seeded rand with {ctx.seed}")

        Evaluator(ctx).interpret(program)
        self.log(f"Finished with {len(list(ctx.function_names()))} functions defined")
        return ctx

    def run_string(self, source: str, filename: str = "<input>") -> bool:
        """Run a program, reporting errors instead of raising. Returns success."""
        try:
            self.execute(source, filename)
            return True
        except EvaluationError as e:
            if e.line is not None:
                self.error(f"{filename}:{e.line}: {e}")
            else:
                self.error(str(e))
        except NickelError as e:
            self.error(str(e))
        except RecursionError:
            self.error("recursion too deep")
        return False

    def read_source(self, input_path: str) -> str:
        self.log(f"Reading {input_path}...")
        with open(input_path, 'r', encoding='utf-8') as f:
            return f.read()

    def run_file(self, input_path: str) -> bool:
        """
        Run a Nickel source file.

        Args:
            input_path: Path to source file

        Returns:
            True if the program ran to completion, False otherwise
        """
        try:
            source = self.read_source(input_path)
        except OSError:
            self.error(f"unable to open '{input_path}'")
            return False
        except UnicodeDecodeError as e:
            self.error(f"unable to read '{input_path}': not valid UTF-8 ({e.reason} at byte {e.start})")
            return False

        return self.run_string(source, input_path)

    def dump_file(self, input_path: str) -> bool:
        """Print the parsed program instead of running it."""
        try:
            program = self.parse(self.read_source(input_path), input_path)
        except OSError:
            self.error(f"unable to open '{input_path}'")
            return False
        except UnicodeDecodeError as e:
            self.error(f"unable to read '{input_path}': not valid UTF-8 ({e.reason} at byte {e.start})")
            return False
        except NickelError as e:
            self.error(str(e))
            return False

        out = self.output if self.output is not None else sys.stdout
        out.write(node_to_string(program))
        return True


def main(argv=None):
    """Command-line interface for the interpreter."""
    import argparse

    parser = argparse.ArgumentParser(
        description='Nickel - run a program written in Nickel, a tiny LISP'
    )
    parser.add_argument('input', help='Input source file')
    parser.add_argument('--seed', type=int, default=None,
                       help='Seed for rand (default: current time)')
    parser.add_argument('--dump', action='store_true',
                       help='Print the parsed program instead of running it')
    parser.add_argument('--recursion-limit', type=int, default=200000,
                       help='Python recursion limit to run with (default: 200000)')
    parser.add_argument('--verbose', action='store_true',
                       help='Verbose output')

    args = parser.parse_args(argv)

    runner = NickelRunner(verbose=args.verbose, seed=args.seed,
                          recursion_limit=args.recursion_limit)

    if args.dump:
        success = runner.dump_file(args.input)
    else:
        success = runner.run_file(args.input)

    sys.exit(0 if success else 1)


if __name__ == '__main__':
    main()
