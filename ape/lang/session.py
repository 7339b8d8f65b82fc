"""Session control for Ape. Threads the dictionary and stack from one statement to the next, either in command-line
mode or file interpretation mode. Each statement gets a fresh program; whatever the evaluator leaves of it is
discarded.
"""

import os

from ape.lang.error import GenericException
from ape.pure.lexical import CLOSE, OPEN, lex, parse, unbalanced_brackets
from ape.pure.printer import unparse
from ape.pure.rewrite import evaluate


class Session:
    """Governs an Ape session: the dictionary grown by `let` and the stack, both owned by this object."""
    SH_FILE = "<in>"  # command-line interpreter filename
    PRELUDE = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "prelude.ape")

    def __init__(self, error_handler, path, prelude=None, cmd_line=False, max_steps=None):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path            # used for error messages
        self.cmd_line = cmd_line    # whether or not in command-line mode
        self.max_steps = max_steps  # rewrite step ceiling per statement, None for unbounded

        self.dictionary = {}  # dict of word name: bound Tree
        self.stack = ()       # tuple of Trees, top first

        if self.cmd_line:
            self.error_handler.fatal = False

        if prelude is not None:
            # only the prelude's definitions are kept, not whatever it leaves on the stack
            loaded = Session(self.error_handler, prelude, None, cmd_line, max_steps)
            self.dictionary = dict(loaded.dictionary)

        if path != Session.SH_FILE:
            exprs = []
            add_to_prev = False

            try:
                with open(path, "r") as file:
                    for line_num, line in enumerate(file):
                        __, add_to_prev = self.preprocess_line(line, line_num + 1, add_to_prev, exprs)
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            for expr in exprs:
                self.add(*expr)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line, line_num, add_to_prev, exprs=None):
        """Preprocesses a line from a file or command-line. In command-line mode, exprs can be ignored (used to keep
        track of file's exprs), but the returned flag will indicate whether a line continuation is necessary, which is
        the case while a quotation is left open. Returns updated value of line and that flag.
        """
        line = line.strip()

        if exprs is not None:
            if add_to_prev:
                prev, first_line_num = exprs.pop()
                line = f"{prev} {line}".strip()
                exprs.append((line, first_line_num))
            elif line:
                exprs.append((line, line_num))

        opened, stray = unbalanced_brackets(line)
        return line, bool(opened) and stray is None

    def add(self, expr, line_num):
        """Evaluates expr against this session's dictionary and stack, and keeps the resulting dictionary and stack."""
        self.error_handler.register_line(self.path, expr, line_num)  # in case error is raised

        self._check_brackets(expr)

        trace = self._trace if self.error_handler.verbose else None
        state = evaluate(self.dictionary, self.stack, parse(lex(expr)), self.max_steps, trace)
        self.dictionary, self.stack = state.dictionary, state.stack

        self.error_handler.remove_line(self.path)  # error was not raised

    @property
    def results(self):
        """The stack as text, bottom first, so that it reads in push order."""
        return unparse(reversed(self.stack))

    def _check_brackets(self, expr):
        """Warns about brackets the parser will silently repair."""
        opened, stray = unbalanced_brackets(expr)

        if stray is not None:
            msg = "'{}' has unmatched '" + CLOSE + "', everything after it is ignored"
            self.error_handler.warn(msg, expr, start=stray, end=stray + 1)
        elif opened:
            msg = "'{}' has unclosed '" + OPEN + "', closed at end of input"
            self.error_handler.warn(msg, expr, start=opened[0], end=opened[0] + 1)

    def _trace(self, rule, state):
        self.error_handler.register_step(rule, f"{unparse(reversed(state.stack))} | {unparse(state.program)}")
