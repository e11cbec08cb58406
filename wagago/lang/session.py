"""Session control for the wagago language: runs source text through scan, parse, resolve and interpret, either
for a whole file or one shell line at a time. All error state lives on the session, so independent sessions never
share flags.
"""

from wagago.core.interpreter import Interpreter
from wagago.core.parser import Parser
from wagago.core.resolver import Resolver
from wagago.core.scanner import Scanner
from wagago.lang.error import ErrorHandler, WagagoError


class Session:
    """Governs a wagago session. Globals persist across run calls, as in the shell."""

    EX_OK = 0
    EX_DATAERR = 65   # scan/parse/resolve errors
    EX_SOFTWARE = 70  # uncaught runtime fault

    def __init__(self, out=None, err=None, color=True):
        self.error_handler = ErrorHandler(err, color)
        self.interpreter = Interpreter(self.error_handler, out)

    @property
    def had_error(self):
        return self.error_handler.had_error

    @property
    def had_runtime_error(self):
        return self.error_handler.had_runtime_error

    @property
    def exit_code(self):
        if self.had_error:
            return Session.EX_DATAERR
        if self.had_runtime_error:
            return Session.EX_SOFTWARE
        return Session.EX_OK

    def parse(self, source):
        """Scans and parses source. Returns the statements, or None if any static error was reported."""
        tokens = Scanner(source, self.error_handler).scan_tokens()
        statements = Parser(tokens, self.error_handler).parse()

        return None if self.had_error else statements

    def run(self, source):
        """Runs source to completion. Static errors suppress resolution/execution of the whole unit; a runtime fault
        aborts the remaining statements. Returns (had_error, had_runtime_error).
        """
        with self.error_handler:  # exhausted host recursion or ^C is reported, never raised
            statements = self.parse(source)

            if statements is not None:
                Resolver(self.interpreter, self.error_handler).resolve(statements)

                if not self.had_error:
                    self.interpreter.interpret(statements)

        return self.had_error, self.had_runtime_error

    def run_file(self, path):
        try:
            with open(path, "r") as file:
                source = file.read()
        except OSError:
            raise WagagoError(f"'{path}' could not be opened")

        return self.run(source)

    def reset_errors(self):
        """Clears error flags so the next shell line starts clean."""
        self.error_handler.reset()
