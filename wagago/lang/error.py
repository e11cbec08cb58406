"""Error handling for the wagago language. Static errors (scanning, parsing, resolving) are collected by an
ErrorHandler and never abort their own pass; a RuntimeFault aborts evaluation and is reported once by the
interpreter's caller. The handler keeps a plain-text copy of every diagnostic and prints a coloured copy.
"""

import sys

from termcolor import colored

from wagago.core.tokens import TokenType


class WagagoError(Exception):
    """Base class for errors raised by the wagago pipeline itself (not by user programs)."""


class ParseError(WagagoError):
    """Internal parser signal: unwinds to the enclosing declaration, which resynchronizes."""


class RuntimeFault(WagagoError):
    """A runtime error in a user program. token locates the fault for the report."""

    def __init__(self, token, message):
        super().__init__(message)
        self.token = token
        self.message = message


class ErrorHandler:
    """Owns the error state of one run. Diagnostics are stored as plain text and echoed to stream."""
    ERROR = "red"

    def __init__(self, stream=None, color=True):
        self.stream = stream
        self.color = color
        self.diagnostics = []

        self.had_error = False
        self.had_runtime_error = False

    def reset(self):
        """Clears error flags, e.g. between shell lines. Keeps the diagnostic history."""
        self.had_error = False
        self.had_runtime_error = False

    def error(self, line, message):
        """Reports a static error with no location hint (used by the scanner)."""
        self.report(line, "", message)

    def token_error(self, token, message):
        """Reports a static error located at token (used by the parser and resolver)."""
        if token.kind is TokenType.EOF:
            self.report(token.line, " at end", message)
        else:
            self.report(token.line, f" at '{token.lexeme}'", message)

    def report(self, line, where, message):
        self.had_error = True
        self.diagnostics.append(f"[line {line}] Error{where}: {message}")

        label = colored("Error", ErrorHandler.ERROR, attrs=["bold"]) if self.color else "Error"
        self._write(f"[line {line}] {label}{where}: {message}")

    def runtime_error(self, fault):
        """Reports an uncaught RuntimeFault."""
        self.had_runtime_error = True
        self.diagnostics.append(f"{fault.message}\n[line {fault.token.line}]")

        message = colored(fault.message, ErrorHandler.ERROR, attrs=["bold"]) if self.color else fault.message
        self._write(f"{message}\n[line {fault.token.line}]")

    def _write(self, text):
        stream = self.stream if self.stream is not None else sys.stderr
        print(text, file=stream)

    def abort(self, message):
        """Reports a fault the host raised with no source location, e.g. exhausted recursion."""
        self.had_runtime_error = True
        self.diagnostics.append(message)
        self._write(colored(message, ErrorHandler.ERROR, attrs=["bold"]) if self.color else message)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is KeyboardInterrupt:
            self.abort("Keyboard interrupt.")
        elif exc_type is RecursionError:
            self.abort("Stack overflow.")
        else:
            return False
        return True
