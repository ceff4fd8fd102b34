"""Error handling for the Lox interpreter. Every error raised by the pipeline is a LoxError; anything else that makes it
all the way to ErrorHandler is assumed to be an internal issue.
"""

import sys
from enum import IntEnum

from termcolor import colored

from lox.expr.tokens import TokenKind


class Outcome(IntEnum):
    """Terminal outcome of a run. Values double as process exit codes (sysexits EX_DATAERR and EX_SOFTWARE)."""
    SUCCESS = 0
    STATIC_ERROR = 65
    RUNTIME_ERROR = 70


class LoxError(Exception):
    """Base class for every error the interpreter reports. line is None when the error has no source position; column
    and width, when known, are used to underline the offending source text.
    """
    outcome = Outcome.STATIC_ERROR

    def __init__(self, msg, line=None, column=None, width=1, internal=False):
        super().__init__(msg)
        self.msg = msg
        self.line = line
        self.column = column
        self.width = max(width, 1)
        self.internal = internal

    def report(self):
        """Returns the user-facing error text."""
        if self.line is None:
            return f"Error: {self.msg}"
        return f"[line {self.line}] Error: {self.msg}"

    def __eq__(self, other):
        return type(self) is type(other) and self.report() == other.report()

    def __hash__(self):
        return hash(self.report())

    def __repr__(self):
        return f"{type(self).__name__}({self.msg!r}, line={self.line})"


class LexicalError(LoxError):
    """Unterminated string or unrecognized character. Raised into Scanner.errors, never thrown by the Scanner."""


class ParseError(LoxError):
    """Missing or unexpected token. token is the token the Parser was looking at when it failed."""

    def __init__(self, msg, token):
        super().__init__(msg, token.line, token.column, len(token.lexeme))
        self.token = token

    def report(self):
        where = "end" if self.token.kind is TokenKind.EOF else f"'{self.token.lexeme}'"
        return f"[line {self.line}] Error at {where}: {self.msg}"


class LoxRuntimeError(LoxError):
    """Type-mismatched operand(s). Aborts the evaluation it was raised in. token is the failing operator."""
    outcome = Outcome.RUNTIME_ERROR

    def __init__(self, msg, token=None, line=None):
        if token is not None:
            super().__init__(msg, token.line, token.column, len(token.lexeme))
        else:
            super().__init__(msg, line)
        self.token = token

    def report(self):
        if self.line is None:
            return self.msg
        return f"{self.msg}\n[line {self.line}]"


class ErrorHandler:
    """Context manager that reports LoxErrors instead of letting them propagate as Python tracebacks."""
    ERROR = "red"
    STEP = "cyan"

    def __init__(self, fatal=True, steps=()):
        self.fatal = fatal
        self.steps = set(steps)        # trace stages to print, see register_step
        self.outcome = Outcome.SUCCESS
        self.traceback = {}            # path: (source, first line number)

    def register_source(self, path, source, first_line=1):
        """Registers source under path so that errors can be diagnosed. Should be called prior to Session run."""
        self.traceback = {path: (source, first_line)}

    def remove_source(self, path):
        """Removes path from traceback. Should be called after a successful Session run."""
        self.traceback.pop(path, None)

    def register_step(self, stage, text):
        """Prints an intermediate result of the pipeline if stage was enabled."""
        if stage in self.steps:
            for line in str(text).splitlines() or [""]:
                print(colored(f"{stage}: ", ErrorHandler.STEP, attrs=["bold"]) + colored(line, attrs=["dark"]))

    def source_line(self, line_num):
        """Returns the registered source text of line_num, or None if it was never registered."""
        for source, first_line in self.traceback.values():
            lines = source.splitlines()
            if first_line <= line_num < first_line + len(lines):
                return lines[line_num - first_line]
        return None

    def diagnose(self, error):
        """Returns the offending source line with the erroneous part highlighted and underlined, or None."""
        if error.internal or error.line is None or error.column is None:
            return None

        line = self.source_line(error.line)
        if line is None:
            return None

        start = min(error.column - 1, len(line))
        end = start + error.width

        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:end], ErrorHandler.ERROR, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (error.width - 1), ErrorHandler.ERROR, attrs=["bold"])

        return diagnosis

    def display(self, error):
        """Prints error's report, followed by its diagnosis when the source is known."""
        error_msg = ""
        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])
        error_msg += colored(error.report(), ErrorHandler.ERROR, attrs=["bold"])
        print(error_msg)

        diagnosis = self.diagnose(error)
        if diagnosis:
            print(diagnosis)

    def throw(self, *errors):
        """Reports every error in errors in order, then exits with the worst outcome if fatal. Must be given at least one
        error.
        """
        for error in errors:
            self.display(error)
            self.outcome = max(self.outcome, error.outcome)

        self.traceback = {}  # if error occurred, reset traceback (no need if error is fatal)
        if self.fatal:
            sys.exit(int(self.outcome))

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None or issubclass(exc_type, SystemExit):
            return False

        if exc_type is KeyboardInterrupt:
            if self.fatal:
                self.throw(LoxError("keyboard interrupt"))
            print(colored("keyboard interrupt", ErrorHandler.ERROR, attrs=["bold"]))
        elif exc_type is RecursionError:
            self.throw(LoxRuntimeError("Expression nests too deeply."))
        elif issubclass(exc_type, LoxError):
            self.throw(exc_val)
        else:
            self.display(LoxError(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            return False

        return True
