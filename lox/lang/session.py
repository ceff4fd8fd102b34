"""Session control for the Lox interpreter. Drives the scan -> parse -> evaluate pipeline for either a source file or
successive command-line inputs, and reports errors through an ErrorHandler.
"""

from dataclasses import dataclass, field

from lox.expr.evaluator import Evaluator
from lox.expr.parser import Parser
from lox.expr.scanner import Scanner
from lox.expr.value import stringify
from lox.lang.error import LoxError, LoxRuntimeError, Outcome


@dataclass
class Result:
    """Outcome of evaluating one source text. value is only meaningful if outcome is SUCCESS."""
    outcome: Outcome
    value: object = None
    errors: list = field(default_factory=list)

    @property
    def ok(self):
        return self.outcome is Outcome.SUCCESS


class Session:
    """Governs a Lox session. Every source text is scanned, parsed and evaluated independently of the others."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path=SH_FILE, cmd_line=False):
        self.error_handler = error_handler

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.source = None        # contents of path, if path is a file

        self.evaluator = Evaluator()
        self.results = []         # rendered values of successful runs, oldest first

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    self.source = file.read()
            except OSError:
                raise LoxError(f"'{path}' could not be opened")

        elif not cmd_line:
            raise LoxError(f"'{Session.SH_FILE}' is a reserved filename")

    def evaluate(self, source, line=1):
        """Runs source through the whole pipeline without printing anything. line is the number of the first line of
        source. A failed scan halts before parsing, and a failed parse halts before evaluation.
        """
        scanner = Scanner(source, line)
        tokens = scanner.scan_tokens()
        if scanner.failed:
            return Result(Outcome.STATIC_ERROR, errors=scanner.errors)

        parser = Parser(tokens)
        expr = parser.parse()
        if parser.errors:
            return Result(Outcome.STATIC_ERROR, errors=parser.errors)

        try:
            value = self.evaluator.evaluate(expr)
        except LoxRuntimeError as error:
            return Result(Outcome.RUNTIME_ERROR, errors=[error])
        except RecursionError:
            error = LoxRuntimeError("Expression nests too deeply.", line=expr.line)
            return Result(Outcome.RUNTIME_ERROR, errors=[error])

        return Result(Outcome.SUCCESS, value)

    def run(self, source=None, line=1):
        """Evaluates source (by default, the contents of self.path), tracing intermediate stages and reporting errors
        through self.error_handler. Successful values are appended to self.results. Returns the Result.
        """
        if source is None:
            source = self.source
        if source is None:
            raise LoxError("nothing to run")

        self.error_handler.register_source(self.path, source, line)
        self.trace(source, line)

        result = self.evaluate(source, line)
        if result.errors:
            self.error_handler.throw(*result.errors)
        else:
            self.results.append(stringify(result.value))
            self.error_handler.remove_source(self.path)

        return result

    def trace(self, source, line=1):
        """Registers the token and tree stages of source with the error handler, which prints the enabled ones."""
        handler = self.error_handler
        if not handler.steps:
            return

        scanner = Scanner(source, line)
        tokens = scanner.scan_tokens()
        handler.register_step("tokens", "\n".join(str(token) for token in tokens))

        if not scanner.failed:
            expr = Parser(tokens).parse()
            if expr is not None:
                handler.register_step("ast", expr)

    def pop(self):
        """Removes and returns the oldest rendered result."""
        return self.results.pop(0)
