"""Handles interactive/command-line mode for the Lox interpreter. Uses cmd as backend."""

import cmd

from lox.expr.parser import Parser
from lox.expr.scanner import Scanner
from lox.expr.tokens import TokenKind


def unbalanced(source):
    """Whether source has more "(" tokens than ")" tokens. Parentheses in strings and comments do not count."""
    kinds = [token.kind for token in Scanner(source)]
    return kinds.count(TokenKind.LEFT_PAREN) > kinds.count(TokenKind.RIGHT_PAREN)


class Shell(cmd.Cmd):
    """Lox expression interpreter shell."""
    intro = "Lox expression interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self._first_line = 1  # line number of the first line of the pending input
        self.line_num = 0

    def default(self, line):
        """Evaluates an arbitrary Lox expression."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            if not self._tmp_line:
                self._first_line = self.line_num

            source = self._tmp_line + line
            if unbalanced(source):
                self._tmp_line = source + "\n"
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            self.sess.run(source, self._first_line)

            if self.sess.results:
                print(self.sess.pop())

    def do_tokens(self, arg):
        """Prints the tokens of an expression: tokens <expression>"""
        self.line_num += 1
        scanner = Scanner(arg, self.line_num)
        for token in scanner:
            print(token)

        with self.sess.error_handler:
            if scanner.failed:
                self.sess.error_handler.register_source(self.sess.path, arg, self.line_num)
                self.sess.error_handler.throw(*scanner.errors)

    def do_ast(self, arg):
        """Prints the syntax tree of an expression: ast <expression>"""
        self.line_num += 1
        scanner = Scanner(arg, self.line_num)
        parser = Parser(scanner.scan_tokens())

        with self.sess.error_handler:
            self.sess.error_handler.register_source(self.sess.path, arg, self.line_num)
            if scanner.failed:
                self.sess.error_handler.throw(*scanner.errors)
                return

            expr = parser.parse()
            if parser.errors:
                self.sess.error_handler.throw(*parser.errors)
                return

            print(expr)

    def do_help(self, arg):
        """Doesn't return docs, but rather a short intro."""
        print("Welcome to the Lox expression interpreter!\n\n"
              "Type an expression to evaluate it: numbers, strings, true, false and nil can be combined with \n"
              "arithmetic (+ - * /), comparison (< <= > >=), equality (== !=), negation (- !) and parentheses.\n\n"
              "Try it out by typing '(2 + 3) * 4', or '\"foo\" + \"bar\"'. Use 'tokens EXPR' or 'ast EXPR' to see \n"
              "how an expression is scanned or parsed.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
