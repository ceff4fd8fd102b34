import io
import math
import os
import tempfile
import unittest
from contextlib import redirect_stdout

from lox.lang.error import ErrorHandler, LexicalError, LoxError, LoxRuntimeError, Outcome, ParseError
from lox.lang.session import Session


def cmd_line_session(**kwargs):
    return Session(ErrorHandler(**kwargs), Session.SH_FILE, cmd_line=True)


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.sess = cmd_line_session()

    def test_evaluate(self):
        cases = [
            ("2 + 3 * 4", 14.0),
            ("(2 + 3) * 4", 20.0),
            ("8 - 4 - 2", 2.0),
            ("\"foo\" + \"bar\"", "foobar"),
            ("1 == \"1\"", False),
            ("!!true", True),
            ("--5", 5.0),
            ("nil", None),
            ("1 +\n2 // comment", 3.0),
        ]
        for source, expected in cases:
            result = self.sess.evaluate(source)
            self.assertIs(Outcome.SUCCESS, result.outcome, source)
            self.assertTrue(result.ok, source)
            self.assertEqual(expected, result.value, source)
            self.assertEqual([], result.errors, source)

        self.assertEqual(math.inf, self.sess.evaluate("1 / 0").value)

    def test_outcomes(self):
        cases = {
            "\"abc": Outcome.STATIC_ERROR,
            "1 + @": Outcome.STATIC_ERROR,
            "1 +": Outcome.STATIC_ERROR,
            "(1": Outcome.STATIC_ERROR,
            "1 < \"a\"": Outcome.RUNTIME_ERROR,
            "-nil": Outcome.RUNTIME_ERROR,
            "1 < 2": Outcome.SUCCESS,
        }
        for source, outcome in cases.items():
            result = self.sess.evaluate(source)
            self.assertIs(outcome, result.outcome, source)
            self.assertEqual(outcome is Outcome.SUCCESS, result.ok, source)

    def test_failed_scan_halts(self):
        # "1 + @ )" would also be a parse error if the remaining tokens were parsed
        result = self.sess.evaluate("1 + @ )")
        self.assertEqual([LexicalError("Unexpected character '@'.", 1)], result.errors)

        result = self.sess.evaluate("@\n\"abc")
        self.assertEqual([LexicalError("Unexpected character '@'.", 1), LexicalError("Unterminated string.", 2)],
                         result.errors)

    def test_failed_parse_halts(self):
        result = self.sess.evaluate("-nil -")
        self.assertIs(Outcome.STATIC_ERROR, result.outcome)
        self.assertEqual(1, len(result.errors))
        self.assertIsInstance(result.errors[0], ParseError)

    def test_runtime_error(self):
        result = self.sess.evaluate("1 < \"a\"")
        error, = result.errors
        self.assertIsInstance(error, LoxRuntimeError)
        self.assertIn("must be numbers", error.msg)
        self.assertIsNone(result.value)

    def test_line_offset(self):
        result = self.sess.evaluate("1 +\n\n*", line=5)
        self.assertEqual("[line 7] Error at '*': Expect expression.", result.errors[0].report())

    def test_long_chain(self):
        result = self.sess.evaluate(" + ".join(["1"] * 5000))
        self.assertIs(Outcome.SUCCESS, result.outcome)
        self.assertEqual(5000.0, result.value)

        sess = cmd_line_session(steps=["ast"])
        out = io.StringIO()
        with redirect_stdout(out):
            sess.run(" * ".join(["2"] * 1000))
        self.assertIs(Outcome.SUCCESS, sess.error_handler.outcome)
        self.assertIn("(* (* (* 2 2) 2) 2)", out.getvalue())
        self.assertNotIn("nests too deeply", out.getvalue())

    def test_independent_runs(self):
        self.assertIs(Outcome.RUNTIME_ERROR, self.sess.evaluate("-\"a\"").outcome)
        self.assertIs(Outcome.STATIC_ERROR, self.sess.evaluate("(").outcome)
        self.assertEqual(3.0, self.sess.evaluate("1 + 2").value)

    def test_run(self):
        out = io.StringIO()
        with redirect_stdout(out):
            self.sess.run("(2 + 3) * 4")
            self.sess.run("1 +")
            self.sess.run("\"a\" + \"b\"")
            self.sess.run("-\"a\"")

        self.assertEqual(["20", "ab"], self.sess.results)
        self.assertEqual("20", self.sess.pop())
        self.assertEqual("ab", self.sess.pop())

        self.assertIn("[line 1] Error at end: Expect expression.", out.getvalue())
        self.assertIn("Operand must be a number.", out.getvalue())
        self.assertIs(Outcome.RUNTIME_ERROR, self.sess.error_handler.outcome)

    def test_run_fatal(self):
        cases = {"\"abc": 65, "1 < \"a\"": 70}
        for source, code in cases.items():
            sess = Session(ErrorHandler(), Session.SH_FILE, cmd_line=True)
            sess.error_handler.fatal = True
            with redirect_stdout(io.StringIO()), self.assertRaises(SystemExit) as cm:
                sess.run(source)
            self.assertEqual(code, cm.exception.code, source)

    def test_trace(self):
        sess = cmd_line_session(steps=["tokens", "ast"])

        out = io.StringIO()
        with redirect_stdout(out):
            sess.run("1 + 2")

        self.assertIn("NUMBER 1 1.0", out.getvalue())
        self.assertIn("PLUS + null", out.getvalue())
        self.assertIn("(+ 1 2)", out.getvalue())
        self.assertEqual(["3"], sess.results)

    def test_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "expr.lox")
            with open(path, "w", encoding="utf-8") as file:
                file.write("// sum\n1 +\n  2\n")

            sess = Session(ErrorHandler(), path)
            sess.run()
            self.assertEqual(["3"], sess.results)
            self.assertTrue(sess.error_handler.fatal)

    def test_bad_paths(self):
        self.assertRaises(LoxError, Session, ErrorHandler(), "/nonexistent/expr.lox")
        self.assertRaises(LoxError, Session, ErrorHandler(), Session.SH_FILE)
        self.assertRaises(LoxError, cmd_line_session().run)


if __name__ == '__main__':
    unittest.main()
