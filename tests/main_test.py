import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout

from lox.main import build_parser, main


class MainTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def write(self, source):
        path = os.path.join(self.tmp.name, "expr.lox")
        with open(path, "w", encoding="utf-8") as file:
            file.write(source)
        return path

    def test_args(self):
        args = build_parser().parse_args(["-t", "--ast", "expr.lox"])
        self.assertEqual(("expr.lox", True, True), (args.file, args.tokens, args.ast))

        args = build_parser().parse_args([])
        self.assertEqual((None, False, False), (args.file, args.tokens, args.ast))

    def test_success(self):
        out = io.StringIO()
        with redirect_stdout(out):
            code = main([self.write("(2 + 3) * 4\n")])
        self.assertEqual(0, code)
        self.assertEqual("20\n", out.getvalue())

    def test_exit_codes(self):
        cases = {
            "\"abc": 65,
            "1 + )": 65,
            "1 < \"a\"": 70,
        }
        for source, code in cases.items():
            with redirect_stdout(io.StringIO()), self.assertRaises(SystemExit) as cm:
                main([self.write(source)])
            self.assertEqual(code, cm.exception.code, source)

        with redirect_stdout(io.StringIO()), self.assertRaises(SystemExit) as cm:
            main([os.path.join(self.tmp.name, "missing.lox")])
        self.assertEqual(65, cm.exception.code)

    def test_ast_flag(self):
        out = io.StringIO()
        with redirect_stdout(out):
            main(["--ast", self.write("1 + 2")])
        self.assertIn("(+ 1 2)", out.getvalue())
        self.assertTrue(out.getvalue().endswith("3\n"))


if __name__ == '__main__':
    unittest.main()
