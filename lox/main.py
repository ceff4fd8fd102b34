"""Runs the Lox interpreter on a file, or in command-line mode if no file is given. Called from the lox executable
script.

Exit status follows lox.lang.error.Outcome: 0 on success, 65 on a lexical/parse error and 70 on a runtime error.
"""

import argparse
import sys

from lox.lang.error import ErrorHandler, Outcome
from lox.lang.session import Session
from lox.lang.shell import Shell


def build_parser():
    parser = argparse.ArgumentParser(prog="lox", description="Lox expression interpreter")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("-t", "--tokens", action="store_true", help="print the tokens of every run")
    parser.add_argument("-a", "--ast", action="store_true", help="print the syntax tree of every run")
    return parser


def main(argv=None):
    """Runs lox interpreter. Called from lox executable script."""
    args = build_parser().parse_args(argv)

    steps = [stage for stage, enabled in (("tokens", args.tokens), ("ast", args.ast)) if enabled]

    with ErrorHandler(steps=steps) as error_handler:
        if args.file is not None:
            sess = Session(error_handler, args.file)
            sess.run()

            while sess.results:
                print(sess.pop())

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True)).cmdloop()

    return int(error_handler.outcome) if args.file is not None else int(Outcome.SUCCESS)


if __name__ == "__main__":
    sys.exit(main())
