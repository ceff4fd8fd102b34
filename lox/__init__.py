"""Tree-walking interpreter for the expression subset of Lox.

Basic program flow:
    1. Scanner: converts source text into a lazy stream of Tokens (see lox/expr/scanner.py)
    2. Parser: recursive descent over the tokens, producing a single Expr tree (see lox/expr/parser.py)
    3. Evaluator: walks the tree and produces a runtime value or a LoxRuntimeError (see lox/expr/evaluator.py)

The `lang` package wraps the pipeline with error reporting, sessions and an interactive shell.
"""
