"""Expression nodes of the Lox abstract syntax tree.

The node set is closed: an Expr is exactly one of Literal, Grouping, Unary or Binary. Each non-leaf node owns its
children, so a parse always produces a tree with a single root.

`str(expr)` renders the tree in parenthesized prefix form, e.g. "-1 * (2 + 3)" is displayed as

```
(* (- 1) (group (+ 2 3)))
```
"""

from dataclasses import dataclass

from lox.expr.tokens import Token
from lox.expr.value import stringify


class Expr:
    """Superclass of every expression node. Every node has a line: the line on which its source span begins."""

    @staticmethod
    def parenthesize(name, *exprs):
        return f"({name} {' '.join(str(expr) for expr in exprs)})"


@dataclass(frozen=True)
class Literal(Expr):
    """Number, string, boolean or nil value embedded in source."""
    value: object
    line: int = 1

    def __str__(self):
        return stringify(self.value)


@dataclass(frozen=True)
class Grouping(Expr):
    """Parenthesized expression. line is the line of the opening parenthesis."""
    expression: Expr
    line: int = 1

    def __str__(self):
        return Expr.parenthesize("group", self.expression)


@dataclass(frozen=True)
class Unary(Expr):
    """Prefix "-" or "!" applied to a single operand."""
    operator: Token
    right: Expr

    @property
    def line(self):
        return self.operator.line

    def __str__(self):
        return Expr.parenthesize(self.operator.lexeme, self.right)


@dataclass(frozen=True)
class Binary(Expr):
    """Infix operator applied to two operands."""
    left: Expr
    operator: Token
    right: Expr

    @property
    def line(self):
        # left-associative chains nest on the left, so they are walked iteratively here and in __str__
        expr = self.left
        while isinstance(expr, Binary):
            expr = expr.left
        return expr.line

    def __str__(self):
        spine = []
        expr = self
        while isinstance(expr, Binary):
            spine.append(expr)
            expr = expr.left

        text = str(expr)
        for node in reversed(spine):
            text = f"({node.operator.lexeme} {text} {node.right})"
        return text
