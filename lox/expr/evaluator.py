"""Tree-walking evaluation of Lox expressions.

Binary operands are always evaluated left, then right; no operator short-circuits. The first LoxRuntimeError aborts the
whole evaluation and is reported at the line of the operator that failed.
"""

import operator

from lox.expr.ast import Binary, Grouping, Literal, Unary
from lox.expr.tokens import TokenKind
from lox.expr.value import divide, is_equal, is_number, is_string, is_truthy
from lox.lang.error import LoxRuntimeError


# operators that require two numbers
ARITHMETIC = {
    TokenKind.MINUS: operator.sub,
    TokenKind.STAR: operator.mul,
    TokenKind.SLASH: divide,
}

COMPARISON = {
    TokenKind.GREATER: operator.gt,
    TokenKind.GREATER_EQUAL: operator.ge,
    TokenKind.LESS: operator.lt,
    TokenKind.LESS_EQUAL: operator.le,
}


class Evaluator:
    """Evaluates Expr trees. Holds no state between calls, so one Evaluator may be reused for any number of trees."""

    def evaluate(self, expr):
        """Returns the value of expr. Raises LoxRuntimeError on a type mismatch."""
        if isinstance(expr, Literal):
            return expr.value

        elif isinstance(expr, Grouping):
            return self.evaluate(expr.expression)

        elif isinstance(expr, Unary):
            return self.unary(expr)

        elif isinstance(expr, Binary):
            return self.binary(expr)

        raise TypeError(f"cannot evaluate '{type(expr).__name__}'")

    def unary(self, expr):
        right = self.evaluate(expr.right)
        kind = expr.operator.kind

        if kind is TokenKind.MINUS:
            check_number_operand(expr.operator, right)
            return -right

        elif kind is TokenKind.BANG:
            return not is_truthy(right)

        raise TypeError(f"'{expr.operator.lexeme}' is not a unary operator")

    def binary(self, expr):
        # left-associative chains nest on the left, so fold them iteratively from the innermost node out
        spine = []
        while isinstance(expr, Binary):
            spine.append(expr)
            expr = expr.left

        left = self.evaluate(expr)
        for node in reversed(spine):
            right = self.evaluate(node.right)
            left = self.apply(node.operator, left, right)

        return left

    def apply(self, token, left, right):
        """Applies the binary operator token to two already evaluated operands."""
        kind = token.kind

        if kind is TokenKind.PLUS:
            if is_number(left) and is_number(right):
                return left + right
            elif is_string(left) and is_string(right):
                return left + right
            raise LoxRuntimeError("Operands must be two numbers or two strings.", token)

        elif kind in ARITHMETIC:
            check_number_operands(token, left, right)
            return ARITHMETIC[kind](left, right)

        elif kind in COMPARISON:
            check_number_operands(token, left, right)
            return COMPARISON[kind](left, right)

        elif kind is TokenKind.EQUAL_EQUAL:
            return is_equal(left, right)

        elif kind is TokenKind.BANG_EQUAL:
            return not is_equal(left, right)

        raise TypeError(f"'{token.lexeme}' is not a binary operator")


def check_number_operand(token, operand):
    if not is_number(operand):
        raise LoxRuntimeError("Operand must be a number.", token)


def check_number_operands(token, left, right):
    if not (is_number(left) and is_number(right)):
        raise LoxRuntimeError("Operands must be numbers.", token)
