"""Runtime values of Lox. Values are plain Python objects:

    Number  -> float
    String  -> str
    Boolean -> bool
    Nil     -> None

bool is a subclass of int in Python, so every check here dispatches on the exact type rather than on isinstance or
==, which would happily report True == 1.0.
"""

import math
from decimal import Decimal


NUMBER = "number"
STRING = "string"
BOOLEAN = "boolean"
NIL = "nil"

TYPE_NAMES = {float: NUMBER, str: STRING, bool: BOOLEAN, type(None): NIL}


def type_name(value):
    """Returns the Lox name of value's type. Raises TypeError if value is not a Lox value."""
    try:
        return TYPE_NAMES[type(value)]
    except KeyError:
        raise TypeError(f"'{type(value).__name__}' is not a Lox value") from None


def is_number(value):
    return type(value) is float


def is_string(value):
    return type(value) is str


def is_truthy(value):
    """nil and false are falsy, everything else (including 0 and "") is truthy."""
    if value is None:
        return False
    if type(value) is bool:
        return value
    return True


def is_equal(left, right):
    """Values of different types are never equal. Numbers compare by IEEE 754, so NaN != NaN."""
    return type(left) is type(right) and left == right


def divide(left, right):
    """IEEE 754 division: x / 0 is a signed infinity and 0 / 0 (or NaN / 0) is NaN."""
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def stringify(value):
    """Canonical textual rendering of value."""
    if value is None:
        return "nil"

    elif type(value) is bool:
        return "true" if value else "false"

    elif type(value) is float:
        if math.isnan(value):
            return "NaN"
        elif math.isinf(value):
            return "inf" if value > 0 else "-inf"
        elif value.is_integer():
            return f"{value:.0f}"  # keeps the sign of -0.0
        return format(Decimal(repr(value)), "f")  # shortest digits, never in exponent form

    return str(value)
