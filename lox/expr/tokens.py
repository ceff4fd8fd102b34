"""Lexical tokens produced by the Scanner and consumed by the Parser."""

from dataclasses import dataclass
from enum import Enum, auto


class TokenKind(Enum):
    """Every kind of token the Scanner can produce."""

    # single-character tokens
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    COMMA = auto()
    DOT = auto()
    MINUS = auto()
    PLUS = auto()
    SEMICOLON = auto()
    SLASH = auto()
    STAR = auto()

    # one or two character tokens
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()

    # literals
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # reserved words
    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FUN = auto()
    FOR = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    EOF = auto()


KEYWORDS = {
    "and": TokenKind.AND,
    "class": TokenKind.CLASS,
    "else": TokenKind.ELSE,
    "false": TokenKind.FALSE,
    "for": TokenKind.FOR,
    "fun": TokenKind.FUN,
    "if": TokenKind.IF,
    "nil": TokenKind.NIL,
    "or": TokenKind.OR,
    "print": TokenKind.PRINT,
    "return": TokenKind.RETURN,
    "super": TokenKind.SUPER,
    "this": TokenKind.THIS,
    "true": TokenKind.TRUE,
    "var": TokenKind.VAR,
    "while": TokenKind.WHILE,
}

# keywords that begin a statement, used by the Parser to resynchronize after an error
STATEMENT_KEYWORDS = {
    TokenKind.CLASS,
    TokenKind.FUN,
    TokenKind.VAR,
    TokenKind.FOR,
    TokenKind.IF,
    TokenKind.WHILE,
    TokenKind.PRINT,
    TokenKind.RETURN,
}


@dataclass(frozen=True)
class Token:
    """Smallest lexical unit. literal is the parsed value of NUMBER (float) and STRING (str) tokens, else None. column
    is 1-based and counted from the start of line.
    """
    kind: TokenKind
    lexeme: str
    literal: object
    line: int
    column: int = 1

    def __str__(self):
        literal = "null" if self.literal is None else self.literal
        return f"{self.kind.name} {self.lexeme} {literal}"
