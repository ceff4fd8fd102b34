"""Lexical analysis for Lox. Converts source text into a lazy, restartable stream of Tokens.

Lexical grammar, loosely:

```
<token>      ::= <operator> | <string> | <number> | <identifier>
<operator>   ::= "(" | ")" | "{" | "}" | "," | "." | "-" | "+" | ";" | "/" | "*"
               | "!" | "!=" | "=" | "==" | ">" | ">=" | "<" | "<="    ; two-character operators are matched greedily
<string>     ::= '"' <char>* '"'                                      ; may span lines, no escape sequences
<number>     ::= <digit>+ ( "." <digit>+ )?                           ; "1." is NUMBER(1) followed by DOT
<identifier> ::= ( <alpha> | "_" ) ( <alpha> | <digit> | "_" )*       ; reserved words take precedence

<comment>    ::= "//" <char>* <newline>
```

Errors do not stop the scan: each one is collected in Scanner.errors and scanning resumes after the offending
character (or, for an unterminated string, at the end of the source).
"""

import string

from lox.expr.tokens import KEYWORDS, Token, TokenKind
from lox.lang.error import LexicalError


# characters that are a complete token by themselves
SINGLE = {
    "(": TokenKind.LEFT_PAREN,
    ")": TokenKind.RIGHT_PAREN,
    "{": TokenKind.LEFT_BRACE,
    "}": TokenKind.RIGHT_BRACE,
    ",": TokenKind.COMMA,
    ".": TokenKind.DOT,
    "-": TokenKind.MINUS,
    "+": TokenKind.PLUS,
    ";": TokenKind.SEMICOLON,
    "*": TokenKind.STAR,
}

# characters that may be followed by "=": char: (kind alone, kind with "=")
DOUBLE = {
    "!": (TokenKind.BANG, TokenKind.BANG_EQUAL),
    "=": (TokenKind.EQUAL, TokenKind.EQUAL_EQUAL),
    "<": (TokenKind.LESS, TokenKind.LESS_EQUAL),
    ">": (TokenKind.GREATER, TokenKind.GREATER_EQUAL),
}

WHITESPACE = {" ", "\r", "\t"}
DIGITS = set(string.digits)
IDENT_START = set(string.ascii_letters + "_")
IDENT_CHARS = IDENT_START | DIGITS


class Scanner:
    """Single-pass, left-to-right scanner with one character of lookahead (two for number literals)."""

    def __init__(self, source, line=1):
        self.source = source
        self.first_line = line  # line number of the first line of source
        self.errors = []

        self._reset()

    def _reset(self):
        self.errors = []
        self.start = 0       # offset of the first character of the current token
        self.current = 0     # offset of the next character to read
        self.line = self.first_line
        self.line_start = 0  # offset of the first character of self.line

    def __iter__(self):
        """Yields every token in source, ending with exactly one EOF token. Each iteration restarts the scan."""
        self._reset()

        while not self.at_end():
            self.start = self.current
            token = self.scan_token()
            if token is not None:
                yield token

        self.start = self.current
        yield Token(TokenKind.EOF, "", None, self.line, self.column())

    def scan_tokens(self):
        """Scans all of source, returning the list of tokens. Check self.errors afterwards."""
        return list(self)

    @property
    def failed(self):
        """Whether or not the latest scan produced any lexical errors."""
        return bool(self.errors)

    def scan_token(self):
        """Scans the lexeme starting at self.start. Returns a Token, or None if the lexeme produced no token."""
        char = self.advance()

        if char in SINGLE:
            return self.make_token(SINGLE[char])

        elif char in DOUBLE:
            alone, with_equal = DOUBLE[char]
            return self.make_token(with_equal if self.match("=") else alone)

        elif char == "/":
            if self.match("/"):
                while self.peek() != "\n" and not self.at_end():
                    self.advance()
                return None
            return self.make_token(TokenKind.SLASH)

        elif char in WHITESPACE:
            return None

        elif char == "\n":
            self.newline()
            return None

        elif char == "\"":
            return self.string()

        elif char in DIGITS:
            return self.number()

        elif char in IDENT_START:
            return self.identifier()

        self.error(f"Unexpected character '{char}'.")
        return None

    def string(self):
        """Scans a string literal. The opening quote has been consumed."""
        line, column = self.line, self.column()

        while self.peek() != "\"" and not self.at_end():
            if self.advance() == "\n":
                self.newline()

        if self.at_end():
            self.errors.append(LexicalError("Unterminated string.", line, column))
            return None

        self.advance()  # closing quote
        return Token(TokenKind.STRING, self.lexeme(), self.source[self.start + 1:self.current - 1], line, column)

    def number(self):
        """Scans a number literal. The first digit has been consumed."""
        while self.peek() in DIGITS:
            self.advance()

        # a "." only belongs to the number if a digit follows it
        if self.peek() == "." and self.peek(1) in DIGITS:
            self.advance()
            while self.peek() in DIGITS:
                self.advance()

        return self.make_token(TokenKind.NUMBER, float(self.lexeme()))

    def identifier(self):
        """Scans an identifier or reserved word. The first character has been consumed."""
        while self.peek() in IDENT_CHARS:
            self.advance()

        return self.make_token(KEYWORDS.get(self.lexeme(), TokenKind.IDENTIFIER))

    def advance(self):
        char = self.source[self.current]
        self.current += 1
        return char

    def match(self, expected):
        """Consumes the next character only if it is expected."""
        if self.peek() != expected:
            return False
        self.current += 1
        return True

    def peek(self, offset=0):
        """Returns the character offset places after the next one, or "" past the end of source."""
        idx = self.current + offset
        return self.source[idx] if idx < len(self.source) else ""

    def at_end(self):
        return self.current >= len(self.source)

    def newline(self):
        """Bookkeeping after a newline character has been consumed."""
        self.line += 1
        self.line_start = self.current

    def lexeme(self):
        return self.source[self.start:self.current]

    def column(self):
        """1-based column of self.start within its line."""
        return self.start - self.line_start + 1

    def make_token(self, kind, literal=None):
        return Token(kind, self.lexeme(), literal, self.line, self.column())

    def error(self, msg):
        self.errors.append(LexicalError(msg, self.line, self.column(), self.current - self.start))
