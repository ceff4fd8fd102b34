"""Recursive descent parser for Lox expressions.

Grammar, from lowest to highest precedence:

```
<expression> ::= <equality>
<equality>   ::= <comparison> ( ( "!=" | "==" ) <comparison> )*
<comparison> ::= <term> ( ( ">" | ">=" | "<" | "<=" ) <term> )*
<term>       ::= <factor> ( ( "-" | "+" ) <factor> )*
<factor>     ::= <unary> ( ( "/" | "*" ) <unary> )*
<unary>      ::= ( "!" | "-" ) <unary> | <primary>
<primary>    ::= NUMBER | STRING | "true" | "false" | "nil" | "(" <expression> ")"
```

Every binary level is left-associative ("8 - 4 - 2" is "(8 - 4) - 2"); unary is right-associative by recursion, so
"--5" is "-(-5)".
"""

from lox.expr.ast import Binary, Grouping, Literal, Unary
from lox.expr.tokens import STATEMENT_KEYWORDS, TokenKind
from lox.lang.error import ParseError


# binary precedence levels, lowest first
EQUALITY = (TokenKind.BANG_EQUAL, TokenKind.EQUAL_EQUAL)
COMPARISON = (TokenKind.GREATER, TokenKind.GREATER_EQUAL, TokenKind.LESS, TokenKind.LESS_EQUAL)
TERM = (TokenKind.MINUS, TokenKind.PLUS)
FACTOR = (TokenKind.SLASH, TokenKind.STAR)

UNARY = (TokenKind.BANG, TokenKind.MINUS)

LITERALS = {
    TokenKind.FALSE: False,
    TokenKind.TRUE: True,
    TokenKind.NIL: None,
}


class Parser:
    """Builds a single Expr tree from a token list ending in EOF. Never mutates tokens; it only advances a cursor."""
    MAX_DEPTH = 64  # maximum nesting of groupings and unary operators

    def __init__(self, tokens):
        self.tokens = list(tokens)
        self.current = 0
        self.depth = 0
        self.errors = []

    def parse(self):
        """Parses the whole token list as one expression. Returns the root Expr, or None if a ParseError was recorded
        in self.errors.
        """
        self.current = 0
        self.depth = 0
        self.errors = []

        try:
            expr = self.expression()
            if not self.at_end():
                raise ParseError("Expect end of expression.", self.peek())
            return expr
        except ParseError as error:
            self.errors.append(error)
            self.synchronize()
            return None

    def expression(self):
        return self.equality()

    def equality(self):
        return self.binary(self.comparison, EQUALITY)

    def comparison(self):
        return self.binary(self.term, COMPARISON)

    def term(self):
        return self.binary(self.factor, TERM)

    def factor(self):
        return self.binary(self.unary, FACTOR)

    def binary(self, operand, operators):
        """Parses a left-associative level: operand (operator operand)*, folding into nested Binary nodes."""
        expr = operand()

        while self.match(*operators):
            operator = self.previous()
            right = operand()
            expr = Binary(expr, operator, right)

        return expr

    def unary(self):
        if self.match(*UNARY):
            operator = self.previous()
            self.descend(operator)
            try:
                return Unary(operator, self.unary())
            finally:
                self.depth -= 1

        return self.primary()

    def primary(self):
        token = self.peek()

        if self.match(*LITERALS):
            return Literal(LITERALS[token.kind], token.line)

        elif self.match(TokenKind.NUMBER, TokenKind.STRING):
            return Literal(token.literal, token.line)

        elif self.match(TokenKind.LEFT_PAREN):
            self.descend(token)
            try:
                expr = self.expression()
            finally:
                self.depth -= 1
            self.consume(TokenKind.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr, token.line)

        raise ParseError("Expect expression.", token)

    def descend(self, token):
        """Enters one more level of nesting, failing at token if that exceeds MAX_DEPTH."""
        if self.depth >= self.MAX_DEPTH:
            raise ParseError("Expression nests too deeply.", token)
        self.depth += 1

    def synchronize(self):
        """Discards tokens until the start of the next statement, so that parsing could resume there."""
        self.advance()

        while not self.at_end():
            if self.previous().kind is TokenKind.SEMICOLON:
                return
            if self.peek().kind in STATEMENT_KEYWORDS:
                return
            self.advance()

    def match(self, *kinds):
        """Consumes the next token if it is one of kinds."""
        if any(self.check(kind) for kind in kinds):
            self.advance()
            return True
        return False

    def consume(self, kind, msg):
        if self.check(kind):
            return self.advance()
        raise ParseError(msg, self.peek())

    def check(self, kind):
        if self.at_end():
            return False
        return self.peek().kind is kind

    def advance(self):
        if not self.at_end():
            self.current += 1
        return self.previous()

    def at_end(self):
        return self.peek().kind is TokenKind.EOF

    def peek(self):
        return self.tokens[self.current]

    def previous(self):
        return self.tokens[max(self.current - 1, 0)]
