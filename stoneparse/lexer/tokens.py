"""
Token definitions for the stoneparse lexer.

The token model is deliberately coarse. Grammars built with the combinator
engine only need to know whether a token is an identifier, a number or a
string. Operators and punctuation are identifier-shaped, so keyword
literals and operator tables match them by their text.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any


class TokenType(Enum):
    """Enumeration of all token types produced by the lexer."""

    IDENTIFIER = auto()             # names, operators and punctuation
    NUMBER = auto()                 # 42, 3.14, 1e-3
    STRING = auto()                 # "hello"
    NEWLINE = auto()                # end of a source line
    EOF = auto()                    # end of input


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Used for error reporting and for the location of AST leaves.
    """
    filename: str
    line: int
    column: int
    offset: int  # Character offset from start of file

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token.

    Contains the token type, lexeme (raw text), semantic value,
    and source location.
    """
    type: TokenType
    lexeme: str                     # Raw text from source
    value: Any                      # int/float for numbers, unescaped text for strings
    location: SourceLocation

    # Text carried by NEWLINE tokens
    EOL = "\\n"

    def __str__(self) -> str:
        if self.value is not None and self.value != self.lexeme:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"

    def __repr__(self) -> str:
        return (f"Token({self.type.name}, {self.lexeme!r}, "
                f"{self.value!r}, {self.location!r})")

    @property
    def is_identifier(self) -> bool:
        """Check if this token is identifier-shaped (names, operators, newlines)."""
        return self.type in (TokenType.IDENTIFIER, TokenType.NEWLINE)

    @property
    def is_number(self) -> bool:
        return self.type == TokenType.NUMBER

    @property
    def is_string(self) -> bool:
        return self.type == TokenType.STRING

    @property
    def is_eof(self) -> bool:
        return self.type == TokenType.EOF

    @property
    def text(self) -> str:
        """Text used for keyword and operator matching."""
        if self.type == TokenType.NEWLINE:
            return Token.EOL
        if self.type == TokenType.STRING:
            return self.value
        return self.lexeme

    @property
    def number(self):
        if not self.is_number:
            raise ValueError(f"{self} is not a number token")
        return self.value

    @property
    def line(self) -> int:
        return self.location.line


# Operators longer than one character; anything else in string.punctuation
# is lexed as a single-character identifier token.
MULTI_CHAR_OPERATORS = ("==", "<=", ">=", "!=", "&&", "||", "->")

ESCAPE_SEQUENCES = {
    'n': '\n',
    't': '\t',
    '\\': '\\',
    '"': '"',
}
