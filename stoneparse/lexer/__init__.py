"""
stoneparse Lexer Package

Token source for the combinator engine: a lookahead-capable stream of
identifier, number and string tokens with source locations.

Key Features:
- peek(i) / read() token stream with lazy scanning
- Operators and punctuation lexed as identifier-shaped tokens
- Newline tokens for line-oriented grammars
- Source location tracking for diagnostics
"""

from .tokens import Token, TokenType, SourceLocation
from .lexer import Lexer, tokenize_string, tokenize_file
from .errors import Diagnostic, LexerError

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "Diagnostic",
    "LexerError",
    "tokenize_string",
    "tokenize_file",
]
