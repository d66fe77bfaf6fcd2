"""
stoneparse

A grammar-combinator engine: compose sequences, alternations, repetitions
and operator-precedence expressions into a recursive-descent parser that
builds an AST as it parses.

Architecture:
    stoneparse/
    ├── lexer/           # Token source with peek/read lookahead
    └── parser/          # AST nodes, node factories and grammar combinators
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .lexer import Lexer, Token, TokenType, LexerError
from .parser import (
    Parser, Operators, Precedence, Associativity, ParseError, parse_string,
    ASTree, ASTLeaf, ASTList,
)

__all__ = [
    # Core classes
    "Lexer",
    "Token",
    "TokenType",
    "Parser",
    "Operators",
    "Precedence",
    "Associativity",
    "parse_string",

    # AST
    "ASTree",
    "ASTLeaf",
    "ASTList",

    # Errors
    "LexerError",
    "ParseError",

    # Version info
    "__version__",
    "__license__",
]
