"""
stoneparse Parser Package

Grammar combinators for assembling recursive-descent parsers that build a
typed AST while they parse.

Key Features:
- Sequences, ordered alternation, repetition and optional parts
- Token-class leaves and keyword/separator literals
- Operator-precedence (precedence climbing) expressions
- Forward and mutually recursive rules via insert_choice()
- Pluggable node shapes
"""

from .ast_nodes import (
    ASTree, ASTLeaf, ASTList, NumberLiteral, Name, StringLiteral, BinaryExpr
)
from .factory import Factory
from .parser import (
    Parser, Operators, Precedence, Associativity, parse_string,
    Delegate, Alternation, Repetition, TokenClassLeaf, KeywordLiteral, Expression,
    TokenClass, RepeatMode, Emit, match_element, parse_element
)
from .errors import (
    ParseError, create_unexpected_token_error, create_expected_token_error
)

__all__ = [
    # Rules
    "Parser", "Operators", "Precedence", "Associativity", "parse_string",

    # Grammar elements
    "Delegate", "Alternation", "Repetition", "TokenClassLeaf",
    "KeywordLiteral", "Expression", "TokenClass", "RepeatMode", "Emit",
    "match_element", "parse_element",

    # AST nodes
    "ASTree", "ASTLeaf", "ASTList",
    "NumberLiteral", "Name", "StringLiteral", "BinaryExpr",
    "Factory",

    # Error handling
    "ParseError", "create_unexpected_token_error", "create_expected_token_error",
]
