"""
Error handling for the stoneparse parser.

There is exactly one parse error kind. It is raised on the first mismatch
and is never recovered from inside the engine.
"""

from typing import Optional, List

from ..lexer.tokens import Token
from ..lexer.errors import Diagnostic


class ParseError(Exception):
    """
    Exception raised when the input does not match the grammar.

    Carries the offending token, and through it the source line.
    """

    def __init__(
        self,
        message: str,
        token: Token,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            message=message,
            location=token.location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )
        self.token = token

    @property
    def message(self) -> str:
        return self.diagnostic.message

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    @property
    def line(self) -> int:
        return self.token.line

    def __str__(self) -> str:
        return str(self.diagnostic)


# Common parser error codes for categorization
PARSER_ERROR_CODES = {
    "P001": "Unexpected token",
    "P002": "Expected token not found",
    "P003": "Trailing input",
}


def describe_token(token: Token) -> str:
    """Render a token for error messages: '"x" at line 3' or 'end of input'."""
    if token.is_eof:
        return "end of input"
    return f'"{token.text}" at line {token.line}'


def create_unexpected_token_error(found: Token) -> ParseError:
    """Create the generic error for a token no grammar element accepts."""
    return ParseError(
        message=f"Unexpected token {describe_token(found)}",
        token=found,
        code="P001"
    )


def create_expected_token_error(expected: str, found: Token) -> ParseError:
    """Create an error for a missing keyword or punctuation token."""
    return ParseError(
        message=f'"{expected}" expected, found {describe_token(found)}',
        token=found,
        code="P002",
        suggestions=[f'Insert "{expected}" before {describe_token(found)}']
    )


def create_trailing_input_error(found: Token) -> ParseError:
    """Create an error for tokens left over after a complete parse."""
    return ParseError(
        message=f"Unexpected trailing input {describe_token(found)}",
        token=found,
        code="P003",
        help_text="The rule matched, but the input continues past it."
    )
