"""
stoneparse Lexer - turns source text into a lookahead token stream

The parser combinators only ever talk to the lexer through peek() and
read(), so tokens are scanned lazily as far ahead as the grammar looks.
tokenize() is still there for callers that want the whole list up front.
"""

import logging
import re
import string
from typing import List, Optional

from .tokens import (
    Token, TokenType, SourceLocation, MULTI_CHAR_OPERATORS, ESCAPE_SEQUENCES
)
from .errors import (
    LexerError, create_invalid_character_error,
    create_unterminated_string_error, create_invalid_number_error
)

logger = logging.getLogger(__name__)

PUNCTUATION = frozenset(string.punctuation) - {'"'}


class Lexer:
    """
    Lexical analyzer with unbounded lookahead.

    peek(i) looks i tokens ahead without consuming anything, read()
    consumes one token. Both return the EOF token once the source is
    exhausted, no matter how often they are called.
    """

    def __init__(self, source: str, filename: str = "<unknown>"):
        """
        Initialize the lexer with source code.

        Args:
            source: Source code string
            filename: Name of source file for error reporting
        """
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []
        self.errors: List[LexerError] = []

        # Scanned but not yet read tokens
        self._queue: List[Token] = []
        self._eof: Optional[Token] = None

        self._compile_patterns()

    def _compile_patterns(self):
        """Compile regex patterns used by the lexer."""
        self.number_pattern = re.compile(
            r'(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?'
        )
        self.identifier_pattern = re.compile(r'[A-Za-z_][A-Za-z0-9_]*')

    # ------------------------------------------------------------------
    # Token stream
    # ------------------------------------------------------------------

    def peek(self, i: int = 0) -> Token:
        """Return the i-th upcoming token without consuming it."""
        if i < 0:
            raise ValueError(f"lookahead must be non-negative, got {i}")
        if self._fill(i):
            return self._queue[i]
        return self._eof

    def read(self) -> Token:
        """Consume and return the next token."""
        if self._fill(0):
            return self._queue.pop(0)
        return self._eof

    def _fill(self, i: int) -> bool:
        """Scan until at least i + 1 tokens are queued. False once the source runs out."""
        while i >= len(self._queue):
            token = self._scan()
            if token is None:
                return False
            self._queue.append(token)
        return True

    def _scan(self) -> Optional[Token]:
        self._skip_whitespace_and_comments()
        if self.pos >= len(self.source):
            if self._eof is None:
                self._eof = self._make_eof()
            return None
        return self._next_token()

    def _make_eof(self) -> Token:
        return Token(
            TokenType.EOF, "", None,
            SourceLocation(self.filename, self.line, self.column, self.pos)
        )

    # ------------------------------------------------------------------
    # Eager tokenization
    # ------------------------------------------------------------------

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source code.

        Lexical errors are collected in self.errors and the offending
        character is skipped. Afterwards the token stream serves the
        tokenized list from the beginning.

        Returns:
            List of tokens including EOF token
        """
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens.clear()
        self.errors.clear()
        self._queue.clear()
        self._eof = None

        while self.pos < len(self.source):
            try:
                self._skip_whitespace_and_comments()

                if self.pos >= len(self.source):
                    break

                token = self._next_token()
                if token:
                    self.tokens.append(token)

            except LexerError as e:
                self.errors.append(e)
                # Try to recover by skipping the problematic character
                self._advance()

        self._eof = self._make_eof()
        self.tokens.append(self._eof)
        self._queue = self.tokens[:-1]

        logger.debug("%s: %d tokens, %d errors", self.filename, len(self.tokens), len(self.errors))
        return self.tokens

    def _next_token(self) -> Optional[Token]:
        """Get the next token from the source."""
        if self.pos >= len(self.source):
            return None

        start_pos = self.pos
        start_line = self.line
        start_column = self.column
        location = SourceLocation(self.filename, start_line, start_column, start_pos)

        current_char = self.source[self.pos]

        if current_char == '\n':
            self._advance()
            return Token(TokenType.NEWLINE, '\n', None, location)

        if current_char.isdigit() or (current_char == '.' and self._peek().isdigit()):
            return self._tokenize_number(location)

        if current_char.isalpha() or current_char == '_':
            match = self.identifier_pattern.match(self.source, self.pos)
            if match:
                lexeme = match.group(0)
                self._advance_by(len(lexeme))
                return Token(TokenType.IDENTIFIER, lexeme, lexeme, location)

        if current_char == '"':
            return self._tokenize_string(location)

        # Operators and punctuation (multi-character first)
        for op in MULTI_CHAR_OPERATORS:
            if self.source.startswith(op, self.pos):
                self._advance_by(len(op))
                return Token(TokenType.IDENTIFIER, op, None, location)

        if current_char in PUNCTUATION:
            self._advance()
            return Token(TokenType.IDENTIFIER, current_char, None, location)

        raise create_invalid_character_error(current_char, location)

    def _tokenize_number(self, location: SourceLocation) -> Token:
        """Tokenize integer or float literals."""
        match = self.number_pattern.match(self.source, self.pos)
        if not match:
            raise create_invalid_number_error(
                self.source[self.pos:self.pos + 10], location, "Expected a decimal number"
            )

        lexeme = match.group(0)
        self._advance_by(len(lexeme))

        try:
            if any(c in lexeme for c in '.eE'):
                value = float(lexeme)
            else:
                value = int(lexeme)
        except ValueError:
            raise create_invalid_number_error(lexeme, location, "Cannot parse number")

        return Token(TokenType.NUMBER, lexeme, value, location)

    def _tokenize_string(self, location: SourceLocation) -> Token:
        """Tokenize a double-quoted string literal."""
        start_pos = self.pos
        self._advance()  # Skip opening quote

        value_parts = []

        while self.pos < len(self.source) and self.source[self.pos] != '"':
            char = self.source[self.pos]
            if char == '\n':
                self._rewind(location)
                raise create_unterminated_string_error(location)
            if char == '\\' and self.pos + 1 < len(self.source):
                self._advance()  # Skip backslash
                escaped = self.source[self.pos]
                value_parts.append(ESCAPE_SEQUENCES.get(escaped, escaped))
            else:
                value_parts.append(char)
            self._advance()

        if self.pos >= len(self.source):
            self._rewind(location)
            raise create_unterminated_string_error(location)

        self._advance()  # Skip closing quote

        lexeme = self.source[start_pos:self.pos]
        return Token(TokenType.STRING, lexeme, ''.join(value_parts), location)

    def _skip_whitespace_and_comments(self):
        """Skip whitespace (newlines excluded) and comments."""
        while self.pos < len(self.source):
            if self.source[self.pos].isspace() and self.source[self.pos] != '\n':
                self._advance()
                continue

            # Line comments //
            if self.source.startswith('//', self.pos):
                while self.pos < len(self.source) and self.source[self.pos] != '\n':
                    self._advance()
                continue

            # Block comments /* */
            if self.source.startswith('/*', self.pos):
                self._advance_by(2)
                while (self.pos < len(self.source) and
                       not self.source.startswith('*/', self.pos)):
                    self._advance()
                self._advance_by(2)
                continue

            break

    def _advance(self):
        """Advance position by one character, updating line/column."""
        if self.pos < len(self.source):
            if self.source[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def _advance_by(self, count: int):
        for _ in range(count):
            self._advance()

    def _rewind(self, location: SourceLocation):
        """Move back to the start of a token that failed to scan."""
        self.pos = location.offset
        self.line = location.line
        self.column = location.column

    def _peek(self, offset: int = 1) -> str:
        """Peek at a character ahead without advancing."""
        peek_pos = self.pos + offset
        if peek_pos < len(self.source):
            return self.source[peek_pos]
        return '\0'

    def has_errors(self) -> bool:
        """Check if tokenize() encountered any errors."""
        return len(self.errors) > 0


def tokenize_string(source: str, filename: str = "<string>") -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Raises:
        LexerError: If lexing fails
    """
    lexer = Lexer(source, filename)
    tokens = lexer.tokenize()

    if lexer.has_errors():
        # Raise the first error encountered
        raise lexer.errors[0]

    return tokens


def tokenize_file(filepath: str) -> List[Token]:
    """
    Convenience function to tokenize a source file.

    Raises:
        LexerError: If lexing fails
        IOError: If file cannot be read
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return tokenize_string(source, filepath)
