"""
stoneparse combinator engine

A Parser is one grammar rule: an ordered list of grammar elements plus the
node shape its results are folded into. Rules are assembled with the fluent
builder methods (number(), identifier(), token(), sep(), ast(), or_(),
maybe(), option(), repeat(), expression()) and then run against a Lexer.

Every element answers two questions. match() asks whether it could start at
the current lookahead position and never consumes a token. parse() consumes
tokens and appends the nodes it produces to the rule's result list. Parsing
is LL(1) at rule entry: a rule's match() is its first element's match(), and
an alternation commits to the first candidate whose match() fires.

Binary operators are not rules of their own. The expression element parses
them by precedence climbing over an Operators table.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, Any, Callable, Dict, List, Optional, Tuple, Union

from ..lexer.lexer import Lexer
from ..lexer.tokens import Token, TokenType
from .ast_nodes import ASTree, ASTLeaf, ASTList
from .errors import (
    create_unexpected_token_error, create_expected_token_error,
    create_trailing_input_error
)
from .factory import Factory, Shape

logger = logging.getLogger(__name__)


# ============================================================================
# Operator table
# ============================================================================

class Associativity(Enum):
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class Precedence:
    """Binding strength of a binary operator. Higher values bind tighter."""
    value: int
    associativity: Associativity = Associativity.LEFT

    @property
    def left_assoc(self) -> bool:
        return self.associativity is Associativity.LEFT


class Operators(dict):
    """Maps operator text to its precedence and associativity."""

    LEFT = Associativity.LEFT
    RIGHT = Associativity.RIGHT

    def add(self, name: str, prec: int, assoc: Associativity = Associativity.LEFT) -> 'Operators':
        self[name] = Precedence(prec, assoc)
        return self


# ============================================================================
# Grammar elements
# ============================================================================

class TokenClass(Enum):
    IDENTIFIER = "identifier"
    NUMBER = "number"
    STRING = "string"


class RepeatMode(Enum):
    ZERO_OR_MORE = "*"
    ZERO_OR_ONE = "?"


class Emit(Enum):
    KEEP = "keep"
    DISCARD = "discard"


@dataclass(frozen=True, eq=False)
class Delegate:
    """Runs another rule and appends the one node it returns."""
    parser: 'Parser'


@dataclass(eq=False)
class Alternation:
    """Ordered choice between rules. The first rule that matches wins."""
    parsers: List['Parser']

    def insert(self, parser: 'Parser') -> None:
        """Put a new alternative ahead of all existing ones."""
        self.parsers.insert(0, parser)
        logger.debug("alternation extended to %d choices", len(self.parsers))

    def choose(self, lexer: Lexer) -> Optional['Parser']:
        for parser in self.parsers:
            if parser.match(lexer):
                return parser
        return None


@dataclass(frozen=True, eq=False)
class Repetition:
    """Runs a rule while it matches; at most once in ZERO_OR_ONE mode."""
    parser: 'Parser'
    mode: RepeatMode = RepeatMode.ZERO_OR_MORE


@dataclass(frozen=True, eq=False)
class TokenClassLeaf:
    """
    Consumes one identifier, number or string token and builds a leaf.

    For identifiers, words in ``reserved`` do not match. The set is kept by
    reference, so words the grammar reserves later still count.
    """
    token_class: TokenClass
    factory: Factory
    reserved: AbstractSet[str] = frozenset()

    def test(self, token: Token) -> bool:
        if self.token_class is TokenClass.IDENTIFIER:
            return token.is_identifier and token.text not in self.reserved
        if self.token_class is TokenClass.NUMBER:
            return token.is_number
        return token.is_string


@dataclass(frozen=True, eq=False)
class KeywordLiteral:
    """Consumes one identifier-shaped token whose text is one of ``texts``."""
    texts: Tuple[str, ...]
    emit: Emit = Emit.KEEP

    def test(self, token: Token) -> bool:
        return token.is_identifier and token.text in self.texts


@dataclass(frozen=True, eq=False)
class Expression:
    """Binary operator expression over ``operand``, parsed by precedence climbing."""
    operand: 'Parser'
    operators: Operators
    factory: Factory

    def next_operator(self, lexer: Lexer) -> Optional[Precedence]:
        token = lexer.peek(0)
        if token.is_identifier:
            return self.operators.get(token.text)
        return None

    def shift(self, lexer: Lexer, left: ASTree, prec: int) -> ASTree:
        """
        Consume one operator and its right operand, then fold them with
        ``left``. Operators to the right that bind tighter than ``prec``
        (or as tight, when right-associative) are folded into the right
        operand first.
        """
        nodes: List[ASTree] = [left, ASTLeaf(lexer.read())]
        right = self.operand.parse(lexer)
        while True:
            next_prec = self.next_operator(lexer)
            if next_prec is None or not _right_is_expr(prec, next_prec):
                break
            right = self.shift(lexer, right, next_prec.value)
        nodes.append(right)
        return self.factory.make(nodes)


def _right_is_expr(prec: int, next_prec: Precedence) -> bool:
    if next_prec.left_assoc:
        return prec < next_prec.value
    return prec <= next_prec.value


Element = Union[Delegate, Alternation, Repetition, TokenClassLeaf, KeywordLiteral, Expression]


# ----------------------------------------------------------------------------
# match(): pure lookahead
# ----------------------------------------------------------------------------

def _match_delegate(element: Delegate, lexer: Lexer) -> bool:
    return element.parser.match(lexer)


def _match_alternation(element: Alternation, lexer: Lexer) -> bool:
    return element.choose(lexer) is not None


def _match_repetition(element: Repetition, lexer: Lexer) -> bool:
    return element.parser.match(lexer)


def _match_token(element: Union[TokenClassLeaf, KeywordLiteral], lexer: Lexer) -> bool:
    return element.test(lexer.peek(0))


def _match_expression(element: Expression, lexer: Lexer) -> bool:
    return element.operand.match(lexer)


# ----------------------------------------------------------------------------
# parse(): consume tokens, append nodes to ``res``
# ----------------------------------------------------------------------------

def _parse_delegate(element: Delegate, lexer: Lexer, res: List[ASTree]) -> None:
    res.append(element.parser.parse(lexer))


def _parse_alternation(element: Alternation, lexer: Lexer, res: List[ASTree]) -> None:
    parser = element.choose(lexer)
    if parser is None:
        raise create_unexpected_token_error(lexer.peek(0))
    res.append(parser.parse(lexer))


def _parse_repetition(element: Repetition, lexer: Lexer, res: List[ASTree]) -> None:
    while element.parser.match(lexer):
        tree = element.parser.parse(lexer)
        # Empty plain lists come from absent optional parts; drop them
        if type(tree) is not ASTList or tree.num_children() > 0:
            res.append(tree)
        if element.mode is RepeatMode.ZERO_OR_ONE:
            break


def _parse_token_class(element: TokenClassLeaf, lexer: Lexer, res: List[ASTree]) -> None:
    token = lexer.read()
    if not element.test(token):
        raise create_unexpected_token_error(token)
    res.append(element.factory.make(token))


def _parse_keyword(element: KeywordLiteral, lexer: Lexer, res: List[ASTree]) -> None:
    token = lexer.read()
    if element.test(token):
        if element.emit is Emit.KEEP:
            res.append(ASTLeaf(token))
        return
    if element.texts:
        raise create_expected_token_error(element.texts[0], token)
    raise create_unexpected_token_error(token)


def _parse_expression(element: Expression, lexer: Lexer, res: List[ASTree]) -> None:
    right = element.operand.parse(lexer)
    while True:
        prec = element.next_operator(lexer)
        if prec is None:
            break
        right = element.shift(lexer, right, prec.value)
    res.append(right)


_MATCHERS: Dict[type, Callable[[Any, Lexer], bool]] = {
    Delegate: _match_delegate,
    Alternation: _match_alternation,
    Repetition: _match_repetition,
    TokenClassLeaf: _match_token,
    KeywordLiteral: _match_token,
    Expression: _match_expression,
}

_PARSERS: Dict[type, Callable[[Any, Lexer, List[ASTree]], None]] = {
    Delegate: _parse_delegate,
    Alternation: _parse_alternation,
    Repetition: _parse_repetition,
    TokenClassLeaf: _parse_token_class,
    KeywordLiteral: _parse_keyword,
    Expression: _parse_expression,
}


def match_element(element: Element, lexer: Lexer) -> bool:
    """Whether ``element`` could start at the current position. Consumes nothing."""
    return _MATCHERS[type(element)](element, lexer)


def parse_element(element: Element, lexer: Lexer, res: List[ASTree]) -> None:
    """Consume ``element`` from ``lexer`` and append the nodes it produces to ``res``."""
    _PARSERS[type(element)](element, lexer, res)


# ============================================================================
# Rules
# ============================================================================

_KEEP_SHAPE = object()


class Parser:
    """
    One grammar rule.

    Build rules with Parser.rule() and the chaining methods below. Rules may
    refer to each other recursively through ast(), or_() and the other
    combinators; insert_choice() extends a rule after other rules already
    point at it.
    """

    def __init__(self, shape: Shape = None):
        self.elements: List[Element] = []
        self.factory = Factory.for_list(shape)

    @classmethod
    def rule(cls, shape: Shape = None) -> 'Parser':
        """Start an empty rule whose results are folded by ``shape``."""
        return cls(shape)

    def _copy(self) -> 'Parser':
        # Shares the element list; reset() on either side detaches it
        other = Parser.__new__(Parser)
        other.elements = self.elements
        other.factory = self.factory
        return other

    def reset(self, shape: Any = _KEEP_SHAPE) -> 'Parser':
        """Drop all elements. The node shape is replaced only if given."""
        self.elements = []
        if shape is not _KEEP_SHAPE:
            self.factory = Factory.for_list(shape)
        return self

    # ------------------------------------------------------------------
    # Running a rule
    # ------------------------------------------------------------------

    def parse(self, lexer: Lexer) -> ASTree:
        """Consume one instance of this rule and return its node."""
        results: List[ASTree] = []
        for element in self.elements:
            parse_element(element, lexer, results)
        return self.factory.make(results)

    def match(self, lexer: Lexer) -> bool:
        """Whether this rule can start here. An empty rule always can."""
        if not self.elements:
            return True
        return match_element(self.elements[0], lexer)

    # ------------------------------------------------------------------
    # Builder
    # ------------------------------------------------------------------

    def number(self, shape: Shape = None) -> 'Parser':
        self.elements.append(TokenClassLeaf(TokenClass.NUMBER, Factory.for_leaf(shape)))
        return self

    def identifier(self, reserved: Optional[AbstractSet[str]] = None, shape: Shape = None) -> 'Parser':
        if reserved is None:
            reserved = set()
        self.elements.append(
            TokenClassLeaf(TokenClass.IDENTIFIER, Factory.for_leaf(shape), reserved)
        )
        return self

    def string(self, shape: Shape = None) -> 'Parser':
        self.elements.append(TokenClassLeaf(TokenClass.STRING, Factory.for_leaf(shape)))
        return self

    def token(self, *texts: str) -> 'Parser':
        """Match one of ``texts`` and keep it as a leaf."""
        self.elements.append(KeywordLiteral(tuple(texts), Emit.KEEP))
        return self

    def sep(self, *texts: str) -> 'Parser':
        """Match one of ``texts`` and drop it."""
        self.elements.append(KeywordLiteral(tuple(texts), Emit.DISCARD))
        return self

    def ast(self, parser: 'Parser') -> 'Parser':
        self.elements.append(Delegate(parser))
        return self

    def or_(self, *parsers: 'Parser') -> 'Parser':
        self.elements.append(Alternation(list(parsers)))
        return self

    def maybe(self, parser: 'Parser') -> 'Parser':
        """Optional part that leaves an empty list node behind when absent."""
        empty = parser._copy().reset()
        self.elements.append(Alternation([parser, empty]))
        return self

    def option(self, parser: 'Parser') -> 'Parser':
        self.elements.append(Repetition(parser, RepeatMode.ZERO_OR_ONE))
        return self

    def repeat(self, parser: 'Parser') -> 'Parser':
        self.elements.append(Repetition(parser, RepeatMode.ZERO_OR_MORE))
        return self

    def expression(self, subexp: 'Parser', operators: Operators, shape: Shape = None) -> 'Parser':
        self.elements.append(Expression(subexp, operators, Factory.for_list(shape)))
        return self

    def insert_choice(self, parser: 'Parser') -> 'Parser':
        """
        Give this rule a new first alternative.

        If the rule starts with an alternation, ``parser`` is prepended to
        it. Otherwise the rule becomes or_(parser, <its old self>). Rules
        that already refer to this one see the change either way.
        """
        first = self.elements[0] if self.elements else None
        if isinstance(first, Alternation):
            first.insert(parser)
        else:
            otherwise = self._copy()
            self.reset(None)
            self.or_(parser, otherwise)
            logger.debug("rule turned into an alternation: %r", self)
        return self

    def __repr__(self) -> str:
        kinds = ", ".join(type(e).__name__ for e in self.elements)
        return f"Parser({kinds})"


def parse_string(rule: Parser, source: str, filename: str = "<string>") -> ASTree:
    """
    Convenience function to parse one instance of ``rule`` from a string.

    Trailing newlines are allowed; any other leftover token is an error.

    Raises:
        LexerError: If lexing fails
        ParseError: If parsing fails
    """
    logger.debug("parsing %s with %r", filename, rule)
    lexer = Lexer(source, filename)
    tree = rule.parse(lexer)

    while lexer.peek(0).type == TokenType.NEWLINE:
        lexer.read()
    if not lexer.peek(0).is_eof:
        raise create_trailing_input_error(lexer.peek(0))

    return tree
