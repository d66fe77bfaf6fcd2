"""
Abstract Syntax Tree node definitions for stoneparse.

Every tree is built from two kinds of node: ASTLeaf, which owns exactly one
token, and ASTList, which owns an ordered list of child nodes. Grammar
authors derive their own node types from these two and hand them to the
parser as node shapes.

Nodes are immutable once constructed and keep no reference to their parent.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Iterator, Optional, Tuple

from ..lexer.tokens import Token


class ASTree(ABC):
    """Base class for all AST nodes."""

    @abstractmethod
    def child(self, i: int) -> 'ASTree':
        """Return the i-th child. Raises IndexError when there is none."""

    @abstractmethod
    def num_children(self) -> int:
        """Number of child nodes."""

    @abstractmethod
    def children(self) -> Iterator['ASTree']:
        """Iterate over the child nodes."""

    @abstractmethod
    def location(self) -> Optional[str]:
        """Human-readable source location, e.g. "at line 3"."""

    def __iter__(self) -> Iterator['ASTree']:
        return self.children()


class ASTLeaf(ASTree):
    """A node wrapping a single token."""

    def __init__(self, token: Token):
        self._token = token

    def child(self, i: int) -> ASTree:
        raise IndexError(f"{self.__class__.__name__} has no children")

    def num_children(self) -> int:
        return 0

    def children(self) -> Iterator[ASTree]:
        return iter(())

    def location(self) -> str:
        return f"at line {self._token.line}"

    def token(self) -> Token:
        return self._token

    def __str__(self) -> str:
        return self._token.text

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._token.text!r})"


class ASTList(ASTree):
    """A node owning an ordered list of children."""

    def __init__(self, children: Iterable[ASTree]):
        self._children: Tuple[ASTree, ...] = tuple(children)

    def child(self, i: int) -> ASTree:
        if not 0 <= i < len(self._children):
            raise IndexError(
                f"child index {i} out of range for {self.__class__.__name__} "
                f"with {len(self._children)} children"
            )
        return self._children[i]

    def num_children(self) -> int:
        return len(self._children)

    def children(self) -> Iterator[ASTree]:
        return iter(self._children)

    def location(self) -> Optional[str]:
        # First child that can tell where it is
        for child in self._children:
            loc = child.location()
            if loc is not None:
                return loc
        return None

    def __str__(self) -> str:
        return "(" + " ".join(str(child) for child in self._children) + ")"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({list(self._children)!r})"


# ============================================================================
# Common node shapes
# ============================================================================

class NumberLiteral(ASTLeaf):
    """Numeric literal leaf."""

    def value(self):
        return self.token().number


class Name(ASTLeaf):
    """Identifier leaf."""

    def name(self) -> str:
        return self.token().text


class StringLiteral(ASTLeaf):
    """String literal leaf; value() is the unescaped text."""

    def value(self) -> str:
        return self.token().text


class BinaryExpr(ASTList):
    """Binary operator application: left operator right."""

    def left(self) -> ASTree:
        return self.child(0)

    def operator(self) -> str:
        return str(self.child(1))

    def right(self) -> ASTree:
        return self.child(2)
