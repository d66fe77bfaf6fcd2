"""
Node factories.

A node shape is what a grammar author hands to the builder to say which
node type a rule or token should produce. Shapes are classes derived from
ASTLeaf (built from one token) or ASTList (built from a list of nodes), or
plain callables with the same signature. A class that defines a ``create``
static or class method is built through it instead of its constructor,
which lets a shape decide to return something other than a fresh instance.

Shapes are resolved once, when the grammar is assembled. A shape of the
wrong arity is a grammar bug and raises TypeError right there.
"""

from typing import Any, Callable, List, Optional

from .ast_nodes import ASTree, ASTLeaf, ASTList

Shape = Optional[Callable[..., ASTree]]


class Factory:
    """Builds nodes of one resolved shape."""

    def __init__(self, builder: Callable[[Any], ASTree], description: str):
        self._builder = builder
        self.description = description

    def make(self, arg: Any) -> ASTree:
        node = self._builder(arg)
        if not isinstance(node, ASTree):
            raise TypeError(
                f"node shape {self.description} returned {type(node).__name__}, not an ASTree"
            )
        return node

    def __repr__(self) -> str:
        return f"Factory({self.description})"

    @staticmethod
    def for_leaf(shape: Shape = None) -> 'Factory':
        """Factory building a leaf node from a single token."""
        if shape is None:
            shape = ASTLeaf
        return Factory(_resolve(shape, ASTLeaf, "a token"), _describe(shape))

    @staticmethod
    def for_list(shape: Shape = None) -> 'Factory':
        """
        Factory building a composite node from a list of nodes.

        The default shape returns a single node unwrapped and wraps
        anything else, including an empty list, in a plain ASTList.
        """
        if shape is None:
            return Factory(_collapse_or_list, "ASTList")
        return Factory(_resolve(shape, ASTList, "a list of nodes"), _describe(shape))


def _collapse_or_list(nodes: List[ASTree]) -> ASTree:
    if len(nodes) == 1:
        return nodes[0]
    return ASTList(nodes)


def _resolve(shape: Callable[..., ASTree], base: type, arg_kind: str) -> Callable[[Any], ASTree]:
    if isinstance(shape, type):
        if not issubclass(shape, base):
            raise TypeError(
                f"{shape.__name__} cannot be built from {arg_kind}: "
                f"expected a subclass of {base.__name__}"
            )
        create = getattr(shape, "create", None)
        if callable(create):
            return create
        return shape
    if callable(shape):
        return shape
    raise TypeError(f"node shape must be a class or callable, got {shape!r}")


def _describe(shape: Callable[..., ASTree]) -> str:
    return getattr(shape, "__name__", repr(shape))
