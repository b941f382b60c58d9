"""Parse encoded generic type names into structured expressions.

Springfox-style specs encode Java generics in definition keys and ``$ref``
targets with guillemets: ``Page«List«User»»`` stands for
``Page<List<User>>``.  This module parses either spelling with a small
recursive-descent parser into a :class:`GenericExpr` tree, so callers can
walk, rewrite and re-render nested instantiations without string surgery.

Grammar::

    expr  := name [ "<" expr ( "," expr )* ">" ] ( "[]" )*
    name  := any run of characters other than < > « » , [ ]

``«`` and ``»`` are accepted wherever ``<`` and ``>`` are.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator

_OPEN = frozenset("<«")
_CLOSE = frozenset(">»")
_RESERVED = _OPEN | _CLOSE | frozenset(",[]")

GENERIC_PLACEHOLDER = "T"
GENERIC_MARKER = f"<{GENERIC_PLACEHOLDER}>"
ARRAY_MARKER = "[]"


class GenericSyntaxError(ValueError):
    """Raised when a type name cannot be parsed as a generic expression."""


@dataclass(frozen=True)
class GenericExpr:
    """One node of a parsed generic type name.

    Attributes:
        name: The base name of this node (``Page`` in ``Page<User>``).
        args: Type arguments in textual order.
        array_depth: Number of trailing ``[]`` markers.
    """

    name: str
    args: tuple[GenericExpr, ...] = ()
    array_depth: int = 0

    @property
    def is_instantiated(self) -> bool:
        return bool(self.args)

    def walk(self) -> Iterator[GenericExpr]:
        """Yield this node and every nested argument, outer first, left to right."""
        yield self
        for arg in self.args:
            yield from arg.walk()

    def names(self) -> list[str]:
        """Return the dependency chain: every node name in pre-order."""
        return [node.name for node in self.walk()]

    def innermost(self) -> GenericExpr:
        """Follow the last argument down to the deepest node."""
        node = self
        while node.args:
            node = node.args[-1]
        return node

    def rewrite(self, fn: Callable[[GenericExpr], GenericExpr]) -> GenericExpr:
        """Rebuild the tree bottom-up, passing each node through *fn*."""
        rebuilt = GenericExpr(
            self.name,
            tuple(arg.rewrite(fn) for arg in self.args),
            self.array_depth,
        )
        return fn(rebuilt)

    def render(self) -> str:
        """Render back to angle-bracket syntax (``Page<Array<User>>``)."""
        text = self.name
        if self.args:
            text += "<" + ", ".join(arg.render() for arg in self.args) + ">"
        return text + ARRAY_MARKER * self.array_depth

    def __str__(self) -> str:
        return self.render()


class _Parser:
    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def parse(self) -> GenericExpr:
        expr = self._expr()
        if self._pos != len(self._text):
            raise GenericSyntaxError(
                f"Unexpected {self._text[self._pos]!r} at offset {self._pos} in {self._text!r}"
            )
        return expr

    def _peek(self) -> str:
        return self._text[self._pos] if self._pos < len(self._text) else ""

    def _expr(self) -> GenericExpr:
        name = self._name()
        args: list[GenericExpr] = []
        if self._peek() in _OPEN:
            self._pos += 1
            args.append(self._expr())
            while self._peek() == ",":
                self._pos += 1
                args.append(self._expr())
            if self._peek() not in _CLOSE:
                raise GenericSyntaxError(f"Unclosed generic arguments in {self._text!r}")
            self._pos += 1
        depth = 0
        while self._text.startswith(ARRAY_MARKER, self._pos):
            self._pos += len(ARRAY_MARKER)
            depth += 1
        return GenericExpr(name, tuple(args), depth)

    def _name(self) -> str:
        start = self._pos
        while self._pos < len(self._text) and self._text[self._pos] not in _RESERVED:
            self._pos += 1
        name = self._text[start:self._pos].strip()
        if not name:
            raise GenericSyntaxError(f"Expected a type name at offset {start} in {self._text!r}")
        return name


def parse_generic(text: str) -> GenericExpr:
    """Parse ``Page«List«User»»`` or ``Page<List<User>>`` into a :class:`GenericExpr`.

    Raises:
        GenericSyntaxError: On empty names or unbalanced delimiters.
    """
    return _Parser(text).parse()


def normalize_generic_markers(text: str) -> str:
    """``A«B«C»»`` -> ``A<B<C>>``."""
    return text.replace("«", "<").replace("»", ">")


def to_generic_type(text: str) -> str:
    """Normalize a raw reference name into rendered generic syntax.

    Falls back to plain delimiter replacement when *text* does not parse, so
    it is safe to call on anything a spec may contain.
    """
    try:
        return parse_generic(text).render()
    except GenericSyntaxError:
        return normalize_generic_markers(text)


def strip_generic_marker(name: str) -> str:
    """``Page<T>`` -> ``Page``."""
    return name.replace(GENERIC_MARKER, "")


def strip_array_marker(type_name: str) -> str:
    """``User[]`` -> ``User``."""
    return type_name.replace(ARRAY_MARKER, "")
