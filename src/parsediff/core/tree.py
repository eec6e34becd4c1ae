"""Parse tree data model.

A ParseTree is a tagged node with an ordered tuple of children. A child is
one of:

- a nested ParseTree
- an untagged sequence (a tuple of children), e.g. a source position ``(1, 0)``
- a scalar: str, int, float, bool, None or Symbol

Trees are immutable. Parsers produce them, the comparator consumes them, and
no tree outlives the evaluation of a single fixture.

Example:
    >>> tree = from_nested([Symbol("binary"), [Symbol("@int"), "1", [1, 0]], Symbol("+"),
    ...                     [Symbol("@int"), "2", [1, 4]]])
    >>> tree.tag
    'binary'
    >>> render(tree)
    '[:binary, [:@int, "1", [1, 0]], :+, [:@int, "2", [1, 4]]]'
"""

import re
from dataclasses import dataclass
from typing import Any, Union

# Symbols that render without quotes: identifiers (optionally prefixed with
# @, @@ or $ and suffixed with ?, ! or =) and operator method names.
_BARE_SYMBOL = re.compile(
    r"\A(?:(?:@@?|\$)?[^\W\d]\w*[?!=]?|\$[^\w\s]|\[\]=?|[-+*/%<>=!~^&|]+|[-+!~]@)\Z"
)


class Symbol(str):
    """A symbol-like leaf value.

    Symbols compare equal only to other symbols, so ``Symbol("foo")`` and the
    string ``"foo"`` are distinct leaves.
    """

    __slots__ = ()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Symbol) and str.__eq__(self, other)

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    __hash__ = str.__hash__

    def __repr__(self) -> str:
        return render_scalar(self)


Scalar = Union[str, int, float, bool, None]
Child = Union["ParseTree", tuple, Scalar]


@dataclass(frozen=True)
class ParseTree:
    """A tagged parse tree node.

    Attributes:
        tag: Node type (e.g. "program", "args_add_block", "@ident")
        children: Ordered child values
    """

    tag: str
    children: tuple = ()

    def __post_init__(self):
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", _freeze(self.children))

    def __len__(self) -> int:
        return len(self.children)

    def __getitem__(self, index: int) -> Child:
        return self.children[index]

    def __repr__(self) -> str:
        return render(self)


def _freeze(values: Any) -> tuple:
    return tuple(_freeze(v) if isinstance(v, list) else v for v in values)


def from_nested(value: Any) -> Child:
    """Convert nested Python lists into tree values.

    A list (or tuple) whose first element is a Symbol becomes a ParseTree with
    that symbol as its tag. Any other list becomes an untagged tuple. Scalars
    and existing ParseTree values pass through unchanged.

    Args:
        value: Nested lists, tuples and scalars

    Returns:
        The equivalent tree value

    Raises:
        TypeError: If a value is not a list, tuple, ParseTree or scalar
    """
    if not isinstance(value, (list, tuple)):
        return _leaf(value)

    # (sequence, converted elements) per open list, deepest last
    frames: list[tuple[Any, list[Child]]] = [(value, [])]
    while True:
        sequence, converted = frames[-1]
        if len(converted) < len(sequence):
            item = sequence[len(converted)]
            if isinstance(item, (list, tuple)):
                frames.append((item, []))
            else:
                converted.append(_leaf(item))
            continue
        frames.pop()
        if sequence and isinstance(sequence[0], Symbol):
            result: Child = ParseTree(str(sequence[0]), tuple(converted[1:]))
        else:
            result = tuple(converted)
        if not frames:
            return result
        frames[-1][1].append(result)


def _leaf(value: Any) -> Child:
    if isinstance(value, ParseTree):
        return value
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    raise TypeError(f"Cannot convert {type(value).__name__} into a parse tree value")


def to_nested(value: Child) -> Any:
    """Convert tree values back into nested lists (the inverse of from_nested)."""
    if isinstance(value, ParseTree):
        return [Symbol(value.tag)] + [to_nested(c) for c in value.children]
    if isinstance(value, tuple):
        return [to_nested(c) for c in value]
    return value


def render_scalar(value: Scalar) -> str:
    """Render a scalar leaf in s-expression notation."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Symbol):
        text = str(value)
        if _BARE_SYMBOL.match(text):
            return f":{text}"
        return f":{_quote(text)}"
    if isinstance(value, str):
        return _quote(value)
    return repr(value)


def _quote(text: str) -> str:
    out = ['"']
    for ch in text:
        if ch in ('"', "\\"):
            out.append("\\" + ch)
        elif ch == "\n":
            out.append("\\n")
        elif ch == "\t":
            out.append("\\t")
        elif ch == "\r":
            out.append("\\r")
        elif ord(ch) < 0x20 or ch == "\x7f":
            out.append(f"\\x{ord(ch):02X}")
        elif 0xDC80 <= ord(ch) <= 0xDCFF:
            # Undecodable source byte carried through surrogateescape
            out.append(f"\\x{ord(ch) - 0xDC00:02X}")
        else:
            out.append(ch)
    out.append('"')
    return "".join(out)


class _Punct(str):
    """Bracket or separator emitted by render, as opposed to a string leaf."""

    __slots__ = ()


def render(value: Child) -> str:
    """Render a tree value as s-expression text."""
    out: list[str] = []
    pending: list[Any] = [value]
    while pending:
        item = pending.pop()
        if isinstance(item, _Punct):
            out.append(item)
            continue
        if isinstance(item, ParseTree):
            parts = [Symbol(item.tag), *item.children]
        elif isinstance(item, tuple):
            parts = list(item)
        else:
            out.append(render_scalar(item))
            continue
        out.append("[")
        pending.append(_Punct("]"))
        for index in range(len(parts) - 1, -1, -1):
            pending.append(parts[index])
            if index:
                pending.append(_Punct(", "))
    return "".join(out)
