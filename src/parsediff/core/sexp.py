"""Reader for textual s-expressions.

External parsers print their trees in the nested-array notation used by
Ruby's ``inspect``::

    [:program, [:stmts_add, [:stmts_new], [:@int, "1", [1, 0]]]]

This module reads that notation back into tree values. Arrays whose first
element is a symbol become ParseTree nodes, other arrays become untagged
tuples. ``nil``, ``true``, ``false``, integers, floats, double-quoted strings
and symbols (bare or quoted) are supported.

String escapes producing raw bytes (``"\\xE3"``) are assembled into UTF-8 and
decoded with ``surrogateescape``, so invalid byte sequences survive reading.
"""

from .errors import ParseError
from .tree import Child, ParseTree, Symbol

_DELIMITERS = frozenset(" \t\r\n,]")

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "s": " ",
    "e": "\x1b",
    "a": "\x07",
    "b": "\x08",
    "f": "\x0c",
    "v": "\x0b",
}

_HEX = "0123456789abcdefABCDEF"


class SexpSyntaxError(ParseError):
    """Malformed s-expression text."""

    def __init__(self, message: str, text: str, pos: int):
        self.pos = pos
        excerpt = text[max(0, pos - 20) : pos + 20]
        super().__init__(f"{message} at offset {pos}: {excerpt!r}")


def _close_array(items: list[Child]) -> Child:
    if isinstance(items[0], Symbol):
        return ParseTree(str(items[0]), tuple(items[1:]))
    return tuple(items)


class _Reader:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def error(self, message: str) -> SexpSyntaxError:
        return SexpSyntaxError(message, self.text, self.pos)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in " \t\r\n":
            self.pos += 1

    def read(self) -> Child:
        """Read one value. Nested arrays are tracked on an explicit stack, so
        nesting depth is not bounded by the interpreter's recursion limit."""
        open_arrays: list[list[Child]] = []
        while True:
            self.skip_whitespace()
            ch = self.peek()
            if not ch:
                raise self.error("Unexpected end of input")
            if ch == "[":
                self.pos += 1
                self.skip_whitespace()
                if self.peek() != "]":
                    open_arrays.append([])
                    continue
                self.pos += 1
                value: Child = ()
            else:
                value = self.read_atom(ch)

            while open_arrays:
                open_arrays[-1].append(value)
                self.skip_whitespace()
                ch = self.peek()
                if ch == ",":
                    self.pos += 1
                    break
                if ch != "]":
                    raise self.error("Expected ',' or ']'")
                self.pos += 1
                value = _close_array(open_arrays.pop())
            else:
                return value

    def read_atom(self, ch: str) -> Child:
        if ch == ":":
            return self.read_symbol()
        if ch == '"':
            return self.read_string()
        if ch == "-" or ch.isdigit():
            return self.read_number()
        word = self.read_word()
        if word == "nil":
            return None
        if word == "true":
            return True
        if word == "false":
            return False
        raise self.error(f"Unexpected token {word!r}")

    def read_word(self) -> str:
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] not in _DELIMITERS:
            self.pos += 1
        return self.text[start : self.pos]

    def read_symbol(self) -> Symbol:
        self.pos += 1  # :
        if self.peek() == '"':
            return Symbol(self.read_string())
        if self.text.startswith("[]", self.pos):
            self.pos += 2
            if self.peek() == "=":
                self.pos += 1
                return Symbol("[]=")
            return Symbol("[]")
        name = self.read_word()
        if not name:
            raise self.error("Empty symbol")
        return Symbol(name)

    def read_number(self) -> int | float:
        word = self.read_word()
        try:
            if any(c in word for c in ".eE"):
                return float(word)
            return int(word)
        except ValueError:
            raise self.error(f"Invalid number {word!r}") from None

    def read_string(self) -> str:
        self.pos += 1  # opening quote
        buf = bytearray()
        text = self.text
        while True:
            if self.pos >= len(text):
                raise self.error("Unterminated string")
            ch = text[self.pos]
            self.pos += 1
            if ch == '"':
                break
            if ch != "\\":
                buf += ch.encode("utf-8", "surrogateescape")
                continue
            if self.pos >= len(text):
                raise self.error("Unterminated escape")
            esc = text[self.pos]
            self.pos += 1
            if esc in _SIMPLE_ESCAPES:
                buf += _SIMPLE_ESCAPES[esc].encode()
            elif esc == "x" and self.peek() == "{":
                # Multibyte character of a non-Unicode encoding, e.g. EUC-JP "\x{A4A2}"
                self.pos += 1
                digits = self._take(_HEX, 8)
                if self.peek() != "}":
                    raise self.error("Unterminated \\x{...} escape")
                self.pos += 1
                buf += bytes.fromhex(digits.zfill(len(digits) + len(digits) % 2))
            elif esc == "x":
                digits = self._take(_HEX, 2)
                buf.append(int(digits, 16))
            elif esc == "u":
                buf += self._read_unicode_escape().encode("utf-8", "surrogatepass")
            elif esc in "01234567":
                self.pos -= 1
                digits = self._take("01234567", 3)
                buf.append(int(digits, 8) & 0xFF)
            else:
                # \" \\ \# and any other escaped character stand for themselves
                buf += esc.encode("utf-8", "surrogateescape")
        return buf.decode("utf-8", "surrogateescape")

    def _take(self, alphabet: str, limit: int) -> str:
        start = self.pos
        while (
            self.pos < len(self.text)
            and self.pos - start < limit
            and self.text[self.pos] in alphabet
        ):
            self.pos += 1
        if self.pos == start:
            raise self.error("Invalid escape sequence")
        return self.text[start : self.pos]

    def _read_unicode_escape(self) -> str:
        if self.peek() == "{":
            self.pos += 1
            chars = []
            while True:
                self.skip_whitespace()
                if self.peek() == "}":
                    self.pos += 1
                    break
                chars.append(chr(int(self._take(_HEX, 6), 16)))
            return "".join(chars)
        return chr(int(self._take(_HEX, 4), 16))


def read_sexp(text: str) -> Child:
    """Read one s-expression value from text.

    Args:
        text: S-expression text; surrounding whitespace is ignored

    Returns:
        The tree value (ParseTree, tuple or scalar)

    Raises:
        SexpSyntaxError: If the text is malformed or has trailing content

    Example:
        >>> read_sexp('[:var_ref, [:@kw, "self", [1, 0]]]').tag
        'var_ref'
        >>> read_sexp("nil") is None
        True
    """
    reader = _Reader(text)
    value = reader.read()
    reader.skip_whitespace()
    if reader.pos != len(text):
        raise reader.error("Trailing content after s-expression")
    return value


def read_tree(text: str) -> ParseTree | None:
    """Read parser output: a ParseTree, or None when the parser printed ``nil``.

    Raises:
        SexpSyntaxError: If the text is malformed or is not a tagged node
    """
    value = read_sexp(text)
    if value is None or isinstance(value, ParseTree):
        return value
    raise SexpSyntaxError(
        f"Expected a tagged node, got {type(value).__name__}", text, 0
    )
