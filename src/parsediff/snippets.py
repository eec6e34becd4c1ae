"""Curated inline snippets.

Short sources asserted for exact equivalence on every run, without an
allowlist. They guard specific grammar features; a mismatch on any of them is
always a regression.

Some snippets are skipped on engines known to print emoji symbols
differently (``skip_engines``).
"""

from dataclasses import dataclass

from .core.models import Fixture

TRUFFLERUBY = "truffleruby"


@dataclass(frozen=True)
class Snippet:
    source: str
    skip_engines: frozenset = frozenset()

    def skipped_on(self, *engines: str) -> bool:
        return any(engine in self.skip_engines for engine in engines)

    def as_fixture(self) -> Fixture:
        return Fixture(source=self.source)


def _plain(*sources: str) -> tuple[Snippet, ...]:
    return tuple(Snippet(s) for s in sources)


def _not_on(engine: str, *sources: str) -> tuple[Snippet, ...]:
    return tuple(Snippet(s, frozenset({engine})) for s in sources)


SNIPPETS: dict[str, tuple[Snippet, ...]] = {
    "binary": _plain("1 + 2", "3 - 4 * 5", "6 / 7; 8 % 9"),
    "unary": _plain("-7"),
    "unary_parens": _plain("-(7)", "(-7)", "(-\n7)"),
    "binary_parens": _plain("(3 + 7) * 4"),
    "method_calls_with_variable_names": (
        _plain(
            "foo",
            "foo()",
            "foo -7",
            "foo(-7)",
            "foo(1, 2, 3)",
            "foo 1",
            "foo bar",
            "foo 1, 2",
            "foo.bar",
        )
        + _not_on(
            TRUFFLERUBY,
            "🗻",
            "🗻.location",
            "foo.🗻",
            "🗻.😮!",
            "🗻 🗻,🗻,🗻",
        )
        + _plain(
            "foo&.bar",
            "foo { bar }",
            "foo.bar { 7 }",
            "foo(1) { bar }",
            "foo(bar)",
            "foo(bar(1))",
            "foo(bar(1)) { 7 }",
            "foo bar(1)",
        )
    ),
    "method_call_blocks": _plain(
        "foo { |a| a }",
        "foo(bar 1)",
        "foo bar 1",
        "foo(bar 1) { 7 }",
        "foo(bar 1) {; 7 }",
        "foo(bar 1) {;}",
        "foo do\n  bar\nend",
        "foo do\nend",
        "foo do; end",
        "foo do bar; end",
        "foo do bar end",
        "foo do; bar; end",
    ),
    "method_calls_on_immediate_values": _plain(
        "7.even?",
        "!1",
        "7 && 7",
        "7 and 7",
        "7 || 7",
        "7 or 7",
        "'racecar'.reverse",
    ),
    "range": _plain("(...2)", "(..2)", "(1...2)", "(1..2)", "(foo..-7)"),
    "parentheses": _plain("()", "(1)", "(1; 2)"),
    "numbers": _plain(
        "[1, -1, +1, 1.0, -1.0, +1.0]",
        "[1r, -1r, +1r, 1.5r, -1.5r, +1.5r]",
        "[1i, -1i, +1i, 1.5i, -1.5i, +1.5i]",
        "[1ri, -1ri, +1ri, 1.5ri, -1.5ri, +1.5ri]",
    ),
    "begin_end": _plain(
        "begin; end",
        "begin end",
        "begin; rescue; end",
        "begin:s.l end",
    ),
    "begin_rescue": _plain(
        "begin a; rescue Exception => ex; c; end",
        "begin a; rescue RuntimeError => ex; c; rescue Exception => ex; d; end",
        "begin a; rescue RuntimeError => ex; c; rescue Exception => ex; end",
        "begin a; rescue RuntimeError,FakeError,Exception => ex; c; end",
        "begin a; rescue RuntimeError,FakeError,Exception; c; end",
        "begin a; rescue; ensure b; end",
        "begin a; rescue; end",
        "begin; a; ensure; b; end",
    ),
    "begin_ensure": _plain(
        "begin a; rescue; c; ensure; end",
        "begin a; ensure; end",
        "begin; ensure; end",
        # Statements parse differently depending on a semicolon after the keyword
        "begin a; rescue; c; ensure b; end",
        "begin a; rescue c; ensure b; end",
        "begin a; rescue; c; ensure; b; end",
        # Multibyte characters shift byte offsets away from character offsets
        "begin 🗻; rescue; c;     ensure;🗻🗻🗻🗻🗻; end",
        "begin 🗻; rescue; c;     ensure 🗻🗻🗻🗻🗻; end",
    ),
    "break": _plain("foo { break }", "foo { break 7 }", "foo { break [1, 2, 3] }"),
    "constants": _plain("Foo", "Foo + F🗻", "Foo = 'soda'"),
    "op_assign": _plain("a += b", "a -= b", "a *= b", "a /= b"),
    "arrays": _plain("[1, 2, 7]", "[1, [2, 7]]"),
    "array_refs": _plain("a[1]", "a[1] = 7"),
    "strings": _plain(
        "'a'",
        "'a\x01'",
        "`a`",
        "`a\x07`",
        '"a#{1}c"',
        '"a#{1}b#{2}c"',
        "`foo`",
    ),
    "symbols": _plain(":a", ":'a'", ':"a"', "%s(foo)"),
    "assign": _plain("a = b", "a = 1"),
    "alias": (
        _plain(
            "alias :foo :bar",
            "alias $a $b",
            "alias $a $'",
            "alias foo bar",
            "alias foo if",
            "alias :'def' :\"abc#{1}\"",
            "alias :\"abc#{1}\" :'def'",
        )
        # Uppercase Unicode character is a constant
        + _not_on(TRUFFLERUBY, "alias :foo :Ę", "alias :Ę :foo")
        + _plain(
            "alias foo +",
            "alias foo :+",
            "alias :foo :''",
            "alias :'' :foo",
        )
    ),
    "keyword_aliases": _plain(
        "alias :foo :if",
        "alias :foo :self",
        "alias :foo :__FILE__",
        "alias foo __ENCODING__",
    ),
}


def iter_snippets(groups: tuple[str, ...] = ()):
    """Yield ``(group, snippet)`` pairs, optionally restricted to some groups.

    Raises:
        KeyError: If a requested group does not exist
    """
    for group in groups or tuple(SNIPPETS):
        for snippet in SNIPPETS[group]:
            yield group, snippet
