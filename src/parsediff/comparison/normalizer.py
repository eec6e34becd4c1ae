"""Tree normalization.

The two parsers are allowed to spell "this call has no block" differently.
Ripper wraps argument lists in an ``args_add_block`` node whose block slot is
``false`` when there is no block; other implementations use ``nil`` or leave
the slot out entirely. Normalization unwraps such nodes to their inner
argument list so that the comparator only sees genuine differences.

Nothing else is rewritten: every other divergence between the parsers must
reach the comparator unmodified.
"""

from ..core.tree import Child, ParseTree

ARGS_ADD_BLOCK = "args_add_block"


class Normalizer:
    """Canonicalizes the optional-trailing-block marker of a parse tree.

    Args:
        marker_tag: Tag of the argument-list-with-optional-block node
    """

    def __init__(self, marker_tag: str = ARGS_ADD_BLOCK):
        self.marker_tag = marker_tag

    def has_no_block(self, node: ParseTree) -> bool:
        """True when ``node`` is the marker and its block slot is absent, nil or false."""
        if node.tag != self.marker_tag or not node.children:
            return False
        if len(node.children) < 2:
            return True
        block = node.children[1]
        return block is None or block is False

    def unwrap(self, value: Child) -> Child:
        """Strip marker nodes with an empty block slot off the top of ``value``."""
        while isinstance(value, ParseTree) and self.has_no_block(value):
            value = value.children[0]
        return value

    def __call__(self, value: Child) -> Child:
        root = self.unwrap(value)
        if not isinstance(root, (ParseTree, tuple)):
            return root

        # Post-order rebuild on an explicit stack; trees may nest deeper than
        # the recursion limit.
        frames: list[tuple[Child, list[Child]]] = [(root, [])]
        while True:
            container, rebuilt = frames[-1]
            children = container.children if isinstance(container, ParseTree) else container
            if len(rebuilt) < len(children):
                child = self.unwrap(children[len(rebuilt)])
                if isinstance(child, (ParseTree, tuple)):
                    frames.append((child, []))
                else:
                    rebuilt.append(child)
                continue
            frames.pop()
            if isinstance(container, ParseTree):
                result: Child = ParseTree(container.tag, tuple(rebuilt))
            else:
                result = tuple(rebuilt)
            if not frames:
                return result
            frames[-1][1].append(result)


_default = Normalizer()


def normalize(tree: Child) -> Child:
    """Return the canonical form of ``tree``.

    Pure, deterministic and idempotent:
    ``normalize(normalize(t)) == normalize(t)``.

    Example:
        >>> from parsediff.core.sexp import read_sexp
        >>> tree = read_sexp('[:args_add_block, [:args_add, [:args_new], [:@int, "1", [1, 4]]], false]')
        >>> normalize(tree).tag
        'args_add'
    """
    return _default(tree)
