"""
Prefix tree over spoken words.

Commands like

    "turn off screen"       -> handler_1
    "turn off sound"        -> handler_2
    "turn off the computer" -> handler_3

are stored as

    turn
    └── off
        ├── screen       -> handler_1
        ├── sound        -> handler_2
        └── the
            └── computer -> handler_3

and `scan` walks as deep as the words allow, returning the deepest leaf on
the walked path.
"""

from __future__ import annotations

from typing import Dict, Generic, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")

ScanResult = Tuple[int, Optional[T], bool]


class WordTree(Generic[T]):
    def __init__(self) -> None:
        self.children: Dict[str, WordTree[T]] = {}
        self.leaf: Optional[T] = None
        # a leaf may legitimately be falsy, so track presence separately
        self.has_leaf = False

    def set(self, words: Sequence[str], leaf: T) -> None:
        node = self
        for w in words:
            child = node.children.get(w)
            if child is None:
                child = WordTree()
                node.children[w] = child
            node = child
        node.leaf = leaf
        node.has_leaf = True

    def scan(self, words: Sequence[str]) -> ScanResult:
        """
        Return (cost, leaf, matched).

        cost is the number of leading words consumed by the match. When the
        deeper walk finds no leaf, the child's own leaf is used, so a failed
        longer phrase falls back one level rather than to the start.
        """
        if not words:
            return 0, None, False
        child = self.children.get(words[0])
        if child is None:
            return 0, None, False

        rest_cost, leaf, matched = child.scan(words[1:])
        if matched:
            return 1 + rest_cost, leaf, True
        if child.has_leaf:
            return 1, child.leaf, True
        return 0, None, False


class FallbackWordTree(WordTree[T]):
    """A WordTree whose fallback leaf is returned, costing 0 words, when nothing matches."""

    def __init__(self) -> None:
        super().__init__()
        self.fallback: Optional[T] = None
        self.has_fallback = False

    def set_fallback(self, leaf: T) -> None:
        self.fallback = leaf
        self.has_fallback = True

    def scan(self, words: Sequence[str]) -> ScanResult:
        cost, leaf, matched = super().scan(words)
        if not matched and self.has_fallback:
            return 0, self.fallback, True
        return cost, leaf, matched
