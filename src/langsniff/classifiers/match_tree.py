"""Order-sensitive scoring over sequences of token kinds.

Each language owns a trie keyed on :class:`TokenKind`. Training inserts the
token stream starting at every position, up to ``depth`` levels deep. A node
created at level ``n`` weighs ``LEVEL_MULTIPLIER ** n`` and remembers every
literal value seen at that position; the sum of all node weights is the tree's
``total_possible_score``.

Scoring walks the snippet from every position and multiplies, per matched
level, by ``EXACT_MATCH_MULTIPLIER`` when the literal was seen there and by
``LEVEL_MULTIPLIER`` otherwise. The sum is divided by the snippet length and
the tree's total possible score, so large corpora do not win by size alone.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..tokenizer import Tokenizer
from ..types import Prediction, Token, TokenKind

DEFAULT_DEPTH = 10
LEVEL_MULTIPLIER = 2.0
EXACT_MATCH_MULTIPLIER = 5.0


class MatchNode:
    __slots__ = ("children", "kind", "level", "score", "values")

    def __init__(self, kind: TokenKind, level: int, score: float) -> None:
        self.kind = kind
        self.level = level
        self.score = score
        self.children: dict[TokenKind, MatchNode] = {}
        self.values: set[str] = set()


class MatchTree:
    """Trie over token kinds with per-level weights."""

    def __init__(self, depth: int = DEFAULT_DEPTH) -> None:
        if depth <= 0:
            raise ValueError(f"match tree depth must be positive, got {depth}")
        self.depth = depth
        self.root = MatchNode(TokenKind.UNKNOWN, 0, 1.0)
        self.total_possible_score = 0.0

    def insert(self, tokens: Sequence[Token]) -> float:
        """Add the path for ``tokens``; return the weight of newly created nodes."""

        added = 0.0
        node = self.root
        for token in tokens[: self.depth]:
            child = node.children.get(token.kind)
            if child is None:
                child = MatchNode(token.kind, node.level + 1, node.score * LEVEL_MULTIPLIER)
                node.children[token.kind] = child
                added += child.score
            child.values.add(token.value)
            node = child
        self.total_possible_score += added
        return added

    def match(self, tokens: Sequence[Token]) -> float:
        """Multiplicative score of the longest matching path (1.0 when nothing matches)."""

        score = 1.0
        node = self.root
        for token in tokens[: self.depth]:
            child = node.children.get(token.kind)
            if child is None:
                break
            if token.value in child.values:
                score *= EXACT_MATCH_MULTIPLIER
            else:
                score *= LEVEL_MULTIPLIER
            node = child
        return score


class MatchTreeClassifier:
    """Language classifier backed by one :class:`MatchTree` per language."""

    def __init__(
        self,
        name: str = "match_tree",
        *,
        depth: int = DEFAULT_DEPTH,
        tokenizer: Tokenizer | None = None,
    ) -> None:
        if depth <= 0:
            raise ValueError(f"match tree depth must be positive, got {depth}")
        self.name = name
        self._depth = depth
        self._tokenizer = tokenizer or Tokenizer()
        self._trees: dict[str, MatchTree] = {}

    def train(self, text: str, label: str) -> None:
        tree = self._trees.setdefault(_normalize_label(label), MatchTree(self._depth))
        tokens = self._tokenizer.tokenize(text)
        # the trailing END token never starts a path
        for start in range(len(tokens) - 1):
            tree.insert(tokens[start : start + self._depth])

    def predict(self, text: str) -> Prediction:
        trees = {
            language: tree for language, tree in self._trees.items() if tree.total_possible_score
        }
        if not trees:
            return Prediction(category=None, confidence=0.0, scores={})

        tokens = self._tokenizer.tokenize(text)
        raw = {language: self._score(tree, tokens) for language, tree in trees.items()}
        total = sum(raw.values())
        scores = {language: value / total for language, value in raw.items()}
        category = max(scores, key=lambda language: (scores[language], language))
        return Prediction(category=category, confidence=scores[category], scores=scores)

    def is_trained(self) -> bool:
        return any(tree.total_possible_score for tree in self._trees.values())

    def categories(self) -> list[str]:
        return sorted(self._trees)

    def tree(self, language: str) -> MatchTree:
        return self._trees[language]

    def _score(self, tree: MatchTree, tokens: list[Token]) -> float:
        matched = sum(
            tree.match(tokens[start : start + self._depth]) for start in range(len(tokens))
        )
        return matched / len(tokens) / tree.total_possible_score


def _normalize_label(label: str) -> str:
    normalized = str(label).strip()
    if not normalized:
        raise ValueError("label cannot be empty")
    return normalized


__all__ = [
    "DEFAULT_DEPTH",
    "EXACT_MATCH_MULTIPLIER",
    "LEVEL_MULTIPLIER",
    "MatchNode",
    "MatchTree",
    "MatchTreeClassifier",
]
