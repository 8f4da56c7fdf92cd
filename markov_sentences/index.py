import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional

from .distribution import WeightedDistribution
from .errors import EmptyDistribution, EmptyIndex, NoSuccessor
from .tokenizer import tokenize

# a word directly followed by sentence-ending punctuation
_TERMINATOR_RE = re.compile(r"\b(?P<word>\w+)[!.?;]")


@dataclass(frozen=True)
class Successor:
    """Outcome of a successor lookup; `token` is None at a dead end."""

    token: Optional[str]

    @property
    def found(self) -> bool:
        return self.token is not None


class AdjacencyIndex:
    """
    Word adjacency model of a corpus.

    Maps every token to the distribution of tokens seen right after it, and
    keeps one distribution of the words seen right before `! . ? ;`.
    Use `AdjacencyIndex.build(text)`; the index is not modified afterwards.
    """

    def __init__(self, bigrams=None, terminators=None):
        self._bigrams = dict(bigrams or {})
        self._terminators = terminators if terminators is not None else WeightedDistribution()
        # stable order for uniform picks over distinct keys
        self._tokens = tuple(self._bigrams)

    @classmethod
    def build(cls, text: str) -> "AdjacencyIndex":
        return cls(_index_bigrams(text), _index_terminators(text))

    # -----------------------
    # Sampling
    # -----------------------
    def random_token(self, rng) -> str:
        if not self._tokens:
            raise EmptyIndex()
        return rng.choice(self._tokens)

    def successor(self, token: str, rng) -> Successor:
        following = self._bigrams.get(token)
        if following is None or following.is_empty():
            return Successor(None)
        return Successor(following.draw(rng))

    def random_successor(self, token: str, rng) -> str:
        step = self.successor(token, rng)
        if not step.found:
            raise NoSuccessor(token)
        return step.token

    def random_terminator(self, rng) -> str:
        try:
            return self._terminators.draw(rng)
        except EmptyDistribution:
            raise EmptyIndex("No sentence terminating tokens have been indexed") from None

    # -----------------------
    # Inspection
    # -----------------------
    # the accessors below hand out copies, the index itself never changes
    def tokens(self) -> tuple:
        return self._tokens

    def successors(self, token: str) -> Optional[WeightedDistribution]:
        following = self._bigrams.get(token)
        return following.copy() if following is not None else None

    @property
    def bigrams(self):
        return MappingProxyType({token: d.copy() for token, d in self._bigrams.items()})

    @property
    def terminators(self) -> WeightedDistribution:
        return self._terminators.copy()

    @property
    def pair_count(self) -> int:
        return sum(d.total for d in self._bigrams.values())

    def stats(self) -> dict:
        return {
            "tokens": len(self._tokens),
            "pairs": self.pair_count,
            "terminators": len(self._terminators),
            "terminator_occurrences": self._terminators.total,
        }

    def __len__(self):
        return len(self._tokens)

    def __contains__(self, token):
        return token in self._bigrams

    def __repr__(self):
        return f"AdjacencyIndex(tokens={len(self._tokens)}, pairs={self.pair_count})"


def _index_bigrams(text: str) -> dict:
    bigrams = {}
    tokens = tokenize(text)
    for current, nxt in zip(tokens, tokens[1:]):
        if current not in bigrams:
            bigrams[current] = WeightedDistribution()
        bigrams[current].insert(nxt)
    return bigrams


def _index_terminators(text: str) -> WeightedDistribution:
    terminators = WeightedDistribution()
    for match in _TERMINATOR_RE.finditer(text):
        terminators.insert(match.group("word").lower())
    return terminators
