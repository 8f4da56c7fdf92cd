from collections import Counter

from .errors import EmptyDistribution


class WeightedDistribution:
    """
    Frequency table over distinct values.

    Inserting a value again bumps its weight instead of storing a duplicate,
    and `draw` picks values with probability proportional to their weight.
    """

    def __init__(self, values=()):
        self._weights = Counter()
        self._total = 0
        for value in values:
            self.insert(value)

    @property
    def total(self) -> int:
        return self._total

    def insert(self, value):
        self._weights[value] += 1
        self._total += 1

    def copy(self) -> "WeightedDistribution":
        clone = WeightedDistribution()
        clone.merge(self)
        return clone

    def merge(self, other: "WeightedDistribution"):
        """Fold the weights of `other` into this distribution."""
        for value, weight in other.items():
            self._weights[value] += weight
            self._total += weight

    def is_empty(self) -> bool:
        return self._total == 0

    def weight(self, value) -> int:
        return self._weights.get(value, 0)

    def keys(self) -> set:
        return set(self._weights)

    def items(self):
        return self._weights.items()

    def most_common(self, n=None):
        return self._weights.most_common(n)

    def draw(self, rng):
        if self._total == 0:
            raise EmptyDistribution()

        # sample proportional to counts
        r = rng.randrange(self._total)
        cum = 0
        for value, count in self._weights.items():
            cum += count
            if r < cum:
                return value

        # unreachable while total matches the stored weights
        raise AssertionError("cumulative weights do not add up to total")

    def __len__(self):
        return len(self._weights)

    def __contains__(self, value):
        return value in self._weights

    def __iter__(self):
        return iter(self._weights)

    def __repr__(self):
        return f"WeightedDistribution({dict(self._weights)!r}, total={self._total})"
