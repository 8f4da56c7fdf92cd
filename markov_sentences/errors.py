class MarkovError(Exception):
    """Base class for failures raised by the markov engine."""


class EmptyDistribution(MarkovError):
    def __init__(self, message="Cannot draw from an empty distribution"):
        super().__init__(message)


class EmptyIndex(MarkovError):
    def __init__(self, message="No tokens have been indexed"):
        super().__init__(message)


class NoSuccessor(MarkovError, KeyError):
    def __init__(self, token):
        self.token = token
        super().__init__(f"No bigrams found for {token!r}")

    def __str__(self):
        # KeyError quotes its argument, keep the plain message
        return self.args[0]
