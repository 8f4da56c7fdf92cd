import re

# whitespace plus the punctuation treated as word separators
WORD_SEPARATORS = "!\"#$%&'*+,-./:;<=>?@[\\]^_`{|}~() \r\n\t"

# apostrophes are handled separately so contractions survive
_SEPARATOR_RE = re.compile("[" + re.escape(WORD_SEPARATORS.replace("'", "")) + "]+")
_APOSTROPHE_RUN_RE = re.compile(r"'{2,}")


def tokenize(text: str) -> list:
    """
    Lower-case `text` and split it into word tokens.

    An apostrophe is kept only when it sits inside a word ("it's");
    leading, trailing and doubled apostrophes separate like the rest.
    """
    tokens = []
    for fragment in _SEPARATOR_RE.split(text.lower()):
        for piece in _APOSTROPHE_RUN_RE.split(fragment):
            piece = piece.strip("'").strip()
            if piece:
                tokens.append(piece)
    return tokens
