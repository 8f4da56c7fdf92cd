import random
from pathlib import Path
from typing import Optional

from .index import AdjacencyIndex
from .tokenizer import tokenize

MIN_SENTENCE_WORDS = 5
MAX_SENTENCE_WORDS = 20
MIN_SENTENCES_PER_PARAGRAPH = 2
MAX_SENTENCES_PER_PARAGRAPH = 10

PARAGRAPH_SEPARATOR = "\n\n"


def draw_count(rng, lower: int, upper: Optional[int] = None) -> int:
    """
    Draw a count uniformly from `lower..upper`, both ends inclusive.

    Every range in this module (words per sentence, sentences per paragraph,
    paragraphs per document) goes through here. `upper` defaults to `lower`.
    """
    if upper is None:
        upper = lower
    if lower < 1:
        raise ValueError(f"lower bound must be at least 1, got {lower}")
    if lower > upper:
        raise ValueError(f"lower bound {lower} is greater than upper bound {upper}")
    return rng.randint(lower, upper)


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]


def generate_sentence(
    index: AdjacencyIndex,
    rng,
    seed: Optional[str] = None,
    min_words: int = MIN_SENTENCE_WORDS,
    max_words: int = MAX_SENTENCE_WORDS,
) -> str:
    """
    Walk the index from a seed word and render one sentence.

    The walk stops once the sentence holds the drawn number of words, or
    earlier if the current word was never followed by anything. A word seen
    before sentence-ending punctuation and a "." close the sentence.
    """
    target = draw_count(rng, min_words, max_words)

    words = tokenize(seed or "")
    if not words:
        words = [index.random_token(rng)]

    current = words[-1]
    while len(words) < target:
        step = index.successor(current, rng)
        if not step.found:
            break
        current = step.token
        words.append(current)

    words.append(index.random_terminator(rng) + ".")
    words[0] = _capitalize(words[0])
    return " ".join(words)


def generate_paragraph(
    index: AdjacencyIndex,
    rng,
    seed: Optional[str] = None,
    min_sentences: int = MIN_SENTENCES_PER_PARAGRAPH,
    max_sentences: int = MAX_SENTENCES_PER_PARAGRAPH,
    min_words: int = MIN_SENTENCE_WORDS,
    max_words: int = MAX_SENTENCE_WORDS,
) -> str:
    count = draw_count(rng, min_sentences, max_sentences)
    sentences = [
        generate_sentence(index, rng, seed, min_words, max_words)
        for _ in range(count)
    ]
    return " ".join(sentences)


def generate_document(
    index: AdjacencyIndex,
    rng,
    min_paragraphs: int = 1,
    max_paragraphs: Optional[int] = None,
    seed: Optional[str] = None,
    min_sentences: int = MIN_SENTENCES_PER_PARAGRAPH,
    max_sentences: int = MAX_SENTENCES_PER_PARAGRAPH,
    min_words: int = MIN_SENTENCE_WORDS,
    max_words: int = MAX_SENTENCE_WORDS,
) -> str:
    """Paragraphs separated by a blank line; `max_paragraphs` defaults to `min_paragraphs`."""
    count = draw_count(rng, min_paragraphs, max_paragraphs)
    paragraphs = [
        generate_paragraph(index, rng, seed, min_sentences, max_sentences, min_words, max_words)
        for _ in range(count)
    ]
    return PARAGRAPH_SEPARATOR.join(paragraphs).rstrip()


class TextGenerator:
    """
    An index bundled with its own random source.

    Pass `seed` for reproducible output.
    """

    def __init__(self, index: AdjacencyIndex, seed: Optional[int] = None, rng=None):
        self.index = index
        self.rng = rng if rng is not None else random.Random(seed)

    @classmethod
    def from_text(cls, text: str, seed: Optional[int] = None) -> "TextGenerator":
        return cls(AdjacencyIndex.build(text), seed=seed)

    @classmethod
    def from_file(cls, path, seed: Optional[int] = None) -> "TextGenerator":
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Input file not found: {path}")
        return cls.from_text(path.read_text(encoding="utf-8"), seed=seed)

    def generate_sentence(self, start_word=None, min_words=MIN_SENTENCE_WORDS, max_words=MAX_SENTENCE_WORDS):
        return generate_sentence(self.index, self.rng, start_word, min_words, max_words)

    def generate_paragraph(self, start_word=None, **ranges):
        return generate_paragraph(self.index, self.rng, start_word, **ranges)

    def generate_paragraphs(self, min_paragraphs=1, max_paragraphs=None, start_word=None, **ranges):
        return generate_document(
            self.index, self.rng, min_paragraphs, max_paragraphs, start_word, **ranges
        )
