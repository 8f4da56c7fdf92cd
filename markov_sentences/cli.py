import argparse
import sys

from .errors import MarkovError
from .generator import (
    MAX_SENTENCE_WORDS,
    MAX_SENTENCES_PER_PARAGRAPH,
    MIN_SENTENCE_WORDS,
    MIN_SENTENCES_PER_PARAGRAPH,
    TextGenerator,
)


def build_parser():
    parser = argparse.ArgumentParser(description="Generate sentences from a word adjacency model of a text file.")
    parser.add_argument("path", nargs="?", default="input.txt", help="Corpus file to train on (UTF-8).")
    parser.add_argument("--min-paragraphs", type=int, default=3)
    parser.add_argument("--max-paragraphs", type=int, default=5)
    parser.add_argument("--min-sentences", type=int, default=MIN_SENTENCES_PER_PARAGRAPH)
    parser.add_argument("--max-sentences", type=int, default=MAX_SENTENCES_PER_PARAGRAPH)
    parser.add_argument("--min-words", type=int, default=MIN_SENTENCE_WORDS)
    parser.add_argument("--max-words", type=int, default=MAX_SENTENCE_WORDS)
    parser.add_argument("--start", default=None, help="Word(s) every sentence starts with.")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible output.")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        generator = TextGenerator.from_file(args.path, seed=args.seed)
    except (OSError, UnicodeDecodeError) as e:
        sys.exit(f"Error reading corpus: {e}")

    try:
        text = generator.generate_paragraphs(
            args.min_paragraphs,
            args.max_paragraphs,
            start_word=args.start,
            min_sentences=args.min_sentences,
            max_sentences=args.max_sentences,
            min_words=args.min_words,
            max_words=args.max_words,
        )
    except (MarkovError, ValueError) as e:
        sys.exit(f"Error generating text: {e}")

    print(text)


if __name__ == "__main__":
    main()
