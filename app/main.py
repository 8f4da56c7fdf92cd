import random
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, BackgroundTasks, HTTPException
from pydantic import BaseModel, Field, model_validator

from markov_sentences.errors import EmptyIndex, MarkovError
from markov_sentences.generator import (
    MAX_SENTENCE_WORDS,
    MAX_SENTENCES_PER_PARAGRAPH,
    MIN_SENTENCE_WORDS,
    MIN_SENTENCES_PER_PARAGRAPH,
    TextGenerator,
    generate_document,
    generate_paragraph,
    generate_sentence,
)

app = FastAPI(title="Markov Sentences")

# -----------------------
# Corpus setup
# -----------------------
DEFAULT_CORPUS_PATH = Path("input.txt")
# /index/rebuild only reads files from here
CORPUS_DIR = Path("corpora")
DEFAULT_CORPUS = [
    "The Count of Monte Cristo is a novel written by Alexandre Dumas.",
    "The novel follows a sailor who is imprisoned and then escapes.",
    "A sailor learns of a treasure on the island of Monte Cristo.",
    "The count returns to take his revenge on the men who betrayed him.",
]

# -----------------------
# Index cache
# -----------------------
_index_state = {"source": None, "generator": None}


def check_usable(generator: TextGenerator):
    """
    Refuse an index that cannot produce a sentence.
    """
    stats = generator.index.stats()
    if stats["tokens"] == 0:
        raise EmptyIndex("corpus yields no adjacent word pairs")
    if stats["terminators"] == 0:
        raise EmptyIndex("corpus has no sentence terminating words")


def load_default_generator():
    if DEFAULT_CORPUS_PATH.is_file():
        try:
            generator = TextGenerator.from_file(DEFAULT_CORPUS_PATH)
            check_usable(generator)
            print(f"[Index] Built from {DEFAULT_CORPUS_PATH}: {generator.index.stats()}")
            return generator, str(DEFAULT_CORPUS_PATH)
        except (OSError, UnicodeDecodeError, MarkovError) as e:
            print(f"[Index] Error reading {DEFAULT_CORPUS_PATH}: {e}")
    return TextGenerator.from_text(" ".join(DEFAULT_CORPUS)), "default_corpus"


def resolve_corpus_path(name: str) -> Path:
    base = CORPUS_DIR.resolve()
    path = (base / name).resolve()
    if path == base or base not in path.parents:
        raise HTTPException(status_code=400, detail=f"Corpus path must be a file inside {CORPUS_DIR}")
    return path


def set_generator(generator: TextGenerator, source: str):
    _index_state.update({"source": source, "generator": generator})


def get_generator() -> TextGenerator:
    if _index_state["generator"] is None:
        set_generator(*load_default_generator())
    return _index_state["generator"]


def _rng_for(generator: TextGenerator, random_seed: Optional[int]):
    # a seeded request gets its own random source so the output is reproducible
    if random_seed is None:
        return generator.rng
    return random.Random(random_seed)


def _check_range(lower, upper, name):
    if upper is not None and lower > upper:
        raise ValueError(f"min_{name} must not be greater than max_{name}")


# -----------------------
# Request schemas
# -----------------------
class SentenceRequest(BaseModel):
    start_word: Optional[str] = None
    min_words: int = Field(MIN_SENTENCE_WORDS, ge=1)
    max_words: int = Field(MAX_SENTENCE_WORDS, ge=1)
    random_seed: Optional[int] = None

    @model_validator(mode="after")
    def check_word_range(self):
        _check_range(self.min_words, self.max_words, "words")
        return self


class ParagraphRequest(SentenceRequest):
    min_sentences: int = Field(MIN_SENTENCES_PER_PARAGRAPH, ge=1)
    max_sentences: int = Field(MAX_SENTENCES_PER_PARAGRAPH, ge=1)

    @model_validator(mode="after")
    def check_sentence_range(self):
        _check_range(self.min_sentences, self.max_sentences, "sentences")
        return self


class TextGenerationRequest(ParagraphRequest):
    min_paragraphs: int = Field(1, ge=1)
    max_paragraphs: Optional[int] = Field(None, ge=1)

    @model_validator(mode="after")
    def check_paragraph_range(self):
        _check_range(self.min_paragraphs, self.max_paragraphs, "paragraphs")
        return self


class RebuildIndexRequest(BaseModel):
    # exactly one of these; `path` is relative to CORPUS_DIR
    text: Optional[str] = None
    path: Optional[str] = None

    @model_validator(mode="after")
    def check_source(self):
        if (self.text is None) == (self.path is None):
            raise ValueError("provide exactly one of 'text' or 'path'")
        return self


# -----------------------
# Root & status
# -----------------------
@app.get("/")
def root():
    return {"status": "Markov Sentences API Active"}


@app.get("/index/status")
def index_status():
    generator = get_generator()
    return {
        "source": _index_state["source"],
        "default_corpus_path": str(DEFAULT_CORPUS_PATH),
        **generator.index.stats(),
    }


# -----------------------
# Generation endpoints
# -----------------------
@app.post("/generate_sentence")
def api_generate_sentence(req: SentenceRequest):
    generator = get_generator()
    try:
        text = generate_sentence(
            generator.index,
            _rng_for(generator, req.random_seed),
            req.start_word,
            req.min_words,
            req.max_words,
        )
        return {"generated_text": text, "model": "bigram"}
    except MarkovError as e:
        raise HTTPException(status_code=500, detail=f"Sentence generation failed: {e}")


@app.post("/generate_paragraph")
def api_generate_paragraph(req: ParagraphRequest):
    generator = get_generator()
    try:
        text = generate_paragraph(
            generator.index,
            _rng_for(generator, req.random_seed),
            req.start_word,
            req.min_sentences,
            req.max_sentences,
            req.min_words,
            req.max_words,
        )
        return {"generated_text": text, "model": "bigram"}
    except MarkovError as e:
        raise HTTPException(status_code=500, detail=f"Paragraph generation failed: {e}")


@app.post("/generate")
@app.post("/generate_text")
def api_generate_text(req: TextGenerationRequest):
    generator = get_generator()
    try:
        text = generate_document(
            generator.index,
            _rng_for(generator, req.random_seed),
            req.min_paragraphs,
            req.max_paragraphs,
            req.start_word,
            req.min_sentences,
            req.max_sentences,
            req.min_words,
            req.max_words,
        )
        return {"generated_text": text, "model": "bigram"}
    except MarkovError as e:
        raise HTTPException(status_code=500, detail=f"Text generation failed: {e}")


# -----------------------
# Index rebuild
# -----------------------
@app.post("/index/rebuild")
def api_rebuild_index(req: RebuildIndexRequest, background_tasks: BackgroundTasks):
    corpus_path = resolve_corpus_path(req.path) if req.path is not None else None

    def run():
        try:
            if corpus_path is not None:
                generator = TextGenerator.from_file(corpus_path)
                source = req.path
            else:
                generator = TextGenerator.from_text(req.text)
                source = "request_text"
            check_usable(generator)
            set_generator(generator, source)
            print(f"[Index] Rebuilt from {source}: {generator.index.stats()}")
        except (OSError, UnicodeDecodeError, MarkovError) as e:
            print(f"[Index] Rebuild failed: {e}")

    background_tasks.add_task(run)
    return {
        "status": "started",
        "source": req.path if req.path is not None else "request_text",
        "note": "The live index is replaced once the new corpus has been indexed.",
    }
