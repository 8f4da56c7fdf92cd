import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from fastapi.testclient import TestClient

from app import main as service
from markov_sentences.generator import TextGenerator

CORPUS = "alpha beta gamma."


class TestAPI(unittest.TestCase):
    def setUp(self):
        service.set_generator(TextGenerator.from_text(CORPUS, seed=0), "test_corpus")
        self.client = TestClient(service.app)

    def tearDown(self):
        service._index_state.update({"source": None, "generator": None})

    def test_root(self):
        resp = self.client.get("/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"status": "Markov Sentences API Active"})

    def test_status(self):
        body = self.client.get("/index/status").json()
        self.assertEqual(body["source"], "test_corpus")
        self.assertEqual(body["tokens"], 2)
        self.assertEqual(body["pairs"], 2)

    def test_generate_sentence(self):
        resp = self.client.post(
            "/generate_sentence",
            json={"start_word": "alpha", "min_words": 10, "max_words": 10},
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"generated_text": "Alpha beta gamma gamma.", "model": "bigram"})

    def test_generate_paragraph(self):
        resp = self.client.post(
            "/generate_paragraph",
            json={"start_word": "alpha", "min_sentences": 2, "max_sentences": 2, "min_words": 10, "max_words": 10},
        )
        self.assertEqual(resp.json()["generated_text"], "Alpha beta gamma gamma. Alpha beta gamma gamma.")

    def test_generate_text_aliases(self):
        payload = {
            "start_word": "alpha",
            "min_paragraphs": 2,
            "max_paragraphs": 2,
            "min_sentences": 1,
            "max_sentences": 1,
            "min_words": 10,
            "max_words": 10,
        }
        for route in ["/generate", "/generate_text"]:
            resp = self.client.post(route, json=payload)
            self.assertEqual(resp.status_code, 200)
            self.assertEqual(resp.json()["generated_text"], "Alpha beta gamma gamma.\n\nAlpha beta gamma gamma.")

    def test_random_seed_is_reproducible(self):
        service.set_generator(TextGenerator.from_text("one two three two one three one."), "test_corpus")
        payload = {"random_seed": 99, "min_paragraphs": 2, "max_paragraphs": 3}
        first = self.client.post("/generate", json=payload).json()["generated_text"]
        second = self.client.post("/generate", json=payload).json()["generated_text"]
        self.assertEqual(first, second)

    def test_invalid_range_rejected(self):
        resp = self.client.post("/generate_sentence", json={"min_words": 8, "max_words": 2})
        self.assertEqual(resp.status_code, 422)
        resp = self.client.post("/generate", json={"min_paragraphs": 0})
        self.assertEqual(resp.status_code, 422)

    def test_empty_index_fails(self):
        service.set_generator(TextGenerator.from_text(""), "empty")
        resp = self.client.post("/generate_sentence", json={})
        self.assertEqual(resp.status_code, 500)
        self.assertTrue(resp.json()["detail"].startswith("Sentence generation failed"))

    def test_rebuild_from_text(self):
        resp = self.client.post("/index/rebuild", json={"text": "one two three."})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "started")

        body = self.client.get("/index/status").json()
        self.assertEqual(body["source"], "request_text")
        self.assertEqual(body["tokens"], 2)

    def test_rebuild_missing_file_keeps_index(self):
        self.client.post("/index/rebuild", json={"path": "does/not/exist.txt"})
        self.assertEqual(self.client.get("/index/status").json()["source"], "test_corpus")

    def test_rebuild_needs_one_source(self):
        self.assertEqual(self.client.post("/index/rebuild", json={}).status_code, 422)
        resp = self.client.post("/index/rebuild", json={"text": "a b.", "path": "x.txt"})
        self.assertEqual(resp.status_code, 422)

    def test_rebuild_rejects_paths_outside_corpus_dir(self):
        with tempfile.TemporaryDirectory() as tmp:
            secret = Path(tmp) / "secret.txt"
            secret.write_text("password hunter two.", encoding="utf-8")
            corpus_dir = Path(tmp) / "corpora"
            corpus_dir.mkdir()

            with patch.object(service, "CORPUS_DIR", corpus_dir):
                for path in [str(secret), "../secret.txt", "."]:
                    resp = self.client.post("/index/rebuild", json={"path": path})
                    self.assertEqual(resp.status_code, 400)

        self.assertEqual(self.client.get("/index/status").json()["source"], "test_corpus")
        resp = self.client.post(
            "/generate_sentence",
            json={"start_word": "alpha", "min_words": 10, "max_words": 10},
        )
        self.assertEqual(resp.json()["generated_text"], "Alpha beta gamma gamma.")

    def test_rebuild_from_corpus_dir(self):
        with tempfile.TemporaryDirectory() as tmp:
            corpus_dir = Path(tmp)
            (corpus_dir / "novel.txt").write_text("one two three.", encoding="utf-8")

            with patch.object(service, "CORPUS_DIR", corpus_dir):
                resp = self.client.post("/index/rebuild", json={"path": "novel.txt"})

        self.assertEqual(resp.status_code, 200)
        body = self.client.get("/index/status").json()
        self.assertEqual(body["source"], "novel.txt")
        self.assertEqual(body["tokens"], 2)

    def test_rebuild_with_unusable_corpus_keeps_index(self):
        for text in ["", "no sentence ends here", "word."]:
            self.client.post("/index/rebuild", json={"text": text})
            body = self.client.get("/index/status").json()
            self.assertEqual(body["source"], "test_corpus")
            self.assertEqual(body["tokens"], 2)

        resp = self.client.post("/generate_sentence", json={})
        self.assertEqual(resp.status_code, 200)

    def test_empty_default_corpus_file_falls_back(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "input.txt"
            path.write_text("", encoding="utf-8")
            with patch.object(service, "DEFAULT_CORPUS_PATH", path):
                generator, source = service.load_default_generator()

        self.assertEqual(source, "default_corpus")
        self.assertGreater(len(generator.index), 0)


if __name__ == "__main__":
    unittest.main()
