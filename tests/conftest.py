import json
import random

import pytest

from app import create_app
from quiz import Question
from settings import Settings


SAMPLE_RECORDS = [
    {"question": "2+2?", "options": ["3", "4", "5"], "answer": "B"},
    {
        "question": "Pick primes",
        "options": {"a": "4", "b": "5", "c": "6", "d": "7"},
        "correct_answers": ["b", "d"],
    },
    {"question": "Capital of France?", "answer": "Paris"},
    {"question": "Value of pi to 1dp?", "answer": "3.1"},
]


def make_questions(n):
    return [Question(question_text=f"Q{i}", expected_answers=(str(i),)) for i in range(n)]


@pytest.fixture
def sample_records():
    return json.loads(json.dumps(SAMPLE_RECORDS))


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def site(tmp_path):
    """A static directory and question file on disk."""
    static_dir = tmp_path / "static"
    static_dir.mkdir()
    (static_dir / "index.html").write_text("<html>quiz page</html>", encoding="utf-8")
    (static_dir / "about.html").write_text("<html>about</html>", encoding="utf-8")
    (static_dir / "quiz.js").write_text("// js", encoding="utf-8")

    questions_file = tmp_path / "questions.json"
    questions_file.write_text(json.dumps(SAMPLE_RECORDS), encoding="utf-8")
    return tmp_path


@pytest.fixture
def settings(site):
    return Settings(
        QUESTIONS_SOURCE=str(site / "questions.json"),
        STATIC_DIR=site / "static",
        PAGE_SIZE=10,
    )


@pytest.fixture
def client(settings, rng):
    app = create_app(settings=settings, rng=rng)
    app.config["TESTING"] = True
    with app.test_client() as tc:
        yield tc
