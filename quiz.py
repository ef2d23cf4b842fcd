"""
Quiz logic module - normalizes loosely structured question records into
canonical questions with an unambiguous answer key.
"""

import enum
import json
import re
from dataclasses import dataclass
from typing import List, Tuple


# Answer field names, in priority order
ANSWER_FIELDS = ('answer', 'correct_answers', 'correct_answer')

# Leading enumeration like "a.", "B)", "(c) ", "d:" or "e -"
LETTER_PREFIX = re.compile(r'^\s*\(?[a-zA-Z]\)?[.):\-]\s+')


class QuestionKind(str, enum.Enum):
    SINGLE = 'single'
    MULTIPLE = 'multiple'
    TEXT = 'text'


@dataclass(frozen=True)
class Option:
    """A single answer choice. The id is positional and stable per question."""
    id: str
    text: str
    is_correct: bool = False


@dataclass(frozen=True)
class Question:
    """Canonical question, immutable once normalized."""
    question_text: str
    explanation: str = ''
    kind: QuestionKind = QuestionKind.TEXT
    options: Tuple[Option, ...] = ()
    expected_answers: Tuple[str, ...] = ()

    @property
    def is_choice(self) -> bool:
        return self.kind is not QuestionKind.TEXT

    @property
    def correct_ids(self) -> frozenset:
        return frozenset(o.id for o in self.options if o.is_correct)


def to_text(value) -> str:
    """Stringify a JSON value the way it is spelled in JSON."""
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def strip_letter_prefix(text):
    """Remove a leading "a.", "A)", "(a)" style prefix. Non-text passes through."""
    if not isinstance(text, str):
        return text
    return LETTER_PREFIX.sub('', text, count=1).strip()


def pick_answer_field(raw: dict):
    """Return the first non-null answer field, or None."""
    for name in ANSWER_FIELDS:
        value = raw.get(name)
        if value is not None:
            return value
    return None


def normalize_answers(raw_answer) -> List[str]:
    """Turn a scalar, list or missing answer into a list of trimmed strings."""
    if raw_answer is None:
        return []
    if isinstance(raw_answer, (list, tuple)):
        return [to_text(a).strip() for a in raw_answer]
    if isinstance(raw_answer, (int, float)) and not isinstance(raw_answer, bool):
        return [to_text(raw_answer)]
    return [to_text(raw_answer).strip()]


def build_options(raw_options) -> Tuple[List[str], List[str]]:
    """
    Build the display texts for a record's options.
    Returns (texts, keys); keys is only populated for keyed (object) options.
    """
    if isinstance(raw_options, list):
        texts = [
            strip_letter_prefix(o) if isinstance(o, str) else to_text(o)
            for o in raw_options
        ]
        return texts, []

    if isinstance(raw_options, dict):
        keys = sorted(raw_options.keys(), key=lambda k: k.lower())
        texts = [strip_letter_prefix(to_text(raw_options[k])) for k in keys]
        return texts, keys

    return [], []


def letter_to_index(token: str, option_count: int) -> int:
    """Map "A"/"b"/"C) ..." to 0/1/2; -1 when outside the option range."""
    letter = token.strip()[:1].upper()[:1]
    if not letter:
        return -1
    idx = ord(letter) - ord('A')
    return idx if 0 <= idx < option_count else -1


def resolve_correct_indices(tokens: List[str], texts: List[str], keys: List[str]) -> set:
    """
    Resolve each answer token to an option index.
    Tries letter, then object key, then option text; unmatched tokens are dropped.
    """
    correct = set()
    lowered_keys = [k.lower() for k in keys]
    lowered_texts = [t.lower() for t in texts]

    for token in tokens:
        idx = letter_to_index(token, len(texts))
        if idx != -1:
            correct.add(idx)
            continue

        if keys and token.lower() in lowered_keys:
            correct.add(lowered_keys.index(token.lower()))
            continue

        cleaned = strip_letter_prefix(token).lower()
        if cleaned in lowered_texts:
            correct.add(lowered_texts.index(cleaned))

    return correct


def normalize_question(raw: dict) -> Question:
    """Normalize one raw record. The result may have empty question text."""
    if not isinstance(raw, dict):
        return Question(question_text='')

    question_text = to_text(raw.get('question') or raw.get('prompt') or '')
    explanation = to_text(raw.get('explanation') or '')
    tokens = normalize_answers(pick_answer_field(raw))
    texts, keys = build_options(raw.get('options'))

    if not texts:
        return Question(
            question_text=question_text,
            explanation=explanation,
            kind=QuestionKind.TEXT,
            expected_answers=tuple(tokens),
        )

    correct = resolve_correct_indices(tokens, texts, keys)
    options = tuple(
        Option(id=f'o_{i}', text=t, is_correct=i in correct)
        for i, t in enumerate(texts)
    )
    kind = QuestionKind.MULTIPLE if len(correct) > 1 else QuestionKind.SINGLE

    return Question(
        question_text=question_text,
        explanation=explanation,
        kind=kind,
        options=options,
    )


def normalize_questions(records: list) -> List[Question]:
    """Normalize a list of records, dropping any without question text."""
    questions = []
    for raw in records:
        q = normalize_question(raw)
        if q.question_text:
            questions.append(q)
    return questions
