"""
Scoring module - checks user responses against the normalized answer key.
"""

import math
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional

from quiz import Question, QuestionKind


EXPLANATION_LABEL = "Explanation:"

CORRECT = "correct"
INCORRECT = "incorrect"
NEUTRAL = "neutral"


@dataclass(frozen=True)
class UserResponse:
    selected: FrozenSet[str] = frozenset()
    text: str = ""

    @classmethod
    def from_value(cls, value) -> "UserResponse":
        """Build a response from request data: a list of option ids or a string."""
        if value is None:
            return cls()
        if isinstance(value, (list, tuple, set, frozenset)):
            return cls(selected=frozenset(str(v) for v in value))
        return cls(text=str(value))


@dataclass(frozen=True)
class ScoreResult:
    correct: bool
    correct_display: str


@dataclass
class PageResult:
    results: List[ScoreResult] = field(default_factory=list)

    @property
    def score(self) -> int:
        return sum(1 for r in self.results if r.correct)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def summary(self) -> str:
        return f"Score: {self.score} / {self.total}"


def parse_number(text) -> Optional[float]:
    """Parse a number, or None. Blank text is not a number."""
    text = str(text).strip()
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    return None if math.isnan(value) else value


def _norm(text) -> str:
    return str(text).strip().lower()


def check_text_answer(expected, submitted: str) -> bool:
    """Case/whitespace-insensitive match, or numeric equality when both sides are numbers."""
    if not expected:
        return False

    user = submitted.strip()
    user_num = parse_number(user)
    expected_nums = [n for n in (parse_number(e) for e in expected) if n is not None]
    if user_num is not None and any(n == user_num for n in expected_nums):
        return True

    return _norm(user) in [_norm(e) for e in expected]


def is_correct(question: Question, response: UserResponse) -> bool:
    """Check a single response against its question."""
    if question.kind is QuestionKind.SINGLE:
        if len(response.selected) != 1:
            return False
        return next(iter(response.selected)) in question.correct_ids

    if question.kind is QuestionKind.MULTIPLE:
        return set(response.selected) == set(question.correct_ids)

    return check_text_answer(question.expected_answers, response.text)


def correct_display(question: Question) -> str:
    """Explanation text, or the correct answer(s) when there is no explanation."""
    msg = question.explanation
    if not msg:
        if question.is_choice:
            correct_texts = [o.text for o in question.options if o.is_correct]
            if correct_texts:
                msg = "Correct: " + ", ".join(correct_texts)
        elif question.expected_answers:
            msg = "Correct: " + " / ".join(question.expected_answers)

    if not msg:
        return ""
    return msg if msg.startswith(EXPLANATION_LABEL) else f"{EXPLANATION_LABEL} {msg}"


def score(question: Question, response: UserResponse) -> ScoreResult:
    return ScoreResult(
        correct=is_correct(question, response),
        correct_display=correct_display(question),
    )


def option_marks(question: Question, selected) -> dict:
    """Per-option highlight tag: correct answers, wrong picks, everything else."""
    selected = set(selected)
    marks = {}
    for o in question.options:
        if o.is_correct:
            marks[o.id] = CORRECT
        elif o.id in selected:
            marks[o.id] = INCORRECT
        else:
            marks[o.id] = NEUTRAL
    return marks


def score_page(questions: List[Question], responses: List[UserResponse]) -> PageResult:
    """Score every question on a page. Missing responses count as empty."""
    result = PageResult()
    for idx, q in enumerate(questions):
        response = responses[idx] if idx < len(responses) else UserResponse()
        result.results.append(score(q, response))
    return result
