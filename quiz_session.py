"""
Session module - selects the question pool for a session and tracks paging.

Every operation takes a SessionState and returns a SessionState; states are
never mutated in place. A no-op returns the state it was given.
"""

import copy
import random
import re
from dataclasses import dataclass, replace
from typing import List, Tuple

from quiz import Option, Question


PAGE_SIZE = 10
DEFAULT_SESSION_SIZE = 10
ALL = "all"

NEXT = "next"
PREV = "prev"


class QuizError(Exception):
    """Base class for errors reported back to the quiz user."""


class NoQuestionsError(QuizError):
    def __init__(self, message="No questions available. Check that the question file exists and is valid."):
        super().__init__(message)


@dataclass(frozen=True)
class SessionState:
    pool: Tuple[Question, ...]
    total_size: int
    page_size: int = PAGE_SIZE
    page_index: int = 0
    current_local_index: int = 0
    sequential: bool = False
    all_mode: bool = False

    @property
    def page_start(self) -> int:
        return self.page_index * self.page_size

    @property
    def page_end(self) -> int:
        return min(self.page_start + self.page_size, self.total_size)


def parse_requested_size(value):
    """
    Parse the requested session size.
    Returns ALL for the "all" sentinel, otherwise a positive int (default 10).
    """
    if isinstance(value, str) and value.strip().lower() == ALL:
        return ALL
    if isinstance(value, int) and not isinstance(value, bool):
        return value if value > 0 else DEFAULT_SESSION_SIZE

    m = re.match(r'\s*([+-]?\d+)', str(value))
    if not m:
        return DEFAULT_SESSION_SIZE
    size = int(m.group(1))
    return size if size > 0 else DEFAULT_SESSION_SIZE


def start_session(questions, requested_size=DEFAULT_SESSION_SIZE, sequential=False,
                  page_size=PAGE_SIZE, rng=None) -> SessionState:
    """
    Start a new session over a copy of the given questions.
    Questions are shuffled unless sequential; raises NoQuestionsError if there are none.
    """
    pool = list(questions)
    if not pool:
        raise NoQuestionsError()

    if not sequential:
        (rng or random).shuffle(pool)

    size = parse_requested_size(requested_size)
    all_mode = size == ALL
    total_size = len(pool) if all_mode else min(size, len(pool))

    return SessionState(
        pool=tuple(pool[:total_size]),
        total_size=total_size,
        page_size=page_size,
        sequential=bool(sequential),
        all_mode=all_mode,
    )


def current_page(state: SessionState) -> List[Question]:
    """Deep copy of the questions on the current page."""
    return copy.deepcopy(list(state.pool[state.page_start:state.page_end]))


def page_count(state: SessionState) -> int:
    return -(-state.total_size // state.page_size)


def can_advance(state: SessionState, direction: str) -> bool:
    if direction == NEXT:
        return (state.page_index + 1) * state.page_size < state.total_size
    if direction == PREV:
        return state.page_index > 0
    raise ValueError(f"Unknown direction: {direction!r}")


def advance_page(state: SessionState, direction: str) -> SessionState:
    """Move one page forward or back. Out of range is a no-op."""
    if not can_advance(state, direction):
        return state
    step = 1 if direction == NEXT else -1
    return replace(state, page_index=state.page_index + step, current_local_index=0)


def global_index(state: SessionState) -> int:
    """Position of the current question within the whole session."""
    return state.page_start + state.current_local_index


def goto_global_index(state: SessionState, target: int) -> SessionState:
    """Jump to a 0-based question position, clamped into the session."""
    if state.total_size <= 0:
        return state
    target = max(0, min(state.total_size - 1, int(target)))
    return replace(
        state,
        page_index=target // state.page_size,
        current_local_index=target % state.page_size,
    )


def step_question(state: SessionState, delta: int) -> SessionState:
    """Move to the previous/next single question."""
    return goto_global_index(state, global_index(state) + delta)


def jump_to_question(state: SessionState, number) -> SessionState:
    """Jump to a 1-based question number. Non-numeric input is ignored."""
    try:
        number = int(str(number).strip())
    except ValueError:
        return state
    return goto_global_index(state, number - 1)


def navigator(state: SessionState) -> dict:
    """Describe the navigation controls for the current state."""
    if state.all_mode:
        indices = range(state.total_size)
    else:
        indices = range(state.page_start, state.page_end)

    active = global_index(state)
    return {
        "buttons": [
            {"number": i + 1, "index": i, "active": i == active}
            for i in indices
        ],
        "current": active + 1,
        "total": state.total_size,
        "page": state.page_index + 1,
        "pages": page_count(state),
        "can_prev_page": can_advance(state, PREV),
        "can_next_page": can_advance(state, NEXT),
        "jump_min": 1,
        "jump_max": state.total_size,
    }


def display_options(question: Question, sequential: bool, rng=None) -> List[Option]:
    """
    Fresh copies of a question's options in display order.
    Shuffled on every call unless sequential; ids and correctness are untouched.
    """
    options = [replace(o) for o in question.options]
    if not sequential:
        (rng or random).shuffle(options)
    return options
