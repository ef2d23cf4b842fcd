"""
Command handlers for the quiz UI actions.

Each handler takes the active SessionState (or the questions to start from) and
returns (state, render), where render is a plain dict the presentation layer
draws. Correctness data never appears in a page render, only in results.
"""

from typing import List, Tuple

from quiz import Question
from quiz_session import (
    NEXT, PREV, PAGE_SIZE, SessionState, advance_page, current_page,
    display_options, jump_to_question, navigator, start_session, step_question,
)
from scoring import UserResponse, option_marks, score_page


INPUT_TYPES = {
    "single": "radio",
    "multiple": "checkbox",
    "text": "text",
}


def _question_view(question: Question, number: int, local_index: int,
                   sequential: bool, rng=None) -> dict:
    options = display_options(question, sequential, rng)
    return {
        "number": number,
        "index": local_index,
        "question": question.question_text,
        "type": question.kind.value,
        "input": INPUT_TYPES[question.kind.value],
        "options": [
            {"id": o.id, "letter": chr(ord("A") + i), "text": o.text}
            for i, o in enumerate(options)
        ],
    }


def render_page(state: SessionState, rng=None, focus=None) -> dict:
    """Render instruction for the current page. Options are reshuffled per render."""
    page = current_page(state)
    return {
        "action": "render_page",
        "questions": [
            _question_view(q, state.page_start + i + 1, i, state.sequential, rng)
            for i, q in enumerate(page)
        ],
        "navigator": navigator(state),
        "focus": focus,
        "results": None,
    }


def _response_for(question: Question, value) -> UserResponse:
    if question.is_choice and isinstance(value, str):
        value = [value]
    return UserResponse.from_value(value)


def collect_responses(questions: List[Question], answers) -> List[UserResponse]:
    """
    Map submitted answers onto the page's questions.
    Answers may be a list in page order or a dict keyed by page-local index.
    """
    if isinstance(answers, dict):
        values = [answers.get(str(i), answers.get(i)) for i in range(len(questions))]
    elif isinstance(answers, list):
        values = answers + [None] * (len(questions) - len(answers))
    else:
        values = [None] * len(questions)
    return [_response_for(q, v) for q, v in zip(questions, values)]


def start(questions, count="10", sequential=False, page_size=PAGE_SIZE, rng=None) -> Tuple[SessionState, dict]:
    """Start (or restart) a session. Raises NoQuestionsError when there is nothing to ask."""
    state = start_session(questions, count, sequential, page_size=page_size, rng=rng)
    return state, render_page(state, rng)


restart = start


def submit(state: SessionState, answers) -> Tuple[SessionState, dict]:
    """Score the current page. The displayed page is left as it is."""
    questions = current_page(state)
    responses = collect_responses(questions, answers)
    page_result = score_page(questions, responses)

    nav = navigator(state)
    return state, {
        "action": "show_results",
        "results": {
            "score": page_result.score,
            "total": page_result.total,
            "summary": page_result.summary,
            "questions": [
                {
                    "index": i,
                    "correct": r.correct,
                    "message": r.correct_display,
                    "marks": option_marks(q, resp.selected),
                }
                for i, (q, resp, r) in enumerate(zip(questions, responses, page_result.results))
            ],
            "can_next_page": nav["can_next_page"],
            "can_prev_page": nav["can_prev_page"],
        },
    }


def _paged(new_state: SessionState, rng=None, focus=None) -> Tuple[SessionState, dict]:
    return new_state, render_page(new_state, rng, focus=focus)


def next_page(state: SessionState, rng=None):
    return _paged(advance_page(state, NEXT), rng)


def prev_page(state: SessionState, rng=None):
    return _paged(advance_page(state, PREV), rng)


def next_question(state: SessionState, rng=None):
    new_state = step_question(state, 1)
    return _paged(new_state, rng, focus=new_state.current_local_index)


def prev_question(state: SessionState, rng=None):
    new_state = step_question(state, -1)
    return _paged(new_state, rng, focus=new_state.current_local_index)


def jump(state: SessionState, number, rng=None):
    """Go to question N (1-based)."""
    new_state = jump_to_question(state, number)
    return _paged(new_state, rng, focus=new_state.current_local_index)
