import pytest

from conftest import make_questions
from quiz import normalize_question
from quiz_session import (
    ALL, NEXT, PREV, NoQuestionsError, advance_page, can_advance, current_page,
    display_options, global_index, goto_global_index, jump_to_question, navigator,
    page_count, parse_requested_size, start_session, step_question,
)


def page_sizes(state):
    sizes = [len(current_page(state))]
    while can_advance(state, NEXT):
        state = advance_page(state, NEXT)
        sizes.append(len(current_page(state)))
    return sizes


def test_all_mode_pages():
    state = start_session(make_questions(23), "all", sequential=True)

    assert state.all_mode
    assert state.total_size == 23
    assert page_count(state) == 3
    assert page_sizes(state) == [10, 10, 3]


@pytest.mark.parametrize("requested, expected", [
    ("5", 5),
    (5, 5),
    ("50", 23),
    ("abc", 10),
    ("0", 10),
    ("-3", 10),
    ("7 questions", 7),
    (None, 10),
])
def test_session_size(requested, expected):
    state = start_session(make_questions(23), requested, sequential=True)

    assert state.total_size == expected
    assert len(state.pool) == expected
    assert not state.all_mode


def test_parse_requested_size_all():
    assert parse_requested_size("all") == ALL
    assert parse_requested_size(" ALL ") == ALL


def test_empty_repository_fails():
    with pytest.raises(NoQuestionsError, match="No questions available"):
        start_session([], "all")


def test_sequential_keeps_source_order():
    questions = make_questions(12)
    state = start_session(questions, "all", sequential=True)

    assert list(state.pool) == questions
    assert (state.page_index, state.current_local_index) == (0, 0)


def test_shuffle_is_a_permutation_of_a_copy(rng):
    questions = make_questions(30)
    original = list(questions)
    state = start_session(questions, "all", sequential=False, rng=rng)

    assert questions == original
    assert sorted(q.question_text for q in state.pool) == sorted(q.question_text for q in questions)
    assert list(state.pool) != questions


def test_next_at_last_page_is_noop():
    state = start_session(make_questions(23), "all", sequential=True)
    state = goto_global_index(state, 22)

    assert advance_page(state, NEXT) is state


def test_prev_at_first_page_is_noop():
    state = start_session(make_questions(23), "all", sequential=True)
    assert advance_page(state, PREV) is state


def test_paging_resets_local_index():
    state = start_session(make_questions(23), "all", sequential=True)
    state = goto_global_index(state, 4)
    state = advance_page(state, NEXT)

    assert (state.page_index, state.current_local_index) == (1, 0)
    state = advance_page(state, PREV)
    assert (state.page_index, state.current_local_index) == (0, 0)


def test_goto_round_trip():
    state = start_session(make_questions(23), "all", sequential=True)
    for i in range(state.total_size):
        moved = goto_global_index(state, i)
        assert moved.page_index * moved.page_size + moved.current_local_index == i
        assert global_index(moved) == i
        assert moved.page_index * moved.page_size < moved.total_size
        assert moved.current_local_index < min(
            moved.page_size, moved.total_size - moved.page_index * moved.page_size
        )


@pytest.mark.parametrize("target, expected", [(-5, 0), (100, 22), (10, 10)])
def test_goto_clamps(target, expected):
    state = start_session(make_questions(23), "all", sequential=True)
    assert global_index(goto_global_index(state, target)) == expected


def test_step_question_crosses_page_boundary():
    state = start_session(make_questions(23), "all", sequential=True)
    state = goto_global_index(state, 9)
    state = step_question(state, 1)

    assert (state.page_index, state.current_local_index) == (1, 0)
    state = step_question(state, -1)
    assert (state.page_index, state.current_local_index) == (0, 9)


def test_step_question_stays_in_bounds():
    state = start_session(make_questions(3), "all", sequential=True)

    assert global_index(step_question(state, -1)) == 0
    assert global_index(step_question(goto_global_index(state, 2), 1)) == 2


def test_jump_to_question_is_one_based():
    state = start_session(make_questions(23), "all", sequential=True)

    assert global_index(jump_to_question(state, "12")) == 11
    assert global_index(jump_to_question(state, 99)) == 22
    assert jump_to_question(state, "abc") is state


def test_current_page_is_a_copy():
    state = start_session(make_questions(23), "all", sequential=True)
    state = advance_page(state, NEXT)
    page = current_page(state)

    assert [q.question_text for q in page] == [f"Q{i}" for i in range(10, 20)]
    assert page == list(state.pool[10:20])
    assert all(p is not q for p, q in zip(page, state.pool[10:20]))


def test_navigator_all_mode_lists_every_question():
    state = goto_global_index(start_session(make_questions(23), "all", sequential=True), 12)
    nav = navigator(state)

    assert [b["number"] for b in nav["buttons"]] == list(range(1, 24))
    assert [b["number"] for b in nav["buttons"] if b["active"]] == [13]
    assert nav["can_prev_page"] and nav["can_next_page"]
    assert (nav["page"], nav["pages"], nav["jump_max"]) == (2, 3, 23)


def test_navigator_lists_current_page_only():
    state = advance_page(start_session(make_questions(23), "15", sequential=True), NEXT)
    nav = navigator(state)

    assert [b["number"] for b in nav["buttons"]] == [11, 12, 13, 14, 15]
    assert not nav["can_next_page"]
    assert nav["can_prev_page"]


def test_display_options_sequential_keeps_order():
    q = normalize_question({"question": "?", "options": ["a", "b", "c", "d"], "answer": "C"})
    options = display_options(q, sequential=True)

    assert [o.id for o in options] == ["o_0", "o_1", "o_2", "o_3"]
    assert all(o is not p for o, p in zip(options, q.options))


def test_display_options_shuffle_keeps_correctness(rng):
    q = normalize_question({"question": "?", "options": [str(i) for i in range(8)], "answer": "C"})
    before = list(q.options)

    for _ in range(5):
        options = display_options(q, sequential=False, rng=rng)
        assert sorted(o.id for o in options) == sorted(o.id for o in before)
        assert [o.id for o in options if o.is_correct] == ["o_2"]

    assert list(q.options) == before
