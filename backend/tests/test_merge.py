"""
Tests for merging per-chunk quizzes.
"""

import pytest

from merge import merge_chunk_quizzes


@pytest.mark.unit
def test_duplicate_across_chunks_keeps_earliest(make_question):
    chunks = [
        [make_question("Q1 from chunk 1", 1, answer="A"), make_question("Q2 from chunk 1", 2)],
        [make_question("Q1 from chunk 2", 1), make_question("  q1 FROM chunk 1 ", 2, answer="D")],
        [make_question("Q1 from chunk 3", 1)],
    ]

    merged = merge_chunk_quizzes(chunks, 10)

    assert [q.question for q in merged] == [
        "Q1 from chunk 1",
        "Q2 from chunk 1",
        "Q1 from chunk 2",
        "Q1 from chunk 3",
    ]
    assert merged[0].correct_answer == "A"
    assert [q.question_id for q in merged] == [1, 2, 3, 4]


@pytest.mark.unit
def test_duplicate_within_one_chunk(make_question):
    chunks = [[make_question("Same?"), make_question("same?"), make_question("Other?")]]
    merged = merge_chunk_quizzes(chunks, 5)
    assert [q.question for q in merged] == ["Same?", "Other?"]


@pytest.mark.unit
def test_truncates_to_requested_total_favoring_earlier_chunks(make_question):
    chunks = [
        [make_question(f"a{i}") for i in range(3)],
        [make_question(f"b{i}") for i in range(3)],
    ]
    merged = merge_chunk_quizzes(chunks, 4)
    assert [q.question for q in merged] == ["a0", "a1", "a2", "b0"]
    assert [q.question_id for q in merged] == [1, 2, 3, 4]


@pytest.mark.unit
def test_shortfall_is_returned_as_is(make_question):
    chunks = [[make_question("only one")], [], [make_question("only one")]]
    merged = merge_chunk_quizzes(chunks, 10)
    assert len(merged) == 1
    assert merged[0].question_id == 1


@pytest.mark.unit
def test_chunk_local_ids_are_replaced(make_question):
    chunks = [[make_question("x", 7)], [make_question("y", 1)]]
    assert [q.question_id for q in merge_chunk_quizzes(chunks, 2)] == [1, 2]


@pytest.mark.unit
def test_non_list_chunks_are_skipped(make_question):
    chunks = [None, [make_question("kept")]]
    assert [q.question for q in merge_chunk_quizzes(chunks, 3)] == ["kept"]


@pytest.mark.unit
def test_zero_requested_gives_empty(make_question):
    assert merge_chunk_quizzes([[make_question("x")]], 0) == []


@pytest.mark.unit
def test_inputs_are_not_mutated(make_question):
    original = make_question("x", 9)
    merge_chunk_quizzes([[original]], 1)
    assert original.question_id == 9
