# merge.py
from typing import List, Sequence

from schemas import Question


def question_key(question: Question) -> str:
    return question.question.strip().lower()


def merge_chunk_quizzes(chunk_quizzes: Sequence[List[Question]], requested_total: int) -> List[Question]:
    """
    Merge per-chunk question lists into one quiz.

    `chunk_quizzes` must be in chunk index order: the first occurrence of a
    question text wins, so earlier chunks take precedence over later ones,
    both for duplicates and when the result is cut down to requested_total.
    Survivors are renumbered 1..n; chunk-local ids are dropped. A shortfall is
    returned as-is.
    """
    merged: List[Question] = []
    seen = set()

    for chunk_quiz in chunk_quizzes:
        if not isinstance(chunk_quiz, list):
            continue
        for question in chunk_quiz:
            key = question_key(question)
            if key in seen:
                continue
            seen.add(key)
            merged.append(question.model_copy(update={"question_id": len(merged) + 1}))

    return merged[:max(requested_total, 0)]
