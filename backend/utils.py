# utils.py
import json
import re
from typing import List, Optional

from pydantic import ValidationError

from schemas import Question, DEFAULT_TOPIC

ANSWER_LETTERS = "ABCD"

# "A)", "b.", "C:", "D -", "A " ... at the very start of an option.
# Case-insensitive, so a leading article is eaten too: "a lot of memory" -> "lot of memory".
OPTION_LABEL_RE = re.compile(r"^[A-D][\)\.:\-\s]+", re.I)
# first bracketed array in a chatty reply; greedy so nested arrays stay whole
JSON_ARRAY_RE = re.compile(r"\[.*\]", re.S)
FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.M)


def strip_code_fences(text: str) -> str:
    return FENCE_RE.sub("", (text or "").strip()).strip()


def parse_quiz_array(text: str) -> Optional[list]:
    """
    Two-stage parse of a model reply.

    Strict json.loads first; if that fails or does not yield a list, retry on
    the first [...] substring. Returns None when neither stage produces a list.
    """
    text = strip_code_fences(text)
    candidates = [text]
    match = JSON_ARRAY_RE.search(text)
    if match and match.group(0) != text:
        candidates.append(match.group(0))

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except (ValueError, RecursionError):
            # RecursionError: pathologically nested replies
            continue
        if isinstance(data, list):
            return data
    return None


def clean_option(option) -> str:
    return OPTION_LABEL_RE.sub("", str(option)).strip()


def _answer_letter(raw) -> Optional[str]:
    value = str(raw or "").strip().upper()
    if not value or value[0] not in ANSWER_LETTERS:
        return None
    if len(value) > 1 and value[1].isalnum():
        return None
    return value[0]


def normalize_question(raw: dict) -> Optional[Question]:
    """Fold one raw model object into a Question, or None if it can't be one."""
    if not isinstance(raw, dict):
        return None

    text = str(raw.get("question") or "").strip()
    options = raw.get("options")
    letter = _answer_letter(raw.get("correct_answer") or raw.get("correctAnswer"))
    if not text or not isinstance(options, list) or len(options) < 4 or letter is None:
        return None

    try:
        return Question(
            question=text,
            options=[clean_option(o) for o in options[:4]],
            correct_answer=letter,
            topic=str(raw.get("topic") or "").strip() or DEFAULT_TOPIC,
        )
    except ValidationError:
        return None


def normalize_chunk_questions(raw_text: str, quota: int) -> List[Question]:
    """Parse and normalize a chunk reply into at most `quota` questions numbered 1..n."""
    data = parse_quiz_array(raw_text)
    if not data or quota <= 0:
        return []

    quiz: List[Question] = []
    for item in data:
        q = normalize_question(item)
        if q is None:
            continue
        quiz.append(q)
        if len(quiz) >= quota:
            break

    return [q.model_copy(update={"question_id": i}) for i, q in enumerate(quiz, start=1)]
