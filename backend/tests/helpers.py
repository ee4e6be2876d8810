"""
Test data builders shared by several test modules.
"""

import json

SHARED_QUESTION = "What is a variable?"


def long_transcript(num_chars):
    """Distinct words ("w0 w1 ...") so word order can be checked, cut to exactly num_chars."""
    words = []
    length = 0
    i = 0
    while length < num_chars:
        word = f"w{i}"
        words.append(word)
        length += len(word) + 1
        i += 1
    return " ".join(words)[:num_chars]


def _question(text):
    return {
        "questionId": 1,
        "question": text,
        "options": ["A) first", "B) second", "C) third", "D) fourth"],
        "correct_answer": "B",
        "topic": "Programming",
    }


def reply_for(chunk_text, num_questions, difficulty, title, chunk_index):
    """Fake model reply: num_questions distinct questions tagged with the chunk index."""
    return json.dumps([_question(f"Chunk {chunk_index} question {j}?") for j in range(num_questions)])


def reply_with_shared_question(chunk_text, num_questions, difficulty, title, chunk_index):
    """Like reply_for, but chunks 0 and 3 both open with the same question."""
    texts = [f"Chunk {chunk_index} question {j}?" for j in range(num_questions)]
    if chunk_index in (0, 3) and texts:
        texts[0] = SHARED_QUESTION
    return "```json\n" + json.dumps([_question(t) for t in texts]) + "\n```"
