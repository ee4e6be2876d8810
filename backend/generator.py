# generator.py
"""
Quiz generation pipeline.

    get_video_info: cache lookup, fetch on miss, best-effort store
    generate: plan chunks, fan out one model call per chunk, merge

A chunk whose model call fails, or whose reply can't be parsed, yields no
questions; it never aborts its siblings.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

import llm
from cache import TranscriptCacheStore
from chunking import plan_chunks
from merge import merge_chunk_quizzes
from schemas import ContentRecord, Question
from utils import normalize_chunk_questions
from youtube import fetch_video

log = logging.getLogger(__name__)


@dataclass
class VideoInfo:
    record: ContentRecord
    from_cache: bool

    @property
    def transcript(self) -> str:
        return self.record.transcript or ""

    @property
    def title(self) -> str:
        return self.record.title


def get_video_info(
    video_id: str,
    cache: Optional[TranscriptCacheStore],
    fetch: Callable[[str], ContentRecord] = fetch_video,
) -> VideoInfo:
    """
    Cached transcript + metadata for video_id.

    On a miss the video is fetched and, when it has a transcript, stored.
    Cache failures are logged and otherwise ignored; fetch errors propagate.
    """
    if cache is not None:
        try:
            cached = cache.lookup(video_id)
        except SQLAlchemyError as e:
            log.warning("[Pipeline] Cache lookup failed for %s: %s", video_id, e)
            cached = None
        if cached is not None:
            return VideoInfo(record=cached, from_cache=True)

    record = fetch(video_id)

    if cache is not None and record.transcript:
        cache.store(video_id, record)

    return VideoInfo(record=record, from_cache=False)


async def generate_quiz_from_chunk(
    chunk_text: str,
    num_questions: int,
    difficulty: str,
    title: str,
    chunk_index: int,
) -> List[Question]:
    """One model call for one chunk, normalized. Never raises except on cancellation."""
    if num_questions <= 0:
        return []

    try:
        raw = await llm.generate_chunk_text(chunk_text, num_questions, difficulty, title, chunk_index)
        quiz = normalize_chunk_questions(raw, num_questions)
    except Exception:
        log.exception("[Pipeline] Error generating quiz from chunk %d", chunk_index + 1)
        return []

    if not quiz:
        log.warning("[Pipeline] Chunk %d produced no usable questions", chunk_index + 1)
    else:
        log.info("[Pipeline] Generated %d/%d questions from chunk %d", len(quiz), num_questions, chunk_index + 1)
    return quiz


async def generate(
    content_key: str,
    transcript: Optional[str],
    num_questions: int,
    difficulty: str = "medium",
    title: str = "",
) -> List[Question]:
    """
    Build a quiz of at most num_questions questions from a transcript.

    Short transcripts are answered by a single direct model call. Longer ones
    are split, every chunk is generated concurrently, and the per-chunk lists
    are merged in chunk order (deduplicated, renumbered, capped).

    Raises:
        ValueError: num_questions is negative.
    """
    if num_questions < 0:
        raise ValueError("num_questions must be >= 0")

    plan = plan_chunks(transcript, num_questions)
    log.info("[Pipeline] %s: %d chars, %d chunk(s), quotas %s (total %d)",
             content_key, len(transcript or ""), len(plan), plan.quotas, plan.total)

    if not plan.chunks:
        return []

    if len(plan) == 1:
        return await generate_quiz_from_chunk(plan.chunks[0], plan.quotas[0], difficulty, title, 0)

    start = time.perf_counter()
    # gather keeps results in argument order, i.e. chunk index order
    chunk_quizzes = await asyncio.gather(*(
        generate_quiz_from_chunk(chunk, quota, difficulty, title, index)
        for index, (chunk, quota) in enumerate(zip(plan.chunks, plan.quotas))
    ))
    log.info("[Pipeline] %s: parallel generation finished in %.1fs", content_key, time.perf_counter() - start)

    quiz = merge_chunk_quizzes(list(chunk_quizzes), num_questions)
    log.info("[Pipeline] %s: final quiz %d questions (target %d)", content_key, len(quiz), num_questions)
    return quiz
