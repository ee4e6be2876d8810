# chunking.py
import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

# Transcripts shorter than this are sent to the model whole.
SPLIT_THRESHOLD = 5000

# (upper bound in characters, chunk count); anything longer gets MAX_CHUNKS.
CHUNK_THRESHOLDS: Tuple[Tuple[int, int], ...] = (
    (SPLIT_THRESHOLD, 1),
    (20000, 2),
    (40000, 3),
    (60000, 4),
    (80000, 5),
)
MAX_CHUNKS = 6


@dataclass(frozen=True)
class ChunkPlan:
    chunks: List[str] = field(default_factory=list)
    quotas: List[int] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(self.quotas)

    def __len__(self) -> int:
        return len(self.chunks)


def calculate_optimal_chunks(
    transcript_length: int,
    thresholds: Sequence[Tuple[int, int]] = CHUNK_THRESHOLDS,
    max_chunks: int = MAX_CHUNKS,
) -> int:
    for upper, count in thresholds:
        if transcript_length < upper:
            return count
    return max_chunks


def distribute_questions(total_questions: int, num_chunks: int) -> List[int]:
    """Spread total_questions over num_chunks; the first total % num_chunks chunks get one extra."""
    if num_chunks <= 0:
        return []
    base, remainder = divmod(total_questions, num_chunks)
    return [base + (1 if i < remainder else 0) for i in range(num_chunks)]


def split_transcript(transcript: Optional[str], num_chunks: int = 4) -> List[str]:
    if not transcript:
        return []

    # short transcripts go through untouched, whatever num_chunks says
    if len(transcript) < SPLIT_THRESHOLD:
        return [transcript]

    words = transcript.split()
    num_chunks = max(1, num_chunks)
    words_per_chunk = math.ceil(len(words) / num_chunks)
    if words_per_chunk == 0:
        return []

    chunks = []
    for i in range(num_chunks):
        chunk = " ".join(words[i * words_per_chunk:(i + 1) * words_per_chunk])
        if chunk.strip():
            chunks.append(chunk)
    return chunks


def plan_chunks(transcript: Optional[str], total_questions: int) -> ChunkPlan:
    """
    Decide how many pieces the transcript is cut into and how many
    questions each piece owes.

    Quotas are distributed over the chunks the splitter actually returned,
    so the plan always satisfies len(chunks) == len(quotas) and
    sum(quotas) == total_questions (for non-empty transcripts).
    """
    transcript = transcript or ""
    num_chunks = calculate_optimal_chunks(len(transcript))
    chunks = split_transcript(transcript, num_chunks)
    return ChunkPlan(chunks=chunks, quotas=distribute_questions(total_questions, len(chunks)))


def estimate_processing_time(transcript_length: int, use_chunking: bool = True) -> int:
    """Rough wall-clock estimate in seconds, surfaced to clients as a progress hint."""
    if transcript_length < SPLIT_THRESHOLD:
        return 15
    if transcript_length < 20000:
        return 30 if use_chunking else 60
    if transcript_length < 60000:
        return 60 if use_chunking else 120
    return 90 if use_chunking else 180
