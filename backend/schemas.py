# schemas.py
from datetime import datetime
from typing import List, Optional, Literal
from pydantic import BaseModel, Field

Difficulty = Literal["easy", "medium", "hard"]
AnswerLetter = Literal["A", "B", "C", "D"]

DEFAULT_TOPIC = "General"

class Question(BaseModel):
    # chunk-local until merge renumbers it; request-scoped, never persisted
    question_id: Optional[int] = Field(default=None, alias="questionId")
    question: str
    options: List[str] = Field(min_length=4, max_length=4)
    correct_answer: AnswerLetter
    topic: str = DEFAULT_TOPIC
    class Config:
        populate_by_name = True

class ContentRecord(BaseModel):
    """Read model for a transcript cache row, detached from the session."""
    video_id: str
    title: str
    description: Optional[str] = None
    channel_title: Optional[str] = None
    published_at: Optional[datetime] = None
    duration: Optional[str] = None
    duration_minutes: Optional[int] = None
    transcript: str = ""
    transcript_length: int = 0
    cached_at: Optional[datetime] = None
    last_accessed: Optional[datetime] = None
    access_count: int = 0
    class Config:
        from_attributes = True

class GenerateIn(BaseModel):
    video_url: Optional[str] = None
    video_id: Optional[str] = None
    num_questions: int = Field(default=15, ge=0)
    difficulty: Difficulty = "medium"

class QuizOut(BaseModel):
    video_id: str
    title: str
    from_cache: bool
    difficulty: Difficulty
    estimated_seconds: int
    quiz: List[Question]

class CachedVideoOut(BaseModel):
    video_id: str
    title: str
    channel_title: Optional[str]
    duration_minutes: Optional[int]
    transcript_length: int
    cached_at: Optional[datetime]
    last_accessed: Optional[datetime]
    access_count: int

class PurgeOut(BaseModel):
    purged: int
