# models.py
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime
from db import Base

class TranscriptCache(Base):
    __tablename__ = "transcript_cache"

    id = Column(Integer, primary_key=True, index=True)
    video_id = Column(String(64), unique=True, index=True, nullable=False)
    title = Column(String(512), nullable=False)
    description = Column(Text)
    channel_title = Column(String(256))
    published_at = Column(DateTime)
    duration = Column(String(32))            # ISO-8601, e.g. "PT1H2M10S"
    duration_minutes = Column(Integer)
    transcript = Column(Text, nullable=False)
    transcript_length = Column(Integer, nullable=False, default=0)
    cached_at = Column(DateTime, default=datetime.utcnow, index=True)
    last_accessed = Column(DateTime, default=datetime.utcnow)
    access_count = Column(Integer, nullable=False, default=1)
