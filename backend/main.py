# main.py
import asyncio
import logging

from fastapi import FastAPI, HTTPException, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from config import CORS_ALLOW_ORIGINS, LOG_LEVEL, REQUEST_TIMEOUT_SECONDS
from db import Base, engine, SessionLocal
import models, schemas  # noqa: F401  (models registers the cache table on Base)
from cache import TranscriptCacheStore
from chunking import calculate_optimal_chunks, estimate_processing_time
from generator import generate, get_video_info
from youtube import extract_video_id, is_educational_content, FetchError

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
log = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# App & CORS
# -----------------------------------------------------------------------------
app = FastAPI(title="Transcript Quiz Generator")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create tables at startup
Base.metadata.create_all(bind=engine)

_cache = TranscriptCacheStore(SessionLocal)

def get_cache() -> TranscriptCacheStore:
    return _cache

# -----------------------------------------------------------------------------
# Health
# -----------------------------------------------------------------------------
@app.get("/api/health")
def health():
    return {"status": "ok"}

# -----------------------------------------------------------------------------
# LLM smoke test (quick check that Gemini works)
# -----------------------------------------------------------------------------
@app.get("/api/llm-test")
def llm_test():
    from llm import ping_llm
    return ping_llm()

# -----------------------------------------------------------------------------
# Generate quiz (cache/fetch + chunked parallel generation)
# -----------------------------------------------------------------------------
@app.post("/api/generate-quiz", response_model=schemas.QuizOut)
async def generate_quiz(payload: schemas.GenerateIn, cache: TranscriptCacheStore = Depends(get_cache)):
    video_id = extract_video_id(payload.video_url) if payload.video_url else payload.video_id
    if not video_id:
        raise HTTPException(status_code=400, detail="Video ID or URL is required")

    # 1) Cached transcript, or fetch from YouTube
    try:
        info = await run_in_threadpool(get_video_info, video_id, cache)
    except FetchError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if not is_educational_content(info.title, info.record.description):
        raise HTTPException(status_code=400, detail="Video does not appear to be educational")

    # 2) Generate, chunked and in parallel for long transcripts
    try:
        quiz = await asyncio.wait_for(
            generate(video_id, info.transcript, payload.num_questions, payload.difficulty, info.title),
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
    except asyncio.TimeoutError:
        log.warning("Quiz generation for %s timed out after %ss", video_id, REQUEST_TIMEOUT_SECONDS)
        raise HTTPException(status_code=504, detail="Quiz generation timed out")

    if not quiz and payload.num_questions > 0:
        raise HTTPException(status_code=500, detail="Failed to generate quiz questions")

    length = len(info.transcript)
    return {
        "video_id": video_id,
        "title": info.title,
        "from_cache": info.from_cache,
        "difficulty": payload.difficulty,
        "estimated_seconds": estimate_processing_time(length, calculate_optimal_chunks(length) > 1),
        "quiz": quiz,
    }

# -----------------------------------------------------------------------------
# Cache inspection
# -----------------------------------------------------------------------------
@app.get("/api/cache/{video_id}", response_model=schemas.CachedVideoOut)
def get_cached_video(video_id: str, cache: TranscriptCacheStore = Depends(get_cache)):
    try:
        record = cache.lookup(video_id)
    except SQLAlchemyError as e:
        log.warning("Cache lookup failed for %s: %s", video_id, e)
        raise HTTPException(status_code=503, detail="Cache unavailable")
    if record is None:
        raise HTTPException(status_code=404, detail="Video not cached")
    return record.model_dump()

@app.delete("/api/cache/expired", response_model=schemas.PurgeOut)
def purge_expired(cache: TranscriptCacheStore = Depends(get_cache)):
    return {"purged": cache.purge_expired()}
