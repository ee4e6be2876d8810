# youtube.py
import html
import logging
import re
from datetime import datetime, timezone
from typing import Optional

import requests
from bs4 import BeautifulSoup

from config import YOUTUBE_API_KEY, MAX_TRANSCRIPT_LENGTH, MAX_VIDEO_DURATION_MINUTES
from schemas import ContentRecord

log = logging.getLogger(__name__)

VIDEO_ID_RE = re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([^&\n?#]+)")
DURATION_RE = re.compile(r"^PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?$")

VIDEOS_API_URL = "https://www.googleapis.com/youtube/v3/videos"
TIMEDTEXT_URL = "https://video.google.com/timedtext"

EDUCATIONAL_KEYWORDS = (
    "tutorial", "lecture", "course", "lesson", "explained",
    "introduction", "guide", "education", "learn",
)

class FetchError(Exception):
    pass

def extract_video_id(url: str) -> Optional[str]:
    match = VIDEO_ID_RE.search(url or "")
    return match.group(1) if match else None

def parse_iso_duration(value: str) -> int:
    """PT1H2M10S -> 62. Seconds are dropped."""
    match = DURATION_RE.match(value or "")
    if not match:
        return 0
    hours = int(match.group(1) or 0)
    minutes = int(match.group(2) or 0)
    return hours * 60 + minutes

def _parse_published(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt

def fetch_video_info(video_id: str) -> dict:
    """
    Metadata for one video from the YouTube Data API.
    Returns {title, description, channel_title, published_at, duration, duration_minutes}.
    """
    if not YOUTUBE_API_KEY:
        raise FetchError("YOUTUBE_API_KEY is missing in .env")

    try:
        resp = requests.get(
            VIDEOS_API_URL,
            params={"part": "snippet,contentDetails", "id": video_id, "key": YOUTUBE_API_KEY},
            timeout=20,
        )
    except requests.RequestException as e:
        raise FetchError(f"YouTube API request failed: {e}") from e
    if resp.status_code != 200:
        raise FetchError(f"YouTube API error: HTTP {resp.status_code}")

    items = resp.json().get("items") or []
    if not items:
        raise FetchError(f"Video not found: {video_id}")

    video = items[0]
    snippet = video.get("snippet") or {}
    duration = (video.get("contentDetails") or {}).get("duration") or ""
    total_minutes = parse_iso_duration(duration)

    if total_minutes > MAX_VIDEO_DURATION_MINUTES:
        raise FetchError(
            f"Video duration ({total_minutes} min) exceeds maximum allowed ({MAX_VIDEO_DURATION_MINUTES} min)"
        )

    return {
        "title": snippet.get("title") or video_id,
        "description": snippet.get("description") or "",
        "channel_title": snippet.get("channelTitle"),
        "published_at": _parse_published(snippet.get("publishedAt")),
        "duration": duration,
        "duration_minutes": total_minutes,
    }

def fetch_transcript(video_id: str, lang: str = "en") -> str:
    """English caption track as one string; "" when the video has none or the fetch fails.

    The legacy timedtext endpoint only serves manually uploaded tracks and
    answers many public videos with an empty body, so "" is a common result.
    """
    try:
        resp = requests.get(TIMEDTEXT_URL, params={"lang": lang, "v": video_id}, timeout=20)
    except requests.RequestException as e:
        log.warning("[YouTube] Transcript fetch failed for %s: %s", video_id, e)
        return ""
    if resp.status_code != 200 or not resp.text.strip():
        return ""

    soup = BeautifulSoup(resp.text, "html.parser")
    parts = []
    for el in soup.find_all("text"):
        text = html.unescape(el.get_text(" ", strip=True))
        if text:
            parts.append(text)
    transcript = " ".join(parts)

    # Limit size for LLM cost
    if len(transcript) > MAX_TRANSCRIPT_LENGTH:
        log.warning("[YouTube] Transcript too long (%d chars), truncating to %d",
                    len(transcript), MAX_TRANSCRIPT_LENGTH)
        transcript = transcript[:MAX_TRANSCRIPT_LENGTH]
    return transcript

def fetch_video(video_id: str) -> ContentRecord:
    """Metadata + transcript for video_id, in the shape the cache stores."""
    info = fetch_video_info(video_id)
    transcript = fetch_transcript(video_id)
    log.info("[YouTube] %s: %d min, transcript %d chars", video_id, info["duration_minutes"], len(transcript))
    return ContentRecord(
        video_id=video_id,
        transcript=transcript,
        transcript_length=len(transcript),
        **info,
    )

def is_educational_content(title: str, description: Optional[str]) -> bool:
    haystack = f"{title or ''} {description or ''}".lower()
    return any(word in haystack for word in EDUCATIONAL_KEYWORDS)
