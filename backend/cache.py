# cache.py
"""
Transcript cache keyed by YouTube video id.

Rows live in the `transcript_cache` table. Every hit bumps access_count and
last_accessed in a single UPDATE statement, so concurrent hits on the same
video never lose an increment. Rows older than the retention window are
treated as absent and deleted lazily; expiry ignores how often a row is read.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from config import CACHE_RETENTION_DAYS
from db import get_session
from models import TranscriptCache
from schemas import ContentRecord

log = logging.getLogger(__name__)

# columns a store() call is allowed to write
_STORED_FIELDS = (
    "title",
    "description",
    "channel_title",
    "published_at",
    "duration",
    "duration_minutes",
    "transcript",
)


def utcnow() -> datetime:
    # naive UTC, matching what the DateTime columns hand back
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TranscriptCacheStore:

    def __init__(self, session_factory, retention: timedelta = timedelta(days=CACHE_RETENTION_DAYS),
                 clock: Callable[[], datetime] = utcnow):
        self.session_factory = session_factory
        self.retention = retention
        self.clock = clock

    def _cutoff(self, now: datetime) -> datetime:
        return now - self.retention

    def lookup(self, video_id: str) -> Optional[ContentRecord]:
        """Return the live record for video_id and count the access, or None on a miss."""
        now = self.clock()
        with get_session(self.session_factory) as db:
            result = db.execute(
                update(TranscriptCache)
                .where(TranscriptCache.video_id == video_id)
                .where(TranscriptCache.cached_at >= self._cutoff(now))
                .values(access_count=TranscriptCache.access_count + 1, last_accessed=now)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                db.rollback()
                record = None
            else:
                row = db.execute(
                    select(TranscriptCache).where(TranscriptCache.video_id == video_id)
                ).scalar_one()
                record = ContentRecord.model_validate(row)
                db.commit()

        if record is None:
            log.info("[Cache] MISS for video %s", video_id)
            self.purge_expired()
            return None

        log.info("[Cache] HIT for video %s (access #%d)", video_id, record.access_count)
        return record

    def store(self, video_id: str, record: ContentRecord) -> bool:
        """
        Upsert the record for video_id with a fresh cached_at.

        Best effort: database errors are logged and reported as False, never raised.
        """
        now = self.clock()
        values = {name: getattr(record, name) for name in _STORED_FIELDS}
        values["transcript"] = values["transcript"] or ""
        values["transcript_length"] = len(values["transcript"])
        values["cached_at"] = now
        values["last_accessed"] = now

        try:
            with get_session(self.session_factory) as db:
                if not self._update_existing(db, video_id, values):
                    db.add(TranscriptCache(video_id=video_id, access_count=1, **values))
                    try:
                        db.commit()
                    except IntegrityError:
                        # another request inserted the same video first; last writer wins
                        db.rollback()
                        if not self._update_existing(db, video_id, values):
                            log.warning("[Cache] Lost insert race for %s and found no row to update", video_id)
                            return False
        except SQLAlchemyError as e:
            log.warning("[Cache] Failed to cache transcript for %s: %s", video_id, e)
            return False

        log.info("[Cache] Stored transcript for video %s (%d chars)", video_id, values["transcript_length"])
        return True

    def _update_existing(self, db, video_id: str, values: dict) -> bool:
        result = db.execute(
            update(TranscriptCache)
            .where(TranscriptCache.video_id == video_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            db.rollback()
            return False
        db.commit()
        return True

    def purge_expired(self) -> int:
        """Delete rows past the retention window. Returns how many went."""
        cutoff = self._cutoff(self.clock())
        try:
            with get_session(self.session_factory) as db:
                result = db.execute(
                    delete(TranscriptCache)
                    .where(TranscriptCache.cached_at < cutoff)
                    .execution_options(synchronize_session=False)
                )
                db.commit()
        except SQLAlchemyError as e:
            log.warning("[Cache] Purge failed: %s", e)
            return 0

        if result.rowcount:
            log.info("[Cache] Purged %d expired transcript(s)", result.rowcount)
        return result.rowcount or 0
