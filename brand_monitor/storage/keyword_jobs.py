"""Job store — selection and bookkeeping for keyword searches."""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from brand_monitor.models import KeywordSearch
from brand_monitor.utils.timeutils import ensure_utc, utcnow

logger = logging.getLogger("brand_monitor.storage.keyword_jobs")

_UNSET = object()


class KeywordJobStore:
    """Reads and updates KeywordSearch rows for the monitor."""

    def __init__(self, db: Session):
        self.db = db

    def select_due(self, now: datetime) -> list[KeywordSearch]:
        """All active searches whose next run is due, oldest-due first."""
        return (
            self.db.query(KeywordSearch)
            .filter(
                KeywordSearch.is_active.is_(True),
                KeywordSearch.next_search_at <= now,
            )
            .order_by(KeywordSearch.next_search_at.asc(), KeywordSearch.id.asc())
            .all()
        )

    def select_for_user(self, user_id: int) -> list[KeywordSearch]:
        """All active searches of one user, regardless of due time."""
        return (
            self.db.query(KeywordSearch)
            .filter(
                KeywordSearch.user_id == user_id,
                KeywordSearch.is_active.is_(True),
            )
            .order_by(KeywordSearch.id.asc())
            .all()
        )

    def update(
        self,
        job_id: int,
        last_searched_at: datetime,
        total_mentions_found: int | None = None,
        last_error: str | None = None,
        next_search_at=_UNSET,
    ) -> None:
        """Write bookkeeping after a processing attempt.

        next_search_at is only written when passed; manual runs leave it alone.
        """
        values = {
            KeywordSearch.last_searched_at: last_searched_at,
            KeywordSearch.last_error: last_error,
        }
        if total_mentions_found is not None:
            values[KeywordSearch.total_mentions_found] = total_mentions_found
        if next_search_at is not _UNSET:
            values[KeywordSearch.next_search_at] = next_search_at

        self.db.query(KeywordSearch).filter(KeywordSearch.id == job_id).update(
            values, synchronize_session="fetch"
        )
        self.db.commit()

    def create(self, user_id: int, keyword: str, search_frequency_hours: int = 24) -> KeywordSearch:
        """Register a new keyword search, due immediately."""
        job = KeywordSearch(
            user_id=user_id,
            keyword=keyword.strip(),
            search_frequency_hours=search_frequency_hours,
            next_search_at=utcnow(),
        )
        self.db.add(job)
        self.db.commit()
        logger.info("[user:%d] Registered keyword '%s' every %dh", user_id, job.keyword, search_frequency_hours)
        return job

    def deactivate(self, job_id: int) -> bool:
        updated = (
            self.db.query(KeywordSearch)
            .filter(KeywordSearch.id == job_id)
            .update({KeywordSearch.is_active: False}, synchronize_session="fetch")
        )
        self.db.commit()
        return bool(updated)

    def stats(self) -> list[dict]:
        """Per-search bookkeeping summary for the CLI."""
        rows = self.db.query(KeywordSearch).order_by(KeywordSearch.user_id, KeywordSearch.id).all()
        return [
            {
                "id": row.id,
                "user_id": row.user_id,
                "keyword": row.keyword,
                "is_active": row.is_active,
                "frequency_hours": row.search_frequency_hours,
                "last_searched_at": ensure_utc(row.last_searched_at),
                "next_search_at": ensure_utc(row.next_search_at),
                "total_mentions_found": row.total_mentions_found,
                "last_error": row.last_error,
            }
            for row in rows
        ]
