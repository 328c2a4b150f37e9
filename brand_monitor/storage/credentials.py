"""Credential store — per-user Reddit OAuth tokens."""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from brand_monitor.models import RedditCredential

logger = logging.getLogger("brand_monitor.storage.credentials")


class CredentialStore:
    """Reads and updates RedditCredential rows. Never creates or deletes them."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: int) -> RedditCredential | None:
        return (
            self.db.query(RedditCredential)
            .filter(RedditCredential.user_id == user_id)
            .first()
        )

    def update(self, user_id: int, access_token: str, expires_at: datetime) -> None:
        """Persist a refreshed access token and its new expiry."""
        updated = (
            self.db.query(RedditCredential)
            .filter(RedditCredential.user_id == user_id)
            .update(
                {
                    RedditCredential.access_token: access_token,
                    RedditCredential.expires_at: expires_at,
                },
                synchronize_session="fetch",
            )
        )
        self.db.commit()
        if not updated:
            logger.warning("[user:%d] No credential row to update", user_id)
