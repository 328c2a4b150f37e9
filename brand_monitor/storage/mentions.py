"""Mention store — dedup lookups and inserts for ingested posts and comments."""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from brand_monitor.models import Mention, make_dedup_key

logger = logging.getLogger("brand_monitor.storage.mentions")


class MentionStore:
    """Dedup and persistence for Mention rows, scoped per user and platform."""

    def __init__(self, db: Session, content_max_length: int = 2000):
        self.db = db
        self.content_max_length = content_max_length

    def exists(self, user_id: int, platform: str, post_id: str, comment_id: str | None = None) -> bool:
        """Check whether this post (or this comment of the post) was already recorded."""
        row = (
            self.db.query(Mention.id)
            .filter(
                Mention.user_id == user_id,
                Mention.platform == platform,
                Mention.dedup_key == make_dedup_key(post_id, comment_id),
            )
            .first()
        )
        return row is not None

    def insert(self, mention: Mention) -> bool:
        """Insert a mention. Returns False instead of raising on any storage failure.

        A unique-key conflict means another writer got there first and is
        reported as "already exists" rather than as an error.
        """
        mention.dedup_key = make_dedup_key(mention.post_id, mention.comment_id)
        if mention.content and len(mention.content) > self.content_max_length:
            mention.content = mention.content[: self.content_max_length]

        try:
            self.db.add(mention)
            self.db.commit()
            return True
        except IntegrityError:
            self.db.rollback()
            logger.info(
                "[user:%d] Mention %s already stored, skipping",
                mention.user_id, mention.dedup_key,
            )
            return False
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                "[user:%d] Failed to insert mention %s: %s",
                mention.user_id, mention.dedup_key, e,
            )
            return False
