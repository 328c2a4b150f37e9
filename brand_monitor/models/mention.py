"""Mention model — one deduplicated post or comment matching a keyword."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, JSON, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


def make_dedup_key(post_id: str, comment_id: str | None = None) -> str:
    """Post-level mentions key on the post id; comments on post id + comment id."""
    if comment_id:
        return f"{post_id}:{comment_id}"
    return post_id


class Mention(Base):
    __tablename__ = "user_mentions"
    __table_args__ = (
        UniqueConstraint("user_id", "platform", "dedup_key", name="uq_user_platform_mention"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    keyword: Mapped[str] = mapped_column(String(255), nullable=False)
    platform: Mapped[str] = mapped_column(String(50), default="reddit")

    author: Mapped[str] = mapped_column(String(255), default="")
    content: Mapped[str] = mapped_column(Text, default="")
    sentiment: Mapped[str] = mapped_column(String(20), default="neutral")
    subreddit: Mapped[str] = mapped_column(String(255), default="")

    post_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    comment_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    dedup_key: Mapped[str] = mapped_column(String(140), nullable=False)

    url: Mapped[str] = mapped_column(String(2048), default="")
    score: Mapped[int] = mapped_column(Integer, default=0)
    num_comments: Mapped[int] = mapped_column(Integer, default=0)
    tags: Mapped[list] = mapped_column(JSON, default=list)

    mentioned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    user: Mapped["User"] = relationship(back_populates="mentions")
