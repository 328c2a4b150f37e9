"""Daily reputation score model — per-user sentiment rollup for one UTC date."""

from datetime import date, datetime, timezone

from sqlalchemy import Date, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class ReputationScore(Base):
    __tablename__ = "reputation_scores"
    __table_args__ = (
        UniqueConstraint("user_id", "date", name="uq_user_reputation_date"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    score_date: Mapped[date] = mapped_column("date", Date, nullable=False)

    overall_score: Mapped[int] = mapped_column(Integer, default=50)
    positive_mentions: Mapped[int] = mapped_column(Integer, default=0)
    negative_mentions: Mapped[int] = mapped_column(Integer, default=0)
    neutral_mentions: Mapped[int] = mapped_column(Integer, default=0)
    mixed_mentions: Mapped[int] = mapped_column(Integer, default=0)
    total_mentions: Mapped[int] = mapped_column(Integer, default=0)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    user: Mapped["User"] = relationship(back_populates="reputation_scores")
