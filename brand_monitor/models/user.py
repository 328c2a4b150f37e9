"""User account model."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), default="")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    keyword_searches: Mapped[list["KeywordSearch"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    reddit_credential: Mapped["RedditCredential"] = relationship(
        back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    mentions: Mapped[list["Mention"]] = relationship(back_populates="user", cascade="all, delete-orphan")
    reputation_scores: Mapped[list["ReputationScore"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
