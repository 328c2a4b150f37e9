"""ORM models for the brand monitor."""

from .base import Base, SessionLocal, engine, init_db
from .keyword_search import KeywordSearch
from .mention import Mention, make_dedup_key
from .reddit_credential import RedditCredential
from .reputation_score import ReputationScore
from .user import User

__all__ = [
    "Base",
    "SessionLocal",
    "engine",
    "init_db",
    "User",
    "KeywordSearch",
    "RedditCredential",
    "Mention",
    "make_dedup_key",
    "ReputationScore",
]
