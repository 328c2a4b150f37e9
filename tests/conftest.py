"""Shared fixtures: in-memory database, config, and Reddit doubles."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import sessionmaker

from brand_monitor.config import AppConfig
from brand_monitor.models import Base, KeywordSearch, RedditCredential, User
from brand_monitor.reddit.models import RedditComment, RedditPost

FIXED_NOW = datetime(2026, 10, 17, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def config():
    config = AppConfig()
    config.reddit.client_id = "test_client_id"
    config.reddit.client_secret = "test_client_secret"
    config.reddit.user_agent = "BrandMonitor/1.0 test"
    config.monitor.post_delay_seconds = 0
    config.monitor.trigger_token = "test-trigger-token"
    config.scheduler.enabled = False
    return config


@pytest.fixture
def user(db):
    user = User(email="owner@example.com", name="Owner")
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def other_user(db):
    user = User(email="other@example.com", name="Other")
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def make_job(db):
    def _make_job(user_id, keyword="Acme", frequency=24, next_search_at=None, active=True):
        job = KeywordSearch(
            user_id=user_id,
            keyword=keyword,
            search_frequency_hours=frequency,
            is_active=active,
            next_search_at=next_search_at or FIXED_NOW - timedelta(hours=1),
        )
        db.add(job)
        db.commit()
        return job
    return _make_job


@pytest.fixture
def make_credential(db):
    def _make_credential(user_id, expires_at, access_token="stored-token", refresh_token="refresh-token"):
        credential = RedditCredential(
            user_id=user_id,
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=expires_at,
            reddit_username="acme_fan",
        )
        db.add(credential)
        db.commit()
        return credential
    return _make_credential


def make_response(status_code=200, json_data=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text
    if json_data is None:
        response.json.side_effect = ValueError("no JSON")
    else:
        response.json.return_value = json_data
    return response


def make_post(post_id="p1", title="Acme is great for pricing", selftext="", subreddit="startups", **kwargs):
    defaults = dict(
        id=post_id,
        title=title,
        selftext=selftext,
        subreddit=subreddit,
        author="poster",
        score=12,
        num_comments=0,
        permalink=f"/r/{subreddit}/comments/{post_id}/acme/",
        created_at=FIXED_NOW - timedelta(hours=2),
    )
    defaults.update(kwargs)
    return RedditPost(**defaults)


def make_comment(comment_id="c1", body="Acme support is awesome", **kwargs):
    defaults = dict(
        id=comment_id,
        body=body,
        author="commenter",
        score=3,
        parent_id="t3_p1",
        created_at=FIXED_NOW - timedelta(hours=1),
    )
    defaults.update(kwargs)
    return RedditComment(**defaults)


class FakeSearchClient:
    """Stands in for RedditSearchClient; records the token each call received."""

    def __init__(self, posts_by_keyword=None, comments_by_post=None, failing_keywords=(), failing_comment_posts=()):
        self.posts_by_keyword = posts_by_keyword or {}
        self.comments_by_post = comments_by_post or {}
        self.failing_keywords = set(failing_keywords)
        self.failing_comment_posts = set(failing_comment_posts)
        self.search_calls = []
        self.comment_calls = []

    def search_posts(self, keyword, token=None, limit=10):
        self.search_calls.append((keyword, token, limit))
        if keyword in self.failing_keywords:
            raise RuntimeError(f"search exploded for {keyword}")
        return list(self.posts_by_keyword.get(keyword, []))[:limit]

    def get_comments(self, subreddit, post_id, token=None, limit=3):
        self.comment_calls.append((subreddit, post_id, token, limit))
        if post_id in self.failing_comment_posts:
            raise RuntimeError(f"comments exploded for {post_id}")
        return list(self.comments_by_post.get(post_id, []))[:limit]


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW
