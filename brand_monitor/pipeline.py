"""Keyword monitor pipeline — searches Reddit for each due keyword and stores new mentions."""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

import requests
from sqlalchemy.orm import Session, sessionmaker

from brand_monitor.analysis.reputation import update_daily_reputation_scores
from brand_monitor.analysis.sentiment import classify
from brand_monitor.config import AppConfig, require_monitor_config
from brand_monitor.models import KeywordSearch, Mention, SessionLocal
from brand_monitor.reddit.models import RedditComment, RedditPost
from brand_monitor.reddit.oauth import TokenManager
from brand_monitor.reddit.search import RedditSearchClient
from brand_monitor.storage.credentials import CredentialStore
from brand_monitor.storage.keyword_jobs import KeywordJobStore
from brand_monitor.storage.mentions import MentionStore
from brand_monitor.utils.http_client import session_from_config
from brand_monitor.utils.timeutils import utcnow

logger = logging.getLogger("brand_monitor.pipeline")

PLATFORM = "reddit"
SCHEDULED = "scheduled"
MANUAL = "manual"


@dataclass
class RunSummary:
    mode: str = SCHEDULED
    processed: int = 0
    total_mentions_found: int = 0
    message: str = "Keyword monitoring completed successfully"

    def to_dict(self) -> dict:
        return {
            "success": True,
            "processed": self.processed,
            "totalMentionsFound": self.total_mentions_found,
            "message": self.message,
        }


@dataclass
class MonitorServices:
    """Collaborators of one run, all bound to the same DB session."""

    jobs: KeywordJobStore
    mentions: MentionStore
    tokens: TokenManager
    search: RedditSearchClient


def build_services(
    db: Session,
    config: AppConfig,
    http_session: Optional[requests.Session] = None,
    search_client: Optional[RedditSearchClient] = None,
) -> MonitorServices:
    if http_session is None:
        http_session = session_from_config(config.http, config.reddit.user_agent)
    if search_client is None:
        search_client = RedditSearchClient(
            http_session,
            timeout=config.http.timeout_seconds,
            sort=config.reddit.sort,
            time_range=config.reddit.time_range,
        )
    tokens = TokenManager(
        credentials=CredentialStore(db),
        client_id=config.reddit.client_id,
        client_secret=config.reddit.client_secret,
        session=http_session,
        refresh_buffer=timedelta(minutes=config.monitor.token_refresh_buffer_minutes),
        timeout=config.http.timeout_seconds,
    )
    return MonitorServices(
        jobs=KeywordJobStore(db),
        mentions=MentionStore(db, content_max_length=config.monitor.content_max_length),
        tokens=tokens,
        search=search_client,
    )


def run_keyword_monitor(
    config: AppConfig,
    user_id: Optional[int] = None,
    session_factory: sessionmaker = SessionLocal,
    http_session: Optional[requests.Session] = None,
    search_client: Optional[RedditSearchClient] = None,
    clock: Callable[[], datetime] = utcnow,
    sleep: Callable[[float], None] = time.sleep,
) -> RunSummary:
    """Run one monitoring pass.

    With user_id, every active search of that user runs now and none is
    rescheduled (manual trigger). Without it, every due search across users
    runs oldest-due first and gets its next run time pushed forward.

    Raises ConfigurationError before touching any job if Reddit client
    credentials are missing. Everything else is contained per post or per job.
    """
    require_monitor_config(config)

    mode = MANUAL if user_id is not None else SCHEDULED
    summary = RunSummary(mode=mode)
    db = session_factory()
    try:
        services = build_services(db, config, http_session, search_client)

        if mode == MANUAL:
            jobs = services.jobs.select_for_user(user_id)
        else:
            jobs = services.jobs.select_due(clock())

        budget = config.monitor.max_jobs_per_run
        if budget > 0 and len(jobs) > budget:
            logger.warning("%d searches due, processing %d this run", len(jobs), budget)
            jobs = jobs[:budget]

        logger.info("Processing %d keyword searches (%s run)", len(jobs), mode)

        touched_users: set[int] = set()
        for job in jobs:
            touched_users.add(job.user_id)
            found = _run_job(db, job, services, config, mode, clock, sleep)
            summary.processed += 1
            summary.total_mentions_found += found

        if touched_users:
            update_daily_reputation_scores(db, touched_users, clock().date())

        logger.info(
            "Keyword monitoring done: %d searches, %d new mentions",
            summary.processed, summary.total_mentions_found,
        )
        return summary
    finally:
        db.close()


def _run_job(
    db: Session,
    job: KeywordSearch,
    services: MonitorServices,
    config: AppConfig,
    mode: str,
    clock: Callable[[], datetime],
    sleep: Callable[[float], None],
) -> int:
    """Process one search and write its bookkeeping. Never raises."""
    job_id = job.id
    user_id = job.user_id
    keyword = job.keyword
    previous_total = job.total_mentions_found or 0
    frequency_hours = job.search_frequency_hours or 24

    try:
        logger.info("[user:%d] Processing keyword '%s'", user_id, keyword)
        found = process_keyword_job(user_id, keyword, services, config, clock, sleep)

        finished = clock()
        update = {
            "last_searched_at": finished,
            "total_mentions_found": previous_total + found,
            "last_error": None,
        }
        if mode == SCHEDULED:
            update["next_search_at"] = finished + timedelta(hours=frequency_hours)
        services.jobs.update(job_id, **update)

        logger.info("[user:%d] Found %d new mentions for '%s'", user_id, found, keyword)
        return found

    except Exception as e:
        logger.error("[user:%d] Keyword '%s' failed: %s", user_id, keyword, e, exc_info=True)
        db.rollback()
        failed_at = clock()
        update = {"last_searched_at": failed_at, "last_error": f"{type(e).__name__}: {e}"}
        if mode == SCHEDULED:
            update["next_search_at"] = failed_at + timedelta(hours=frequency_hours)
        try:
            services.jobs.update(job_id, **update)
        except Exception:
            db.rollback()
            logger.error("[user:%d] Could not record failure for search %d", user_id, job_id, exc_info=True)
        return 0


def process_keyword_job(
    user_id: int,
    keyword: str,
    services: MonitorServices,
    config: AppConfig,
    clock: Callable[[], datetime] = utcnow,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Search one keyword and store every new post/comment mention. Returns mentions inserted."""
    token = services.tokens.get_valid_token(user_id, now=clock())
    posts = services.search.search_posts(keyword, token, limit=config.reddit.post_limit)

    found = 0
    for index, post in enumerate(posts):
        if index:
            sleep(config.monitor.post_delay_seconds)
        try:
            found += _process_post(user_id, keyword, post, token, services, config)
        except Exception as e:
            logger.error("[user:%d] Failed processing post %s: %s", user_id, post.id, e, exc_info=True)
    return found


def _process_post(
    user_id: int,
    keyword: str,
    post: RedditPost,
    token: Optional[str],
    services: MonitorServices,
    config: AppConfig,
) -> int:
    if services.mentions.exists(user_id, PLATFORM, post.id):
        return 0

    result = classify(post.text, keyword)
    inserted = services.mentions.insert(Mention(
        user_id=user_id,
        keyword=keyword,
        platform=PLATFORM,
        author=post.author,
        content=post.text,
        sentiment=result.sentiment,
        subreddit=post.subreddit,
        post_id=post.id,
        comment_id=None,
        url=post.url,
        score=post.score,
        num_comments=post.num_comments,
        tags=result.tags,
        mentioned_at=post.created_at,
    ))
    if not inserted:
        return 0

    found = 1
    comments = services.search.get_comments(
        post.subreddit, post.id, token, limit=config.reddit.comment_limit
    )
    keyword_lower = keyword.lower()
    for comment in comments:
        if keyword_lower not in comment.body.lower():
            continue
        if _store_comment(user_id, keyword, post, comment, services):
            found += 1
    return found


def _store_comment(
    user_id: int,
    keyword: str,
    post: RedditPost,
    comment: RedditComment,
    services: MonitorServices,
) -> bool:
    if services.mentions.exists(user_id, PLATFORM, post.id, comment.id):
        return False

    result = classify(comment.body, keyword)
    return services.mentions.insert(Mention(
        user_id=user_id,
        keyword=keyword,
        platform=PLATFORM,
        author=comment.author,
        content=comment.body,
        sentiment=result.sentiment,
        subreddit=post.subreddit,
        post_id=post.id,
        comment_id=comment.id,
        url=post.url,
        score=comment.score,
        num_comments=0,
        tags=result.tags,
        mentioned_at=comment.created_at,
    ))
