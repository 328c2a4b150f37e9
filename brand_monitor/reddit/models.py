"""Reddit post and comment records parsed from listing JSON."""

from dataclasses import dataclass, field
from datetime import datetime

from brand_monitor.utils.timeutils import from_epoch, utcnow

REMOVED_SENTINELS = {"[deleted]", "[removed]"}


@dataclass
class RedditPost:
    """A search result from Reddit."""

    id: str
    title: str
    subreddit: str
    selftext: str = ""
    author: str = ""
    score: int = 0
    num_comments: int = 0
    permalink: str = ""
    created_at: datetime = field(default_factory=utcnow)

    @property
    def text(self) -> str:
        return f"{self.title} {self.selftext}".strip()

    @property
    def url(self) -> str:
        return f"https://reddit.com{self.permalink}" if self.permalink else ""

    @property
    def is_removed(self) -> bool:
        return self.selftext in REMOVED_SENTINELS

    @classmethod
    def from_listing(cls, data: dict) -> "RedditPost | None":
        post_id = data.get("id")
        if not post_id:
            return None
        return cls(
            id=post_id,
            title=data.get("title") or "",
            subreddit=data.get("subreddit") or "",
            selftext=data.get("selftext") or "",
            author=data.get("author") or "",
            score=data.get("score") or 0,
            num_comments=data.get("num_comments") or 0,
            permalink=data.get("permalink") or "",
            created_at=from_epoch(data.get("created_utc")),
        )


@dataclass
class RedditComment:
    id: str
    body: str
    author: str = ""
    score: int = 0
    parent_id: str = ""
    created_at: datetime = field(default_factory=utcnow)

    @property
    def is_removed(self) -> bool:
        return self.body in REMOVED_SENTINELS

    @classmethod
    def from_listing(cls, data: dict) -> "RedditComment | None":
        # "more" stubs carry no body
        comment_id = data.get("id")
        body = data.get("body")
        if not comment_id or not body:
            return None
        return cls(
            id=comment_id,
            body=body,
            author=data.get("author") or "",
            score=data.get("score") or 0,
            parent_id=data.get("parent_id") or "",
            created_at=from_epoch(data.get("created_utc")),
        )
