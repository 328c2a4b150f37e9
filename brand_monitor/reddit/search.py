"""Reddit search client — keyword search and top comments, authenticated or anonymous."""

import logging
from typing import Optional

import requests

from brand_monitor.reddit.models import RedditComment, RedditPost

logger = logging.getLogger("brand_monitor.reddit.search")


class RedditSearchClient:
    """Queries Reddit for posts and comments.

    With a token, requests go to oauth.reddit.com with a bearer header;
    without one, to the public www.reddit.com JSON endpoints. The mode is
    decided per call by token presence alone and never switched mid-call.
    Non-2xx and transport failures are logged and read as "no results".
    """

    OAUTH_BASE = "https://oauth.reddit.com"
    PUBLIC_BASE = "https://www.reddit.com"

    def __init__(
        self,
        session: requests.Session,
        timeout: int = 10,
        sort: str = "new",
        time_range: str = "week",
    ):
        self.session = session
        self.timeout = timeout
        self.sort = sort
        self.time_range = time_range

    def search_posts(self, keyword: str, token: Optional[str] = None, limit: int = 10) -> list[RedditPost]:
        if token:
            url = f"{self.OAUTH_BASE}/search"
        else:
            url = f"{self.PUBLIC_BASE}/search.json"
        params = {"q": keyword, "limit": limit, "sort": self.sort, "t": self.time_range}

        data = self._get_json(url, params, token, context=f"search '{keyword}'")
        posts = []
        for item in _listing_items(data):
            post = RedditPost.from_listing(item)
            if post is None or post.is_removed:
                continue
            posts.append(post)

        logger.info(
            "Fetched %d posts for '%s' (%s)",
            len(posts), keyword, "oauth" if token else "anonymous",
        )
        return posts

    def get_comments(
        self,
        subreddit: str,
        post_id: str,
        token: Optional[str] = None,
        limit: int = 3,
    ) -> list[RedditComment]:
        if token:
            url = f"{self.OAUTH_BASE}/r/{subreddit}/comments/{post_id}"
        else:
            url = f"{self.PUBLIC_BASE}/r/{subreddit}/comments/{post_id}.json"
        params = {"limit": limit, "sort": "top"}

        data = self._get_json(url, params, token, context=f"comments {post_id}")
        # [post listing, comment listing]
        if not isinstance(data, list) or len(data) < 2:
            return []

        comments = []
        for item in _listing_items(data[1]):
            comment = RedditComment.from_listing(item)
            if comment is None or comment.is_removed:
                continue
            comments.append(comment)
        return comments[:limit]

    def _get_json(self, url: str, params: dict, token: Optional[str], context: str):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        try:
            response = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Reddit request failed for %s: %s", context, e)
            return None

        if not response.ok:
            status = response.status_code
            if status == 401:
                logger.warning("Reddit rejected credentials for %s (401) - token invalid", context)
            elif status == 429:
                logger.warning("Reddit rate limited %s (429)", context)
            elif status == 403:
                logger.warning("Reddit blocked %s (403)", context)
            else:
                logger.warning("Reddit returned %d for %s", status, context)
            return None

        try:
            return response.json()
        except ValueError:
            logger.warning("Reddit returned a non-JSON body for %s", context)
            return None


def _listing_items(listing) -> list[dict]:
    """Return the data dicts of a Listing's children, skipping anything malformed."""
    if not isinstance(listing, dict):
        return []
    body = listing.get("data")
    if not isinstance(body, dict):
        return []
    children = body.get("children")
    if not isinstance(children, list):
        return []
    items = []
    for child in children:
        if isinstance(child, dict) and isinstance(child.get("data"), dict):
            items.append(child["data"])
    return items
