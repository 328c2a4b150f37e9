"""Tests for the Reddit search client."""

from unittest.mock import MagicMock

import pytest
import requests

from brand_monitor.reddit.search import RedditSearchClient

from conftest import make_response


def listing(*posts):
    return {"data": {"children": [{"kind": "t3", "data": p} for p in posts]}}


def comment_listing(*comments):
    return [
        listing({"id": "p1", "title": "post"}),
        {"data": {"children": [{"kind": "t1", "data": c} for c in comments]}},
    ]


POST = {
    "id": "p1",
    "title": "Acme review",
    "selftext": "Acme is great",
    "author": "poster",
    "subreddit": "startups",
    "score": 10,
    "num_comments": 2,
    "created_utc": 1760000000,
    "permalink": "/r/startups/comments/p1/acme_review/",
}


@pytest.fixture
def http_session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(http_session):
    return RedditSearchClient(http_session, timeout=5)


class TestSearchPosts:
    def test_anonymous_mode(self, client, http_session):
        http_session.get.return_value = make_response(200, listing(POST))

        posts = client.search_posts("Acme", token=None, limit=10)

        assert [p.id for p in posts] == ["p1"]
        args, kwargs = http_session.get.call_args
        assert args[0] == "https://www.reddit.com/search.json"
        assert kwargs["params"] == {"q": "Acme", "limit": 10, "sort": "new", "t": "week"}
        assert "Authorization" not in kwargs["headers"]

    def test_authenticated_mode(self, client, http_session):
        http_session.get.return_value = make_response(200, listing(POST))

        client.search_posts("Acme", token="tok", limit=5)

        args, kwargs = http_session.get.call_args
        assert args[0] == "https://oauth.reddit.com/search"
        assert kwargs["headers"] == {"Authorization": "Bearer tok"}
        assert kwargs["params"]["limit"] == 5

    @pytest.mark.parametrize("status", [401, 403, 429, 500])
    def test_non_2xx_returns_empty(self, client, http_session, status):
        http_session.get.return_value = make_response(status, {"error": status})
        assert client.search_posts("Acme", token="tok") == []
        assert http_session.get.call_count == 1

    def test_transport_error_returns_empty(self, client, http_session):
        http_session.get.side_effect = requests.Timeout("slow")
        assert client.search_posts("Acme") == []

    def test_non_json_returns_empty(self, client, http_session):
        http_session.get.return_value = make_response(200, None, text="<html>")
        assert client.search_posts("Acme") == []

    @pytest.mark.parametrize("body", [
        {"kind": "Listing", "data": None},
        {"data": {"children": None}},
        {"data": "oops"},
        ["not", "a", "listing"],
        {},
    ])
    def test_malformed_listing_returns_empty(self, client, http_session, body):
        http_session.get.return_value = make_response(200, body)
        assert client.search_posts("Acme") == []

    def test_malformed_children_skipped(self, client, http_session):
        http_session.get.return_value = make_response(200, {"data": {"children": [
            None,
            "t3_p0",
            {"kind": "t3", "data": None},
            {"kind": "t3", "data": POST},
        ]}})
        assert [p.id for p in client.search_posts("Acme")] == ["p1"]

    def test_bad_created_utc_does_not_raise(self, client, http_session):
        http_session.get.return_value = make_response(200, listing(dict(POST, created_utc="yesterday")))
        assert [p.id for p in client.search_posts("Acme")] == ["p1"]

    def test_removed_posts_filtered(self, client, http_session):
        removed = dict(POST, id="p2", selftext="[removed]")
        deleted = dict(POST, id="p3", selftext="[deleted]")
        http_session.get.return_value = make_response(200, listing(POST, removed, deleted))
        assert [p.id for p in client.search_posts("Acme")] == ["p1"]


class TestGetComments:
    def test_anonymous_url_and_params(self, client, http_session):
        http_session.get.return_value = make_response(200, comment_listing(
            {"id": "c1", "body": "Acme!", "author": "a", "score": 1, "parent_id": "t3_p1", "created_utc": 1760000000},
        ))

        comments = client.get_comments("startups", "p1", token=None, limit=3)

        assert [c.id for c in comments] == ["c1"]
        args, kwargs = http_session.get.call_args
        assert args[0] == "https://www.reddit.com/r/startups/comments/p1.json"
        assert kwargs["params"] == {"limit": 3, "sort": "top"}

    def test_authenticated_url(self, client, http_session):
        http_session.get.return_value = make_response(200, comment_listing())
        client.get_comments("startups", "p1", token="tok")
        args, kwargs = http_session.get.call_args
        assert args[0] == "https://oauth.reddit.com/r/startups/comments/p1"
        assert kwargs["headers"] == {"Authorization": "Bearer tok"}

    def test_deleted_removed_and_stubs_filtered(self, client, http_session):
        http_session.get.return_value = make_response(200, comment_listing(
            {"id": "c1", "body": "[deleted]"},
            {"id": "c2", "body": "[removed]"},
            {"id": "c3", "body": "Acme is fine"},
            {"id": "more", "count": 12, "children": ["x"]},
        ))
        assert [c.id for c in client.get_comments("startups", "p1")] == ["c3"]

    def test_bounded_by_limit(self, client, http_session):
        http_session.get.return_value = make_response(200, comment_listing(
            *[{"id": f"c{i}", "body": f"comment {i}"} for i in range(6)]
        ))
        assert len(client.get_comments("startups", "p1", limit=3)) == 3

    def test_failure_returns_empty(self, client, http_session):
        http_session.get.return_value = make_response(429, {})
        assert client.get_comments("startups", "p1") == []

    def test_unexpected_shape_returns_empty(self, client, http_session):
        http_session.get.return_value = make_response(200, {"data": {}})
        assert client.get_comments("startups", "p1") == []

    @pytest.mark.parametrize("second", [None, {"data": None}, {"data": {"children": "x"}}, "oops"])
    def test_malformed_comment_listing_returns_empty(self, client, http_session, second):
        http_session.get.return_value = make_response(200, [listing({"id": "p1", "title": "post"}), second])
        assert client.get_comments("startups", "p1") == []

    def test_malformed_comment_children_skipped(self, client, http_session):
        good = {"id": "c1", "body": "Acme rocks", "author": "a"}
        http_session.get.return_value = make_response(200, [
            listing({"id": "p1", "title": "post"}),
            {"data": {"children": [None, {"kind": "t1"}, {"kind": "t1", "data": good}]}},
        ])
        assert [c.id for c in client.get_comments("startups", "p1")] == ["c1"]
