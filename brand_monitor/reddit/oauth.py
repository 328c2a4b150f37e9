"""Reddit OAuth token lifecycle.

Hands out a usable access token for a user, refreshing it through Reddit's
token endpoint when it is about to expire. A None result is not an error for
callers: it means "search anonymously".

Usage:
    manager = TokenManager(
        credentials=CredentialStore(db),
        client_id="...",
        client_secret="...",
        session=create_session(user_agent),
    )
    token = manager.get_valid_token(user_id)
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional

import requests

from brand_monitor.storage.credentials import CredentialStore
from brand_monitor.utils.timeutils import ensure_utc, utcnow

logger = logging.getLogger("brand_monitor.reddit.oauth")

DEFAULT_EXPIRES_IN = 3600
MAX_EXPIRES_IN = 365 * 24 * 3600


class TokenManager:
    """Returns currently-valid Reddit access tokens, refreshing when needed."""

    TOKEN_URL = "https://www.reddit.com/api/v1/access_token"

    def __init__(
        self,
        credentials: CredentialStore,
        client_id: str,
        client_secret: str,
        session: requests.Session,
        refresh_buffer: timedelta = timedelta(minutes=5),
        timeout: int = 10,
    ):
        self.credentials = credentials
        self.client_id = client_id
        self.client_secret = client_secret
        self.session = session
        self.refresh_buffer = refresh_buffer
        self.timeout = timeout

    def get_valid_token(self, user_id: int, now: Optional[datetime] = None) -> Optional[str]:
        """Return an access token usable right now, or None.

        Args:
            user_id: Owner of the credential.
            now: Current time (injectable for tests).

        Returns:
            The stored token if it outlives the refresh buffer, a freshly
            refreshed token otherwise, or None when there is no credential,
            no refresh token, or the refresh was rejected.
        """
        now = now or utcnow()
        credential = self.credentials.get(user_id)
        if credential is None:
            logger.info("[user:%d] No Reddit credential, using anonymous access", user_id)
            return None

        if now + self.refresh_buffer < ensure_utc(credential.expires_at):
            return credential.access_token

        if not credential.refresh_token:
            logger.warning("[user:%d] Reddit token expired and no refresh token stored", user_id)
            return None

        token_data = self.refresh_access_token(credential.refresh_token)
        if token_data is None:
            logger.warning("[user:%d] Reddit token refresh failed, falling back to anonymous access", user_id)
            return None

        access_token = token_data["access_token"]
        expires_at = now + timedelta(seconds=token_data["expires_in"])
        self.credentials.update(user_id, access_token=access_token, expires_at=expires_at)
        logger.info("[user:%d] Refreshed Reddit token, valid until %s", user_id, expires_at.isoformat())
        return access_token

    def refresh_access_token(self, refresh_token: str) -> Optional[dict[str, Any]]:
        """Exchange a refresh token for a new access token.

        Returns the token response ({access_token, expires_in, token_type,
        scope}) or None if Reddit rejected the refresh or was unreachable.
        """
        try:
            response = self.session.post(
                self.TOKEN_URL,
                data={
                    "grant_type": "refresh_token",
                    "refresh_token": refresh_token,
                },
                auth=(self.client_id, self.client_secret),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Reddit token refresh request failed: %s", e)
            return None

        if not response.ok:
            logger.error("Reddit token refresh rejected (%d): %s", response.status_code, response.text[:200])
            return None

        try:
            token_data = response.json()
        except ValueError:
            logger.error("Reddit token refresh returned a non-JSON body")
            return None

        if not isinstance(token_data, dict) or not token_data.get("access_token"):
            logger.error("Reddit token refresh response has no access_token: %s", _refresh_error(token_data))
            return None

        token_data["expires_in"] = _expires_in(token_data.get("expires_in"))
        return token_data


def _refresh_error(token_data) -> str:
    if isinstance(token_data, dict):
        return token_data.get("error", "unknown")
    return "unexpected body"


def _expires_in(value) -> int:
    """Token lifetime in seconds; a missing or unusable value means one hour."""
    if value is None or isinstance(value, bool):
        return DEFAULT_EXPIRES_IN
    try:
        seconds = int(value)
    except (TypeError, ValueError, OverflowError):
        logger.warning("Reddit token refresh returned an unusable expires_in: %r", value)
        return DEFAULT_EXPIRES_IN
    if not 0 < seconds <= MAX_EXPIRES_IN:
        logger.warning("Reddit token refresh returned an out-of-range expires_in: %d", seconds)
        return DEFAULT_EXPIRES_IN
    return seconds
