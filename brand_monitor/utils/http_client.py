"""HTTP session factory with a bounded retry/backoff policy."""

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from brand_monitor.config import HttpConfig

RETRY_STATUSES = [429, 500, 502, 503, 504]


def create_session(
    user_agent: str,
    max_retries: int = 3,
    backoff_factor: float = 1.0,
) -> requests.Session:
    """Create a requests session that retries throttled and transient failures.

    The final response is handed back instead of raising once retries run out,
    so callers see the real status code (e.g. 429) and can report it.
    """
    session = requests.Session()

    retry_strategy = Retry(
        total=max_retries,
        backoff_factor=backoff_factor,
        status_forcelist=RETRY_STATUSES,
        allowed_methods=["GET", "POST"],
        respect_retry_after_header=True,
        raise_on_status=False,
    )

    adapter = HTTPAdapter(max_retries=retry_strategy)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    session.headers.update({
        "User-Agent": user_agent,
        "Accept": "application/json",
    })

    return session


def session_from_config(config: HttpConfig, user_agent: str) -> requests.Session:
    return create_session(
        user_agent=user_agent,
        max_retries=config.max_retries,
        backoff_factor=config.backoff_factor,
    )
