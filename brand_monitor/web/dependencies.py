"""Shared FastAPI dependencies — DB session and trigger-token auth."""

import secrets
from collections.abc import Generator

from fastapi import HTTPException, Request
from sqlalchemy.orm import Session


def get_db(request: Request) -> Generator[Session, None, None]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def require_trigger_token(request: Request) -> None:
    """Reject requests whose bearer token does not match monitor.trigger_token."""
    expected = request.app.state.config.monitor.trigger_token
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing or invalid authorization header")
    supplied = header.removeprefix("Bearer ").strip()
    if not expected or not secrets.compare_digest(supplied, expected):
        raise HTTPException(status_code=401, detail="Invalid trigger token")
