"""Monitor routes — HTTP trigger for scheduled and manual keyword runs."""

import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from brand_monitor.config import ConfigurationError
from brand_monitor.pipeline import run_keyword_monitor
from brand_monitor.scheduler import get_scheduler_info

from .dependencies import require_trigger_token

logger = logging.getLogger("brand_monitor.web.monitor")

router = APIRouter(dependencies=[Depends(require_trigger_token)])


class TriggerPayloadError(ValueError):
    pass


def parse_trigger_payload(body: bytes) -> int | None:
    """Return the target user id of a manual trigger, or None for a scheduled run."""
    if not body.strip():
        return None
    try:
        payload = json.loads(body)
    except ValueError as e:
        raise TriggerPayloadError(f"Body is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise TriggerPayloadError("Body must be a JSON object")

    user_id = payload.get("user_id")
    if user_id is None:
        return None
    if isinstance(user_id, bool) or not isinstance(user_id, int):
        raise TriggerPayloadError("user_id must be an integer")
    return user_id


@router.post("/keyword-monitor")
async def trigger_keyword_monitor(request: Request):
    try:
        user_id = parse_trigger_payload(await request.body())
    except TriggerPayloadError as e:
        return JSONResponse({"error": "Malformed trigger payload", "details": str(e)}, status_code=400)

    try:
        summary = await run_in_threadpool(
            run_keyword_monitor,
            request.app.state.config,
            user_id=user_id,
            session_factory=request.app.state.session_factory,
        )
    except ConfigurationError as e:
        logger.error("Keyword monitor misconfigured: %s", e)
        return JSONResponse({"error": "Monitor is not configured", "details": str(e)}, status_code=500)

    return JSONResponse(summary.to_dict())


@router.get("/scheduler")
def scheduler_info():
    """Diagnostic endpoint — shows scheduler state."""
    return JSONResponse(get_scheduler_info())
