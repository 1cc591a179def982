# firealert/routes/events.py
import json
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from ..errors import StoreError
from ..models import FireEventIn
from ..schemas import ErrorOut, EventCreated, EventList, FireEventOut
from ..utils.auth import require_auth
from ..utils.request_info import client_ip, parse_limit, user_agent

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["fire-events"], dependencies=[Depends(require_auth)])


def _reject_constant(name: str):
    # NaN, Infinity and -Infinity are not JSON
    raise ValueError(f"invalid JSON constant {name}")


def _error(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    body = ErrorOut(error=error, details=details).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


@router.post("/fire-events", response_model=EventCreated)
async def create_fire_event(request: Request):
    """
    Receive a realtime detection alert.
    - Normalizes the body (wrong types fall back to defaults).
    - Stores it, then schedules the WhatsApp notification without awaiting it.
    """
    raw = await request.body()
    if len(raw) > request.app.state.settings.MAX_BODY_BYTES:
        return _error(413, "Payload too large")
    try:
        payload = json.loads(raw, parse_constant=_reject_constant) if raw.strip() else {}
    except ValueError:
        return _error(400, "Invalid JSON body")

    event_in = FireEventIn.from_payload(payload)
    doc = event_in.to_document(ip=client_ip(request), user_agent=user_agent(request))

    try:
        saved = await request.app.state.store.insert(doc)
    except StoreError as e:
        logger.error("Failed to store event: %s", e)
        return _error(500, "Failed to store event", str(e))

    event = FireEventOut.from_document(saved)
    request.app.state.dispatcher.schedule(event.model_dump(mode="json"))
    return EventCreated(event=event)


@router.get("/fire-events", response_model=EventList)
async def list_fire_events(request: Request, limit: Optional[str] = Query(default=None)):
    """Last N events, most recent first."""
    n = parse_limit(limit)
    try:
        docs = await request.app.state.store.find_recent(n)
    except StoreError as e:
        logger.error("Failed to read events: %s", e)
        return _error(500, "Failed to read events", str(e))

    events = [FireEventOut.from_document(d) for d in docs]
    return EventList(count=len(events), events=events)
