# firealert/utils/request_info.py
import math
from typing import Optional
from fastapi import Request

DEFAULT_LIMIT = 50
MIN_LIMIT = 1
MAX_LIMIT = 200


def client_ip(request: Request) -> str:
    """Left-most X-Forwarded-For entry, else the socket peer."""
    xff = request.headers.get("x-forwarded-for", "")
    first = xff.split(",")[0].strip()
    if first:
        return first
    return request.client.host if request.client else ""


def user_agent(request: Request) -> str:
    return request.headers.get("user-agent", "")


def parse_limit(raw: Optional[str]) -> int:
    if raw is None or not raw.strip():
        return DEFAULT_LIMIT
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_LIMIT
    if math.isnan(value):
        return DEFAULT_LIMIT
    return int(max(MIN_LIMIT, min(MAX_LIMIT, value)))
