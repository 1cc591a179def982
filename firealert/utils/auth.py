# firealert/utils/auth.py
import hmac
from fastapi import Request
from fastapi.responses import JSONResponse
from ..errors import AuthorizationError

BEARER_PREFIX = "Bearer "


def bearer_token(request: Request) -> str:
    header = request.headers.get("authorization", "")
    return header[len(BEARER_PREFIX):] if header.startswith(BEARER_PREFIX) else ""


async def require_auth(request: Request):
    """Route dependency; no-op when API_KEY is unset."""
    api_key = request.app.state.settings.API_KEY
    if not api_key:
        return
    token = bearer_token(request)
    if not hmac.compare_digest(token.encode("utf-8"), api_key.encode("utf-8")):
        raise AuthorizationError("Unauthorized")


async def authorization_error_handler(request: Request, exc: AuthorizationError):
    return JSONResponse(status_code=401, content={"ok": False, "error": "Unauthorized"})
