# firealert/routes/health.py
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse
from ..models import utc_now_iso
from ..schemas import HealthOut

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthOut)
async def health():
    return HealthOut(time=utc_now_iso())


@router.get("/", response_class=PlainTextResponse)
async def welcome():
    return "Welcome to Fire detection App"
