# firealert/schemas.py
from pydantic import BaseModel
from typing import Optional, Dict, Any, List
from datetime import datetime


class FireEventOut(BaseModel):
    id: str
    received_at: datetime   # serialized to ISO
    timestamp: str = ""
    score: str = ""
    best: Optional[Dict[str, Any]] = None
    snapshot_filename: str = ""
    image_url: str = ""
    cloudinary_public_id: str = ""
    ip: str = ""
    user_agent: str = ""

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "FireEventOut":
        data = {k: v for k, v in doc.items() if k != "_id" and v is not None}
        if not isinstance(data.get("best"), dict):
            data.pop("best", None)
        return cls(id=str(doc["_id"]), **data)


class HealthOut(BaseModel):
    ok: bool = True
    status: str = "up"
    time: str


class EventCreated(BaseModel):
    ok: bool = True
    message: str = "Event stored"
    event: FireEventOut


class EventList(BaseModel):
    ok: bool = True
    count: int
    events: List[FireEventOut]


class ErrorOut(BaseModel):
    ok: bool = False
    error: str
    details: Optional[str] = None
