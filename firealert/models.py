# firealert/models.py
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class FireEventIn(BaseModel):
    """
    Inbound alert payload. Every field is optional and a value of the wrong
    type is replaced by its default instead of failing validation.
    """
    model_config = ConfigDict(extra="ignore")

    timestamp: str = Field(default_factory=utc_now_iso)
    score: str = ""
    best: Optional[Dict[str, Any]] = None
    snapshot_filename: str = ""
    image_url: str = ""
    cloudinary_public_id: str = ""

    @field_validator("timestamp", mode="before")
    @classmethod
    def _timestamp_or_now(cls, v):
        return v if isinstance(v, str) else utc_now_iso()

    @field_validator("score", "snapshot_filename", "image_url", "cloudinary_public_id", mode="before")
    @classmethod
    def _string_or_empty(cls, v):
        return v if isinstance(v, str) else ""

    @field_validator("best", mode="before")
    @classmethod
    def _object_or_none(cls, v):
        return v if isinstance(v, dict) else None

    @classmethod
    def from_payload(cls, payload: Any) -> "FireEventIn":
        if not isinstance(payload, dict):
            payload = {}
        return cls.model_validate(payload)

    def to_document(self, ip: str, user_agent: str) -> Dict[str, Any]:
        doc = self.model_dump()
        doc["ip"] = ip
        doc["user_agent"] = user_agent
        return doc
