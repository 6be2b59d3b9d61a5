"""Event schemas for push notification dispatch."""
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from redditsync.models.notification import NotificationCategory

DeliveryStatus = Literal["sent", "skipped", "failed"]


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class NotificationEvent(BaseModel):
    """Event handed to the push transport through Redis."""

    user_id: str = Field(..., description="Opaque id of the recipient")
    category: NotificationCategory = Field(..., description="Event category")
    title: str = Field(..., description="Notification title")
    body: str = Field(..., description="Notification body")
    data: dict[str, Any] = Field(default_factory=dict, description="Payload passed to the client")
    service: str = Field(default="redditsync", description="Service emitting the event")
    timestamp: str = Field(default_factory=_utc_now_iso, description="ISO 8601 timestamp")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user_id": "u_123",
                "category": "new_comments",
                "title": "New reply",
                "body": "someone replied to your comment",
                "data": {"post_id": "abc123"},
                "service": "redditsync",
                "timestamp": "2026-10-18T10:30:00+00:00",
            }
        }
    )


class DeliveryOutcome(BaseModel):
    """Recorded result of one dispatch attempt."""

    user_id: str
    category: NotificationCategory
    title: str
    status: DeliveryStatus
    reason: str = Field(..., description="delivered, category_disabled, quiet_hours, preferences_unavailable, transport_error")
    timestamp: str = Field(default_factory=_utc_now_iso)
