"""
Notifications API routes for Kinship.

List, create, read and delete in-app notifications, bulk actions, and
notification preferences.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field

from api.services.interaction_store import get_interaction_store
from api.services.notification_store import (
    NOTIFICATION_PRIORITIES,
    NOTIFICATION_TYPES,
    Notification,
    NotificationPreferences,
    get_notification_store,
)
from api.services.notifications import create_notification, generate_reminder_notifications
from api.services.person_store import get_person_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


# ---------------------------------------------------------------------------
# Request / Response models
# ---------------------------------------------------------------------------

class CreateNotificationRequest(BaseModel):
    type: str = Field(..., description="reminder, activity, milestone or system")
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    priority: str = Field(default="medium", description="low, medium or high")
    is_actionable: bool = False
    action_url: Optional[str] = None
    metadata: dict = Field(default_factory=dict)
    expires_at: Optional[datetime] = None


class NotificationResponse(BaseModel):
    id: str
    type: str
    title: str
    description: Optional[str]
    priority: str
    is_actionable: bool
    action_url: Optional[str]
    metadata: dict
    person_id: Optional[str]
    is_read: bool
    read_at: Optional[str]
    created_at: str
    expires_at: Optional[str]

    @classmethod
    def from_notification(cls, n: Notification) -> "NotificationResponse":
        return cls(**n.to_dict())


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    total: int
    unread_count: int


class ActionRequest(BaseModel):
    action: str


class PreferencesRequest(BaseModel):
    reminder_enabled: Optional[bool] = None
    reminder_frequency_days: Optional[int] = Field(default=None, ge=1, le=365)
    activity_enabled: Optional[bool] = None
    milestone_enabled: Optional[bool] = None
    system_enabled: Optional[bool] = None


# ---------------------------------------------------------------------------
# Routes (static paths MUST come before {notification_id} to avoid capture)
# ---------------------------------------------------------------------------

@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    limit: int = Query(default=20, ge=1, le=200),
    include_read: bool = Query(default=True),
):
    """Newest notifications first."""
    store = get_notification_store()
    notifications = store.list_all(limit=limit, include_read=include_read)
    return NotificationListResponse(
        notifications=[NotificationResponse.from_notification(n) for n in notifications],
        total=len(notifications),
        unread_count=store.unread_count(),
    )


@router.post("", response_model=NotificationResponse)
async def create_notification_route(request: CreateNotificationRequest):
    """Create a notification."""
    if request.type not in NOTIFICATION_TYPES:
        raise HTTPException(status_code=400, detail=f"type must be one of: {', '.join(NOTIFICATION_TYPES)}")
    if request.priority not in NOTIFICATION_PRIORITIES:
        raise HTTPException(status_code=400, detail="priority must be 'low', 'medium' or 'high'")

    notification = create_notification(
        type=request.type,
        title=request.title,
        description=request.description,
        priority=request.priority,
        is_actionable=request.is_actionable,
        action_url=request.action_url,
        metadata=request.metadata,
        expires_at=request.expires_at,
    )
    if not notification:
        raise HTTPException(status_code=500, detail="Failed to create notification")
    return NotificationResponse.from_notification(notification)


@router.get("/unread-count")
async def get_unread_count():
    return {"count": get_notification_store().unread_count()}


@router.post("/actions")
async def notification_action(request: ActionRequest):
    """Bulk actions: mark_all_read, cleanup_expired, generate_reminders, get_unread_count."""
    store = get_notification_store()

    if request.action == "mark_all_read":
        updated = store.mark_all_as_read()
        return {"success": True, "message": "All notifications marked as read", "data": {"updated": updated}}

    if request.action == "cleanup_expired":
        removed = store.delete_expired(datetime.now(timezone.utc))
        return {"success": True, "message": "Expired notifications cleaned up", "data": {"removed": removed}}

    if request.action == "generate_reminders":
        created = generate_reminder_notifications(
            get_person_store().get_all(),
            get_interaction_store().get_all(),
            datetime.now(timezone.utc),
        )
        return {"success": True, "message": "Reminder notifications generated", "data": {"created": created}}

    if request.action == "get_unread_count":
        return {"success": True, "data": {"count": store.unread_count()}}

    raise HTTPException(status_code=400, detail="Invalid action")


@router.get("/preferences")
async def get_preferences():
    return get_notification_store().get_preferences().to_dict()


@router.put("/preferences")
async def update_preferences(request: PreferencesRequest):
    store = get_notification_store()
    current = store.get_preferences().to_dict()
    current.update({k: v for k, v in request.model_dump().items() if v is not None})
    return store.save_preferences(NotificationPreferences(**current)).to_dict()


@router.get("/{notification_id}", response_model=NotificationResponse)
async def get_notification(notification_id: str):
    notification = get_notification_store().get(notification_id)
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    return NotificationResponse.from_notification(notification)


@router.put("/{notification_id}/read")
async def mark_notification_read(notification_id: str):
    if not get_notification_store().mark_as_read(notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"status": "read", "id": notification_id}


@router.delete("/{notification_id}")
async def delete_notification(notification_id: str):
    if not get_notification_store().delete(notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"status": "deleted", "id": notification_id}
