"""HTTP endpoints for user notifications."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, require_admin
from app.config import get_settings
from app.database import get_db
from app.models import User
from app.schemas import NotificationCount, NotificationCreate, NotificationRead
from app.services import notifications as emitter
from app.services.notifications import NotificationTarget

router = APIRouter(prefix="/notifications", tags=["notifications"])

settings = get_settings()


def _target_from_payload(payload: NotificationCreate) -> NotificationTarget:
    if payload.user_id is not None:
        return NotificationTarget.single(payload.user_id)
    if payload.user_ids:
        return NotificationTarget.many(payload.user_ids)
    if payload.all_users:
        return NotificationTarget.everyone()
    return NotificationTarget()


@router.get("", response_model=list[NotificationRead])
def list_notifications(
    limit: int | None = Query(default=None, ge=1, le=200),
    unread_only: bool = Query(default=False),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[NotificationRead]:
    """Return the caller's notifications, newest first."""

    notifications = emitter.list_notifications(
        db,
        current_user,
        limit=limit or settings.notifications_default_limit,
        unread_only=unread_only,
    )
    return [NotificationRead.model_validate(item, from_attributes=True) for item in notifications]


@router.post("", response_model=NotificationCount, status_code=status.HTTP_201_CREATED)
def create_notification(
    payload: NotificationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> NotificationCount:
    """Send a notification to one user, several users or everyone."""

    count = emitter.notify(
        db,
        _target_from_payload(payload),
        payload.title,
        payload.message,
        notification_type=payload.type,
        link=payload.link,
        metadata=payload.metadata,
        actor_id=current_user.id,
    )
    return NotificationCount(count=count)


@router.post("/read-all", response_model=NotificationCount)
def mark_all_notifications_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationCount:
    return NotificationCount(count=emitter.mark_all_read(db, current_user))


@router.post("/{notification_id}/read", response_model=NotificationRead)
def mark_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> NotificationRead:
    notification = emitter.mark_read(db, notification_id, current_user)
    return NotificationRead.model_validate(notification, from_attributes=True)
