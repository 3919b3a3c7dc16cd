"""HTTP endpoints for deletion reasons and the moderation log."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, require_admin
from app.database import get_db
from app.models import User
from app.schemas import ContentActionLogRead, DeletionReasonRead, ModerationActionCreate
from app.services import moderation

router = APIRouter(prefix="/moderation", tags=["moderation"])


@router.get("/reasons", response_model=list[DeletionReasonRead])
def list_deletion_reasons(db: Session = Depends(get_db)) -> list[DeletionReasonRead]:
    """Active deletion reasons, most severe first."""

    return [
        DeletionReasonRead.model_validate(reason, from_attributes=True)
        for reason in moderation.list_deletion_reasons(db)
    ]


@router.get("/logs", response_model=list[ContentActionLogRead])
def list_action_logs(
    author_id: int | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> list[ContentActionLogRead]:
    entries = moderation.list_action_logs(db, content_author_id=author_id, limit=limit)
    return [ContentActionLogRead.model_validate(entry, from_attributes=True) for entry in entries]


@router.get("/logs/me", response_model=list[ContentActionLogRead])
def list_own_action_logs(
    limit: int = Query(default=50, ge=1, le=200),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[ContentActionLogRead]:
    """Moderation actions taken against the caller's content."""

    entries = moderation.list_action_logs(db, content_author_id=current_user.id, limit=limit)
    return [ContentActionLogRead.model_validate(entry, from_attributes=True) for entry in entries]


@router.post("/actions", response_model=ContentActionLogRead, status_code=status.HTTP_201_CREATED)
def record_action(
    payload: ModerationActionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> ContentActionLogRead:
    """Record a moderation action and notify the affected author."""

    entry = moderation.record_moderation_action(
        db,
        current_user,
        **payload.model_dump(),
    )
    return ContentActionLogRead.model_validate(entry, from_attributes=True)
