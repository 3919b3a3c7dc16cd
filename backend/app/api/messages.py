"""HTTP endpoints for managing board messages."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_optional_user
from app.config import get_settings
from app.database import get_db
from app.models import User
from app.schemas import MessageCreate, MessageDeleteRequest, MessageRead, MessageUpdate
from app.services import messages as message_store
from app.services.errors import InvalidArgumentError

router = APIRouter(prefix="/messages", tags=["messages"])

settings = get_settings()


@router.get("", response_model=list[MessageRead])
def list_messages(
    channel_id: int | None = Query(default=None),
    thread_id: int | None = Query(default=None),
    popular: bool = Query(default=False),
    limit: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    current_user: User | None = Depends(get_optional_user),
) -> list[MessageRead]:
    """List channel or thread messages, or the recent feed when ``popular`` is set."""

    viewer_id = current_user.id if current_user is not None else None
    if popular:
        return message_store.list_recent(
            db, limit or settings.board_history_default_limit, viewer_id
        )
    if channel_id is None:
        raise InvalidArgumentError("channel_id is required")
    return message_store.list_channel_messages(db, channel_id, thread_id, viewer_id)


@router.post("", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
def create_message(
    payload: MessageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageRead:
    """Post a message to a channel or reply into a thread."""

    return message_store.post_message(
        db,
        current_user,
        payload.content,
        channel_id=payload.channel_id,
        thread_id=payload.thread_id,
    )


@router.get("/{message_id}", response_model=MessageRead)
def read_message(
    message_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageRead:
    """Return a message by id, including soft-deleted rows."""

    return message_store.get_message(db, message_id, current_user.id)


@router.patch("/{message_id}", response_model=MessageRead)
def update_message(
    message_id: int,
    payload: MessageUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageRead:
    return message_store.edit_message(db, message_id, current_user, payload.content)


@router.delete("/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_message(
    message_id: int,
    payload: MessageDeleteRequest | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Response:
    """Soft-delete a message; admins removing others' messages must give a reason."""

    details = payload or MessageDeleteRequest()
    message_store.delete_message(
        db,
        message_id,
        current_user,
        reason_id=details.reason_id,
        custom_reason=details.custom_reason,
        admin_notes=details.admin_notes,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
