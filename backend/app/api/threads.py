"""HTTP endpoints for thread views and replies."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_optional_user
from app.database import get_db
from app.models import User
from app.schemas import MessageRead, ThreadRead, ThreadReplyCreate
from app.services import messages as message_store

router = APIRouter(prefix="/threads", tags=["threads"])


@router.get("/{thread_id}", response_model=ThreadRead)
def get_thread(
    thread_id: int,
    db: Session = Depends(get_db),
    current_user: User | None = Depends(get_optional_user),
) -> ThreadRead:
    """Return a thread root together with its visible replies."""

    viewer_id = current_user.id if current_user is not None else None
    return message_store.get_thread(db, thread_id, viewer_id)


@router.post("/{thread_id}", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
def reply_to_thread(
    thread_id: int,
    payload: ThreadReplyCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageRead:
    return message_store.reply_to_thread(db, thread_id, current_user, payload.content)
