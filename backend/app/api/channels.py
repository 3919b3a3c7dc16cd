"""Channel-specific API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.database import get_db
from app.models import User
from app.schemas import ChannelCreate, ChannelRead, ChannelUpdate
from app.services import directory

router = APIRouter(prefix="/channels", tags=["channels"])


@router.post("", response_model=ChannelRead, status_code=status.HTTP_201_CREATED)
def create_channel(
    payload: ChannelCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ChannelRead:
    """Create a channel inside a category."""

    channel = directory.create_channel(
        db,
        payload.category_id,
        payload.name,
        current_user,
        description=payload.description,
    )
    return ChannelRead.model_validate(channel, from_attributes=True)


@router.patch("/{channel_id}", response_model=ChannelRead)
def update_channel(
    channel_id: int,
    payload: ChannelUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ChannelRead:
    """Rename a channel or change its description."""

    update_data = payload.model_dump(exclude_unset=True)
    channel = directory.rename_channel(db, channel_id, current_user, **update_data)
    return ChannelRead.model_validate(channel, from_attributes=True)


@router.delete("/{channel_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_channel(
    channel_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Response:
    directory.delete_channel(db, channel_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
