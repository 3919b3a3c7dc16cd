"""Schemas for user notifications."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.models.enums import NotificationType


class NotificationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    title: str
    message: str
    type: NotificationType
    link: str | None = None
    is_read: bool
    created_at: datetime
    metadata: dict[str, Any] | None = Field(
        default=None, validation_alias=AliasChoices("extra", "metadata")
    )


class NotificationCreate(BaseModel):
    """Admin payload; the first of user_id, user_ids or all_users that is set wins."""

    title: str = Field(default="", max_length=255)
    message: str = ""
    type: NotificationType = NotificationType.INFO
    link: str | None = Field(default=None, max_length=512)
    metadata: dict[str, Any] | None = None
    user_id: int | None = None
    user_ids: list[int] | None = None
    all_users: bool = False


class NotificationCount(BaseModel):
    count: int = Field(..., ge=0)
