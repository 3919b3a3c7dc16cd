"""Schemas for deletion reasons and the content action log."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import ContentActionType, ReasonSeverity


class DeletionReasonRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    severity: ReasonSeverity
    is_active: bool


class ContentActionLogRead(BaseModel):
    """Entry of the moderation audit trail."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    action_type: ContentActionType
    content_type: str
    content_id: int
    content_title: str | None = None
    content_author_id: int | None = None
    performed_by_id: int | None = None
    deletion_reason_id: int | None = None
    deletion_reason: DeletionReasonRead | None = None
    custom_reason: str | None = None
    admin_notes: str | None = None
    is_notification_sent: bool
    created_at: datetime


class ModerationActionCreate(BaseModel):
    """Payload for recording a moderation action on arbitrary content."""

    action_type: ContentActionType
    content_type: str = Field(..., min_length=1, max_length=32)
    content_id: int
    content_title: str | None = Field(default=None, max_length=255)
    content_author_id: int | None = None
    reason_id: int | None = None
    custom_reason: str | None = Field(default=None, max_length=500)
    admin_notes: str | None = Field(default=None, max_length=2000)
