"""Schemas related to board messages, threads and reactions."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from app.models.enums import MessageType, UserRole


class MessageAuthor(BaseModel):
    """Lightweight user information embedded in messages and reactions."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    login: str
    display_name: str | None = None
    role: UserRole = UserRole.USER


class ReactionRead(BaseModel):
    """Single reaction row including the reactor."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    message_id: int
    user_id: int
    emoji_code: str
    created_at: datetime
    user: MessageAuthor | None = None


class MessageReactionSummary(BaseModel):
    """Aggregated reaction information for a message."""

    emoji_code: str = Field(..., description="Emoji identifier, e.g. a unicode emoji or :thumbsup:")
    count: int = Field(..., ge=0, description="Total reactions with the emoji")
    reacted: bool = Field(
        default=False,
        description="Indicates whether the current user added this reaction",
    )
    user_ids: list[int] = Field(
        default_factory=list,
        description="Identifiers of users who added this reaction",
    )


class MentionRead(BaseModel):
    mentioned_user_id: int
    user: MessageAuthor | None = None


class MessageRead(BaseModel):
    """Serialized representation of a board message."""

    id: int
    channel_id: int
    thread_id: int | None = None
    author_id: int | None
    author: MessageAuthor | None = None
    content: str
    message_type: MessageType
    like_count: int = Field(0, ge=0)
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None
    deleted_by_id: int | None = None
    deletion_reason_id: int | None = None
    deletion_custom_reason: str | None = None
    thread_reply_count: int = 0
    reactions: list[MessageReactionSummary] = Field(default_factory=list)
    mentions: list[MentionRead] = Field(default_factory=list)


class MessageCreate(BaseModel):
    """Payload for posting a message; validation failures map to HTTP 400."""

    channel_id: int | None = None
    thread_id: int | None = None
    content: str = ""


class MessageUpdate(BaseModel):
    content: str = ""


class MessageDeleteRequest(BaseModel):
    """Optional moderation details supplied when an admin deletes a message."""

    reason_id: int | None = None
    custom_reason: str | None = Field(default=None, max_length=500)
    admin_notes: str | None = Field(default=None, max_length=2000)


class ThreadRead(BaseModel):
    thread_message: MessageRead
    replies: list[MessageRead] = Field(default_factory=list)


class ThreadReplyCreate(BaseModel):
    content: str = ""


class ReactionToggleRequest(BaseModel):
    """Payload for toggling a reaction."""

    message_id: int | None = None
    emoji_code: str | None = Field(default=None, max_length=64)


class ReactionToggleResult(BaseModel):
    action: Literal["added", "removed"]
    reaction: ReactionRead | None = None
