"""Pydantic schemas for API payloads."""

from .auth import LoginRequest, Token, UserCreate, UserRead
from .board import (
    CategoryCreate,
    CategoryRead,
    CategoryUpdate,
    CategoryWithChannels,
    ChannelCreate,
    ChannelRead,
    ChannelUpdate,
    ChannelWithCount,
)
from .messages import (
    MentionRead,
    MessageAuthor,
    MessageCreate,
    MessageDeleteRequest,
    MessageRead,
    MessageReactionSummary,
    MessageUpdate,
    ReactionRead,
    ReactionToggleRequest,
    ReactionToggleResult,
    ThreadRead,
    ThreadReplyCreate,
)
from .moderation import ContentActionLogRead, DeletionReasonRead, ModerationActionCreate
from .notifications import NotificationCount, NotificationCreate, NotificationRead
from .search import SearchResults

__all__ = [
    "LoginRequest",
    "Token",
    "UserCreate",
    "UserRead",
    "CategoryCreate",
    "CategoryRead",
    "CategoryUpdate",
    "CategoryWithChannels",
    "ChannelCreate",
    "ChannelRead",
    "ChannelUpdate",
    "ChannelWithCount",
    "MentionRead",
    "MessageAuthor",
    "MessageCreate",
    "MessageDeleteRequest",
    "MessageRead",
    "MessageReactionSummary",
    "MessageUpdate",
    "ReactionRead",
    "ReactionToggleRequest",
    "ReactionToggleResult",
    "ThreadRead",
    "ThreadReplyCreate",
    "ContentActionLogRead",
    "DeletionReasonRead",
    "ModerationActionCreate",
    "NotificationCount",
    "NotificationCreate",
    "NotificationRead",
    "SearchResults",
]
