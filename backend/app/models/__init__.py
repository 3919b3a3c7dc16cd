"""Database models package."""

from .base import Base
from .board import (
    BoardCategory,
    Channel,
    ContentActionLog,
    DeletionReason,
    Mention,
    Message,
    Notification,
    Reaction,
    User,
)
from .enums import (
    SEVERITY_RANK,
    ContentActionType,
    ContentType,
    MessageType,
    NotificationType,
    ReasonSeverity,
    UserRole,
)

__all__ = [
    "Base",
    "User",
    "BoardCategory",
    "Channel",
    "Message",
    "Reaction",
    "Mention",
    "Notification",
    "DeletionReason",
    "ContentActionLog",
    "UserRole",
    "MessageType",
    "NotificationType",
    "ReasonSeverity",
    "SEVERITY_RANK",
    "ContentActionType",
    "ContentType",
]
