from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    """Community-wide roles assigned to a user."""

    USER = "user"
    ADMIN = "admin"


class MessageType(str, Enum):
    """Whether a message is posted to a channel or into a thread."""

    CHANNEL = "channel"
    THREAD_REPLY = "thread_reply"


class NotificationType(str, Enum):
    """Categories of notifications delivered to users."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    MENTION = "mention"
    REACTION = "reaction"
    MODERATION = "moderation"


class ReasonSeverity(str, Enum):
    """Severity levels attached to deletion reasons."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


SEVERITY_RANK: dict[ReasonSeverity, int] = {
    ReasonSeverity.LOW: 0,
    ReasonSeverity.MEDIUM: 1,
    ReasonSeverity.HIGH: 2,
    ReasonSeverity.CRITICAL: 3,
}


class ContentActionType(str, Enum):
    """Administrative actions that can be applied to user content."""

    DELETE = "delete"
    RESTORE = "restore"
    HIDE = "hide"
    WARN = "warn"


class ContentType(str, Enum):
    """Kinds of content tracked by the moderation log."""

    EVENT = "event"
    BOARD_POST = "board_post"
    BOARD_REPLY = "board_reply"
    COLUMN = "column"
    COLUMN_COMMENT = "column_comment"
