"""
Notification emitter.

Creates notification rows for a single user, a list of users or the whole
community, and renders the text used for mention, reaction and moderation
notifications.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from sqlalchemy import insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import ContentActionType, ContentType, Message, Notification, NotificationType, User
from app.services.errors import BoardError, InvalidArgumentError, NotFoundError
from app.services.persistence import commit

logger = logging.getLogger(__name__)

CONTENT_TYPE_NAMES: dict[str, str] = {
    ContentType.EVENT.value: "event listing",
    ContentType.BOARD_POST.value: "board post",
    ContentType.BOARD_REPLY.value: "reply",
    ContentType.COLUMN.value: "column",
    ContentType.COLUMN_COMMENT.value: "comment",
}

PREVIEW_LENGTH = 100


@dataclass(frozen=True)
class NotificationTarget:
    """Recipients of a notification: one user, several users or everyone."""

    user_id: int | None = None
    user_ids: tuple[int, ...] = field(default_factory=tuple)
    all_users: bool = False

    @classmethod
    def single(cls, user_id: int) -> "NotificationTarget":
        return cls(user_id=user_id)

    @classmethod
    def many(cls, user_ids: Iterable[int]) -> "NotificationTarget":
        return cls(user_ids=tuple(user_ids))

    @classmethod
    def everyone(cls) -> "NotificationTarget":
        return cls(all_users=True)

    @property
    def is_empty(self) -> bool:
        return self.user_id is None and not self.user_ids and not self.all_users


def _resolve_recipients(db: Session, target: NotificationTarget) -> list[int]:
    if target.all_users:
        return list(db.execute(select(User.id).order_by(User.id)).scalars())

    ordered: list[int] = []
    if target.user_id is not None:
        ordered.append(target.user_id)
    ordered.extend(target.user_ids)

    recipients: list[int] = []
    seen: set[int] = set()
    for user_id in ordered:
        if user_id not in seen:
            seen.add(user_id)
            recipients.append(user_id)
    return recipients


def notify(
    db: Session,
    target: NotificationTarget,
    title: str,
    message: str,
    *,
    notification_type: NotificationType = NotificationType.INFO,
    link: str | None = None,
    metadata: dict[str, Any] | None = None,
    actor_id: int | None = None,
    commit_changes: bool = True,
) -> int:
    """Insert one notification per recipient and return how many were created.

    The acting user is always removed from the recipient list.
    """

    if target.is_empty:
        raise InvalidArgumentError("A notification target is required")
    if not title or not title.strip() or not message or not message.strip():
        raise InvalidArgumentError("Notification title and message are required")

    recipients = _resolve_recipients(db, target)
    if actor_id is not None and actor_id in recipients:
        logger.debug("Skipping self-notification for user %s", actor_id)
        recipients = [user_id for user_id in recipients if user_id != actor_id]
    if not recipients:
        return 0

    rows = [
        {
            "user_id": user_id,
            "title": title.strip(),
            "message": message.strip(),
            "type": notification_type,
            "link": link,
            "is_read": False,
            "extra": metadata,
        }
        for user_id in recipients
    ]
    db.execute(insert(Notification), rows)
    if commit_changes:
        commit(db, "create notifications")

    logger.info("Created %s %s notification(s)", len(rows), notification_type.value)
    return len(rows)


def _preview(text: str) -> str:
    if len(text) <= PREVIEW_LENGTH:
        return text
    return text[:PREVIEW_LENGTH] + "..."


def mention_template(author_name: str, channel_name: str, content: str) -> tuple[str, str]:
    return (
        f"{author_name} mentioned you",
        f"{author_name} mentioned you in #{channel_name}: {_preview(content)}",
    )


def reaction_template(reactor_name: str, emoji_code: str, content: str) -> tuple[str, str]:
    return (
        f"{reactor_name} reacted to your message",
        f"{reactor_name} reacted {emoji_code} to your message: {_preview(content)}",
    )


def moderation_template(
    action_type: ContentActionType | str,
    content_type: str,
    content_title: str,
    reason_text: str,
) -> tuple[str, str]:
    """Render the title and body of a moderation notification."""

    name = CONTENT_TYPE_NAMES.get(content_type, "content")
    label = name[0].upper() + name[1:]
    action = action_type.value if isinstance(action_type, ContentActionType) else str(action_type)

    if action == ContentActionType.DELETE.value:
        return (
            f"{label} removed",
            f'Your {name} "{content_title}" was removed. Reason: {reason_text}',
        )
    if action == ContentActionType.HIDE.value:
        return (
            f"{label} hidden",
            f'Your {name} "{content_title}" was hidden. Reason: {reason_text}',
        )
    if action == ContentActionType.WARN.value:
        return (
            f"Warning about your {name}",
            f'You received a warning about your {name} "{content_title}". Reason: {reason_text}',
        )
    if action == ContentActionType.RESTORE.value:
        return (
            f"{label} restored",
            f'Your {name} "{content_title}" was restored.',
        )
    return (
        f"Notice about your {name}",
        f'An action was taken on your {name} "{content_title}".',
    )


def message_link(message: Message) -> str:
    root_id = message.thread_id or message.id
    return f"/board/channels/{message.channel_id}/threads/{root_id}#message-{message.id}"


def notify_mentions(db: Session, message: Message, mentioned: Iterable[User], author: User) -> int:
    """Best-effort mention fan-out performed after the message is committed."""

    recipient_ids = [user.id for user in mentioned if user.id != author.id]
    if not recipient_ids:
        return 0

    title, body = mention_template(author.public_name, message.channel.name, message.content)
    try:
        return notify(
            db,
            NotificationTarget.many(recipient_ids),
            title,
            body,
            notification_type=NotificationType.MENTION,
            link=message_link(message),
            metadata={"message_id": message.id, "channel_id": message.channel_id},
            actor_id=author.id,
        )
    except (BoardError, SQLAlchemyError):
        db.rollback()
        logger.exception("Failed to send mention notifications for message %s", message.id)
        return 0


def notify_reaction(db: Session, message: Message, reactor: User, emoji_code: str) -> int:
    """Best-effort notification to a message author about a new reaction."""

    if message.author_id is None or message.author_id == reactor.id:
        logger.debug("Skipping self-notification for reaction on message %s", message.id)
        return 0

    title, body = reaction_template(reactor.public_name, emoji_code, message.content)
    try:
        return notify(
            db,
            NotificationTarget.single(message.author_id),
            title,
            body,
            notification_type=NotificationType.REACTION,
            link=message_link(message),
            metadata={"message_id": message.id, "emoji_code": emoji_code},
            actor_id=reactor.id,
        )
    except (BoardError, SQLAlchemyError):
        db.rollback()
        logger.exception("Failed to send reaction notification for message %s", message.id)
        return 0


def list_notifications(
    db: Session, user: User, *, limit: int, unread_only: bool = False
) -> list[Notification]:
    stmt = select(Notification).where(Notification.user_id == user.id)
    if unread_only:
        stmt = stmt.where(Notification.is_read.is_(False))
    stmt = stmt.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit)
    return list(db.execute(stmt).scalars())


def mark_read(db: Session, notification_id: int, user: User) -> Notification:
    notification = db.get(Notification, notification_id)
    if notification is None or notification.user_id != user.id:
        raise NotFoundError("Notification not found")
    if not notification.is_read:
        notification.is_read = True
        commit(db, "mark notification read", entity_id=notification.id)
        db.refresh(notification)
    return notification


def mark_all_read(db: Session, user: User) -> int:
    result = db.execute(
        update(Notification)
        .where(Notification.user_id == user.id, Notification.is_read.is_(False))
        .values(is_read=True)
    )
    commit(db, "mark notifications read", entity_id=user.id)
    return result.rowcount or 0
