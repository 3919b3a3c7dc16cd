"""Message store: posting, editing, soft deletion and hydrated listings."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from app.config import get_settings
from app.models import (
    ContentActionType,
    ContentType,
    Mention,
    Message,
    MessageType,
    Reaction,
    User,
)
from app.schemas import (
    MentionRead,
    MessageAuthor,
    MessageRead,
    MessageReactionSummary,
    ThreadRead,
)
from app.services import moderation
from app.services.directory import get_channel
from app.services.errors import ForbiddenError, InvalidArgumentError, NotFoundError
from app.services.mentions import resolve_mentions
from app.services.notifications import notify_mentions
from app.services.persistence import commit

logger = logging.getLogger(__name__)

settings = get_settings()

CONTENT_TITLE_LENGTH = 50

MESSAGE_LOAD_OPTIONS = (
    selectinload(Message.author),
    selectinload(Message.reactions).selectinload(Reaction.user),
    selectinload(Message.mentions).selectinload(Mention.mentioned_user),
)


def _serialize_user(user: User | None) -> MessageAuthor | None:
    if user is None:
        return None
    return MessageAuthor(
        id=user.id,
        login=user.login,
        display_name=user.display_name,
        role=user.role,
    )


def collect_thread_reply_counts(messages: Sequence[Message], db: Session) -> dict[int, int]:
    """Count non-deleted replies for every root in ``messages`` with one query."""

    root_ids = [message.id for message in messages if message.thread_id is None]
    if not root_ids:
        return {}
    stmt = (
        select(Message.thread_id, func.count(Message.id))
        .where(Message.thread_id.in_(root_ids), Message.deleted_at.is_(None))
        .group_by(Message.thread_id)
    )
    return {root_id: count for root_id, count in db.execute(stmt)}


def serialize_message(
    message: Message,
    *,
    viewer_id: int | None = None,
    reply_counts: dict[int, int] | None = None,
) -> MessageRead:
    grouped: dict[str, list[int]] = defaultdict(list)
    for reaction in message.reactions:
        grouped[reaction.emoji_code].append(reaction.user_id)

    reactions = [
        MessageReactionSummary(
            emoji_code=emoji_code,
            count=len(user_ids),
            reacted=viewer_id in user_ids if viewer_id is not None else False,
            user_ids=sorted(user_ids),
        )
        for emoji_code, user_ids in sorted(grouped.items())
    ]
    mentions = [
        MentionRead(
            mentioned_user_id=mention.mentioned_user_id,
            user=_serialize_user(mention.mentioned_user),
        )
        for mention in message.mentions
    ]

    return MessageRead(
        id=message.id,
        channel_id=message.channel_id,
        thread_id=message.thread_id,
        author_id=message.author_id,
        author=_serialize_user(message.author),
        content=message.content,
        message_type=message.message_type,
        like_count=message.like_count,
        created_at=message.created_at,
        updated_at=message.updated_at,
        deleted_at=message.deleted_at,
        deleted_by_id=message.deleted_by_id,
        deletion_reason_id=message.deletion_reason_id,
        deletion_custom_reason=message.deletion_custom_reason,
        thread_reply_count=(reply_counts or {}).get(message.id, 0),
        reactions=reactions,
        mentions=mentions,
    )


def serialize_messages(
    messages: Sequence[Message], db: Session, viewer_id: int | None = None
) -> list[MessageRead]:
    reply_counts = collect_thread_reply_counts(messages, db)
    return [
        serialize_message(message, viewer_id=viewer_id, reply_counts=reply_counts)
        for message in messages
    ]


def _load_message(db: Session, message_id: int) -> Message | None:
    stmt = select(Message).where(Message.id == message_id).options(*MESSAGE_LOAD_OPTIONS)
    return db.execute(stmt).scalar_one_or_none()


def get_active_message(db: Session, message_id: int) -> Message:
    """Return a message that exists and has not been soft-deleted."""

    message = _load_message(db, message_id)
    if message is None or message.is_deleted:
        raise NotFoundError("Message not found")
    return message


def get_message(db: Session, message_id: int, viewer_id: int | None = None) -> MessageRead:
    """Return a message by id, including soft-deleted rows and their audit fields."""

    message = _load_message(db, message_id)
    if message is None:
        raise NotFoundError("Message not found")
    return serialize_messages([message], db, viewer_id)[0]


def _normalize_content(content: str | None) -> str:
    normalized = (content or "").strip()
    if not normalized:
        raise InvalidArgumentError("Message content is required")
    if len(normalized) > settings.board_message_max_length:
        raise InvalidArgumentError(
            f"Message exceeds maximum length of {settings.board_message_max_length} characters"
        )
    return normalized


def post_message(
    db: Session,
    author: User,
    content: str | None,
    *,
    channel_id: int | None = None,
    thread_id: int | None = None,
) -> MessageRead:
    """Post a channel message or, when ``thread_id`` is given, a thread reply.

    Replies always land in the thread root's channel. The message and its
    mention rows are committed together; mention notifications are sent
    afterwards and never undo the post.
    """

    normalized = _normalize_content(content)

    if thread_id is not None:
        root = get_active_message(db, thread_id)
        if not root.is_thread_root:
            raise InvalidArgumentError("Cannot reply to a reply")
        if channel_id is not None and channel_id != root.channel_id:
            logger.debug(
                "Ignoring channel %s for reply to %s in channel %s",
                channel_id,
                root.id,
                root.channel_id,
            )
        channel = root.channel
    else:
        if channel_id is None:
            raise InvalidArgumentError("Channel is required")
        channel = get_channel(db, channel_id)

    mentioned = resolve_mentions(db, normalized)

    message = Message(
        channel_id=channel.id,
        thread_id=thread_id,
        author_id=author.id,
        content=normalized,
        message_type=MessageType.THREAD_REPLY if thread_id is not None else MessageType.CHANNEL,
        like_count=0,
    )
    db.add(message)
    db.flush()
    for user in mentioned:
        db.add(Mention(message_id=message.id, mentioned_user_id=user.id))
    commit(db, "post message", entity_id=channel.id)
    db.refresh(message)

    logger.info(
        "Message %s posted to channel %s by user %s (%s mention(s))",
        message.id,
        channel.id,
        author.id,
        len(mentioned),
    )

    notify_mentions(db, message, mentioned, author)

    return MessageRead(
        id=message.id,
        channel_id=message.channel_id,
        thread_id=message.thread_id,
        author_id=message.author_id,
        author=_serialize_user(author),
        content=message.content,
        message_type=message.message_type,
        like_count=0,
        created_at=message.created_at,
        updated_at=message.updated_at,
        thread_reply_count=0,
        reactions=[],
        mentions=[],
    )


def reply_to_thread(db: Session, thread_id: int, author: User, content: str | None) -> MessageRead:
    return post_message(db, author, content, thread_id=thread_id)


def edit_message(db: Session, message_id: int, actor: User, content: str | None) -> MessageRead:
    message = get_active_message(db, message_id)
    if message.author_id != actor.id and not actor.is_admin:
        raise ForbiddenError("Only the author or an admin can edit this message")

    message.content = _normalize_content(content)
    message.updated_at = datetime.now(timezone.utc)
    commit(db, "edit message", entity_id=message.id)
    db.refresh(message)
    return serialize_messages([message], db, actor.id)[0]


@dataclass(frozen=True)
class DeletionPolicy:
    """How a delete proceeds for a given actor.

    Authors removing their own message get the reserved self-delete reason
    and no audit entry; admins removing someone else's message must cite a
    reason, are logged and the author is notified.
    """

    self_delete: bool
    requires_reason: bool
    log_action: bool
    notify_author: bool

    @classmethod
    def for_actor(cls, actor: User, message: Message) -> "DeletionPolicy":
        if message.author_id == actor.id:
            return cls(self_delete=True, requires_reason=False, log_action=False, notify_author=False)
        if actor.is_admin:
            return cls(self_delete=False, requires_reason=True, log_action=True, notify_author=True)
        raise ForbiddenError("Only the author or an admin can delete this message")


def delete_message(
    db: Session,
    message_id: int,
    actor: User,
    *,
    reason_id: int | None = None,
    custom_reason: str | None = None,
    admin_notes: str | None = None,
) -> Message:
    """Soft-delete a message according to the actor's deletion policy."""

    message = get_active_message(db, message_id)
    policy = DeletionPolicy.for_actor(actor, message)
    custom_reason = (custom_reason or "").strip() or None

    if policy.self_delete:
        reason_id = moderation.get_self_delete_reason(db).id
        custom_reason = None
    else:
        if reason_id is None and custom_reason is None:
            raise InvalidArgumentError("A deletion reason is required")
        if reason_id is not None:
            moderation.get_deletion_reason(db, reason_id)

    message.deleted_at = datetime.now(timezone.utc)
    message.deleted_by_id = actor.id
    message.deletion_reason_id = reason_id
    message.deletion_custom_reason = custom_reason

    entry = None
    if policy.log_action:
        entry = moderation.log_action(
            db,
            action_type=ContentActionType.DELETE,
            content_type=(
                ContentType.BOARD_POST.value
                if message.is_thread_root
                else ContentType.BOARD_REPLY.value
            ),
            content_id=message.id,
            performed_by=actor,
            content_title=message.content[:CONTENT_TITLE_LENGTH],
            content_author_id=message.author_id,
            reason_id=reason_id,
            custom_reason=custom_reason,
            admin_notes=admin_notes,
            commit_changes=False,
        )
    commit(db, "delete message", entity_id=message.id)
    logger.info(
        "Message %s deleted by user %s (%s)",
        message.id,
        actor.id,
        "self" if policy.self_delete else "moderation",
    )

    if entry is not None and policy.notify_author:
        moderation.notify_content_author(db, entry)
    return message


def list_channel_messages(
    db: Session,
    channel_id: int,
    thread_id: int | None = None,
    viewer_id: int | None = None,
) -> list[MessageRead]:
    """List visible roots of a channel, or the visible replies of one thread."""

    channel = get_channel(db, channel_id)
    stmt = select(Message).where(
        Message.channel_id == channel.id,
        Message.deleted_at.is_(None),
    )
    if thread_id is None:
        stmt = stmt.where(Message.thread_id.is_(None))
    else:
        root = get_active_message(db, thread_id)
        if not root.is_thread_root:
            raise InvalidArgumentError("Message is a reply, not a thread")
        if root.channel_id != channel.id:
            raise NotFoundError("Thread not found in this channel")
        stmt = stmt.where(Message.thread_id == root.id)
    stmt = stmt.order_by(Message.created_at.asc(), Message.id.asc()).options(*MESSAGE_LOAD_OPTIONS)

    messages = list(db.execute(stmt).scalars())
    return serialize_messages(messages, db, viewer_id)


def list_recent(db: Session, limit: int, viewer_id: int | None = None) -> list[MessageRead]:
    """Most recent visible thread roots across all channels, newest first."""

    effective_limit = max(1, min(limit, settings.board_history_max_limit))
    stmt = (
        select(Message)
        .where(Message.deleted_at.is_(None), Message.thread_id.is_(None))
        .order_by(Message.created_at.desc(), Message.id.desc())
        .limit(effective_limit)
        .options(*MESSAGE_LOAD_OPTIONS)
    )
    messages = list(db.execute(stmt).scalars())
    return serialize_messages(messages, db, viewer_id)


def get_thread(db: Session, thread_id: int, viewer_id: int | None = None) -> ThreadRead:
    root = get_active_message(db, thread_id)
    if not root.is_thread_root:
        raise InvalidArgumentError("Message is a reply, not a thread")

    stmt = (
        select(Message)
        .where(Message.thread_id == root.id, Message.deleted_at.is_(None))
        .order_by(Message.created_at.asc(), Message.id.asc())
        .options(*MESSAGE_LOAD_OPTIONS)
    )
    replies = list(db.execute(stmt).scalars())
    return ThreadRead(
        thread_message=serialize_message(
            root, viewer_id=viewer_id, reply_counts={root.id: len(replies)}
        ),
        replies=serialize_messages(replies, db, viewer_id),
    )
