"""Moderation action log, deletion reasons and moderation notifications."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.models import (
    SEVERITY_RANK,
    ContentActionLog,
    ContentActionType,
    DeletionReason,
    Notification,
    NotificationType,
    ReasonSeverity,
    User,
)
from app.services.errors import BoardError, ForbiddenError, NotFoundError
from app.services.notifications import NotificationTarget, moderation_template, notify
from app.services.persistence import commit

logger = logging.getLogger(__name__)

SELF_DELETE_REASON = "self-delete"
UNSPECIFIED_REASON = "not specified"


def list_deletion_reasons(db: Session) -> list[DeletionReason]:
    """Active reasons, most severe first, then alphabetically."""

    reasons = db.execute(
        select(DeletionReason).where(DeletionReason.is_active.is_(True))
    ).scalars()
    return sorted(reasons, key=lambda reason: (-SEVERITY_RANK[reason.severity], reason.name))


def get_deletion_reason(db: Session, reason_id: int) -> DeletionReason:
    reason = db.get(DeletionReason, reason_id)
    if reason is None:
        raise NotFoundError("Deletion reason not found")
    return reason


def get_self_delete_reason(db: Session) -> DeletionReason:
    """Return the reserved reason used for author-initiated deletes, creating it once."""

    reason = db.execute(
        select(DeletionReason).where(DeletionReason.name == SELF_DELETE_REASON)
    ).scalar_one_or_none()
    if reason is None:
        reason = DeletionReason(
            name=SELF_DELETE_REASON,
            description="Removed by the author",
            severity=ReasonSeverity.LOW,
            is_active=True,
        )
        db.add(reason)
        db.flush()
    return reason


def log_action(
    db: Session,
    *,
    action_type: ContentActionType,
    content_type: str,
    content_id: int,
    performed_by: User,
    content_title: str | None = None,
    content_author_id: int | None = None,
    reason_id: int | None = None,
    custom_reason: str | None = None,
    admin_notes: str | None = None,
    commit_changes: bool = True,
) -> ContentActionLog:
    """Append an entry to the content action log.

    Permission checks are the caller's responsibility.
    """

    entry = ContentActionLog(
        action_type=action_type,
        content_type=content_type,
        content_id=content_id,
        content_title=content_title,
        content_author_id=content_author_id,
        performed_by_id=performed_by.id,
        deletion_reason_id=reason_id,
        custom_reason=custom_reason,
        admin_notes=admin_notes,
        is_notification_sent=False,
    )
    db.add(entry)
    if commit_changes:
        commit(db, "log content action", entity_id=content_id)
        db.refresh(entry)
    else:
        db.flush()

    logger.info(
        "Logged %s on %s %s by user %s",
        action_type.value,
        content_type,
        content_id,
        performed_by.id,
    )
    return entry


def resolve_reason_text(db: Session, entry: ContentActionLog) -> str:
    if entry.deletion_reason_id is not None:
        reason = db.get(DeletionReason, entry.deletion_reason_id)
        if reason is not None:
            return reason.name
    if entry.custom_reason:
        return entry.custom_reason
    return UNSPECIFIED_REASON


def _already_notified(db: Session, recipient_id: int, entry: ContentActionLog) -> bool:
    stmt = select(Notification).where(
        Notification.user_id == recipient_id,
        Notification.type == NotificationType.MODERATION,
    )
    for notification in db.execute(stmt).scalars():
        extra = notification.extra or {}
        if extra.get("action_log_id") == entry.id and extra.get("content_id") == entry.content_id:
            return True
    return False


def send_deletion_notification(
    db: Session,
    recipient_id: int,
    entry: ContentActionLog,
    content_title: str | None = None,
) -> bool:
    """Notify the affected author about a moderation action.

    Returns ``False`` without sending when this action was already notified.
    """

    if entry.is_notification_sent or _already_notified(db, recipient_id, entry):
        logger.debug("Moderation notification for action %s already sent", entry.id)
        return False

    title, message = moderation_template(
        entry.action_type,
        entry.content_type,
        content_title or entry.content_title or "",
        resolve_reason_text(db, entry),
    )
    notify(
        db,
        NotificationTarget.single(recipient_id),
        title,
        message,
        notification_type=NotificationType.MODERATION,
        metadata={
            "action_log_id": entry.id,
            "content_type": entry.content_type,
            "content_id": entry.content_id,
            "action_type": entry.action_type.value,
        },
        commit_changes=False,
    )
    entry.is_notification_sent = True
    commit(db, "send moderation notification", entity_id=entry.id)
    logger.info("Sent moderation notification for action %s to user %s", entry.id, recipient_id)
    return True


def notify_content_author(
    db: Session, entry: ContentActionLog, content_title: str | None = None
) -> bool:
    """Best-effort moderation notification performed after the action commits."""

    if entry.content_author_id is None or entry.content_author_id == entry.performed_by_id:
        return False
    try:
        return send_deletion_notification(db, entry.content_author_id, entry, content_title)
    except (BoardError, SQLAlchemyError):
        db.rollback()
        logger.exception("Failed to send moderation notification for action %s", entry.id)
        return False


def record_moderation_action(
    db: Session,
    actor: User,
    *,
    action_type: ContentActionType,
    content_type: str,
    content_id: int,
    content_title: str | None = None,
    content_author_id: int | None = None,
    reason_id: int | None = None,
    custom_reason: str | None = None,
    admin_notes: str | None = None,
) -> ContentActionLog:
    """Log an admin action against arbitrary content and notify its author."""

    if not actor.is_admin:
        raise ForbiddenError("Admin privileges required")
    if reason_id is not None:
        get_deletion_reason(db, reason_id)

    entry = log_action(
        db,
        action_type=action_type,
        content_type=content_type,
        content_id=content_id,
        performed_by=actor,
        content_title=content_title,
        content_author_id=content_author_id,
        reason_id=reason_id,
        custom_reason=custom_reason,
        admin_notes=admin_notes,
    )
    notify_content_author(db, entry, content_title)
    db.refresh(entry)
    return entry


def list_action_logs(
    db: Session, *, content_author_id: int | None = None, limit: int = 50
) -> list[ContentActionLog]:
    stmt = select(ContentActionLog).options(
        selectinload(ContentActionLog.deletion_reason),
        selectinload(ContentActionLog.performed_by),
    )
    if content_author_id is not None:
        stmt = stmt.where(ContentActionLog.content_author_id == content_author_id)
    stmt = stmt.order_by(ContentActionLog.created_at.desc(), ContentActionLog.id.desc()).limit(limit)
    return list(db.execute(stmt).scalars())


DEFAULT_DELETION_REASONS: tuple[tuple[str, str, ReasonSeverity], ...] = (
    ("Illegal content", "Content that breaks the law", ReasonSeverity.CRITICAL),
    ("Harassment", "Personal attacks or targeted abuse", ReasonSeverity.HIGH),
    ("Spam", "Advertising or repeated unsolicited posts", ReasonSeverity.MEDIUM),
    ("Inappropriate content", "Content unsuitable for the community", ReasonSeverity.MEDIUM),
    ("Off-topic", "Posted in the wrong channel", ReasonSeverity.LOW),
    (SELF_DELETE_REASON, "Removed by the author", ReasonSeverity.LOW),
)


def seed_deletion_reasons(db: Session) -> int:
    """Insert the default deletion reasons that are missing and return how many were added."""

    existing = set(db.execute(select(DeletionReason.name)).scalars())
    added = 0
    for name, description, severity in DEFAULT_DELETION_REASONS:
        if name in existing:
            continue
        db.add(DeletionReason(name=name, description=description, severity=severity, is_active=True))
        added += 1
    if added:
        commit(db, "seed deletion reasons")
    logger.info("Seeded %s deletion reason(s)", added)
    return added
