"""Categories and channels that organise board messages."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from app.config import get_settings
from app.core.slug import channel_slug
from app.models import BoardCategory, Channel, Message, User
from app.schemas import CategoryWithChannels, ChannelWithCount
from app.services.errors import ConflictError, ForbiddenError, InvalidArgumentError, NotFoundError
from app.services.persistence import commit

logger = logging.getLogger(__name__)

settings = get_settings()

DUPLICATE_CHANNEL = "A channel with this name already exists in the category"


def _ensure_admin(actor: User) -> None:
    if not actor.is_admin:
        raise ForbiddenError("Admin privileges required")


def _ensure_owner_or_admin(channel: Channel, actor: User) -> None:
    if channel.created_by_id != actor.id and not actor.is_admin:
        raise ForbiddenError("Only the channel creator or an admin can modify this channel")


def _clean_text(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def get_category(db: Session, category_id: int) -> BoardCategory:
    category = db.get(BoardCategory, category_id)
    if category is None or category.deleted_at is not None:
        raise NotFoundError("Category not found")
    return category


def get_channel(db: Session, channel_id: int) -> Channel:
    channel = db.get(Channel, channel_id)
    if channel is None or channel.deleted_at is not None:
        raise NotFoundError("Channel not found")
    return channel


def create_category(
    db: Session,
    actor: User,
    name: str,
    description: str | None = None,
    color: str | None = None,
) -> BoardCategory:
    """Create a category placed after every existing one."""

    _ensure_admin(actor)
    cleaned = (name or "").strip()
    if not cleaned:
        raise InvalidArgumentError("Category name is required")

    current_max = db.execute(select(func.max(BoardCategory.sort_order))).scalar_one_or_none()
    category = BoardCategory(
        name=cleaned,
        description=_clean_text(description),
        color=_clean_text(color) or settings.default_category_color,
        sort_order=(current_max or 0) + 1,
    )
    db.add(category)
    commit(db, "create category")
    db.refresh(category)
    logger.info("Category %s created by user %s", category.id, actor.id)
    return category


def update_category(
    db: Session,
    category_id: int,
    actor: User,
    *,
    name: str | None = None,
    description: str | None = None,
    color: str | None = None,
) -> BoardCategory:
    _ensure_admin(actor)
    category = get_category(db, category_id)

    if name is not None:
        cleaned = name.strip()
        if not cleaned:
            raise InvalidArgumentError("Category name is required")
        category.name = cleaned
    if description is not None:
        category.description = _clean_text(description)
    if color is not None:
        category.color = _clean_text(color) or settings.default_category_color

    commit(db, "update category", entity_id=category.id)
    db.refresh(category)
    return category


def delete_category(db: Session, category_id: int, actor: User) -> None:
    """Mark an empty category as deleted."""

    _ensure_admin(actor)
    category = get_category(db, category_id)

    channel_count = db.execute(
        select(func.count(Channel.id)).where(
            Channel.category_id == category.id, Channel.deleted_at.is_(None)
        )
    ).scalar_one()
    if channel_count:
        raise ConflictError("Category still contains channels")

    category.deleted_at = datetime.now(timezone.utc)
    commit(db, "delete category", entity_id=category_id)
    logger.info("Category %s deleted by user %s", category_id, actor.id)


def _message_counts(db: Session, channel_ids: list[int]) -> dict[int, int]:
    if not channel_ids:
        return {}
    stmt = (
        select(Message.channel_id, func.count(Message.id))
        .where(Message.channel_id.in_(channel_ids), Message.deleted_at.is_(None))
        .group_by(Message.channel_id)
    )
    return {channel_id: count for channel_id, count in db.execute(stmt)}


def list_categories(db: Session) -> list[CategoryWithChannels]:
    """Return every category with its channels and their live message counts."""

    categories = list(
        db.execute(
            select(BoardCategory)
            .where(BoardCategory.deleted_at.is_(None))
            .options(selectinload(BoardCategory.channels))
            .order_by(BoardCategory.sort_order, BoardCategory.name)
        ).scalars()
    )
    channel_ids = [
        channel.id
        for category in categories
        for channel in category.channels
        if channel.deleted_at is None
    ]
    counts = _message_counts(db, channel_ids)

    listing: list[CategoryWithChannels] = []
    for category in categories:
        channels = sorted(
            (channel for channel in category.channels if channel.deleted_at is None),
            key=lambda item: (item.sort_order, item.id),
        )
        entry = CategoryWithChannels.model_validate(category, from_attributes=True)
        entry.channels = [
            ChannelWithCount.model_validate(channel, from_attributes=True).model_copy(
                update={"message_count": counts.get(channel.id, 0)}
            )
            for channel in channels
        ]
        listing.append(entry)
    return listing


def _slug_taken(db: Session, category_id: int, slug: str, exclude_id: int | None = None) -> bool:
    stmt = select(Channel.id).where(
        Channel.category_id == category_id,
        Channel.name == slug,
        Channel.deleted_at.is_(None),
    )
    if exclude_id is not None:
        stmt = stmt.where(Channel.id != exclude_id)
    return db.execute(stmt).first() is not None


def create_channel(
    db: Session,
    category_id: int | None,
    name: str,
    creator: User,
    description: str | None = None,
) -> Channel:
    """Create a channel with a slugified, category-unique name."""

    if category_id is None:
        raise InvalidArgumentError("Category is required")
    slug = channel_slug(name)
    if not slug:
        raise InvalidArgumentError("Channel name is required")

    category = get_category(db, category_id)
    if _slug_taken(db, category.id, slug):
        raise ConflictError(DUPLICATE_CHANNEL)

    current_max = db.execute(
        select(func.max(Channel.sort_order)).where(Channel.category_id == category.id)
    ).scalar_one_or_none()
    channel = Channel(
        category_id=category.id,
        name=slug,
        description=_clean_text(description),
        sort_order=(current_max or 0) + 1,
        created_by_id=creator.id,
    )
    db.add(channel)
    commit(db, "create channel", conflict_detail=DUPLICATE_CHANNEL)
    db.refresh(channel)
    logger.info("Channel %s (%s) created in category %s", channel.id, channel.name, category.id)
    return channel


def rename_channel(
    db: Session,
    channel_id: int,
    actor: User,
    *,
    name: str | None = None,
    description: str | None = None,
) -> Channel:
    channel = get_channel(db, channel_id)
    _ensure_owner_or_admin(channel, actor)

    if name is not None:
        slug = channel_slug(name)
        if not slug:
            raise InvalidArgumentError("Channel name is required")
        if _slug_taken(db, channel.category_id, slug, exclude_id=channel.id):
            raise ConflictError(DUPLICATE_CHANNEL)
        channel.name = slug
    if description is not None:
        channel.description = _clean_text(description)

    commit(db, "rename channel", entity_id=channel.id, conflict_detail=DUPLICATE_CHANNEL)
    db.refresh(channel)
    return channel


def delete_channel(db: Session, channel_id: int, actor: User) -> None:
    """Mark a channel with no visible messages as deleted.

    Soft-deleted messages keep pointing at the channel row, which stays in place.
    """

    channel = get_channel(db, channel_id)
    _ensure_owner_or_admin(channel, actor)

    active_messages = db.execute(
        select(func.count(Message.id)).where(
            Message.channel_id == channel.id, Message.deleted_at.is_(None)
        )
    ).scalar_one()
    if active_messages:
        raise ConflictError("Channel still contains messages")

    channel.deleted_at = datetime.now(timezone.utc)
    channel.is_live = None
    commit(db, "delete channel", entity_id=channel_id)
    logger.info("Channel %s deleted by user %s", channel_id, actor.id)
