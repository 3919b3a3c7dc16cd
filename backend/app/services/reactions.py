"""Reaction ledger with toggle semantics."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.models import Message, Reaction, User
from app.services.errors import ConflictError, InvalidArgumentError
from app.services.messages import get_active_message
from app.services.notifications import notify_reaction
from app.services.persistence import commit

logger = logging.getLogger(__name__)


@dataclass
class ReactionToggle:
    action: Literal["added", "removed"]
    reaction: Reaction | None = None


def _find_reaction(db: Session, message_id: int, user_id: int, emoji_code: str) -> Reaction | None:
    stmt = (
        select(Reaction)
        .where(
            Reaction.message_id == message_id,
            Reaction.user_id == user_id,
            Reaction.emoji_code == emoji_code,
        )
        .with_for_update()
    )
    return db.execute(stmt).scalar_one_or_none()


def _recount_likes(db: Session, message: Message) -> None:
    message.like_count = db.execute(
        select(func.count(Reaction.id)).where(Reaction.message_id == message.id)
    ).scalar_one()


def _remove(db: Session, message: Message, reaction: Reaction) -> ReactionToggle:
    db.delete(reaction)
    db.flush()
    _recount_likes(db, message)
    commit(db, "remove reaction", entity_id=message.id)
    return ReactionToggle(action="removed")


def toggle_reaction(
    db: Session, message_id: int | None, user: User, emoji_code: str | None
) -> ReactionToggle:
    """Add the reaction if the user has not left it yet, otherwise remove it.

    When two toggles race on the same triple the loser of the insert finds the
    winner's row and removes it, so the pair of toggles cancels out.
    """

    code = (emoji_code or "").strip()
    if message_id is None or not code:
        raise InvalidArgumentError("message_id and emoji_code are required")

    message = get_active_message(db, message_id)
    existing = _find_reaction(db, message.id, user.id, code)
    if existing is not None:
        return _remove(db, message, existing)

    reaction = Reaction(message_id=message.id, user_id=user.id, emoji_code=code)
    db.add(reaction)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        logger.info("Concurrent reaction on message %s by user %s", message_id, user.id)
        message = get_active_message(db, message_id)
        winner = _find_reaction(db, message.id, user.id, code)
        if winner is None:
            raise ConflictError("Reaction changed concurrently, please retry") from None
        return _remove(db, message, winner)

    _recount_likes(db, message)
    commit(db, "add reaction", entity_id=message.id, conflict_detail="Reaction already exists")
    db.refresh(reaction)

    notify_reaction(db, message, user, code)
    return ReactionToggle(action="added", reaction=_load_reaction(db, reaction.id))


def _load_reaction(db: Session, reaction_id: int) -> Reaction:
    stmt = select(Reaction).where(Reaction.id == reaction_id).options(selectinload(Reaction.user))
    return db.execute(stmt).scalar_one()


def list_reactions(db: Session, message_id: int | None) -> list[Reaction]:
    if message_id is None:
        raise InvalidArgumentError("message_id is required")
    message = get_active_message(db, message_id)
    stmt = (
        select(Reaction)
        .where(Reaction.message_id == message.id)
        .order_by(Reaction.created_at.asc(), Reaction.id.asc())
        .options(selectinload(Reaction.user))
    )
    return list(db.execute(stmt).scalars())
