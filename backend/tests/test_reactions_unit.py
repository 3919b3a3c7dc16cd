"""Unit tests for the reaction toggle ledger."""

from __future__ import annotations

import pytest
from sqlalchemy import select

from app.models import Message, Notification, NotificationType, Reaction
from app.services import messages as message_store
from app.services import reactions as ledger
from app.services.errors import ConflictError, InvalidArgumentError, NotFoundError


@pytest.fixture()
def posted(db_session, channel, alice):
    return message_store.post_message(db_session, alice, "react here", channel_id=channel.id)


def _like_count(db_session, message_id: int) -> int:
    message = db_session.get(Message, message_id)
    db_session.refresh(message)
    return message.like_count


def test_toggle_adds_then_removes_then_adds(db_session, posted, bob):
    first = ledger.toggle_reaction(db_session, posted.id, bob, "👍")
    assert first.action == "added"
    assert first.reaction.user.login == "bob"
    assert _like_count(db_session, posted.id) == 1

    second = ledger.toggle_reaction(db_session, posted.id, bob, "👍")
    assert second.action == "removed"
    assert second.reaction is None
    assert _like_count(db_session, posted.id) == 0

    third = ledger.toggle_reaction(db_session, posted.id, bob, "👍")
    assert third.action == "added"
    assert _like_count(db_session, posted.id) == 1


def test_like_count_tracks_all_reactions(db_session, posted, alice, bob):
    ledger.toggle_reaction(db_session, posted.id, bob, "👍")
    ledger.toggle_reaction(db_session, posted.id, bob, "🎉")
    ledger.toggle_reaction(db_session, posted.id, alice, "👍")

    assert _like_count(db_session, posted.id) == 3
    assert [item.emoji_code for item in ledger.list_reactions(db_session, posted.id)] == [
        "👍",
        "🎉",
        "👍",
    ]


def test_reaction_notifies_author_once_per_add(db_session, posted, alice, bob):
    ledger.toggle_reaction(db_session, posted.id, alice, "👍")
    ledger.toggle_reaction(db_session, posted.id, bob, "👍")
    ledger.toggle_reaction(db_session, posted.id, bob, "👍")

    notifications = list(
        db_session.execute(
            select(Notification).where(Notification.type == NotificationType.REACTION)
        ).scalars()
    )
    assert len(notifications) == 1
    assert notifications[0].user_id == alice.id
    assert notifications[0].extra == {"message_id": posted.id, "emoji_code": "👍"}
    assert "Bob Builder reacted 👍" in notifications[0].message


def test_toggle_requires_fields(db_session, posted, bob):
    with pytest.raises(InvalidArgumentError):
        ledger.toggle_reaction(db_session, None, bob, "👍")
    with pytest.raises(InvalidArgumentError):
        ledger.toggle_reaction(db_session, posted.id, bob, "  ")


def test_toggle_on_deleted_message_is_not_found(db_session, posted, alice, bob):
    message_store.delete_message(db_session, posted.id, alice)

    with pytest.raises(NotFoundError):
        ledger.toggle_reaction(db_session, posted.id, bob, "👍")


def test_list_reactions_requires_message(db_session):
    with pytest.raises(InvalidArgumentError):
        ledger.list_reactions(db_session, None)
    with pytest.raises(NotFoundError):
        ledger.list_reactions(db_session, 404)


def _racing_lookup(session_factory, message_id: int, user_id: int, emoji_code: str, real_lookup):
    """Lookup that lets a second session insert the same reaction before the first insert."""

    calls = {"count": 0}

    def lookup(db, *args):
        calls["count"] += 1
        if calls["count"] == 1:
            with session_factory() as other:
                other.add(Reaction(message_id=message_id, user_id=user_id, emoji_code=emoji_code))
                other.commit()
            return None
        if real_lookup is None:
            return None
        return real_lookup(db, *args)

    return lookup


def test_insert_race_removes_winning_reaction(db_session, session_factory, posted, bob, monkeypatch):
    lookup = _racing_lookup(session_factory, posted.id, bob.id, "👍", ledger._find_reaction)
    monkeypatch.setattr(ledger, "_find_reaction", lookup)

    result = ledger.toggle_reaction(db_session, posted.id, bob, "👍")

    assert result.action == "removed"
    assert db_session.execute(select(Reaction)).first() is None
    assert _like_count(db_session, posted.id) == 0


def test_insert_race_with_vanished_row_is_conflict(db_session, session_factory, posted, bob, monkeypatch):
    lookup = _racing_lookup(session_factory, posted.id, bob.id, "👍", None)
    monkeypatch.setattr(ledger, "_find_reaction", lookup)

    with pytest.raises(ConflictError):
        ledger.toggle_reaction(db_session, posted.id, bob, "👍")
