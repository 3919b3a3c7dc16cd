"""Unit tests for categories and channels."""

from __future__ import annotations

import pytest

from app.core.slug import channel_slug
from app.models import BoardCategory, Channel, Message
from app.services import directory
from app.services import messages as message_store
from app.services.errors import (
    ConflictError,
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
)


def test_channel_slug_lowercases_and_hyphenates():
    assert channel_slug("  General   Chat ") == "general-chat"
    assert channel_slug("Off\tTopic\nTalk") == "off-topic-talk"
    assert channel_slug("   ") == ""


def test_create_category_requires_admin(db_session, alice):
    with pytest.raises(ForbiddenError):
        directory.create_category(db_session, alice, "News")


def test_create_category_rejects_blank_name(db_session, admin):
    with pytest.raises(InvalidArgumentError):
        directory.create_category(db_session, admin, "   ")


def test_create_category_appends_to_sort_order(db_session, admin, category):
    created = directory.create_category(db_session, admin, " News ", description="Updates")

    assert created.name == "News"
    assert created.sort_order == category.sort_order + 1
    assert created.color == "#3B82F6"


def test_update_category_changes_fields(db_session, admin, category):
    updated = directory.update_category(
        db_session, category.id, admin, name="Lounge", color="#FF0000"
    )

    assert updated.name == "Lounge"
    assert updated.color == "#FF0000"


def test_delete_category_with_channels_conflicts(db_session, admin, channel):
    with pytest.raises(ConflictError):
        directory.delete_category(db_session, channel.category_id, admin)


def test_delete_empty_category(db_session, admin, category):
    directory.delete_category(db_session, category.id, admin)

    with pytest.raises(NotFoundError):
        directory.get_category(db_session, category.id)

    db_session.expire_all()
    kept = db_session.get(BoardCategory, category.id)
    assert kept is not None
    assert kept.deleted_at is not None
    assert directory.list_categories(db_session) == []


def test_delete_category_ignores_deleted_channels(db_session, admin, category, channel, alice):
    directory.delete_channel(db_session, channel.id, alice)

    directory.delete_category(db_session, category.id, admin)

    with pytest.raises(NotFoundError):
        directory.get_category(db_session, category.id)


def test_create_channel_slugifies_name(db_session, category, bob):
    channel = directory.create_channel(db_session, category.id, "Hello World", bob)

    assert channel.name == "hello-world"
    assert channel.created_by_id == bob.id
    assert channel.sort_order == 1


def test_create_channel_places_after_existing(db_session, category, channel, bob):
    created = directory.create_channel(db_session, category.id, "random", bob)

    assert created.sort_order == channel.sort_order + 1


def test_create_channel_requires_category_and_name(db_session, category, bob):
    with pytest.raises(InvalidArgumentError):
        directory.create_channel(db_session, None, "general", bob)
    with pytest.raises(InvalidArgumentError):
        directory.create_channel(db_session, category.id, "  ", bob)


def test_create_channel_unknown_category(db_session, bob):
    with pytest.raises(NotFoundError):
        directory.create_channel(db_session, 404, "general", bob)


def test_create_channel_duplicate_slug_conflicts(db_session, category, channel, bob):
    with pytest.raises(ConflictError):
        directory.create_channel(db_session, category.id, "  CHAT ", bob)


def test_same_channel_name_allowed_in_other_category(db_session, admin, channel, bob):
    other = directory.create_category(db_session, admin, "Other")

    created = directory.create_channel(db_session, other.id, "chat", bob)

    assert created.name == "chat"


def test_rename_channel_keeps_own_name(db_session, channel, alice):
    renamed = directory.rename_channel(db_session, channel.id, alice, name="Chat")

    assert renamed.name == "chat"


def test_rename_channel_rejects_taken_name(db_session, category, channel, alice):
    directory.create_channel(db_session, category.id, "random", alice)

    with pytest.raises(ConflictError):
        directory.rename_channel(db_session, channel.id, alice, name="Random")


def test_rename_channel_requires_creator_or_admin(db_session, channel, bob, admin):
    with pytest.raises(ForbiddenError):
        directory.rename_channel(db_session, channel.id, bob, name="mine")

    renamed = directory.rename_channel(db_session, channel.id, admin, description="Talk")
    assert renamed.description == "Talk"


def test_delete_channel_with_messages_conflicts(db_session, channel, alice):
    db_session.add(Message(channel_id=channel.id, author_id=alice.id, content="hi"))
    db_session.commit()

    with pytest.raises(ConflictError):
        directory.delete_channel(db_session, channel.id, alice)


def test_delete_channel_without_messages(db_session, channel, alice):
    directory.delete_channel(db_session, channel.id, alice)

    with pytest.raises(NotFoundError):
        directory.get_channel(db_session, channel.id)


def test_list_categories_counts_visible_messages(db_session, admin, category, channel, alice):
    db_session.add_all(
        [
            Message(channel_id=channel.id, author_id=alice.id, content="one"),
            Message(channel_id=channel.id, author_id=alice.id, content="two"),
        ]
    )
    db_session.commit()
    hidden = Message(channel_id=channel.id, author_id=alice.id, content="gone")
    db_session.add(hidden)
    db_session.commit()
    hidden.deleted_at = hidden.created_at
    db_session.commit()
    directory.create_category(db_session, admin, "Empty")

    listing = directory.list_categories(db_session)

    assert [entry.name for entry in listing] == ["General", "Empty"]
    assert [item.name for item in listing[0].channels] == ["chat"]
    assert listing[0].channels[0].message_count == 2
    assert listing[1].channels == []


def test_delete_channel_keeps_soft_deleted_messages(db_session, channel, alice):
    posted = message_store.post_message(db_session, alice, "short lived", channel_id=channel.id)
    message_store.delete_message(db_session, posted.id, alice)

    directory.delete_channel(db_session, channel.id, alice)
    db_session.expire_all()

    kept = db_session.get(Message, posted.id)
    assert kept is not None
    assert kept.deleted_at is not None
    assert kept.channel_id == channel.id
    stored_channel = db_session.get(Channel, channel.id)
    assert stored_channel.deleted_at is not None
    assert message_store.get_message(db_session, posted.id).id == posted.id


def test_deleted_channel_is_hidden_and_name_reusable(db_session, admin, category, channel, alice, bob):
    directory.delete_channel(db_session, channel.id, alice)

    listing = directory.list_categories(db_session)
    assert listing[0].channels == []
    with pytest.raises(NotFoundError):
        directory.rename_channel(db_session, channel.id, alice, name="again")
    with pytest.raises(NotFoundError):
        message_store.post_message(db_session, alice, "hello?", channel_id=channel.id)

    replacement = directory.create_channel(db_session, category.id, "Chat", bob)
    assert replacement.name == "chat"
    assert replacement.id != channel.id
