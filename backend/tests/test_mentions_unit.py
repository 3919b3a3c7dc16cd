"""Unit tests for mention extraction and resolution."""

from __future__ import annotations

from app.services.mentions import extract_mention_tokens, resolve_mentions


def test_extract_mention_tokens_in_order_without_duplicates():
    text = "@bob hi @alice, ping @BOB again; mail me at bob@example"

    assert extract_mention_tokens(text) == ["bob", "alice", "example"]


def test_extract_mention_tokens_handles_empty_text():
    assert extract_mention_tokens("") == []
    assert extract_mention_tokens("no mentions here") == []


def test_resolve_mentions_by_login_and_display_name(db_session, alice, bob, make_user):
    carol = make_user("carol_99", "Carol")

    resolved = resolve_mentions(db_session, "@CAROL and @Bob, also @nobody")

    assert [user.id for user in resolved] == [carol.id, bob.id]


def test_resolve_mentions_deduplicates_users(db_session, alice):
    resolved = resolve_mentions(db_session, "@alice @Alice @ALICE")

    assert [user.id for user in resolved] == [alice.id]


def test_extract_mention_tokens_folds_beyond_ascii():
    assert extract_mention_tokens("@Straße and @STRASSE") == ["Straße"]


def test_resolve_mentions_matches_non_ascii_names(db_session, make_user):
    zoe = make_user("zoe", "Zoë")
    fan = make_user("strasse_fan", "Straße")

    resolved = resolve_mentions(db_session, "thanks @ZOË and @STRASSE")

    assert [user.id for user in resolved] == [zoe.id, fan.id]
    assert fan.display_name_key == "strasse"


def test_mention_keys_follow_renames(db_session, alice):
    alice.display_name = "Ålice"
    db_session.commit()

    assert [user.id for user in resolve_mentions(db_session, "@åLICE")] == [alice.id]
    assert resolve_mentions(db_session, "@Alice") == [alice]
