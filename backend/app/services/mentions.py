"""Resolve ``@name`` tokens in message text to community members."""

from __future__ import annotations

import re

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.core.slug import mention_key
from app.models import User

MENTION_PATTERN = re.compile(r"@(\w+)", flags=re.UNICODE)


def extract_mention_tokens(text: str) -> list[str]:
    """Return mention tokens in order of appearance, without the ``@`` prefix.

    Tokens are deduplicated case-insensitively; the first spelling wins.
    """

    seen: set[str] = set()
    tokens: list[str] = []
    for match in MENTION_PATTERN.finditer(text or ""):
        token = match.group(1).strip()
        key = mention_key(token)
        if not token or key in seen:
            continue
        seen.add(key)
        tokens.append(token)
    return tokens


def resolve_mentions(db: Session, text: str) -> list[User]:
    """Resolve mention tokens against logins and display names.

    Matching uses the stored ``mention_key`` columns, so it is case-insensitive
    beyond ASCII. Each user appears once, ordered by the first token that
    resolved to them.
    """

    tokens = extract_mention_tokens(text)
    if not tokens:
        return []

    keys = [mention_key(token) for token in tokens]
    stmt = select(User).where(
        or_(User.login_key.in_(keys), User.display_name_key.in_(keys))
    )
    candidates = sorted(db.execute(stmt).scalars(), key=lambda item: item.id)

    resolved: list[User] = []
    seen_ids: set[int] = set()
    for key in keys:
        for user in candidates:
            if user.id in seen_ids:
                continue
            if key in (user.login_key, user.display_name_key):
                seen_ids.add(user.id)
                resolved.append(user)
    return resolved
