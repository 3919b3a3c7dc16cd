"""Database-backed search across board messages, channels and categories."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from sqlalchemy import and_, func, or_, select
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models import BoardCategory, Channel, Message
from app.services.errors import InvalidArgumentError

settings = get_settings()

DIRECTORY_RESULT_LIMIT = 10


@dataclass(frozen=True)
class BoardSearchFilters:
    """Optional filters narrowing message search to a channel or category."""

    channel_id: int | None = None
    category_id: int | None = None

    @property
    def is_scoped(self) -> bool:
        return self.channel_id is not None or self.category_id is not None


@dataclass
class BoardSearchResult:
    """Container for search hits grouped by entity type."""

    query: str
    messages: list[Message] = field(default_factory=list)
    channels: list[Channel] = field(default_factory=list)
    categories: list[BoardCategory] = field(default_factory=list)

    @property
    def total_results(self) -> int:
        return len(self.messages) + len(self.channels) + len(self.categories)


class BoardSearchService:
    """Case-insensitive substring search using the configured database backend."""

    def __init__(self, session: Session):
        self._session = session
        self._dialect: Dialect | None = session.get_bind().dialect if session.get_bind() else None

    def search(
        self,
        query: str | None,
        *,
        limit: int | None = None,
        filters: BoardSearchFilters | None = None,
        options: Sequence = (),
    ) -> BoardSearchResult:
        """Search visible messages and, when unscoped, channels and categories."""

        term = (query or "").strip()
        if len(term) < settings.board_search_min_query_length:
            raise InvalidArgumentError(
                f"Search query must be at least {settings.board_search_min_query_length} characters"
            )
        if filters is None:
            filters = BoardSearchFilters()
        effective_limit = max(1, min(limit or settings.board_search_default_limit, settings.board_history_max_limit))

        stmt = select(Message).where(Message.deleted_at.is_(None), self._build_matcher(Message.content, term))

        conditions: list = []
        if filters.channel_id is not None:
            conditions.append(Message.channel_id == filters.channel_id)
        if filters.category_id is not None:
            stmt = stmt.join(Channel, Channel.id == Message.channel_id)
            conditions.append(Channel.category_id == filters.category_id)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        if options:
            stmt = stmt.options(*options)

        stmt = stmt.order_by(Message.created_at.desc(), Message.id.desc()).limit(effective_limit)
        rows: Iterable[Message] = self._session.execute(stmt).scalars()
        result = BoardSearchResult(query=term, messages=list(rows))

        if not filters.is_scoped:
            result.channels = self._search_directory(Channel, term)
            result.categories = self._search_directory(BoardCategory, term)
        return result

    # Internal helpers -----------------------------------------------------

    def _build_matcher(self, column, term: str):
        if self._dialect is not None and self._dialect.name == "postgresql":  # pragma: no cover - dialect specific
            return column.ilike(f"%{term}%")
        return func.lower(column).contains(term.lower(), autoescape=True)

    def _search_directory(self, model, term: str) -> list:
        stmt = (
            select(model)
            .where(model.deleted_at.is_(None))
            .where(or_(self._build_matcher(model.name, term), self._build_matcher(model.description, term)))
            .order_by(model.name)
            .limit(DIRECTORY_RESULT_LIMIT)
        )
        return list(self._session.execute(stmt).scalars())
