"""HTTP endpoint for board search."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_optional_user
from app.database import get_db
from app.models import User
from app.schemas import CategoryRead, ChannelRead, SearchResults
from app.search import BoardSearchFilters, BoardSearchService
from app.services.messages import MESSAGE_LOAD_OPTIONS, serialize_messages

router = APIRouter(prefix="/search", tags=["search"])


@router.get("", response_model=SearchResults)
def search_board(
    q: str | None = Query(default=None),
    channel_id: int | None = Query(default=None),
    category_id: int | None = Query(default=None),
    limit: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    current_user: User | None = Depends(get_optional_user),
) -> SearchResults:
    """Search message content, plus channel and category names when unscoped."""

    service = BoardSearchService(db)
    result = service.search(
        q,
        limit=limit,
        filters=BoardSearchFilters(channel_id=channel_id, category_id=category_id),
        options=MESSAGE_LOAD_OPTIONS,
    )
    viewer_id = current_user.id if current_user is not None else None
    return SearchResults(
        messages=serialize_messages(result.messages, db, viewer_id),
        channels=[ChannelRead.model_validate(item, from_attributes=True) for item in result.channels],
        categories=[CategoryRead.model_validate(item, from_attributes=True) for item in result.categories],
        query=result.query,
        total_results=result.total_results,
    )
