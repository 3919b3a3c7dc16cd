"""HTTP endpoints for the reaction ledger."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.database import get_db
from app.models import User
from app.schemas import ReactionRead, ReactionToggleRequest, ReactionToggleResult
from app.services import reactions as ledger

router = APIRouter(prefix="/reactions", tags=["reactions"])


@router.post("", response_model=ReactionToggleResult, status_code=status.HTTP_201_CREATED)
def toggle_reaction(
    payload: ReactionToggleRequest,
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> ReactionToggleResult:
    """Toggle the caller's reaction; 201 when added, 200 when removed."""

    outcome = ledger.toggle_reaction(db, payload.message_id, current_user, payload.emoji_code)
    if outcome.action == "removed":
        response.status_code = status.HTTP_200_OK
        return ReactionToggleResult(action="removed")
    return ReactionToggleResult(
        action="added",
        reaction=ReactionRead.model_validate(outcome.reaction, from_attributes=True),
    )


@router.get("", response_model=list[ReactionRead])
def list_reactions(
    message_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
) -> list[ReactionRead]:
    reactions = ledger.list_reactions(db, message_id)
    return [ReactionRead.model_validate(reaction, from_attributes=True) for reaction in reactions]
