"""HTTP endpoints for board categories."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.database import get_db
from app.models import User
from app.schemas import CategoryCreate, CategoryRead, CategoryUpdate, CategoryWithChannels
from app.services import directory

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryWithChannels])
def list_categories(db: Session = Depends(get_db)) -> list[CategoryWithChannels]:
    """List categories with their channels and message counts."""

    return directory.list_categories(db)


@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CategoryRead:
    """Create a new category (admins only)."""

    category = directory.create_category(
        db,
        current_user,
        payload.name,
        description=payload.description,
        color=payload.color,
    )
    return CategoryRead.model_validate(category, from_attributes=True)


@router.patch("/{category_id}", response_model=CategoryRead)
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CategoryRead:
    update_data = payload.model_dump(exclude_unset=True)
    category = directory.update_category(db, category_id, current_user, **update_data)
    return CategoryRead.model_validate(category, from_attributes=True)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Response:
    """Delete an empty category (admins only)."""

    directory.delete_category(db, category_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
