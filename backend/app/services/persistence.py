"""Transaction helpers mapping storage failures onto the error taxonomy."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.services.errors import ConflictError, InternalError

logger = logging.getLogger(__name__)


def commit(
    db: Session,
    operation: str,
    *,
    entity_id: int | None = None,
    conflict_detail: str | None = None,
) -> None:
    """Commit the session, rolling back and raising a ``BoardError`` on failure.

    Unique-constraint violations become ``ConflictError`` when
    ``conflict_detail`` is given; every other storage failure is logged and
    surfaced as ``InternalError``.
    """

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if conflict_detail is not None:
            logger.info("Conflict during %s (id=%s): %s", operation, entity_id, conflict_detail)
            raise ConflictError(conflict_detail) from exc
        logger.exception("Integrity failure during %s (id=%s)", operation, entity_id)
        raise InternalError(f"Failed to {operation}") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Storage failure during %s (id=%s)", operation, entity_id)
        raise InternalError(f"Failed to {operation}") from exc
