from fastapi import APIRouter

from app.api.auth import router as auth_router
from app.api.categories import router as categories_router
from app.api.channels import router as channels_router
from app.api.messages import router as messages_router
from app.api.moderation import router as moderation_router
from app.api.notifications import router as notifications_router
from app.api.reactions import router as reactions_router
from app.api.search import router as search_router
from app.api.threads import router as threads_router

router = APIRouter()

router.include_router(auth_router, prefix="/auth", tags=["auth"])
router.include_router(categories_router)
router.include_router(channels_router)
router.include_router(messages_router)
router.include_router(threads_router)
router.include_router(reactions_router)
router.include_router(search_router)
router.include_router(notifications_router)
router.include_router(moderation_router)


@router.get("/", tags=["root"])
def read_root() -> dict[str, str]:
    return {"message": "Welcome to the Community Board API"}
