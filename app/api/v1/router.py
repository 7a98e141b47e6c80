from fastapi import APIRouter
from app.api.v1 import health, auth, users, photos, discover, boards, favorites, reports, admin
from app.core.config import settings

api_router = APIRouter(prefix=settings.API_V1_PREFIX)

api_router.include_router(health.router, tags=['health'])
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(photos.router)
api_router.include_router(discover.router)
api_router.include_router(boards.router)
api_router.include_router(favorites.router)
api_router.include_router(reports.router)
api_router.include_router(admin.router)
