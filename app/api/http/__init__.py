from app.api.http.health import router as health_router
from app.api.http.auth import router as auth_router, callback_router as auth_callback_router
from app.api.http.testimonies import router as testimonies_router
from app.api.http.gallery import router as gallery_router
from app.api.http.payments import router as payments_router
from app.api.http.subscription import router as subscription_router
from app.api.http.ai import router as ai_router
from app.api.http.export import router as export_router
from app.api.http.users import router as users_router
from app.api.http.frameworks import router as frameworks_router

__all__ = [
    "health_router",
    "auth_router",
    "auth_callback_router",
    "testimonies_router",
    "gallery_router",
    "payments_router",
    "subscription_router",
    "ai_router",
    "export_router",
    "users_router",
    "frameworks_router"
]
