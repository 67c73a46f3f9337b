from app.db.repositories.user_repository import UserRepository
from app.db.repositories.anonymous_user_repository import AnonymousUserRepository
from app.db.repositories.testimony_repository import TestimonyRepository
from app.db.repositories.gallery_repository import GalleryRepository
from app.db.repositories.subscription_repository import SubscriptionRepository

__all__ = [
    "UserRepository",
    "AnonymousUserRepository",
    "TestimonyRepository",
    "GalleryRepository",
    "SubscriptionRepository"
]
