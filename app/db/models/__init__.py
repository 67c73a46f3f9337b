from app.db.models.user import User
from app.db.models.testimony import Testimony
from app.db.models.anonymous_user import AnonymousUserTracking
from app.db.models.gallery import GalleryEntry
from app.db.models.subscription import Subscription

__all__ = [
    "User",
    "Testimony",
    "AnonymousUserTracking",
    "GalleryEntry",
    "Subscription"
]
