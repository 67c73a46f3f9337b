from app.domains.identity.entities import User, AnonymousUserRecord
from app.domains.identity.schemas import (
    UserResponse, Token, AnonymousSessionResponse, MagicLinkRequest, MagicLinkResponse,
    TrackAnonymousRequest, TrackAnonymousResponse, AnonymousCheckResponse,
    ClaimEmailRequest, ClaimEmailResponse, ClaimRequest
)
from app.domains.identity.services import IdentityService, AnonymousUserService, OwnershipClaimer

__all__ = [
    "User", "AnonymousUserRecord",
    "UserResponse", "Token", "AnonymousSessionResponse", "MagicLinkRequest", "MagicLinkResponse",
    "TrackAnonymousRequest", "TrackAnonymousResponse", "AnonymousCheckResponse",
    "ClaimEmailRequest", "ClaimEmailResponse", "ClaimRequest",
    "IdentityService", "AnonymousUserService", "OwnershipClaimer"
]
