from app.domains.testimonies.entities import Testimony, GalleryEntry, FrameworkType
from app.domains.testimonies.schemas import (
    TestimonyCreate, TestimonyUpdate, TestimonyResponse, TestimonyPublicResponse,
    SharedTestimonyResponse, GalleryPublishRequest, GalleryEntryResponse, GalleryItemResponse,
    FrameworkResponse
)
from app.domains.testimonies.services import TestimonyService, GalleryService

__all__ = [
    "Testimony", "GalleryEntry", "FrameworkType",
    "TestimonyCreate", "TestimonyUpdate", "TestimonyResponse", "TestimonyPublicResponse",
    "SharedTestimonyResponse", "GalleryPublishRequest", "GalleryEntryResponse", "GalleryItemResponse",
    "FrameworkResponse",
    "TestimonyService", "GalleryService"
]
