from typing import List
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_current_user
from app.core.db import get_db
from app.domains.identity.entities import User
from app.domains.testimonies.schemas import (
    GalleryPublishRequest, GalleryEntryResponse, GalleryItemResponse
)
from app.domains.testimonies.services import GalleryService

router = APIRouter(prefix="/api/gallery", tags=["gallery"])


@router.get("", response_model=List[GalleryItemResponse])
async def list_gallery(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db)
):
    """Публичная галерея, новые записи первыми"""
    return await GalleryService(db).list_public(page=page, limit=limit)


@router.post("/publish", response_model=GalleryEntryResponse, status_code=status.HTTP_201_CREATED)
async def publish_to_gallery(
    data: GalleryPublishRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Публикация свидетельства в галерее"""
    gallery_service = GalleryService(db)

    try:
        entry = await gallery_service.publish(data, current_user.id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return GalleryEntryResponse.model_validate(entry)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_from_gallery(
    entry_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Снятие с публикации"""
    await GalleryService(db).unpublish(entry_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
