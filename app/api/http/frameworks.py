from typing import List

from fastapi import APIRouter

from app.domains.testimonies.frameworks import FRAMEWORKS
from app.domains.testimonies.schemas import FrameworkResponse

router = APIRouter(prefix="/api/frameworks", tags=["frameworks"])


@router.get("", response_model=List[FrameworkResponse])
async def list_frameworks():
    """Каталог шаблонов свидетельств"""
    return FRAMEWORKS
