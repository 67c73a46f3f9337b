import uuid

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import enforce_rate_limit, get_pdf_provider
from app.core.auth import get_current_user
from app.core.config import settings
from app.core.db import get_db
from app.domains.identity.entities import User
from app.domains.testimonies.services import TestimonyService
from app.infrastructure.export.services import ExportService, build_pdf_filename

router = APIRouter(prefix="/api/export", tags=["export"])


class PdfExportRequest(BaseModel):
    testimony_id: uuid.UUID


@router.post("/pdf")
async def export_pdf(
    data: PdfExportRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    provider=Depends(get_pdf_provider)
):
    """Экспорт свидетельства в PDF"""
    testimony = await TestimonyService(db).get_readable(data.testimony_id, current_user.id)

    enforce_rate_limit(
        f"export:{current_user.id}", settings.export_rate_limit, settings.user_rate_window_seconds
    )

    pdf = await ExportService(provider).export_to_pdf(testimony)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{build_pdf_filename(testimony.title)}"'}
    )
