import re

from starlette.concurrency import run_in_threadpool

from app.domains.testimonies.entities import Testimony


def build_pdf_filename(title: str) -> str:
    """Имя файла из заголовка: все кроме латиницы и цифр заменяется на _"""
    return re.sub(r"[^a-zA-Z0-9]", "_", title) + ".pdf"


class ExportService:
    """Экспорт свидетельств"""

    def __init__(self, provider):
        self.provider = provider

    async def export_to_pdf(self, testimony: Testimony) -> bytes:
        return await run_in_threadpool(self.provider.generate, testimony)
