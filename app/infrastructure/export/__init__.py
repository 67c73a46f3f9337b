from app.infrastructure.export.providers import PDFProvider
from app.infrastructure.export.services import ExportService, build_pdf_filename

__all__ = ["PDFProvider", "ExportService", "build_pdf_filename"]
