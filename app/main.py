import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.http import (
    health_router, auth_router, auth_callback_router, testimonies_router, gallery_router,
    payments_router, subscription_router, ai_router, export_router, users_router,
    frameworks_router
)
from app.core.config import settings
from app.core.errors import AppError
from app.core.logging import setup_logging
from app.domains.testimonies.entities import FrameworkType

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Testimony Builder",
    description="API для создания и публикации личных свидетельств",
    version="1.0.0"
)

# CORS для frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


_UNION_TAGS = {"root"} | {framework.value for framework in FrameworkType}


def _validation_fields(exc: RequestValidationError) -> dict:
    fields = {}
    for error in exc.errors():
        # Первый элемент пути это источник (body, query, path)
        loc = [str(part) for part in error.get("loc", ())[1:]]
        # Ветка размеченного объединения добавляет имя варианта в путь
        while len(loc) > 1 and loc[0] in _UNION_TAGS:
            loc = loc[1:]
        key = ".".join(loc) or "body"
        if error.get("type") in ("union_tag_invalid", "union_tag_not_found"):
            key = "framework_type"
        fields.setdefault(key, error.get("msg", "Invalid value"))
    return fields


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request data", "fields": _validation_fields(exc)}
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"}
    )


# Подключаем роутеры
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(auth_callback_router)
app.include_router(testimonies_router)
app.include_router(gallery_router)
app.include_router(payments_router)
app.include_router(subscription_router)
app.include_router(ai_router)
app.include_router(export_router)
app.include_router(users_router)
app.include_router(frameworks_router)


@app.get("/")
async def root():
    """Корневой эндпоинт"""
    return {
        "message": "Testimony Builder API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }
