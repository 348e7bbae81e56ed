import logging

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from filetray.api.routes import router
from filetray.core.config import Settings
from filetray.core.config import settings as default_settings
from filetray.core.exceptions import FileTrayError
from filetray.core.logging import setup_logging
from filetray.services.file_collection import FileCollection

logger = logging.getLogger(__name__)


async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.error(f"HTTP exception: {exc.detail} (status: {exc.status_code})")
    return JSONResponse({"detail": exc.detail}, status_code=exc.status_code)


async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    # Log the detailed Pydantic validation errors to the server console
    logger.error("Request validation failed: %s", exc.errors(), exc_info=False)
    return JSONResponse(
        {"error": "Input validation failed", "details": jsonable_errors(exc)},
        status_code=422,
    )


async def filetray_exception_handler(_request: Request, exc: FileTrayError) -> JSONResponse:
    logger.error(f"File collection error: {str(exc)}")
    return JSONResponse({"error": str(exc)}, status_code=500)


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [{k: v for k, v in err.items() if k in ("type", "loc", "msg")} for err in exc.errors()]


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Builds the HTTP app around a single file collection."""
    app_settings = app_settings or default_settings
    setup_logging(app_settings.log_level)

    app = FastAPI(title="filetray")
    app.state.file_collection = FileCollection(app_settings.to_policy())
    logger.info("File collection ready with policy: %s", app.state.file_collection.policy)

    @app.get("/health", status_code=status.HTTP_200_OK, tags=["Health"])
    async def health_check() -> dict[str, str]:
        logger.info("Health check endpoint called")
        return {"status": "ok"}

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(FileTrayError, filetray_exception_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_allowed_origins,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app
