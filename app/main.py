# app/main.py

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.api.routes import GatewayContext, Generator, router as api_router
from app.config.settings import Settings, get_settings
from app.models.schemas import ErrorResponse, GenerationFailure
from app.services.gemini_service import GeminiService

API_TITLE = "Gemini Gateway"
API_VERSION = "1.0.0"
API_DESCRIPTION = "Forward a prompt, optionally with an image, document or audio file, to Gemini."

GENERIC_ERROR = "Generation failed."

logger = logging.getLogger(__name__)

def describe_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg', 'invalid')}" if loc else err.get("msg", "invalid"))
    return "; ".join(parts) or "Invalid request."

def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.context.settings
    logger.info("Gemini API server is running at http://localhost:%d", settings.port)
    yield
    logger.info("Gemini API server stopped.")

def create_app(
    settings: Settings | None = None,
    generator: Generator | None = None,
) -> FastAPI:
    """
    Build the application around one settings object and one generator.
    Both default to the process-wide ones; tests pass their own.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    generator = generator or GeminiService.from_settings(settings)

    settings.upload_dir.mkdir(parents=True, exist_ok=True)

    app = FastAPI(
        title=API_TITLE,
        version=API_VERSION,
        description=API_DESCRIPTION,
        lifespan=lifespan,
    )
    app.state.context = GatewayContext(settings=settings, generator=generator)

    @app.exception_handler(GenerationFailure)
    async def generation_failure_handler(request: Request, exc: GenerationFailure):
        message = exc.message if settings.expose_error_details else GENERIC_ERROR
        logger.warning("%s %s -> 500 (%s)", request.method, request.url.path, exc.kind.value)
        return JSONResponse(status_code=500, content=ErrorResponse(error=message).model_dump())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        # Bad input gets the same {error} shape as a failed generation
        message = describe_validation_errors(exc)
        logger.warning("%s %s -> 500 (invalid request): %s", request.method, request.url.path, message)
        return JSONResponse(status_code=500, content=ErrorResponse(error=message).model_dump())

    # Mount API routes
    app.include_router(api_router)
    return app

def main() -> None:
    """
    Run the server with uvicorn on the configured host and port (3000 by default).
    Registered as the `gemini-gateway` console script.
    """
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=False,
    )

if __name__ == "__main__":
    main()
