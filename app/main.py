import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.router import api_router
from app.core.config import Settings, get_settings
from app.core.exceptions import CryptanalysisError, ExhaustionError, ValidationError
from app.core.logging import configure_logging
from app.services.pipeline.orchestrator import DecryptionCoordinator, Thresholds
from app.services.preprocessing.dictionary import WordDictionary

logger = logging.getLogger(__name__)


def build_coordinator(settings: Settings) -> DecryptionCoordinator:
    """Load the dictionary once and wire the cascade around it."""
    dictionary = WordDictionary.load(settings.dictionary_path)

    return DecryptionCoordinator.from_dictionary(
        dictionary,
        thresholds=Thresholds(global_confidence=settings.confidence_threshold),
        max_rails=settings.max_rails,
        max_key_length=settings.max_key_length,
    )


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Handle application startup and shutdown."""
        # Startup
        app.state.coordinator = build_coordinator(settings)
        logger.info(
            "Cipher breaker ready (dictionary size %d)",
            len(app.state.coordinator.dictionary),
        )
        yield
        # Shutdown

    app = FastAPI(
        title=settings.app_name,
        description=(
            "Classical cipher breaking API. "
            "Identifies Caesar, Rail Fence and Vigenère ciphertexts and "
            "recovers the most plausible plaintext."
        ),
        version="0.1.0",
        openapi_url=f"{settings.api_v1_prefix}/openapi.json",
        docs_url=f"{settings.api_v1_prefix}/docs",
        redoc_url=f"{settings.api_v1_prefix}/redoc",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_development else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error(
            status.HTTP_400_BAD_REQUEST,
            "Missing or invalid ciphertext in request body",
        )

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, exc.message)

    @app.exception_handler(ExhaustionError)
    async def exhaustion_handler(request: Request, exc: ExhaustionError) -> JSONResponse:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message)

    @app.exception_handler(CryptanalysisError)
    async def cryptanalysis_error_handler(
        request: Request, exc: CryptanalysisError
    ) -> JSONResponse:
        logger.error("Cipher analysis failed: %s", exc.message)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.message)

    # Endpoints read the settings this app was built with
    app.dependency_overrides[get_settings] = lambda: settings

    # Include API router
    app.include_router(api_router, prefix=settings.api_v1_prefix)

    return app


app = create_app()


def run() -> None:
    """Run the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    run()
