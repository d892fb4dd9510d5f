"""
Larder Backend — FastAPI Application Factory
=============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() wires settings, repository and
       services together, stores them on `app.state`, and registers
       middleware, exception handlers and routers.
Who:   uvicorn imports `larder.main:app`; tests call create_app() with an
       in-memory repository and fake image collaborators.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                       FastAPI App                        │
    │                                                          │
    │  Middleware:  Request ID → Access Log → GZip → CORS      │
    │                                                          │
    │  Routes:      /register /login          (AuthService)    │
    │               /ingredients /calories                     │
    │               /shopping-list /leaderboard (PantryService)│
    │               /scan-expiry              (ScanService)    │
    │               /recipes                  (RecipeService)  │
    │               / /health                                  │
    │                                                          │
    │  Errors:      LarderError → ERROR_STATUS → {"error": …}  │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (log problems, keep serving)
    3. Create the upload directory
    4. Create missing tables

    Shutdown:
    1. Close the recipe HTTP client
    2. Dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

import boto3
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from larder import __version__
from larder.config import Settings, settings as default_settings
from larder.exceptions import LarderError, status_for
from larder.middleware.logging import RequestLoggingMiddleware
from larder.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware
from larder.repository import Repository, SqlRepository
from larder.routes import ROUTERS
from larder.services.auth_service import AuthService
from larder.services.file_service import FileService
from larder.services.label_service import RekognitionLabelDetector
from larder.services.ocr_service import TesseractTextExtractor
from larder.services.pantry_service import PantryService
from larder.services.recipe_service import RecipeService
from larder.services.scan_service import ScanService
from larder.services.vision_base import LabelDetector, TextExtractor

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure logging for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once from the lifespan, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # uvicorn.access duplicates larder.access; httpx logs full URLs,
    # which include the Spoonacular key.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    config: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(config.log_level)
    logger.info("=" * 60)
    logger.info("Larder Backend %s starting up...", __version__)

    try:
        config.validate_required_for_production()
    except ValueError as e:
        # Keep serving: the affected features fail per request instead.
        logger.error("Configuration error: %s", str(e))

    upload_dir = Path(config.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Upload directory: %s", upload_dir.resolve())

    await app.state.repository.create_schema()

    logger.info("Server ready at http://%s:%d", config.host, config.port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Larder Backend shutting down...")
    await app.state.recipe_service.close()
    await app.state.repository.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Every failure leaves the API as `{"error": "<message>"}`.

    Handler hierarchy:
        LarderError             → status from ERROR_STATUS, own message
        RequestValidationError  → 400 "Invalid request" (malformed JSON,
                                  wrongly typed field or path parameter)
        HTTPException           → its own status and detail (404, 405)
        Exception (fallback)    → 500 "Internal server error"

    Context dicts, driver errors and stack traces are logged, never sent.
    """

    @app.exception_handler(LarderError)
    async def handle_larder_error(request: Request, exc: LarderError):
        status = status_for(exc)
        rid = _request_id(request)
        if status >= 500:
            logger.error(
                "[%s] %s: %s | Context: %s",
                rid, type(exc).__name__, exc.message, exc.context,
            )
        else:
            logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return JSONResponse(status_code=status, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = _request_id(request)
        logger.warning(
            "[%s] Request validation failed: %s",
            rid,
            [".".join(str(part) for part in err.get("loc", ())) for err in exc.errors()],
        )
        return JSONResponse(status_code=400, content={"error": "Invalid request"})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        # Runs outside the middleware stack, so the ID header is added here.
        rid = _request_id(request)
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
            headers={REQUEST_ID_HEADER: rid} if rid else None,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[Repository] = None,
    text_extractor: Optional[TextExtractor] = None,
    label_detector: Optional[LabelDetector] = None,
    recipe_service: Optional[RecipeService] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Any collaborator not supplied is built from `settings`. Building them
    opens no connections: the database pool, the boto3 client and the
    httpx client all connect lazily on first use.
    """
    config = settings or default_settings

    if repository is None:
        repository = SqlRepository.from_url(
            config.database_url,
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
            pool_pre_ping=config.db_pool_pre_ping,
        )
    if text_extractor is None:
        text_extractor = TesseractTextExtractor(
            language=config.ocr_language,
            tesseract_cmd=config.tesseract_cmd,
        )
    if label_detector is None:
        rekognition = boto3.client(
            "rekognition",
            region_name=config.aws_region,
            aws_access_key_id=config.aws_access_key_id,
            aws_secret_access_key=config.aws_secret_access_key,
        )
        label_detector = RekognitionLabelDetector(
            rekognition,
            max_labels=config.label_max_labels,
            min_confidence=config.label_min_confidence,
            resize_width=config.label_resize_width,
        )
    if recipe_service is None:
        recipe_service = RecipeService.create(
            api_key=config.spoonacular_api_key,
            base_url=config.spoonacular_base_url,
            page_size=config.recipe_page_size,
        )

    app = FastAPI(
        title="Larder API",
        description=(
            "Household food management: pantry inventory, calorie log, "
            "shopping list, expiry-date scanning and recipe search."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = config
    app.state.repository = repository
    app.state.recipe_service = recipe_service
    app.state.auth_service = AuthService(
        repository,
        secret_key=config.secret_key,
        algorithm=config.jwt_algorithm,
        token_ttl_minutes=config.token_ttl_minutes,
        bcrypt_rounds=config.bcrypt_rounds,
    )
    app.state.pantry_service = PantryService(repository)
    app.state.scan_service = ScanService(
        FileService(config.upload_dir, max_upload_size=config.max_upload_size),
        text_extractor,
        label_detector,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in reverse order of addition: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins_list,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["Content-Type", "Authorization", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    for router in ROUTERS:
        app.include_router(router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `larder.main:app` to be importable
app = create_app()
