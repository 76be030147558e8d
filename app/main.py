from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from dotenv import load_dotenv
from typing import Optional
import logging

# Load environment variables as early as possible
load_dotenv()

from .core.config import Settings, settings as default_settings
from .dependencies import build_firestore_auth_service, build_memory_auth_service
from .exceptions import AppError, app_error_handler, http_exception_handler, validation_exception_handler
from .middleware import SecurityMiddleware, LoggingMiddleware, ErrorHandlingMiddleware
from .routers import auth_router
from .schemas import HealthResponse
from .services.auth.firebase_service import FirebaseInitError, init_firebase_app, get_firestore_client, shutdown_firebase_app

logger = logging.getLogger(__name__)


def configure_logging(config: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format=config.LOG_FORMAT
    )


def create_app(config: Optional[Settings] = None) -> FastAPI:
    config = config or default_settings
    configure_logging(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup: the credential store client is created once per process
        logger.info(f"Starting {config.APP_NAME} with {config.STORE_BACKEND} store...")
        app.state.auth_service = None
        app.state.store_init_error = None
        firebase_app = None
        if config.STORE_BACKEND == "memory":
            app.state.auth_service = build_memory_auth_service(config)
        elif config.STORE_BACKEND == "firestore":
            try:
                firebase_app = init_firebase_app(config)
                app.state.auth_service = build_firestore_auth_service(get_firestore_client(firebase_app), config)
            except FirebaseInitError as e:
                # Keep serving so /health can report the failure
                app.state.store_init_error = str(e)
                logger.exception("Credential store initialization failed")
        else:
            app.state.store_init_error = f"Unknown STORE_BACKEND: {config.STORE_BACKEND}"
            logger.error(app.state.store_init_error)
        yield
        # Shutdown
        logger.info(f"Shutting down {config.APP_NAME}...")
        shutdown_firebase_app(firebase_app)

    app = FastAPI(
        title=config.APP_NAME,
        version=config.APP_VERSION,
        debug=config.DEBUG,
        lifespan=lifespan,
        docs_url=("/docs" if config.DOCS_ENABLED else None),
        redoc_url=("/redoc" if config.DOCS_ENABLED else None),
        openapi_url=("/openapi.json" if config.DOCS_ENABLED else None)
    )
    app.state.config = config

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(SecurityMiddleware)

    # Any origin may call the API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins_list,
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(auth_router.router)

    @app.get("/health", response_model=HealthResponse, response_model_exclude_none=True)
    def health():
        if app.state.auth_service is None:
            return JSONResponse(
                status_code=503,
                content={"status": "degraded", "store": config.STORE_BACKEND, "error": app.state.store_init_error},
            )
        return HealthResponse(status="ok", store=config.STORE_BACKEND)

    return app


app = create_app()


def run(config: Optional[Settings] = None) -> None:
    import uvicorn
    config = config or default_settings
    uvicorn.run(
        "app.main:app",
        host=config.HOST,
        port=config.PORT,
        workers=1,
        log_level=config.LOG_LEVEL.lower()
    )


# ------------------------
# Run with correct PORT in local/production
# ------------------------
if __name__ == "__main__":
    run()
