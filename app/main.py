from typing import Optional
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import uvicorn

from app.controllers.product_controller import build_product_router
from app.core.config import Settings, get_settings
from app.core.database import build_engine, build_session_maker, create_db_and_tables, close_db
from app.core.exceptions import AppError, AuthenticationError
from app.core.logging import setup_logging
from app.core.security import TokenVerifier
from app.dao.product_dao import ProductDAO
from app.middleware.logging_middleware import LoggingMiddleware
from app.schemas.response_schemas import error_content
from app.services.product_service import ProductService

import structlog

logger = structlog.get_logger()


def _register_exception_handlers(app: FastAPI):

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "Request failed",
            code=exc.code,
            status_code=exc.status_code,
            error=str(exc.__cause__ or exc),
            path=request.url.path,
            method=request.method
        )
        message = "Internal server error" if exc.status_code >= 500 else exc.message
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
        return JSONResponse(
            status_code=exc.status_code,
            content=error_content(message, exc.code, exc.details),
            headers=headers
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        details = [
            {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
            for error in exc.errors()
        ]
        logger.warning("Malformed request", path=request.url.path, method=request.method, details=details)
        return JSONResponse(
            status_code=400,
            content=error_content("Malformed request", "validation_error", details)
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(
            "HTTP Exception",
            status_code=exc.status_code,
            detail=exc.detail,
            path=request.url.path,
            method=request.method
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_content(str(exc.detail), "http_error"),
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled Exception",
            error=str(exc),
            path=request.url.path,
            method=request.method
        )
        return JSONResponse(
            status_code=500,
            content=error_content("Internal server error", "internal_error")
        )


def create_app(
    settings: Optional[Settings] = None,
    *,
    token_verifier: Optional[TokenVerifier] = None,
    product_service: Optional[ProductService] = None,
) -> FastAPI:
    """Compose the API from its collaborators.

    Anything not passed in is built from ``settings``. The database engine is
    only created, and disposed on shutdown, when no product service is given.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    engine = None
    if product_service is None:
        engine = build_engine(settings)
        product_service = ProductService(
            ProductDAO(build_session_maker(engine)),
            default_page_limit=settings.default_page_limit,
            max_page_limit=settings.max_page_limit,
        )
    token_verifier = token_verifier or TokenVerifier.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application startup", environment=settings.environment)
        if engine is not None:
            try:
                await create_db_and_tables(engine)
                logger.info("Database initialized successfully")
            except Exception as e:
                logger.error("Failed to initialize database", error=str(e))
                raise

        yield

        logger.info("Application shutdown")
        if engine is not None:
            await close_db(engine)
            logger.info("Database connections closed")

    app = FastAPI(
        title="Product Catalog API",
        description="Authenticated CRUD and search over products",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.environment == "local" else None,
        redoc_url="/redoc" if settings.environment == "local" else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if settings.request_logging:
        app.add_middleware(LoggingMiddleware)

    _register_exception_handlers(app)

    app.include_router(build_product_router(product_service, token_verifier), prefix=settings.api_prefix)

    @app.get("/")
    async def root():
        return {
            "message": "Product Catalog API is running",
            "version": "1.0.0",
            "environment": settings.environment,
            "docs_url": "/docs" if settings.environment == "local" else "Documentation disabled in production"
        }

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "environment": settings.environment,
        }

    return app


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "local",
        log_config=None
    )
