"""FastAPI application entry point.

This module initializes the FastAPI application with all routers,
middleware, database lifecycle management, configuration, logging,
and global exception handlers for consistent error responses.
"""

import logging
from typing import Any

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from starlette.exceptions import HTTPException

from . import __version__
from .config import settings
from .database import lifespan
from .exceptions import (
    APIException,
    api_exception_handler,
    generic_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from .logging_config import LoggingMiddleware, setup_logging
from .middleware import ProcessTimeMiddleware, SecurityHeadersMiddleware
from .routers import (
    admin_router,
    auth_router,
    health_router,
    items_router,
    swaps_router,
    users_router,
)

# Configure logger for this module
logger = logging.getLogger(__name__)

# Initialize logging before creating the app
setup_logging(settings)
logger.info("Starting FastAPI application initialization")


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    This function creates the FastAPI application instance with all necessary
    configuration including middleware, exception handlers, and routers.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    app = FastAPI(
        title="ReWear API",
        description="Clothing exchange marketplace: listings, swaps and a points economy",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
    )

    logger.info("FastAPI application created with basic configuration")

    # Configure middleware stack (order matters!)
    configure_middleware(app)

    # Register exception handlers
    configure_exception_handlers(app)

    # Register routers
    configure_routers(app)

    # Add root endpoint
    configure_root_endpoints(app)

    logger.info("FastAPI application configuration completed")
    return app


def configure_middleware(app: FastAPI) -> None:
    """Configure middleware stack for the application.

    Middleware added last runs first, so request logging wraps everything
    and sees the final status code.

    Args:
        app: FastAPI application instance
    """
    logger.info("Configuring middleware stack")

    app.add_middleware(SecurityHeadersMiddleware)

    if settings.is_production:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.allowed_hosts)
        logger.info(f"Trusted host middleware configured with hosts: {settings.allowed_hosts}")

    configure_cors_middleware(app)

    app.add_middleware(ProcessTimeMiddleware)
    app.add_middleware(LoggingMiddleware)

    logger.info("Middleware stack configuration completed")


def configure_cors_middleware(app: FastAPI) -> None:
    """Configure CORS middleware from settings.

    Credentials are only allowed with an explicit origin list.

    Args:
        app: FastAPI application instance
    """
    allow_all = "*" in settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=not allow_all,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
        expose_headers=["X-Request-ID", "X-Process-Time"],
        max_age=86400,  # Cache preflight requests for 24 hours
    )
    logger.info(f"CORS configured with origins: {settings.cors_origins}")


def configure_exception_handlers(app: FastAPI) -> None:
    """Configure global exception handlers.

    Args:
        app: FastAPI application instance
    """
    logger.info("Configuring exception handlers")

    app.add_exception_handler(APIException, api_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Exception handlers configuration completed")


def configure_routers(app: FastAPI) -> None:
    """Configure and register API routers.

    Args:
        app: FastAPI application instance
    """
    logger.info("Configuring API routers")

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(items_router)
    app.include_router(users_router)
    app.include_router(swaps_router)
    app.include_router(admin_router)

    logger.info("API routers registered successfully")


def configure_root_endpoints(app: FastAPI) -> None:
    """Configure root and utility endpoints.

    Args:
        app: FastAPI application instance
    """

    @app.get("/", tags=["root"], summary="API Information")
    async def root() -> dict[str, Any]:
        """Root endpoint providing API information.

        Returns:
            Dict[str, Any]: API information
        """
        return {
            "message": "ReWear API is running",
            "version": __version__,
            "environment": settings.environment,
            "docs": "/docs" if not settings.is_production else None,
            "health": "/api/health",
            "endpoints": {
                "health": "/api/health",
                "auth": "/api/auth",
                "items": "/api/items",
                "users": "/api/users",
                "swaps": "/api/swaps",
                "admin": "/api/admin",
            },
        }

    @app.get("/version", tags=["root"], summary="API Version")
    async def version() -> dict[str, str]:
        """Get API version information.

        Returns:
            Dict[str, str]: Version information
        """
        return {"version": __version__, "environment": settings.environment}

    logger.info("Root endpoints configured")


def run() -> None:
    """Run the application with uvicorn (``rewear-api`` console script)."""
    import uvicorn

    uvicorn.run(
        "rewear_api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_config=None,
    )


# Create the FastAPI application instance
app = create_app()

# Log application startup
logger.info(
    "FastAPI application initialized successfully",
    extra={
        "environment": settings.environment,
        "debug": settings.debug,
        "database_url": settings.database_url.split("@")[-1]
        if "@" in settings.database_url
        else settings.database_url,
    },
)
