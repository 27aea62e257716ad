import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .db.store import MemoryStore
from .services.rates.cache_service import RateCacheService
from .services.simulators import Simulators
from .routers import health, rates, users, kyc, payments, transactions, wallet, ui


def create_app(settings_override: Settings | None = None) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment (e.g., temp upload dir, zero delays). Falls back to
    cached get_settings().
    """
    settings = settings_override or get_settings()
    if settings_override is not None:
        settings.init_post_load()
    # Initialize logging early
    init_logging(debug=settings.debug)

    # debug drives log verbosity only; FastAPI(debug=True) serves plain-text tracebacks
    app = FastAPI(title=settings.app_name, version=settings.version)

    # Per-app state; everything is lost on restart
    app.state.settings = settings
    app.state.store = MemoryStore()
    app.state.rates = RateCacheService.from_settings(settings)
    app.state.simulators = Simulators.from_settings(settings)

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(rates.router)
    app.include_router(users.router)
    app.include_router(kyc.router)
    app.include_router(payments.router)
    app.include_router(transactions.router)
    app.include_router(wallet.router)
    app.include_router(ui.router)

    logging.getLogger("enkrypt").info(
        "%s %s started (rate provider: %s)",
        settings.app_name,
        settings.version,
        settings.exchange_rate_provider,
    )
    return app


app = create_app()
