from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .routers import analytics, rates, trips


def create_app(settings_override: Settings | None = None) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment. Falls back to cached get_settings().
    """
    settings = settings_override or get_settings()
    init_logging(debug=settings.debug)

    app = FastAPI(
        title=settings.app_name, debug=settings.debug, version=settings.version
    )

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.not_found_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(errors.MissingRateError, errors.missing_rate_handler)
    app.add_exception_handler(errors.CurrencyMismatchError, errors.currency_mismatch_handler)
    app.add_exception_handler(errors.TripNotFoundError, errors.trip_not_found_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(trips.router)
    app.include_router(analytics.router)
    app.include_router(rates.router)

    @app.get("/")
    async def root():
        return {"message": "NomadGuide Budget Engine API", "version": settings.version}

    return app


app = create_app()
