from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette import status
import logging

logger = logging.getLogger("nomadguide.errors")


class NomadGuideError(Exception):
    """Base class for engine errors."""


class ConversionError(NomadGuideError):
    pass


class MissingRateError(ConversionError):
    def __init__(self, currency: str):
        super().__init__(f"No exchange rate available for {currency}")
        self.currency = currency


class CurrencyMismatchError(NomadGuideError):
    """Raised when a transaction is not in the trip currency.

    Balances are only summed in a single currency; convert first with
    `convert_transactions`.
    """

    def __init__(self, expected: str, found: str, transaction_id: str | None = None):
        super().__init__(
            f"transaction {transaction_id or '?'} is in {found}, trip currency is {expected}"
        )
        self.expected = expected
        self.found = found
        self.transaction_id = transaction_id


class RateProviderUnavailable(NomadGuideError):
    """Raised when a rate provider cannot fetch live rates."""


class TripNotFoundError(NomadGuideError):
    def __init__(self, trip_id: str):
        super().__init__(f"trip {trip_id} not found")
        self.trip_id = trip_id


def not_found_handler(request: Request, exc):  # type: ignore
    if getattr(exc, "status_code", status.HTTP_404_NOT_FOUND) != status.HTTP_404_NOT_FOUND:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": "http_error", "detail": exc.detail},
        )
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "not_found",
            "detail": f"No route for {request.method} {request.url.path}",
        },
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            # errors may embed Decimal inputs or exception objects
            "detail": jsonable_encoder(exc.errors(), custom_encoder={Exception: str}),
        },
    )


def missing_rate_handler(request: Request, exc: MissingRateError):  # type: ignore
    logger.warning("conversion failed", extra={"currency": exc.currency})
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "missing_rate",
            "detail": str(exc),
            "currency": exc.currency,
        },
    )


def currency_mismatch_handler(request: Request, exc: CurrencyMismatchError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "currency_mismatch",
            "detail": str(exc),
            "expected": exc.expected,
            "found": exc.found,
        },
    )


def trip_not_found_handler(request: Request, exc: TripNotFoundError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": "trip_not_found", "detail": str(exc)},
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "detail": "An unexpected error occurred.",
        },
    )
