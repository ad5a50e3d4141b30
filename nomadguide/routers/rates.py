from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from nomadguide.models import ConversionRequest, RatesResult
from nomadguide.services.rates.cache_service import (
    CentralRateCacheService,
    get_central_rate_cache_service,
)
from nomadguide.services.rates.conversion import conversion_preview

"""Rates router.

Endpoints:
    - GET /rates            -> current table (cached unless stale or forced)
    - POST /rates/convert   -> convert an amount with the current table

A provider outage never fails these endpoints; the response carries
success=False and the fallback table instead. Only a currency absent from the
table is an error (422 missing_rate).
"""

router = APIRouter(prefix="/rates", tags=["rates"])


def get_cache_service() -> CentralRateCacheService:
    return get_central_rate_cache_service()


class ConversionOut(BaseModel):
    original_amount: Decimal
    source: str
    target: str
    converted_amount: Decimal
    display_amount: Decimal
    rate: Decimal
    is_converted: bool
    rates_success: bool
    rates_stale: bool


@router.get("", response_model=RatesResult, summary="Current exchange rate table")
def get_rates(
    force_refresh: bool = Query(False, description="Bypass the cache and refetch"),
    svc: CentralRateCacheService = Depends(get_cache_service),
):
    return svc.get_rates(force_refresh=force_refresh)


@router.post("/convert", response_model=ConversionOut, summary="Convert an amount")
def convert_amount(
    payload: ConversionRequest,
    svc: CentralRateCacheService = Depends(get_cache_service),
):
    rates = svc.get_rates()
    result = conversion_preview(payload.amount, payload.source, payload.target, rates.table)
    return ConversionOut(
        original_amount=result.original_amount,
        source=result.source,
        target=result.target,
        converted_amount=result.converted_amount,
        display_amount=result.display_amount,
        rate=result.rate,
        is_converted=result.is_converted,
        rates_success=rates.success,
        rates_stale=rates.stale,
    )
