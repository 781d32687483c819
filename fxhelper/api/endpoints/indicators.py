"""
Indicator API Endpoints

Endpoint for technical indicator calculations over client-supplied candles.
"""

import logging

from fastapi import APIRouter, HTTPException

from fxhelper.schemas.indicators import IndicatorRequest, IndicatorResponse
from fxhelper.services.base import (
    ValidationError,
    InsufficientHistoryError,
    ComputationError,
)
from fxhelper.services.indicators import get_indicator_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/indicators", response_model=IndicatorResponse)
async def calculate_indicators(request: IndicatorRequest):
    """
    Calculate indicators for a candle window.

    Returns:
        - Full series per indicator, aligned to the candles
          (Ichimoku leading spans run `shift` bars past the last candle)
        - `last`: most recent value of each indicator

    Errors:
        - 400: missing instrument/granularity or non-finite prices
        - 422: fewer candles than the configured periods need
        - 500: indicator computation failed
    """
    indicator_service = get_indicator_service()
    try:
        return await indicator_service.execute(request)
    except InsufficientHistoryError as e:
        logger.info(f"Rejected {request.instrument} {request.granularity}: {e.message}")
        raise HTTPException(status_code=422, detail={"error": e.message, **e.details})
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except ComputationError:
        raise HTTPException(status_code=500, detail="Indicator calculation failed")
