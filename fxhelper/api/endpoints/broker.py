"""
OANDA Bridge Endpoints

Read-only passthrough to the OANDA v3 REST API. Upstream status codes and
bodies are returned unchanged.
"""

import asyncio
import logging
from typing import Any, Awaitable, Optional

import aiohttp
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from fxhelper.services.broker import (
    BrokerAPIError,
    BrokerNotConfiguredError,
    OandaClient,
)

logger = logging.getLogger(__name__)

router = APIRouter()

NOT_CONFIGURED = "OANDA env not set: OANDA_TOKEN / OANDA_ACCOUNT_ID"


def get_broker_client(request: Request) -> OandaClient:
    """Broker client created in the application lifespan."""
    client: OandaClient = request.app.state.broker_client
    if not client.is_configured:
        raise HTTPException(status_code=500, detail=NOT_CONFIGURED)
    return client


async def _passthrough(call: Awaitable[Any]) -> Any:
    try:
        return await call
    except BrokerNotConfiguredError:
        raise HTTPException(status_code=500, detail=NOT_CONFIGURED)
    except BrokerAPIError as e:
        return JSONResponse(status_code=e.status, content=e.body)
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.error(f"OANDA request failed: {e!r}")
        raise HTTPException(status_code=502, detail="OANDA request failed")


@router.get("/account/summary")
async def account_summary(client: OandaClient = Depends(get_broker_client)):
    """Account balance, NAV, margin and open trade counts."""
    return await _passthrough(client.get_account_summary())


@router.get("/positions")
async def positions(client: OandaClient = Depends(get_broker_client)):
    """All positions of the account."""
    return await _passthrough(client.get_positions())


@router.get("/pricing")
async def pricing(
    instruments: Optional[str] = Query(default=None, description="e.g. EUR_USD,USD_JPY"),
    client: OandaClient = Depends(get_broker_client),
):
    """Current bid/ask for the given instruments."""
    if not instruments:
        raise HTTPException(
            status_code=400, detail="instruments required, e.g. EUR_USD,USD_JPY"
        )
    return await _passthrough(client.get_pricing(instruments))


@router.get("/candles")
async def candles(
    instrument: Optional[str] = Query(default=None, description="e.g. USD_JPY"),
    granularity: str = Query(default="H1"),
    count: int = Query(default=100, ge=1, le=5000),
    price: str = Query(default="M"),
    client: OandaClient = Depends(get_broker_client),
):
    """Historical candles; the default mid-price format feeds /helpers/indicators directly."""
    if not instrument:
        raise HTTPException(status_code=400, detail="instrument required, e.g. USD_JPY")
    return await _passthrough(
        client.get_candles(instrument, granularity=granularity, count=count, price=price)
    )


@router.get("/transactions")
async def transactions(
    count: int = Query(default=10, ge=1),
    client: OandaClient = Depends(get_broker_client),
):
    """Recent account transactions."""
    return await _passthrough(client.get_transactions(count=count))
