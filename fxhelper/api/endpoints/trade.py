"""
Trade Helper Endpoints

Signal preset and order preview templates. Nothing here places orders.
"""

from fastapi import APIRouter, HTTPException

from fxhelper.schemas.trade import (
    SignalPresetRequest,
    SignalPresetResponse,
    OrderPreviewRequest,
    OrderPreviewResponse,
)
from fxhelper.services.base import ValidationError
from fxhelper.services.trade import preset_signal, preview_order

router = APIRouter()


@router.post("/signal/preset", response_model=SignalPresetResponse)
async def signal_preset(request: SignalPresetRequest):
    """Check trigger ADX against the preset threshold and suggest an entry template."""
    return preset_signal(request)


@router.post("/order/preview", response_model=OrderPreviewResponse)
async def order_preview(request: OrderPreviewRequest):
    """
    Preview position size and OCO template for a planned order.

    Units are sized so that hitting the stop loses `riskPct` % of the balance.
    """
    try:
        return preview_order(request)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
