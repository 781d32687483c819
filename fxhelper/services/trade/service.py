"""
Trade Helper Implementation

Signal preset check and order preview sizing.
PURE PYTHON - deterministic templates, no order is ever sent.
"""

import math

from fxhelper.schemas.trade import (
    SignalPresetRequest,
    SignalPresetResponse,
    SuggestedEntry,
    RiskHint,
    TradeDirection,
    OrderPreviewRequest,
    OrderPreviewResponse,
    OCOTemplate,
)
from fxhelper.services.base import ValidationError

# Rough approximation: 1 unit moves 0.01 account currency per pip.
# Real sizing needs the pair's pip value in the account currency.
VALUE_PER_UNIT_PER_PIP = 0.01


def preset_signal(request: SignalPresetRequest) -> SignalPresetResponse:
    """Trend setup when trigger ADX reaches the threshold, pullback template otherwise."""
    adx = request.indicators.trigger.adx
    threshold = request.thresholds.adx_range
    match = adx is not None and math.isfinite(adx) and adx >= threshold

    if match:
        return SignalPresetResponse(
            match=True,
            rationale=[f"ADX {adx:.1f} >= {threshold:g}: trending market"],
            suggested_entry=SuggestedEntry(
                direction=TradeDirection.LONG,
                entry_zone="BB middle +/- ATR",
                invalidation="Close below BB lower band",
            ),
            risk_hint=RiskHint(rr_estimate=1.8, notes=["Reduce size ahead of events"]),
        )

    return SignalPresetResponse(
        match=False,
        rationale=[f"ADX below {threshold:g}: skip trend setup"],
        suggested_entry=SuggestedEntry(
            direction=TradeDirection.SHORT,
            entry_zone="Sell the pullback",
            invalidation="Break above recent high",
        ),
        risk_hint=RiskHint(rr_estimate=1.2, notes=["Reduce size ahead of events"]),
    )


def preview_order(request: OrderPreviewRequest) -> OrderPreviewResponse:
    """
    Size a position from account balance, risk % and stop distance.

    Raises:
        ValidationError: entry and stop are the same price
    """
    stop_distance = abs(request.entry_price - request.stop_price)
    if stop_distance == 0:
        raise ValidationError("TradeHelper", "entryPrice and stopPrice must differ")

    pip_size = 10 ** request.pip_location
    stop_pips = stop_distance / pip_size
    risk_amount = request.account_balance * (request.risk_pct / 100)
    units = max(0, math.floor(risk_amount / (stop_pips * VALUE_PER_UNIT_PER_PIP)))

    notes = []
    if request.atr:
        notes.append(f"Consider a stop buffer based on ATR={request.atr}")

    return OrderPreviewResponse(
        units=units,
        notional=units * request.entry_price,
        stop_pips=round(stop_pips, 1),
        risk_amount=round(risk_amount, 2),
        rr_to_each_tp=[
            abs(tp - request.entry_price) / stop_distance for tp in request.take_profits
        ],
        oco_template=OCOTemplate(
            order_type="LIMIT",
            entry_price=request.entry_price,
            stop_loss=request.stop_price,
            take_profits=request.take_profits,
        ),
        notes=notes,
    )
