"""
FX Helper Schema Contracts

This module defines all JSON contracts between the API and the services.
"""

from fxhelper.schemas.market import Candle, MidPrice
from fxhelper.schemas.indicators import (
    IndicatorName,
    IndicatorVariant,
    IndicatorParams,
    IndicatorRequest,
    IndicatorResponse,
    IndicatorSeries,
    LastValues,
)
from fxhelper.schemas.trade import (
    TradeDirection,
    SignalPresetRequest,
    SignalPresetResponse,
    OrderPreviewRequest,
    OrderPreviewResponse,
    JournalWriteRequest,
    JournalWriteResponse,
    JournalEntryOut,
)

__all__ = [
    # Market
    "Candle",
    "MidPrice",
    # Indicators
    "IndicatorName",
    "IndicatorVariant",
    "IndicatorParams",
    "IndicatorRequest",
    "IndicatorResponse",
    "IndicatorSeries",
    "LastValues",
    # Trade
    "TradeDirection",
    "SignalPresetRequest",
    "SignalPresetResponse",
    "OrderPreviewRequest",
    "OrderPreviewResponse",
    "JournalWriteRequest",
    "JournalWriteResponse",
    "JournalEntryOut",
]
