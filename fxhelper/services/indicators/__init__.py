"""
Indicator Engine Service

CONTRACT:
    Input:  IndicatorRequest (raw OHLC candles + params)
    Output: IndicatorResponse

RESPONSIBILITIES:
    - Validate candle windows (identifiers, history length, finite prices)
    - Calculate moving averages, oscillators and trend/volatility composites
    - Return full aligned series plus the last value of each indicator

Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from fxhelper.services.indicators.interface import IndicatorServiceInterface
from fxhelper.services.indicators.service import IndicatorService, get_indicator_service

__all__ = [
    "IndicatorServiceInterface",
    "IndicatorService",
    "get_indicator_service",
]
