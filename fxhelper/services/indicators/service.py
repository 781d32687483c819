"""
Indicator Engine Service Implementation

Validates a candle window, calculates the configured indicators and
assembles full series plus last values. Pure NumPy calculations.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Optional

import numpy as np

from fxhelper.core.config import settings
from fxhelper.schemas.market import Candle
from fxhelper.schemas.indicators import (
    IndicatorRequest,
    IndicatorResponse,
    IndicatorParams,
    IndicatorName,
    IndicatorVariant,
    IndicatorSeries,
    LastValues,
    MACDSeries,
    MACDPoint,
    BollingerSeries,
    BollingerPoint,
    StochasticSeries,
    StochasticPoint,
    ADXSeries,
    ADXPoint,
    IchimokuSeries,
    IchimokuPoint,
)
from fxhelper.services.base import (
    ValidationError,
    InsufficientHistoryError,
    ComputationError,
)
from fxhelper.services.indicators.interface import IndicatorServiceInterface
from fxhelper.services.indicators.calculations import (
    OHLCData,
    sma,
    ema,
    rsi,
    rsi_simplified,
    macd,
    stochastic,
    bollinger_bands,
    atr,
    adx,
    dx_simplified,
    ichimoku,
    to_series,
    value_at,
)

logger = logging.getLogger(__name__)


def required_history(params: IndicatorParams) -> dict[IndicatorName, int]:
    """Candles each included indicator needs before its last value is defined."""
    requirements = {
        IndicatorName.SMA: max(params.sma, default=0),
        IndicatorName.EMA: max(params.ema),
        IndicatorName.RSI: params.rsi + 1,
        IndicatorName.MACD: params.macd.slow + params.macd.signal - 1,
        IndicatorName.BB: params.bb.length,
        IndicatorName.ATR: params.atr + 1,
        IndicatorName.ADX: (
            2 * params.adx
            if params.variants.adx == IndicatorVariant.STANDARD
            else params.adx + 1
        ),
        IndicatorName.STOCH: params.stoch.k + params.stoch.d - 1,
        IndicatorName.ICHIMOKU: max(
            params.ichimoku.conv, params.ichimoku.base, params.ichimoku.span_b
        ),
    }
    return {name: requirements[name] for name in params.include}


def minimum_candles(params: IndicatorParams, floor: int) -> int:
    """Largest history requirement of the configured indicators, never below `floor`."""
    return max([floor, *required_history(params).values()])


def _candles_to_arrays(candles: list[Candle]) -> OHLCData:
    """Convert candle list to numpy arrays, rejecting non-finite prices."""
    for i, candle in enumerate(candles):
        mid = candle.mid
        if not all(math.isfinite(v) for v in (mid.o, mid.h, mid.l, mid.c)):
            raise ValidationError(
                "IndicatorService",
                f"Non-finite price in candle {i}",
                {"index": i, "time": candle.time},
            )

    return OHLCData(
        times=[c.time for c in candles],
        opens=np.array([c.mid.o for c in candles], dtype=float),
        highs=np.array([c.mid.h for c in candles], dtype=float),
        lows=np.array([c.mid.l for c in candles], dtype=float),
        closes=np.array([c.mid.c for c in candles], dtype=float),
    )


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Engine Service.

    Stateless: every call recomputes from the full candle window.
    """

    def __init__(self, min_candles_floor: int = 30):
        self.min_candles_floor = min_candles_floor

    @property
    def name(self) -> str:
        return "IndicatorService"

    async def execute(self, input_data: IndicatorRequest) -> IndicatorResponse:
        return self.calculate(input_data)

    def validate_input(self, input_data: IndicatorRequest) -> IndicatorRequest:
        """Reject requests that cannot produce trustworthy output."""
        if not input_data.instrument.strip() or not input_data.granularity.strip():
            raise ValidationError(self.name, "instrument and granularity are required")

        required = minimum_candles(input_data.params, self.min_candles_floor)
        received = len(input_data.candles)
        if received < required:
            raise InsufficientHistoryError(
                self.name,
                f"Need at least {required} candles, got {received}",
                {"required": required, "received": received},
            )
        return input_data

    def calculate(self, request: IndicatorRequest) -> IndicatorResponse:
        """Calculate all configured indicators for the request's candle window."""
        self.validate_input(request)
        data = _candles_to_arrays(request.candles)
        params = request.params

        series = IndicatorSeries()
        last = LastValues(time=data.times[-1], close=float(data.closes[-1]))

        for indicator in params.include:
            handler = getattr(self, f"_calculate_{indicator.value}")
            try:
                full, tail = handler(data, params)
            except Exception as e:
                logger.exception(
                    f"{indicator.value} failed for {request.instrument} {request.granularity}"
                )
                raise ComputationError(
                    self.name,
                    f"{indicator.value} computation failed",
                    {"indicator": indicator.value},
                ) from e
            setattr(series, indicator.value, full)
            setattr(last, indicator.value, tail)

        return IndicatorResponse(
            instrument=request.instrument,
            granularity=request.granularity,
            count=len(data.closes),
            min_candles=minimum_candles(params, self.min_candles_floor),
            computed_at=datetime.now(timezone.utc),
            variants=params.variants,
            times=data.times,
            series=series,
            last=last,
        )

    def _calculate_sma(self, data: OHLCData, params: IndicatorParams):
        full, tail = {}, {}
        for period in params.sma:
            values = sma(data.closes, period)
            full[str(period)] = to_series(values)
            tail[str(period)] = value_at(values)
        return full, tail

    def _calculate_ema(self, data: OHLCData, params: IndicatorParams):
        full, tail = {}, {}
        for period in params.ema:
            values = ema(data.closes, period)
            full[str(period)] = to_series(values)
            tail[str(period)] = value_at(values)
        return full, tail

    def _calculate_rsi(self, data: OHLCData, params: IndicatorParams):
        if params.variants.rsi == IndicatorVariant.SIMPLIFIED:
            values = rsi_simplified(data.closes, params.rsi)
        else:
            values = rsi(data.closes, params.rsi)
        return to_series(values), value_at(values)

    def _calculate_macd(self, data: OHLCData, params: IndicatorParams):
        cfg = params.macd
        result = macd(data.closes, cfg.fast, cfg.slow, cfg.signal)
        return (
            MACDSeries(
                macd=to_series(result.macd),
                signal=to_series(result.signal),
                hist=to_series(result.hist),
            ),
            MACDPoint(
                macd=value_at(result.macd),
                signal=value_at(result.signal),
                hist=value_at(result.hist),
            ),
        )

    def _calculate_bb(self, data: OHLCData, params: IndicatorParams):
        result = bollinger_bands(data.closes, params.bb.length, params.bb.std)
        return (
            BollingerSeries(
                middle=to_series(result.middle),
                upper=to_series(result.upper),
                lower=to_series(result.lower),
                width=to_series(result.width),
            ),
            BollingerPoint(
                middle=value_at(result.middle),
                upper=value_at(result.upper),
                lower=value_at(result.lower),
                width=value_at(result.width),
            ),
        )

    def _calculate_atr(self, data: OHLCData, params: IndicatorParams):
        values = atr(data.highs, data.lows, data.closes, params.atr)
        return to_series(values), value_at(values)

    def _calculate_adx(self, data: OHLCData, params: IndicatorParams):
        variant = params.variants.adx
        if variant == IndicatorVariant.SIMPLIFIED:
            result = dx_simplified(data.highs, data.lows, data.closes, params.adx)
        else:
            result = adx(data.highs, data.lows, data.closes, params.adx)
        return (
            ADXSeries(
                variant=variant,
                adx=to_series(result.adx),
                plus_di=to_series(result.plus_di),
                minus_di=to_series(result.minus_di),
                dx=to_series(result.dx),
            ),
            ADXPoint(
                variant=variant,
                adx=value_at(result.adx),
                plus_di=value_at(result.plus_di),
                minus_di=value_at(result.minus_di),
                dx=value_at(result.dx),
            ),
        )

    def _calculate_stoch(self, data: OHLCData, params: IndicatorParams):
        result = stochastic(
            data.highs, data.lows, data.closes, params.stoch.k, params.stoch.d
        )
        return (
            StochasticSeries(k=to_series(result.k), d=to_series(result.d)),
            StochasticPoint(k=value_at(result.k), d=value_at(result.d)),
        )

    def _calculate_ichimoku(self, data: OHLCData, params: IndicatorParams):
        cfg = params.ichimoku
        result = ichimoku(
            data.highs, data.lows, data.closes, cfg.conv, cfg.base, cfg.span_b, cfg.shift
        )
        return (
            IchimokuSeries(
                conversion=to_series(result.conversion),
                base=to_series(result.base),
                span_a=to_series(result.span_a),
                span_b=to_series(result.span_b),
                lagging=to_series(result.lagging),
            ),
            IchimokuPoint(
                conversion=value_at(result.conversion),
                base=value_at(result.base),
                span_a=value_at(result.span_a),
                span_b=value_at(result.span_b),
            ),
        )

    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        return True


# Singleton instance
_service_instance: Optional[IndicatorService] = None


def get_indicator_service() -> IndicatorService:
    """Get or create indicator service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = IndicatorService(min_candles_floor=settings.min_candles_floor)
    return _service_instance
