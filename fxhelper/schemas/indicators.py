"""
CONTRACT: Indicator Engine

Input: IndicatorRequest (instrument, granularity, raw candles, params)
Output: IndicatorResponse (full series + last values)

Parameters are validated once here and frozen afterwards.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator, model_validator

from fxhelper.schemas.market import Candle


Series = list[Optional[float]]

# Leading spans are materialized, so the projection must stay small
MAX_ICHIMOKU_SHIFT = 250


# =============================================================================
# ENUMS
# =============================================================================


class IndicatorName(str, Enum):
    SMA = "sma"
    EMA = "ema"
    RSI = "rsi"
    MACD = "macd"
    BB = "bb"
    ATR = "atr"
    ADX = "adx"
    STOCH = "stoch"
    ICHIMOKU = "ichimoku"


class IndicatorVariant(str, Enum):
    STANDARD = "standard"
    SIMPLIFIED = "simplified"


# =============================================================================
# INPUT: IndicatorParams
# =============================================================================


class MACDParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    fast: PositiveInt = 12
    slow: PositiveInt = 26
    signal: PositiveInt = 9

    @model_validator(mode="after")
    def check_fast_below_slow(self):
        if self.fast >= self.slow:
            raise ValueError("macd.fast must be smaller than macd.slow")
        return self


class BollingerParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    length: PositiveInt = 20
    std: float = Field(default=2.0, gt=0, allow_inf_nan=False)


class StochasticParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    k: PositiveInt = 14
    d: PositiveInt = 3


class IchimokuParams(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    conv: PositiveInt = 9
    base: PositiveInt = 26
    span_b: PositiveInt = Field(default=52, alias="spanB")
    shift: int = Field(default=26, ge=0, le=MAX_ICHIMOKU_SHIFT)


class VariantParams(BaseModel):
    """Which formulation to use where more than one is in circulation."""

    model_config = ConfigDict(frozen=True)

    rsi: IndicatorVariant = IndicatorVariant.STANDARD
    adx: IndicatorVariant = IndicatorVariant.STANDARD


class IndicatorParams(BaseModel):
    """Per-request indicator configuration. Every field has a default."""

    model_config = ConfigDict(frozen=True)

    sma: list[PositiveInt] = Field(default=[], description="SMA periods, e.g. [200]")
    ema: list[PositiveInt] = Field(default=[20, 50], min_length=1)
    rsi: PositiveInt = 14
    macd: MACDParams = Field(default_factory=MACDParams)
    bb: BollingerParams = Field(default_factory=BollingerParams)
    atr: PositiveInt = 14
    adx: PositiveInt = 14
    stoch: StochasticParams = Field(default_factory=StochasticParams)
    ichimoku: IchimokuParams = Field(default_factory=IchimokuParams)
    include: list[IndicatorName] = Field(
        default_factory=lambda: list(IndicatorName),
        min_length=1,
        description="Indicators to compute (default: all)",
    )
    variants: VariantParams = Field(default_factory=VariantParams)

    @field_validator("sma", "ema", mode="before")
    @classmethod
    def wrap_single_period(cls, v):
        if isinstance(v, (int, str)):
            return [v]
        return v

    @field_validator("sma", "ema", "include")
    @classmethod
    def drop_duplicates(cls, v):
        return list(dict.fromkeys(v))


class IndicatorRequest(BaseModel):
    """
    Request for indicator calculation.
    Sent by: API
    Received by: Indicator Service
    """

    instrument: str = Field(..., description="Instrument, e.g. EUR_USD")
    granularity: str = Field(..., description="Candle granularity, e.g. H1")
    candles: list[Candle]
    params: IndicatorParams = Field(default_factory=IndicatorParams)


# =============================================================================
# OUTPUT: Series records
# =============================================================================


class MACDSeries(BaseModel):
    macd: Series
    signal: Series
    hist: Series


class BollingerSeries(BaseModel):
    middle: Series
    upper: Series
    lower: Series
    width: Series


class StochasticSeries(BaseModel):
    k: Series
    d: Series


class ADXSeries(BaseModel):
    """ADX is null under the simplified variant; read `dx` instead."""

    variant: IndicatorVariant
    adx: Optional[Series] = None
    plus_di: Series
    minus_di: Series
    dx: Series


class IchimokuSeries(BaseModel):
    """span_a and span_b extend `shift` bars past the last candle."""

    conversion: Series
    base: Series
    span_a: Series
    span_b: Series
    lagging: Series


class IndicatorSeries(BaseModel):
    sma: Optional[dict[str, Series]] = None
    ema: Optional[dict[str, Series]] = None
    rsi: Optional[Series] = None
    macd: Optional[MACDSeries] = None
    bb: Optional[BollingerSeries] = None
    atr: Optional[Series] = None
    adx: Optional[ADXSeries] = None
    stoch: Optional[StochasticSeries] = None
    ichimoku: Optional[IchimokuSeries] = None


# =============================================================================
# OUTPUT: Last values
# =============================================================================


class MACDPoint(BaseModel):
    macd: Optional[float] = None
    signal: Optional[float] = None
    hist: Optional[float] = None


class BollingerPoint(BaseModel):
    middle: Optional[float] = None
    upper: Optional[float] = None
    lower: Optional[float] = None
    width: Optional[float] = None


class StochasticPoint(BaseModel):
    k: Optional[float] = None
    d: Optional[float] = None


class ADXPoint(BaseModel):
    variant: IndicatorVariant
    adx: Optional[float] = None
    plus_di: Optional[float] = None
    minus_di: Optional[float] = None
    dx: Optional[float] = None


class IchimokuPoint(BaseModel):
    """Latest values. Spans are the last projected point, `shift` bars ahead."""

    conversion: Optional[float] = None
    base: Optional[float] = None
    span_a: Optional[float] = None
    span_b: Optional[float] = None


class LastValues(BaseModel):
    time: str
    close: float
    sma: Optional[dict[str, Optional[float]]] = None
    ema: Optional[dict[str, Optional[float]]] = None
    rsi: Optional[float] = None
    macd: Optional[MACDPoint] = None
    bb: Optional[BollingerPoint] = None
    atr: Optional[float] = None
    adx: Optional[ADXPoint] = None
    stoch: Optional[StochasticPoint] = None
    ichimoku: Optional[IchimokuPoint] = None


# =============================================================================
# OUTPUT: IndicatorResponse (Complete Response)
# =============================================================================


class IndicatorResponse(BaseModel):
    """
    Complete indicator result for one candle window.
    Returned by: Indicator Service
    """

    instrument: str
    granularity: str
    count: int = Field(..., description="Number of candles used")
    min_candles: int = Field(..., description="Minimum history the request required")
    computed_at: datetime
    variants: VariantParams
    times: list[str]
    series: IndicatorSeries
    last: LastValues

    class Config:
        json_schema_extra = {
            "example": {
                "instrument": "EUR_USD",
                "granularity": "H1",
                "count": 120,
                "min_candles": 52,
                "last": {
                    "time": "2024-02-05T10:00:00.000000000Z",
                    "close": 1.0788,
                    "ema": {"20": 1.0779, "50": 1.0761},
                    "rsi": 58.4,
                    "macd": {"macd": 0.00042, "signal": 0.00031, "hist": 0.00011},
                    "atr": 0.00121,
                    "adx": {"variant": "standard", "adx": 24.7, "dx": 31.2},
                },
            }
        }
