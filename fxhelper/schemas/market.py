"""
Candle Data Contract

Raw candle records as delivered by the OANDA v3 candles endpoint
(mid-price convention). Prices may arrive as numeric strings.
"""

from typing import Optional
from pydantic import BaseModel, Field


class MidPrice(BaseModel):
    """Mid-price OHLC of a single bar."""

    o: float
    h: float
    l: float  # noqa: E741
    c: float


class Candle(BaseModel):
    """Single candlestick data point."""

    time: str = Field(default="", description="Opaque bar timestamp")
    mid: MidPrice
    volume: Optional[int] = Field(default=None, ge=0)
    complete: Optional[bool] = None

    class Config:
        json_schema_extra = {
            "example": {
                "time": "2024-02-05T10:00:00.000000000Z",
                "mid": {"o": "1.07812", "h": "1.07905", "l": "1.07760", "c": "1.07880"},
                "volume": 1532,
                "complete": True,
            }
        }
