"""
CONTRACT: Trade Helpers

Signal preset, order preview and journal payloads.
Field names are camelCase on the wire and snake_case in Python.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# ENUMS
# =============================================================================


class TradeDirection(str, Enum):
    LONG = "long"
    SHORT = "short"


# =============================================================================
# Signal preset
# =============================================================================


class TriggerIndicators(CamelModel):
    """Indicator values on the trigger timeframe."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    adx: Optional[float] = None


class PresetIndicators(CamelModel):
    trigger: TriggerIndicators = Field(default_factory=TriggerIndicators)


class PresetThresholds(CamelModel):
    adx_range: float = Field(default=18.0, description="Minimum ADX for a trend setup")


class SignalPresetRequest(CamelModel):
    indicators: PresetIndicators = Field(default_factory=PresetIndicators)
    thresholds: PresetThresholds = Field(default_factory=PresetThresholds)


class SuggestedEntry(CamelModel):
    direction: TradeDirection
    entry_zone: str
    invalidation: str


class RiskHint(CamelModel):
    rr_estimate: float
    notes: list[str] = []


class SignalPresetResponse(CamelModel):
    match: bool
    rationale: list[str]
    suggested_entry: SuggestedEntry
    risk_hint: RiskHint


# =============================================================================
# Order preview
# =============================================================================


class OrderPreviewRequest(CamelModel):
    instrument: str
    direction: TradeDirection
    entry_price: float = Field(..., gt=0)
    stop_price: float = Field(..., gt=0)
    take_profits: list[float] = []
    risk_pct: float = Field(default=0.8, gt=0, le=100, description="% of balance at risk")
    account_balance: float = Field(..., gt=0)
    pip_location: int = Field(
        default=-2, ge=-10, le=10, description="Pip size = 10 ** pipLocation"
    )
    atr: Optional[float] = Field(default=None, ge=0)


class OCOTemplate(CamelModel):
    order_type: str = "LIMIT"
    entry_price: float
    stop_loss: float
    take_profits: list[float]


class OrderPreviewResponse(CamelModel):
    units: int = Field(..., ge=0)
    notional: float
    stop_pips: float
    risk_amount: float
    rr_to_each_tp: list[float] = Field(..., alias="rrToEachTP")
    oco_template: OCOTemplate
    notes: list[str] = []


# =============================================================================
# Journal
# =============================================================================


class JournalWriteRequest(CamelModel):
    instrument: str = Field(..., min_length=1)
    preset: str = Field(..., min_length=1)
    entry: dict[str, Any]
    result: dict[str, Any]


class JournalWriteResponse(CamelModel):
    saved: bool
    id: Optional[str] = None


class JournalEntryOut(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: str
    instrument: str
    preset: str
    entry: dict[str, Any]
    result: dict[str, Any]
    created_at: datetime
