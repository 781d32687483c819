"""
Indicator Engine Service Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod

from fxhelper.services.base import BaseService
from fxhelper.schemas.indicators import IndicatorRequest, IndicatorResponse


class IndicatorServiceInterface(BaseService[IndicatorRequest, IndicatorResponse]):
    """
    Indicator Engine Service Contract.

    INPUT: IndicatorRequest
        - instrument / granularity identifiers
        - raw candles (mid OHLC)
        - params: which indicators to compute and their periods

    OUTPUT: IndicatorResponse
        - full series per indicator, aligned to the candles
        - last value of each indicator
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    async def execute(self, input_data: IndicatorRequest) -> IndicatorResponse:
        """Calculate the configured indicators for a candle window."""
        pass

    @abstractmethod
    def calculate(self, request: IndicatorRequest) -> IndicatorResponse:
        """
        Synchronous calculation entry point.

        Raises:
            ValidationError: Missing identifiers or non-finite prices
            InsufficientHistoryError: Fewer candles than the params need
            ComputationError: Unexpected failure inside an indicator
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        pass
