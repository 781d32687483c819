"""
Broker Bridge

Read-only proxy to the OANDA v3 REST API.
"""

from fxhelper.services.broker.oanda_client import (
    BrokerConfig,
    BrokerAPIError,
    BrokerNotConfiguredError,
    OandaClient,
)

__all__ = [
    "BrokerConfig",
    "BrokerAPIError",
    "BrokerNotConfiguredError",
    "OandaClient",
]
