"""
OANDA v3 REST Bridge

Thin read-only proxy to the OANDA v3 API: account summary, positions,
pricing, candles and transactions. Credentials come from an explicit
BrokerConfig built at startup; nothing here reads the environment.

OANDA v3 Documentation: https://developer.oanda.com/rest-live-v20/introduction/
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

import aiohttp

from fxhelper.core.config import Settings
from fxhelper.services.base import ExternalAPIError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BrokerConfig:
    """Connection settings for the OANDA REST API."""

    base_url: str
    token: Optional[str] = None
    account_id: Optional[str] = None
    timeout_seconds: float = 15.0

    @property
    def is_configured(self) -> bool:
        return bool(self.token and self.account_id)

    @classmethod
    def from_settings(cls, settings: Settings) -> "BrokerConfig":
        """Pick the live or practice host and copy credentials from settings."""
        if settings.oanda_env == "practice":
            base_url = settings.oanda_practice_url
        else:
            base_url = settings.oanda_live_url
        return cls(
            base_url=base_url.rstrip("/"),
            token=settings.oanda_token,
            account_id=settings.oanda_account_id,
            timeout_seconds=settings.broker_timeout_seconds,
        )


class BrokerNotConfiguredError(ExternalAPIError):
    """Token or account id missing."""
    pass


class BrokerAPIError(ExternalAPIError):
    """OANDA answered with a non-2xx status. Carries the upstream body."""

    def __init__(self, status: int, body: Any):
        self.status = status
        self.body = body
        super().__init__("OandaClient", f"OANDA {status}", {"status": status})


class OandaClient:
    """
    OANDA v3 API client wrapper.

    One aiohttp session per client, opened lazily and closed on shutdown.
    """

    def __init__(self, config: BrokerConfig):
        self.config = config
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def is_configured(self) -> bool:
        return self.config.is_configured

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={
                    "Authorization": f"Bearer {self.config.token}",
                    "Accept": "application/json",
                },
                timeout=aiohttp.ClientTimeout(total=self.config.timeout_seconds),
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _get(self, path: str, query: Optional[dict[str, Any]] = None) -> Any:
        """GET `path` with query forwarding; raise BrokerAPIError on non-2xx."""
        if not self.is_configured:
            raise BrokerNotConfiguredError(
                "OandaClient", "OANDA env not set: OANDA_TOKEN / OANDA_ACCOUNT_ID"
            )

        params = {k: str(v) for k, v in (query or {}).items() if v is not None}
        session = await self._ensure_session()

        async with session.get(f"{self.config.base_url}{path}", params=params) as resp:
            status = resp.status
            text = await resp.text()

        try:
            body = json.loads(text)
        except ValueError:
            body = {"raw": text}

        if status >= 400:
            logger.warning(f"OANDA {status} for {path}")
            raise BrokerAPIError(status, body)
        return body

    async def get_account_summary(self) -> Any:
        return await self._get(f"/v3/accounts/{self.config.account_id}/summary")

    async def get_positions(self) -> Any:
        return await self._get(f"/v3/accounts/{self.config.account_id}/positions")

    async def get_pricing(self, instruments: str) -> Any:
        """Current prices for a comma-separated instrument list."""
        return await self._get(
            f"/v3/accounts/{self.config.account_id}/pricing",
            {"instruments": instruments},
        )

    async def get_candles(
        self,
        instrument: str,
        granularity: str = "H1",
        count: int = 100,
        price: str = "M",
    ) -> Any:
        return await self._get(
            f"/v3/instruments/{instrument}/candles",
            {"granularity": granularity, "count": count, "price": price},
        )

    async def get_transactions(self, count: int = 10) -> Any:
        return await self._get(
            f"/v3/accounts/{self.config.account_id}/transactions",
            {"count": count},
        )
