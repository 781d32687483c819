"""OandaClient against a local aiohttp server standing in for the v3 REST API."""

import asyncio

import pytest
from aiohttp import web
from aiohttp import test_utils

from fxhelper.core.config import Settings
from fxhelper.services.broker import (
    BrokerAPIError,
    BrokerConfig,
    BrokerNotConfiguredError,
    OandaClient,
)


def fake_oanda() -> tuple[web.Application, list]:
    seen = []

    async def summary(request: web.Request):
        seen.append(request)
        return web.json_response({"account": {"id": request.match_info["account_id"]}})

    async def candles(request: web.Request):
        seen.append(request)
        return web.json_response(
            {"instrument": request.match_info["instrument"], "candles": []}
        )

    async def positions(request: web.Request):
        seen.append(request)
        return web.json_response({"errorMessage": "Insufficient authorization"}, status=401)

    async def transactions(request: web.Request):
        seen.append(request)
        return web.Response(status=503, text="upstream maintenance")

    app = web.Application()
    app.router.add_get("/v3/accounts/{account_id}/summary", summary)
    app.router.add_get("/v3/accounts/{account_id}/positions", positions)
    app.router.add_get("/v3/accounts/{account_id}/transactions", transactions)
    app.router.add_get("/v3/instruments/{instrument}/candles", candles)
    return app, seen


def run_against_server(scenario):
    """Start the fake API, run `scenario(client, seen)` and tear everything down."""

    async def main():
        app, seen = fake_oanda()
        async with test_utils.TestServer(app) as server:
            client = OandaClient(
                BrokerConfig(
                    base_url=f"http://{server.host}:{server.port}",
                    token="tok-123",
                    account_id="101-001-1-001",
                    timeout_seconds=5,
                )
            )
            try:
                return await scenario(client, seen)
            finally:
                await client.close()

    return asyncio.run(main())


def test_account_summary_sends_bearer_token():
    async def scenario(client, seen):
        body = await client.get_account_summary()
        return body, seen[0].headers["Authorization"]

    body, auth = run_against_server(scenario)

    assert body == {"account": {"id": "101-001-1-001"}}
    assert auth == "Bearer tok-123"


def test_candles_forward_query():
    async def scenario(client, seen):
        body = await client.get_candles("USD_JPY", granularity="M15", count=250)
        return body, dict(seen[0].query)

    body, query = run_against_server(scenario)

    assert body["instrument"] == "USD_JPY"
    assert query == {"granularity": "M15", "count": "250", "price": "M"}


def test_error_status_carries_upstream_body():
    async def scenario(client, seen):
        with pytest.raises(BrokerAPIError) as exc:
            await client.get_positions()
        return exc.value

    error = run_against_server(scenario)

    assert error.status == 401
    assert error.body == {"errorMessage": "Insufficient authorization"}


def test_non_json_body_is_wrapped():
    async def scenario(client, seen):
        with pytest.raises(BrokerAPIError) as exc:
            await client.get_transactions(count=3)
        return exc.value, dict(seen[0].query)

    error, query = run_against_server(scenario)

    assert error.status == 503
    assert error.body == {"raw": "upstream maintenance"}
    assert query == {"count": "3"}


def test_unconfigured_client_never_calls_out():
    client = OandaClient(BrokerConfig(base_url="http://127.0.0.1:9"))

    assert client.is_configured is False
    with pytest.raises(BrokerNotConfiguredError):
        asyncio.run(client.get_account_summary())


class TestBrokerConfig:
    def test_practice_host(self):
        config = BrokerConfig.from_settings(
            Settings(oanda_env="practice", oanda_token="t", oanda_account_id="a")
        )

        assert config.base_url == "https://api-fxpractice.oanda.com"
        assert config.is_configured

    def test_live_is_the_default(self):
        config = BrokerConfig.from_settings(Settings(oanda_token="t"))

        assert config.base_url == "https://api-fxtrade.oanda.com"
        assert not config.is_configured

    def test_trailing_slash_is_dropped(self):
        config = BrokerConfig.from_settings(
            Settings(oanda_live_url="https://example.test/", oanda_token="t", oanda_account_id="a")
        )

        assert config.base_url == "https://example.test"
