from datetime import timedelta

import pytest

from enkrypt.core.config import Settings
from enkrypt.services.http_client import HttpError
from enkrypt.services.rates import providers
from enkrypt.services.rates.base import RateQuote
from enkrypt.services.rates.cache_service import RateCacheService
from enkrypt.services.rates.providers import (
    CoinGeckoRateProvider,
    ExchangeRateApiProvider,
    StaticRateProvider,
    make_rate_provider,
)


def _fake_get_json(payload=None, error=None, calls=None):
    def _get_json(url, *, timeout=5.0, retries=0, backoff=0.5):
        if calls is not None:
            calls.append(url)
        if error is not None:
            raise error
        return payload

    return _get_json


def test_coingecko_inverts_inr_price(monkeypatch):
    monkeypatch.setattr(providers, "get_json", _fake_get_json({"tether": {"inr": 80.0}}))
    quote = CoinGeckoRateProvider("http://x", 0.012, 1.0).get_quote()
    assert quote.rate == pytest.approx(0.0125)
    assert quote.fallback is False
    assert quote.source == "coingecko"


def test_exchangerate_api_inverts_usd_inr(monkeypatch):
    monkeypatch.setattr(providers, "get_json", _fake_get_json({"rates": {"INR": 83.5}}))
    quote = ExchangeRateApiProvider("http://x", 0.012, 1.0).get_quote()
    assert quote.rate == pytest.approx(1 / 83.5)
    assert not quote.fallback


@pytest.mark.parametrize(
    "payload",
    [{}, {"tether": {}}, {"tether": {"inr": 0}}, {"tether": {"inr": -3}}, {"tether": "bad"}],
)
def test_unusable_payload_falls_back(monkeypatch, payload):
    monkeypatch.setattr(providers, "get_json", _fake_get_json(payload))
    quote = CoinGeckoRateProvider("http://x", 0.012, 1.0).get_quote()
    assert quote.rate == 0.012
    assert quote.fallback is True


def test_http_failure_falls_back(monkeypatch):
    monkeypatch.setattr(providers, "get_json", _fake_get_json(error=HttpError("boom")))
    quote = ExchangeRateApiProvider("http://x", 0.02, 1.0).get_quote()
    assert quote.rate == 0.02
    assert quote.fallback is True


def test_static_provider_is_flagged_fallback():
    quote = StaticRateProvider(0.012).get_quote()
    assert quote.rate == 0.012 and quote.fallback


def test_make_rate_provider_uses_setting(tmp_path):
    s = Settings(exchange_rate_provider="exchangerate-api", upload_dir=tmp_path)
    assert isinstance(make_rate_provider(s), ExchangeRateApiProvider)


def test_unknown_provider_rejected(tmp_path):
    s = Settings(exchange_rate_provider="nope", upload_dir=tmp_path)
    with pytest.raises(ValueError):
        s.init_post_load()


def test_cache_reuses_live_quote_until_ttl(monkeypatch):
    calls = []
    monkeypatch.setattr(
        providers, "get_json", _fake_get_json({"tether": {"inr": 80.0}}, calls=calls)
    )
    svc = RateCacheService(CoinGeckoRateProvider("http://x", 0.012, 1.0), 300, 30)
    svc.get_quote()
    svc.get_quote()
    assert len(calls) == 1
    svc.refresh()
    assert len(calls) == 2


class _SequenceProvider(StaticRateProvider):
    def __init__(self, quotes):
        super().__init__(0.012)
        self._quotes = list(quotes)

    def get_quote(self):
        return self._quotes.pop(0)


def test_cache_expires_fallback_quote_sooner():
    from enkrypt.services.rates.providers import _now

    stale = _now() - timedelta(seconds=60)
    fallback = RateQuote(rate=0.012, source="coingecko", fallback=True, fetched_at=stale)
    live = RateQuote(rate=0.0125, source="coingecko", fallback=False, fetched_at=_now())
    svc = RateCacheService(_SequenceProvider([fallback, live]), 300, 30)
    assert svc.get_quote() is fallback
    # fallback older than 30s is refreshed on the next read
    assert svc.get_quote() is live


def test_exchange_rate_endpoint(client):
    resp = client.get("/api/exchange-rate")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["rate"] == 0.012
    assert body["fallback"] is True
    assert body["source"] == "static"
    assert "timestamp" in body


def test_convert_endpoint(client):
    body = client.get("/api/convert", params={"amount": "1000"}).json()
    assert body["display"] == "12.00"
    assert body["usdtAmount"] == pytest.approx(12.0)
    assert body["rateText"] == "1 INR = ₮0.012 USDT"


def test_convert_endpoint_placeholders(client):
    assert client.get("/api/convert", params={"amount": "-3"}).json()["display"] == "0.00"
    assert client.get("/api/convert").json()["display"] == "0.00"


class _LoopCheckingProvider(StaticRateProvider):
    """Records whether each fetch ran on a thread with a running event loop."""

    def __init__(self):
        super().__init__(0.012)
        self.on_loop = []

    def get_quote(self):
        import asyncio

        try:
            asyncio.get_running_loop()
            self.on_loop.append(True)
        except RuntimeError:
            self.on_loop.append(False)
        return super().get_quote()


def test_rate_fetches_run_off_the_event_loop(app, client):
    provider = _LoopCheckingProvider()
    app.state.rates = RateCacheService(provider, 0, 0)
    client.get("/api/exchange-rate")
    client.get("/api/convert", params={"amount": "100"})
    client.get("/", params={"refresh": "true"})
    assert provider.on_loop == [False, False, False]
