from __future__ import annotations

import pytest

import price_poll_feed.poller.sources as sources_mod
from price_poll_feed.poller.api import NetworkError, ParseError
from price_poll_feed.poller.sources import SOURCES, PriceSource, SourceId, build_sources


def _stub_fetch(monkeypatch, responses: dict):
    calls: list = []

    def fake_fetch(url):
        calls.append(url)
        resp = responses[url]
        if isinstance(resp, Exception):
            raise resp
        return resp

    monkeypatch.setattr(sources_mod, "fetch_json", fake_fetch)
    return calls


def test_table_order_and_endpoints():
    assert list(SOURCES) == [SourceId.BITCOIN, SourceId.ETHEREUM, SourceId.SP500]
    assert SOURCES[SourceId.BITCOIN].url == (
        "https://api.coingecko.com/api/v3/simple/price?ids=bitcoin&vs_currencies=usd"
    )
    assert SOURCES[SourceId.ETHEREUM].url == (
        "https://api.coingecko.com/api/v3/simple/price?ids=ethereum&vs_currencies=usd"
    )
    assert SOURCES[SourceId.SP500].url == (
        "https://query1.finance.yahoo.com/v8/finance/chart/%5EGSPC?interval=1m&range=1d"
    )
    assert [s.log_name for s in SOURCES.values()] == [
        "bitcoin_prices.txt",
        "ethereum_prices.txt",
        "sp500_prices.txt",
    ]
    assert [s.label for s in SOURCES.values()] == ["Bitcoin", "Ethereum", "S&P 500"]


def test_crypto_sources_read_usd_field(monkeypatch):
    btc = SOURCES[SourceId.BITCOIN]
    eth = SOURCES[SourceId.ETHEREUM]
    calls = _stub_fetch(
        monkeypatch,
        {
            btc.url: {"bitcoin": {"usd": 65000.5}},
            eth.url: {"ethereum": {"usd": 3120.25}},
        },
    )
    assert PriceSource(btc).fetch_price() == 65000.5
    assert PriceSource(eth).fetch_price() == 3120.25
    assert calls == [btc.url, eth.url]


def test_crypto_source_does_not_read_other_asset(monkeypatch):
    eth = SOURCES[SourceId.ETHEREUM]
    _stub_fetch(monkeypatch, {eth.url: {"bitcoin": {"usd": 65000.5}}})
    with pytest.raises(ParseError, match=r"^ethereum: field missing$"):
        PriceSource(eth).fetch_price()


def test_index_source_returns_last_close(monkeypatch):
    spx = SOURCES[SourceId.SP500]
    payload = {"chart": {"result": [{"indicators": {"quote": [{"close": [5000.1, 5000.2, None, 5012.9]}]}}]}}
    _stub_fetch(monkeypatch, {spx.url: payload})
    assert PriceSource(spx).fetch_price() == 5012.9


def test_index_source_empty_close_is_parse_error(monkeypatch):
    spx = SOURCES[SourceId.SP500]
    payload = {"chart": {"result": [{"indicators": {"quote": [{"close": []}]}}]}}
    _stub_fetch(monkeypatch, {spx.url: payload})
    with pytest.raises(ParseError):
        PriceSource(spx).fetch_price()


def test_network_error_passes_through(monkeypatch):
    btc = SOURCES[SourceId.BITCOIN]
    err = NetworkError("HTTP 429 from coingecko")
    _stub_fetch(monkeypatch, {btc.url: err})
    with pytest.raises(NetworkError) as info:
        PriceSource(btc).fetch_price()
    assert info.value is err


def test_build_sources_uses_table_order():
    assert [s.spec.source_id for s in build_sources()] == list(SOURCES)
