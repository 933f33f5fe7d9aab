"""Tests for the market overview and its agreement with the detail view."""

import asyncio

from stock_signal.data.models import Quote
from stock_signal.data.unified import UnifiedDataService
from stock_signal.tools.detail import stock_detail
from stock_signal.tools.overview import (
    DEFAULT_UNIVERSE,
    build_overview_entry,
    configured_universe,
    market_overview,
)


def _universe(n: int) -> list[str]:
    return [f"SYM{i:02d}" for i in range(n)]


class TestMarketOverview:
    """Tests for market_overview."""

    def test_failed_symbols_omitted_in_order(self, make_provider, cache) -> None:
        symbols = _universe(38)
        failing = [symbols[3], symbols[17], symbols[30]]
        service = UnifiedDataService(provider=make_provider(failing=failing), cache=cache)

        result = asyncio.run(market_overview(service, symbols))

        assert result["requested"] == 38
        assert result["returned"] == 35
        expected = [s for s in symbols if s not in failing]
        assert [row["symbol"] for row in result["stocks"]] == expected
        assert result["meta"]["tool"] == "market_overview"

    def test_overview_and_detail_agree(self, make_provider, cache) -> None:
        symbols = _universe(6)
        # Vary the daily move so the universe spans several verdicts
        quotes = {
            s: Quote(symbol=s, short_name=s, price=100.0, change_percent=change,
                     fifty_two_week_high=150.0, fifty_day_average=100.0)
            for s, change in zip(symbols, [-3.0, -1.5, 0.0, 2.5, -3.0, 0.2])
        }
        provider = make_provider(quotes=quotes)
        service = UnifiedDataService(provider=provider, cache=cache)

        async def scenario():
            overview = await market_overview(service, symbols)
            details = await asyncio.gather(*(stock_detail(service, s) for s in symbols))
            return overview, details

        overview, details = asyncio.run(scenario())

        strategies = {row["symbol"]: row["strategy"] for row in overview["stocks"]}
        for detail in details:
            assert detail["verdict"] == strategies[detail["symbol"]]
        assert {"REDUCE", "HOLD"} <= set(strategies.values())
        assert all(provider.rounds(s) == 1 for s in symbols)

    def test_explicit_empty_universe_scans_nothing(self, service, provider) -> None:
        result = asyncio.run(market_overview(service, []))

        assert result["requested"] == 0
        assert result["returned"] == 0
        assert result["stocks"] == []
        assert provider.calls == {}

    def test_symbol_spelling_preserved(self, service) -> None:
        result = asyncio.run(market_overview(service, ["aapl"]))
        assert result["stocks"][0]["symbol"] == "aapl"

    def test_default_universe(self, service, provider, monkeypatch) -> None:
        monkeypatch.delenv("SIGNAL_UNIVERSE", raising=False)

        result = asyncio.run(market_overview(service))

        assert result["requested"] == len(DEFAULT_UNIVERSE)
        assert result["returned"] == len(DEFAULT_UNIVERSE)
        assert [row["symbol"] for row in result["stocks"]] == list(DEFAULT_UNIVERSE)


class TestOverviewEntry:
    """Tests for build_overview_entry."""

    def test_entry_fields(self, service) -> None:
        bundle = asyncio.run(service.get_bundle("AAPL"))

        entry = build_overview_entry("AAPL", bundle)

        assert entry == {
            "symbol": "AAPL",
            "name": "AAPL Inc",
            "price": 100.0,
            "change_percent": 0.5,
            "currency": "USD",
            "strategy": "HOLD",
        }

    def test_name_prefers_short_name(self, make_provider, cache, neutral_quote) -> None:
        service = UnifiedDataService(
            provider=make_provider(quotes={"TEST": neutral_quote}), cache=cache
        )
        bundle = asyncio.run(service.get_bundle("TEST"))
        assert build_overview_entry("TEST", bundle)["name"] == "Test"


class TestConfiguredUniverse:
    """Tests for SIGNAL_UNIVERSE parsing."""

    def test_env_override(self, monkeypatch) -> None:
        monkeypatch.setenv("SIGNAL_UNIVERSE", "AAPL, MSFT,,0700.HK ")
        assert configured_universe() == ("AAPL", "MSFT", "0700.HK")

    def test_blank_env_uses_default(self, monkeypatch) -> None:
        monkeypatch.setenv("SIGNAL_UNIVERSE", " , ")
        assert configured_universe() == DEFAULT_UNIVERSE

    def test_default_universe_spans_markets(self) -> None:
        assert len(DEFAULT_UNIVERSE) == 44
        assert any(s.endswith(".HK") for s in DEFAULT_UNIVERSE)
        assert any(s.endswith(".SS") for s in DEFAULT_UNIVERSE)
        assert any(s.endswith(".SZ") for s in DEFAULT_UNIVERSE)
