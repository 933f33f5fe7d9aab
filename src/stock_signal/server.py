"""Stock Signal MCP Server using FastMCP."""

import json
import logging
import os

from fastmcp import FastMCP

from stock_signal import SCHEMA_VERSION, SERVER_VERSION
from stock_signal.data.cache import BundleCache
from stock_signal.data.unified import UnifiedDataService
from stock_signal.data.yfinance_client import YFinanceProvider
from stock_signal.prompts.templates import get_prompt
from stock_signal.tools import market_overview, stock_detail, symbol_search

# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=getattr(logging, log_level, logging.INFO))
logger = logging.getLogger(__name__)


def create_service() -> UnifiedDataService:
    """One provider and one bundle cache per process."""
    return UnifiedDataService(provider=YFinanceProvider(), cache=BundleCache())


def create_server(service: UnifiedDataService | None = None) -> FastMCP:
    """
    Build the MCP server around a unified data service.

    Args:
        service: Service to serve from (default: a yfinance-backed one)

    Returns:
        FastMCP instance with tools and prompts registered
    """
    if service is None:
        service = create_service()

    mcp = FastMCP(name="stock-signal")

    # ========================================================================
    # TOOLS
    # ========================================================================

    @mcp.tool
    async def get_stock_detail(symbol: str) -> str:
        """
        Get the composite investment signal for one stock with its inputs.

        Includes quote, industry, key financials, sentiment-tagged news,
        30-day close history with RSI, the score breakdown and the verdict
        (STRONG BUY, BUY, ACCUMULATE, HOLD, REDUCE or SELL). Results are
        cached briefly and always agree with get_market_overview.

        Args:
            symbol: Stock ticker symbol (e.g., AAPL, 0700.HK, 600519.SS)

        Returns:
            JSON with the detail view, or a not_found error
        """
        result = await stock_detail(service, symbol)
        return json.dumps(result, indent=2, default=str)

    @mcp.tool
    async def get_market_overview(symbols: list[str] | None = None) -> str:
        """
        Get price, daily change and verdict for a universe of stocks.

        Symbols that cannot be fetched are omitted.

        Args:
            symbols: Ticker symbols to scan (default: built-in universe of
                US, Hong Kong, mainland China and global large caps)

        Returns:
            JSON with one row per available symbol, in input order
        """
        result = await market_overview(service, symbols)
        return json.dumps(result, indent=2, default=str)

    @mcp.tool
    async def search_symbol(query: str) -> str:
        """
        Search for stock symbols by company name or ticker.

        Args:
            query: Search query, at least 2 characters

        Returns:
            JSON with up to 5 matches and exact match info
        """
        result = await symbol_search(service, query)
        return json.dumps(result, indent=2, default=str)

    # ========================================================================
    # PROMPTS
    # ========================================================================

    @mcp.prompt
    def signal_review(symbol: str) -> str:
        """Explain the composite signal for one stock."""
        result = get_prompt("signal_review", {"symbol": symbol})
        if result:
            return result["messages"][0]["content"]
        return f"Review {symbol} using get_stock_detail."

    @mcp.prompt
    def market_scan() -> str:
        """Summarize verdicts across the overview universe."""
        result = get_prompt("market_scan", {})
        if result:
            return result["messages"][0]["content"]
        return "Scan the market using get_market_overview."

    return mcp


# ============================================================================
# ENTRY POINT
# ============================================================================


def main() -> None:
    """Run the MCP server."""
    logger.info(f"Starting Stock Signal MCP Server v{SERVER_VERSION} (schema v{SCHEMA_VERSION})")
    create_server().run()


if __name__ == "__main__":
    main()
