"""Prompt templates for stock signal review."""

from typing import Any

# Prompt definitions
PROMPTS = {
    "signal_review": {
        "description": "Explain the composite signal for one stock",
        "arguments": [{"name": "symbol", "required": True}],
    },
    "market_scan": {
        "description": "Summarize verdicts across the overview universe",
        "arguments": [],
    },
}


def list_prompts() -> list[dict[str, Any]]:
    """List available prompts."""
    return [
        {
            "name": name,
            "description": info["description"],
            "arguments": info["arguments"],
        }
        for name, info in PROMPTS.items()
    ]


def get_prompt(name: str, arguments: dict[str, str]) -> dict[str, Any] | None:
    """
    Get a prompt by name with arguments filled in.

    Returns dict with 'messages' key for MCP GetPromptResult.
    """
    if name not in PROMPTS:
        return None

    if name == "signal_review":
        symbol = arguments.get("symbol", "")
        return {
            "messages": [
                {
                    "role": "user",
                    "content": f"""Review the signal for {symbol}.

Call get_stock_detail("{symbol}") once. If it returns an error, say the
symbol is unavailable and stop.

Then provide:
1. **Verdict**: the `verdict` field verbatim
2. **Score**: `score.total` and each entry of `score.components`
3. **Why**: the two largest components by absolute value, with the data
   source from `score.sources` that fed them
4. **Momentum**: `market.rsi` and `market.signal`
5. **Headlines**: each news title with its sentiment

Do not recompute the score. Report the numbers exactly as returned.""",
                }
            ]
        }

    if name == "market_scan":
        return {
            "messages": [
                {
                    "role": "user",
                    "content": """Scan the market overview.

Call get_market_overview() once. Then provide:
1. **Coverage**: `returned` out of `requested` symbols
2. **By verdict**: group the symbols under each `strategy` value,
   strongest first (STRONG BUY, BUY, ACCUMULATE, HOLD, REDUCE, SELL)
3. **Movers**: the three largest absolute `change_percent` values

For any symbol you want to discuss further, call get_stock_detail; it is
served from the same cache, so its verdict will match the overview.""",
                }
            ]
        }

    return None
