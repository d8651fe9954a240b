"""BTC / ETH / S&P 500 price poller.

Implements fetching, response parsing, append-only persistence and the poll loop.
"""

__all__ = [
    "api",
    "cli",
    "persistence",
    "sources",
    "validation",
]
