"""Price Poll Feed - periodic price snapshots into append-only text logs.

Provides:
- Bitcoin and Ethereum spot prices (CoinGecko)
- S&P 500 last intraday close (Yahoo Finance chart API)
- A poll loop appending one line per observation to <source>_prices.txt
"""

__version__ = "0.1.0"

# Expose main submodules
from . import poller

__all__ = ["poller", "__version__"]
