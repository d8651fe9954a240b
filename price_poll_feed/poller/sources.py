from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple

from .api import fetch_json
from .validation import PathStep, extract_price


COINGECKO_SIMPLE_PRICE = "https://api.coingecko.com/api/v3/simple/price"
YAHOO_CHART = "https://query1.finance.yahoo.com/v8/finance/chart"


class SourceId(str, Enum):
    BITCOIN = "bitcoin"
    ETHEREUM = "ethereum"
    SP500 = "sp500"


@dataclass(frozen=True)
class SourceSpec:
    source_id: SourceId
    label: str
    url: str
    price_path: Tuple[PathStep, ...]

    @property
    def log_name(self) -> str:
        return f"{self.source_id.value}_prices.txt"


def _coingecko(source_id: SourceId, asset_id: str, label: str) -> SourceSpec:
    return SourceSpec(
        source_id=source_id,
        label=label,
        url=f"{COINGECKO_SIMPLE_PRICE}?ids={asset_id}&vs_currencies=usd",
        price_path=(asset_id, "usd"),
    )


# Poll order is the order of this table
SOURCES: Dict[SourceId, SourceSpec] = {
    SourceId.BITCOIN: _coingecko(SourceId.BITCOIN, "bitcoin", "Bitcoin"),
    SourceId.ETHEREUM: _coingecko(SourceId.ETHEREUM, "ethereum", "Ethereum"),
    SourceId.SP500: SourceSpec(
        source_id=SourceId.SP500,
        label="S&P 500",
        url=f"{YAHOO_CHART}/%5EGSPC?interval=1m&range=1d",
        # last intraday close
        price_path=("chart", "result", 0, "indicators", "quote", 0, "close", -1),
    ),
}


class PriceSource:
    """Fetches the current USD price for one configured source."""

    def __init__(self, spec: SourceSpec):
        self.spec = spec

    @property
    def label(self) -> str:
        return self.spec.label

    def fetch_price(self) -> float:
        payload = fetch_json(self.spec.url)
        return extract_price(payload, self.spec.price_path)

    def __repr__(self) -> str:
        return f"PriceSource({self.spec.source_id.value})"


def build_sources() -> List[PriceSource]:
    return [PriceSource(spec) for spec in SOURCES.values()]
