from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from .sources import SourceId, SourceSpec


class WriteError(RuntimeError):
    pass


@dataclass(frozen=True)
class Observation:
    source: SourceId
    price: float
    timestamp: pd.Timestamp


@dataclass(frozen=True)
class PersistConfig:
    root_dir: Path

    def log_path(self, spec: SourceSpec) -> Path:
        return self.root_dir / spec.log_name


def now_utc() -> pd.Timestamp:
    return pd.Timestamp.now(tz="UTC")


def format_record(spec: SourceSpec, price: float, timestamp: pd.Timestamp) -> str:
    return f"{spec.label} Price: {price:.2f}, Timestamp: {pd.Timestamp(timestamp).isoformat()}"


def append_observation(cfg: PersistConfig, spec: SourceSpec, price: float, timestamp: pd.Timestamp) -> Path:
    """Append one line to the source's price log, creating it if absent.

    The file is opened and closed per call; nothing is held between polls.
    """
    out = cfg.log_path(spec)
    line = format_record(spec, price, timestamp)
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        with open(out, "a", encoding="utf-8") as fh:
            fh.write(line + "\n")
    except OSError as e:
        raise WriteError(f"cannot append to {out}: {e}") from e
    return out
