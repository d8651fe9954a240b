from __future__ import annotations

import os
import signal
import sys
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import pandas as pd
from dotenv import load_dotenv

from .api import FetchError
from .persistence import Observation, PersistConfig, WriteError, append_observation, now_utc
from .sources import build_sources


POLL_INTERVAL = 10.0
API_KEY_ENV = "API_KEY"


@dataclass
class RunConfig:
    persist_dir: Path = Path(".")
    interval: float = POLL_INTERVAL
    max_cycles: Optional[int] = None
    env_file: Path = Path(".env")


@dataclass
class CycleResult:
    fetched: int = 0
    appended: int = 0
    failed: int = 0
    observations: List[Observation] = field(default_factory=list)


def run_cycle(cfg: RunConfig, sources: Sequence, clock: Callable[[], pd.Timestamp] = now_utc) -> CycleResult:
    """Fetch and append every source once, in order.

    Errors are reported per source and never stop the remaining sources.
    """
    persist_cfg = PersistConfig(cfg.persist_dir)
    res = CycleResult()
    for src in sources:
        try:
            price = src.fetch_price()
        except FetchError as e:
            print(f"[ERROR] fetch {src.label}: {e}", file=sys.stderr)
            res.failed += 1
            continue
        res.fetched += 1

        obs = Observation(src.spec.source_id, price, clock())
        try:
            append_observation(persist_cfg, src.spec, obs.price, obs.timestamp)
        except WriteError as e:
            print(f"[ERROR] write {src.label}: {e}", file=sys.stderr)
            res.failed += 1
            continue
        res.appended += 1
        res.observations.append(obs)
    return res


def run_loop(
    cfg: RunConfig,
    sources: Sequence,
    stop: threading.Event,
    wait: Optional[Callable[[float], object]] = None,
    clock: Callable[[], pd.Timestamp] = now_utc,
) -> int:
    """Run poll cycles until ``stop`` is set or ``cfg.max_cycles`` is reached.

    The interval is waited after each cycle, on top of the cycle's own latency.
    Returns the number of cycles run.
    """
    wait = wait or stop.wait
    cycles = 0
    while not stop.is_set():
        run_cycle(cfg, sources, clock=clock)
        cycles += 1
        if cfg.max_cycles is not None and cycles >= cfg.max_cycles:
            break
        wait(cfg.interval)
    return cycles


def load_api_key(env_file: Path) -> Optional[str]:
    load_dotenv(env_file)
    return os.getenv(API_KEY_ENV) or None


def _mask(secret: str) -> str:
    return "****" + secret[-4:] if len(secret) > 4 else "****"


def _install_stop_handlers(stop: threading.Event) -> dict:
    """Route SIGINT/SIGTERM to ``stop``; returns the previous handlers.

    The first signal lets the current cycle finish. A second one raises
    KeyboardInterrupt, which also breaks out of a stalled HTTP read.
    """

    def _handler(signum, frame):
        if stop.is_set():
            raise KeyboardInterrupt
        stop.set()

    previous = {}
    for sig in (signal.SIGINT, signal.SIGTERM):
        previous[sig] = signal.signal(sig, _handler)
    return previous


def main(cfg: Optional[RunConfig] = None) -> int:
    cfg = cfg or RunConfig()

    api_key = load_api_key(cfg.env_file)
    if api_key is None:
        print(f"[ERROR] {API_KEY_ENV} not set in environment or {cfg.env_file}", file=sys.stderr)
        return 2
    print(f"[INFO] API key loaded: {_mask(api_key)}")

    stop = threading.Event()
    previous = _install_stop_handlers(stop)
    try:
        run_loop(cfg, build_sources(), stop)
    except KeyboardInterrupt:
        print("[INFO] interrupted")
        return 0
    except Exception as e:  # surface clear error message
        print(f"[ERROR] {e}", file=sys.stderr)
        return 3
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
