from __future__ import annotations

from numbers import Real
from typing import Any, Sequence, Union

import numpy as np

from .api import ParseError


PathStep = Union[str, int]


def _fmt_path(path: Sequence[PathStep]) -> str:
    out = ""
    for step in path:
        out += f"[{step}]" if isinstance(step, int) else f".{step}"
    return out.lstrip(".")


def resolve_path(payload: Any, path: Sequence[PathStep]) -> Any:
    """Walk a decoded JSON document along ``path``.

    - str steps index JSON objects, int steps index JSON arrays
    - a negative int counts from the end, so -1 is the last element
    - a missing key, a wrong container type or an empty/short array raises ParseError
    """
    node = payload
    for i, step in enumerate(path):
        where = _fmt_path(path[: i + 1])
        if isinstance(step, int):
            if not isinstance(node, list):
                raise ParseError(f"{where}: expected array, got {type(node).__name__}")
            if not node:
                raise ParseError(f"{where}: array is empty")
            try:
                node = node[step]
            except IndexError:
                raise ParseError(f"{where}: index out of range (len {len(node)})") from None
        else:
            if not isinstance(node, dict):
                raise ParseError(f"{where}: expected object, got {type(node).__name__}")
            if step not in node:
                raise ParseError(f"{where}: field missing")
            node = node[step]
    return node


def coerce_price(value: Any, where: str = "price") -> float:
    """Accept a JSON number and return it as float.

    Booleans, numeric strings, null, NaN, infinities and integers too large
    for a float are rejected, as are non-positive prices.
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ParseError(f"{where}: not numeric ({value!r})")
    try:
        price = float(value)
    except OverflowError:
        raise ParseError(f"{where}: number out of float range") from None
    if not np.isfinite(price):
        raise ParseError(f"{where}: not finite ({price})")
    if price <= 0:
        raise ParseError(f"{where}: non-positive price {price}")
    return price


def extract_price(payload: Any, path: Sequence[PathStep]) -> float:
    return coerce_price(resolve_path(payload, path), _fmt_path(path))
