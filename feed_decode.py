#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Binance stream payload -> PriceTick.

Handles raw trade/aggTrade events (price in "p"), kline events (latest price
is the running candle close, k["c"]) and the combined-stream wrapper
{"stream": ..., "data": {...}}.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union


class DecodeError(ValueError):
    pass


@dataclass(frozen=True)
class PriceTick:
    price: float
    event_ts: Optional[int] = None  # ms


Raw = Union[bytes, bytearray, str, Dict[str, Any]]


def _load(raw: Raw) -> Dict[str, Any]:
    if isinstance(raw, dict):
        msg = raw
    else:
        if isinstance(raw, (bytes, bytearray)):
            try:
                raw = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise DecodeError(f"payload is not utf-8: {e}") from e
        if not isinstance(raw, str):
            raise DecodeError(f"unsupported payload type {type(raw).__name__}")
        try:
            msg = json.loads(raw)
        except (ValueError, RecursionError) as e:
            # JSONDecodeError, over-long int literals, pathological nesting
            raise DecodeError(f"bad json: {e}") from e

    if not isinstance(msg, dict):
        raise DecodeError(f"expected a json object, got {type(msg).__name__}")

    # combined stream: {"stream": "btcusdt@kline_15m", "data": {...}}
    if "stream" in msg and isinstance(msg.get("data"), dict):
        msg = msg["data"]
    return msg


def _price_field(msg: Dict[str, Any]) -> Any:
    if "p" in msg:
        return msg["p"]
    k = msg.get("k")
    if msg.get("e") == "kline" and isinstance(k, dict) and "c" in k:
        return k["c"]
    raise DecodeError("price field missing")


def _to_price(v: Any) -> float:
    if isinstance(v, bool) or not isinstance(v, (str, int, float)):
        raise DecodeError(f"price has unexpected type {type(v).__name__}")
    try:
        p = float(v)
    except ValueError as e:
        raise DecodeError(f"price is not a number: {v!r}") from e
    except OverflowError as e:
        raise DecodeError("price out of float range") from e
    if not math.isfinite(p) or p <= 0:
        raise DecodeError(f"price out of range: {p!r}")
    return p


def decode_price(raw: Raw) -> PriceTick:
    msg = _load(raw)
    price = _to_price(_price_field(msg))

    ts = msg.get("E", msg.get("T"))
    if isinstance(ts, bool) or not isinstance(ts, int):
        ts = None
    return PriceTick(price=price, event_ts=ts)
