#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import math
from typing import Callable

from strategies.band_position import TradeConfig


class FatalConfigError(ValueError):
    pass


InputFn = Callable[[str], str]


def _ask(input_fn: InputFn, prompt: str) -> str:
    try:
        return input_fn(prompt)
    except EOFError as e:
        raise FatalConfigError(f"no input for {prompt.strip()!r}") from e


def _ask_float(input_fn: InputFn, prompt: str) -> float:
    s = _ask(input_fn, prompt).strip()
    try:
        v = float(s)
    except ValueError as e:
        raise FatalConfigError(f"Invalid number: {s!r}") from e
    if not math.isfinite(v):
        raise FatalConfigError(f"Invalid number: {s!r}")
    return v


def prompt_config(input_fn: InputFn = input) -> TradeConfig:
    """Ask for symbol, bands and TP/SL. Any bad answer is fatal, no re-ask."""
    symbol = _ask(input_fn, "Symbol (e.g. btcusdt): ").strip()
    if not symbol:
        raise FatalConfigError("symbol is empty")

    min_price = _ask_float(input_fn, "Min Price: ")
    max_price = _ask_float(input_fn, "Max Price: ")
    tp = _ask_float(input_fn, "Take Profit (%): ")
    sl = _ask_float(input_fn, "Stop Loss (%): ")

    # bands may come in any order, percentages may not be <= 0
    if tp <= 0 or sl <= 0:
        raise FatalConfigError(f"Take Profit / Stop Loss must be positive (got {tp}, {sl})")

    return TradeConfig(
        symbol=symbol,
        min_price=min_price,
        max_price=max_price,
        take_profit_pct=tp,
        stop_loss_pct=sl,
    )
