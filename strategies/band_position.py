#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Band-touch entries with percentage take-profit / stop-loss exits.

Flat -> LONG when price touches the lower band, Flat -> SHORT when it touches
the upper band, back to Flat once TP or SL is crossed. One position at a time.

Tie-breaks (both are evaluation order and are kept on purpose):
- flat and within margin of both bands: the long band wins;
- open and both TP and SL crossed on one tick: take-profit wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from runlog import log
from trade_state import CloseReason, PositionState, Side
from .signals import PositionEvent

# Absolute distance (price units) within which a tick "touches" a band.
DEFAULT_MARGIN = 0.10


@dataclass(frozen=True)
class TradeConfig:
    symbol: str
    min_price: float
    max_price: float
    take_profit_pct: float  # 1.5 means 1.5%
    stop_loss_pct: float

    def __post_init__(self):
        object.__setattr__(self, "symbol", self.symbol.strip().lower())


class BandPositionEngine:
    """Owns the config and the single PositionState; feed it one price at a time."""

    def __init__(self, cfg: TradeConfig, margin: float = DEFAULT_MARGIN):
        self.cfg = cfg
        self.margin = float(margin)
        self.state = PositionState()

    def on_price(self, price: float) -> Optional[PositionEvent]:
        st = self.state
        if st.is_open:
            return self._check_exit(price)

        if abs(price - self.cfg.min_price) < self.margin:
            return self._open(price, long=True)
        if abs(price - self.cfg.max_price) < self.margin:
            return self._open(price, long=False)
        return None

    def _check_exit(self, price: float) -> Optional[PositionEvent]:
        st = self.state
        cfg = self.cfg
        change = (price - st.entry_price) / st.entry_price * 100.0

        if st.is_long:
            if change >= cfg.take_profit_pct:
                return self._close(CloseReason.TAKE_PROFIT, price, change)
            if change <= -cfg.stop_loss_pct:
                return self._close(CloseReason.STOP_LOSS, price, change)
        else:
            if change <= -cfg.take_profit_pct:
                return self._close(CloseReason.TAKE_PROFIT, price, change)
            if change >= cfg.stop_loss_pct:
                return self._close(CloseReason.STOP_LOSS, price, change)
        return None

    def _open(self, price: float, long: bool) -> PositionEvent:
        self.state.open(price, long)
        ev = PositionEvent(
            action="opened",
            side=Side.LONG if long else Side.SHORT,
            price=price,
            entry_price=price,
        )
        log("trade", f"{self.cfg.symbol}: {ev.describe()}")
        return ev

    def _close(self, reason: str, price: float, change: float) -> PositionEvent:
        st = self.state
        ev = PositionEvent(
            action="closed",
            side=st.side,
            price=price,
            reason=reason,
            entry_price=st.entry_price,
            change_pct=change,
        )
        st.close()
        log("trade", f"{self.cfg.symbol}: {ev.describe()} ({change:+.2f}%)")
        return ev
