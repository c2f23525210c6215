# trade_state.py
from __future__ import annotations

from dataclasses import dataclass


class Side:
    LONG = "long"
    SHORT = "short"


class CloseReason:
    TAKE_PROFIT = "Take Profit"
    STOP_LOSS = "Stop Loss"


@dataclass
class PositionState:
    """
    The one simulated position tracked by the bot.

    `is_long` and `entry_price` only mean something while `is_open` is True.
    On close they are left as they were (stale) and get overwritten by the
    next open.
    """

    is_open: bool = False
    is_long: bool = False
    entry_price: float = 0.0

    @property
    def side(self) -> str:
        return Side.LONG if self.is_long else Side.SHORT

    def open(self, price: float, long: bool) -> None:
        self.entry_price = price
        self.is_long = long
        self.is_open = True

    def close(self) -> None:
        self.is_open = False
