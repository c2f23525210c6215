#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class PositionEvent:
    action: str  # "opened" | "closed"
    side: str  # "long" | "short"
    price: float

    # Close reason ("Take Profit" / "Stop Loss"); empty for opens.
    reason: str = ""

    entry_price: float = 0.0
    # Move from entry in percent at the moment of the event (0 for opens).
    change_pct: float = 0.0

    @property
    def opened(self) -> bool:
        return self.action == "opened"

    @property
    def closed(self) -> bool:
        return self.action == "closed"

    def describe(self) -> str:
        if self.opened:
            return f"Opened {self.side.upper()} position at {self.price:.2f}"
        return f"Closed position at {self.price:.2f} due to {self.reason}"
