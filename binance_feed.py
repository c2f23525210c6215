#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Single-symbol Binance websocket feed driving a BandPositionEngine.

One connection, one read -> decode -> evaluate cycle, strictly sequential.
The first connect must succeed (FatalConnectError otherwise); after that every
read failure is logged, backed off and reconnected, forever.
"""

from __future__ import annotations

import asyncio
import math
import os
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

import websockets

from feed_decode import DecodeError, decode_price
from runlog import log, log_error
from strategies.band_position import BandPositionEngine
from strategies.signals import PositionEvent

DEFAULT_WS_BASE = "wss://stream.binance.com:9443"
DEFAULT_INTERVAL = "15m"


class FatalConnectError(RuntimeError):
    pass


class TransientReadError(RuntimeError):
    pass


def _env_str(name: str, default: str) -> str:
    v = os.getenv(name)
    if v is None or not v.strip():
        return default
    return v.strip()


def _env_float(name: str, default: float) -> float:
    v = os.getenv(name)
    if v is None or not v.strip():
        return default
    try:
        return float(v.strip())
    except ValueError:
        return default


def _env_positive(name: str, default: float) -> float:
    v = _env_float(name, default)
    if not math.isfinite(v) or v <= 0:
        return default
    return v


def stream_url(symbol: str, interval: str = DEFAULT_INTERVAL, base: str = DEFAULT_WS_BASE) -> str:
    return f"{base.rstrip('/')}/ws/{symbol.strip().lower()}@kline_{interval}"


@dataclass
class ReconnectPolicy:
    """Delay before each reconnect attempt. factor=1.0 keeps it fixed."""

    backoff_sec: float = 3.0
    factor: float = 1.0
    max_backoff_sec: float = 60.0
    _next: float = field(default=0.0, init=False, repr=False)

    def __post_init__(self):
        self._next = self.backoff_sec

    @classmethod
    def from_env(cls) -> "ReconnectPolicy":
        return cls(
            backoff_sec=_env_positive("FEED_BACKOFF_SEC", 3.0),
            factor=_env_positive("FEED_BACKOFF_FACTOR", 1.0),
            max_backoff_sec=_env_positive("FEED_BACKOFF_MAX_SEC", 60.0),
        )

    def next_delay(self) -> float:
        d = self._next
        self._next = min(self._next * max(1.0, self.factor), max(self.max_backoff_sec, self.backoff_sec))
        return d

    def reset(self) -> None:
        self._next = self.backoff_sec


def ws_connector(url: str, ping_interval: float = 20.0, open_timeout: float = 60.0) -> Callable[[], Awaitable[Any]]:
    async def connect():
        return await websockets.connect(
            url,
            ping_interval=ping_interval,
            ping_timeout=45,
            open_timeout=open_timeout,
            close_timeout=5,
            max_queue=None,
        )
    return connect


class FeedLoop:
    def __init__(
        self,
        url: str,
        engine: BandPositionEngine,
        *,
        connect: Optional[Callable[[], Awaitable[Any]]] = None,
        policy: Optional[ReconnectPolicy] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.url = url
        self.engine = engine
        self._connect = connect or ws_connector(url)
        self.policy = policy or ReconnectPolicy()
        self._sleep = sleep
        self.ws = None

        self.messages = 0
        self.decode_errors = 0
        self.read_errors = 0
        self.reconnects = 0

    @classmethod
    def from_env(cls, engine: BandPositionEngine) -> "FeedLoop":
        url = stream_url(
            engine.cfg.symbol,
            _env_str("FEED_INTERVAL", DEFAULT_INTERVAL),
            _env_str("BINANCE_WS_BASE", DEFAULT_WS_BASE),
        )
        connect = ws_connector(
            url,
            ping_interval=_env_positive("FEED_PING_INTERVAL", 20.0),
            open_timeout=_env_positive("FEED_OPEN_TIMEOUT", 60.0),
        )
        return cls(url, engine, connect=connect, policy=ReconnectPolicy.from_env())

    async def open(self) -> None:
        log("feed", f"Connecting to {self.url}")
        try:
            self.ws = await self._connect()
        except Exception as e:
            raise FatalConnectError(f"WebSocket connection error: {e!r}") from e
        log("feed", "Connected to Binance WebSocket")

    async def run(self) -> None:
        if self.ws is None:
            await self.open()
        try:
            while True:
                if self.ws is None:
                    await self._reconnect()
                    continue

                try:
                    raw = await self._read()
                except TransientReadError as e:
                    self.read_errors += 1
                    log_error(f"Read error: {e}")
                    await self._drop()
                    continue

                self.policy.reset()
                self.handle_message(raw)
        finally:
            await self._drop()

    def handle_message(self, raw: Any) -> Optional[PositionEvent]:
        self.messages += 1
        try:
            tick = decode_price(raw)
        except DecodeError as e:
            self.decode_errors += 1
            log_error(f"decode: dropped message: {e}")
            return None
        return self.engine.on_price(tick.price)

    async def _read(self) -> Any:
        try:
            return await self.ws.recv()
        except Exception as e:
            raise TransientReadError(repr(e)) from e

    async def _reconnect(self) -> None:
        delay = self.policy.next_delay()
        log("feed", f"reconnect in {delay:g}s")
        await self._sleep(delay)
        try:
            self.ws = await self._connect()
        except Exception as e:
            log_error(f"Reconnect to {self.url} failed: {e!r}")
            return
        self.reconnects += 1
        log("feed", "Reconnected to Binance WebSocket")

    async def _drop(self) -> None:
        ws, self.ws = self.ws, None
        if ws is None:
            return
        try:
            await ws.close()
        except Exception as e:
            log("feed", f"close failed: {e!r}")
