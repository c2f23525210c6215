"""
Pytest configuration and shared fixtures.
"""

import pytest

from strategies.band_position import BandPositionEngine, TradeConfig


@pytest.fixture(autouse=True)
def _no_error_file(monkeypatch):
    monkeypatch.delenv("ERRORS_LOG", raising=False)


@pytest.fixture
def cfg() -> TradeConfig:
    """Bands and percentages from the worked example (100 / 110, TP 2%, SL 1%)."""
    return TradeConfig(
        symbol="BTCUSDT",
        min_price=100.0,
        max_price=110.0,
        take_profit_pct=2.0,
        stop_loss_pct=1.0,
    )


@pytest.fixture
def engine(cfg) -> BandPositionEngine:
    return BandPositionEngine(cfg)
