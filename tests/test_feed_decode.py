import json

import pytest

from feed_decode import DecodeError, PriceTick, decode_price


KLINE = {
    "e": "kline",
    "E": 1700000000123,
    "s": "BTCUSDT",
    "k": {"t": 1699999200000, "i": "15m", "o": "100.00", "c": "100.05", "h": "100.10", "l": "99.90", "x": False},
}

TRADE = {"e": "trade", "E": 1700000000456, "s": "BTCUSDT", "t": 12345, "p": "102.06", "q": "0.01"}


def test_trade_payload_bytes():
    tick = decode_price(json.dumps(TRADE).encode())

    assert tick == PriceTick(price=102.06, event_ts=1700000000456)


def test_trade_payload_text_and_dict():
    assert decode_price(json.dumps(TRADE)).price == 102.06
    assert decode_price(dict(TRADE)).price == 102.06


def test_kline_uses_running_close():
    tick = decode_price(json.dumps(KLINE))

    assert tick.price == 100.05
    assert tick.event_ts == 1700000000123


def test_combined_stream_wrapper():
    raw = json.dumps({"stream": "btcusdt@kline_15m", "data": KLINE})

    assert decode_price(raw).price == 100.05


def test_minimal_payload_without_timestamp():
    tick = decode_price('{"p": "0.5"}')

    assert tick.price == 0.5
    assert tick.event_ts is None


@pytest.mark.parametrize(
    "raw",
    [
        b"\xff\xfe",
        "not json",
        "",
        "[1, 2, 3]",
        '"100.0"',
        "{}",
        '{"e": "trade", "q": "1"}',
        '{"k": {"c": "100.0"}}',
        '{"e": "kline", "k": "100.0"}',
        '{"p": "abc"}',
        '{"p": ""}',
        '{"p": "NaN"}',
        '{"p": "inf"}',
        '{"p": "-1.5"}',
        '{"p": "0"}',
        '{"p": null}',
        '{"p": true}',
        '{"p": ["100"]}',
        '{"p": 1' + "0" * 400 + "}",
        '{"p": 1' + "0" * 5000 + "}",
        "[" * 100000,
        '{"a": ' * 100000,
        {"p": 10 ** 400},
        12345,
    ],
)
def test_malformed_payloads_raise_decode_error(raw):
    with pytest.raises(DecodeError):
        decode_price(raw)


def test_decode_error_is_a_value_error():
    assert issubclass(DecodeError, ValueError)
