#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# band_bot.py

import sys
import asyncio
import traceback

from dotenv import load_dotenv

from binance_feed import FatalConnectError, FeedLoop
from runlog import log, log_error
from setup_prompt import FatalConfigError, prompt_config
from strategies.band_position import BandPositionEngine, TradeConfig


async def main_async(cfg: TradeConfig):
    engine = BandPositionEngine(cfg)
    feed = FeedLoop.from_env(engine)
    await feed.run()


def main(input_fn=input):
    load_dotenv()

    try:
        cfg = prompt_config(input_fn)
    except FatalConfigError as e:
        log_error(f"config: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        print()
        log("bot", "stopped")
        return

    log("bot", f"Tracking {cfg.symbol}: long band {cfg.min_price}, short band {cfg.max_price}, "
               f"TP {cfg.take_profit_pct}%, SL {cfg.stop_loss_pct}% (simulated, no orders)")

    try:
        asyncio.run(main_async(cfg))
    except FatalConnectError as e:
        log_error(f"fatal: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        log("bot", "stopped")
    except Exception as e:
        log_error(f"fatal: {repr(e)}\n{traceback.format_exc()}")
        raise


if __name__ == "__main__":
    main()
