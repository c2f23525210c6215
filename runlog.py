#!/usr/bin/env python3
# -*- coding: utf-8 -*-

from __future__ import annotations

import os
import sys
import time


def _ts() -> str:
    return time.strftime("%Y-%m-%d %H:%M:%S", time.gmtime())


def log(tag: str, msg: str) -> None:
    print(f"{_ts()} [{tag}] {msg}", flush=True)


def log_error(msg: str) -> None:
    """Print to stderr; also append to $ERRORS_LOG when it is set."""
    print(f"{_ts()} [error] {msg}", file=sys.stderr, flush=True)
    path = (os.getenv("ERRORS_LOG") or "").strip()
    if not path:
        return
    try:
        with open(path, "a") as f:
            f.write(f"[{_ts()}] {msg}\n")
    except OSError:
        pass
