from __future__ import annotations

import logging
import os
from typing import Optional

import yfinance as yf

logger = logging.getLogger(__name__)


def configure_yfinance_cache(explicit_dir: Optional[str] = None) -> str:
    """Point yfinance's timezone/cookie caches at a writable directory.

    Lookup order: ``explicit_dir``, ``YFINANCE_CACHE_DIR``, ``TMPDIR``, then
    ``/tmp`` (the only writable path on Lambda).
    """
    base_dir = (
        explicit_dir
        or os.environ.get("YFINANCE_CACHE_DIR")
        or os.environ.get("TMPDIR")
        or "/tmp"
    )
    cache_dir = os.path.join(base_dir, "py-yfinance")
    try:
        os.makedirs(cache_dir, exist_ok=True)
    except OSError as e:
        logger.warning(f"yfinance cache dir {cache_dir} unavailable: {e}")
        return cache_dir

    if hasattr(yf, "set_tz_cache_location"):
        yf.set_tz_cache_location(cache_dir)
    return cache_dir
