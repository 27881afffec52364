"""Central configuration for the insider trade sync package."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")

DEFAULT_FEED_URL = "https://marknadssok.fi.se/Publiceringsklient/sv-SE/Search/Search"
DEFAULT_OPENFIGI_URL = "https://api.openfigi.com/v3/mapping"


def _get(key: str, default: str = "") -> str:
    return (os.getenv(key) or default).strip()


@dataclass(slots=True, frozen=True)
class Settings:
    data_dir: Path
    store_path: Path
    feed_url: str
    feed_timeout: float
    openfigi_url: str
    openfigi_api_key: str
    openfigi_timeout: float
    home_exch_code: str
    home_mic: str
    market_sector: str
    log_level: str


def load_settings() -> Settings:
    data_dir = Path(_get("INSIDER_SYNC_DATA_DIR") or BASE_DIR / "data")
    store_path = Path(_get("INSIDER_SYNC_STORE_PATH") or data_dir / "trades.json")
    return Settings(
        data_dir=data_dir,
        store_path=store_path,
        feed_url=_get("INSIDER_SYNC_FEED_URL", DEFAULT_FEED_URL),
        feed_timeout=float(_get("INSIDER_SYNC_FEED_TIMEOUT", "30")),
        openfigi_url=_get("OPENFIGI_URL", DEFAULT_OPENFIGI_URL),
        # Empty key means anonymous OpenFIGI access (lower rate limit)
        openfigi_api_key=_get("OPENFIGI_API_KEY"),
        openfigi_timeout=float(_get("OPENFIGI_TIMEOUT", "10")),
        home_exch_code=_get("INSIDER_SYNC_HOME_EXCH_CODE", "SS"),
        home_mic=_get("INSIDER_SYNC_HOME_MIC", "XSTO"),
        market_sector=_get("INSIDER_SYNC_MARKET_SECTOR", "Equity"),
        log_level=_get("INSIDER_SYNC_LOG_LEVEL", "INFO").upper(),
    )


SETTINGS = load_settings()
