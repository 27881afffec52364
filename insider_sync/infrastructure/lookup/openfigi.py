"""OpenFIGI client resolving ISINs to ticker symbols."""
from __future__ import annotations

import logging
import threading
from typing import Any, Optional

import requests

from insider_sync.config import SETTINGS
from insider_sync.domain.models import FigiCandidate
from insider_sync.domain.services import ListingPreference, raise_if_cancelled

logger = logging.getLogger(__name__)


def _text(value: Any) -> str | None:
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def parse_candidates(payload: Any) -> list[FigiCandidate]:
    """Extract listings from a single-job mapping response.

    Jobs answered with ``warning`` or ``error`` yield no candidates.
    """
    if not isinstance(payload, list) or not payload:
        raise ValueError("OpenFIGI response is not a non-empty list")
    job = payload[0]
    if not isinstance(job, dict):
        raise ValueError("OpenFIGI job result is not an object")
    if "error" in job:
        raise ValueError(f"OpenFIGI error: {job['error']}")
    data = job.get("data") or []
    if not isinstance(data, list):
        raise ValueError("OpenFIGI job data is not a list")
    candidates: list[FigiCandidate] = []
    for item in data:
        if not isinstance(item, dict):
            continue
        ticker = _text(item.get("ticker"))
        if not ticker:
            continue
        candidates.append(
            FigiCandidate(
                ticker=ticker,
                exch_code=_text(item.get("exchCode")),
                mic_code=_text(item.get("micCode")),
                market_sector=_text(item.get("marketSector")),
            )
        )
    return candidates


class OpenFigiTickerLookup:
    """Map an ISIN to the home-market ticker via the OpenFIGI mapping API."""

    def __init__(
        self,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        preference: Optional[ListingPreference] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = url or SETTINGS.openfigi_url
        self.api_key = api_key if api_key is not None else SETTINGS.openfigi_api_key
        self.timeout = timeout if timeout is not None else SETTINGS.openfigi_timeout
        self.preference = preference or ListingPreference(
            exch_code=SETTINGS.home_exch_code,
            mic_code=SETTINGS.home_mic,
            market_sector=SETTINGS.market_sector,
        )
        self.session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["X-OPENFIGI-APIKEY"] = self.api_key
        return headers

    def resolve(self, isin: str, cancel: threading.Event | None = None) -> str | None:
        raise_if_cancelled(cancel)
        try:
            response = self.session.post(
                self.url,
                json=[{"idType": "ID_ISIN", "idValue": isin}],
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("OpenFIGI request failed for %s: %s", isin, exc)
            return None

        if response.status_code == 429:
            logger.warning("OpenFIGI rate limit hit for %s", isin)
            return None
        if response.status_code != 200:
            logger.warning("OpenFIGI returned HTTP %d for %s", response.status_code, isin)
            return None

        try:
            candidates = parse_candidates(response.json())
        except ValueError as exc:
            logger.warning("Failed to resolve ticker for %s: %s", isin, exc)
            return None

        chosen = self.preference.pick(candidates)
        if chosen is None:
            logger.debug("No OpenFIGI listing for %s", isin)
            return None
        return chosen.ticker
