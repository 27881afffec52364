"""Finansinspektionen Insyn export client."""
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pandas as pd
import requests

from insider_sync.config import SETTINGS
from insider_sync.domain.errors import FeedError
from insider_sync.infrastructure.parsing.insyn import parse_insyn_csv

logger = logging.getLogger(__name__)


def default_window(today: Optional[date] = None) -> tuple[date, date]:
    """Yesterday through today, in UTC."""
    today = today or datetime.now(timezone.utc).date()
    return today - timedelta(days=1), today


class FiInsynFeed:
    """Download insider disclosures published in a date window as raw CSV rows."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url or SETTINGS.feed_url
        self.timeout = timeout if timeout is not None else SETTINGS.feed_timeout
        self.session = session or requests.Session()

    @staticmethod
    def _params(from_date: date, to_date: date) -> dict[str, str]:
        return {
            "SearchFunctionType": "Insyn",
            "Utgivare": "",
            "PersonILedandeStällningNamn": "",
            "Transaktionsdatum.From": "",
            "Transaktionsdatum.To": "",
            "Publiceringsdatum.From": from_date.isoformat(),
            "Publiceringsdatum.To": to_date.isoformat(),
            "button": "export",
            "Page": "1",
        }

    def fetch_text(self, from_date: date, to_date: date) -> str:
        try:
            response = self.session.get(
                self.base_url,
                params=self._params(from_date, to_date),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise FeedError(f"Insyn export request failed: {exc}") from exc

        if response.status_code != 200:
            snippet = response.text[:200] if response.text else "no body"
            raise FeedError(f"Insyn export returned HTTP {response.status_code}: {snippet}")
        return response.text

    def fetch_rows(self, from_date: date, to_date: date) -> list[dict[str, str]]:
        text = self.fetch_text(from_date, to_date)
        if not text.strip():
            return []
        try:
            rows = parse_insyn_csv(text)
        except pd.errors.EmptyDataError:
            return []
        except (pd.errors.ParserError, UnicodeDecodeError) as exc:
            raise FeedError(f"Insyn export could not be parsed: {exc}") from exc
        logger.info("Fetched %d Insyn rows published %s..%s", len(rows), from_date, to_date)
        return rows
