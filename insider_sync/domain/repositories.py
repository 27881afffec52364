"""Repository interfaces anchoring the domain layer."""
from __future__ import annotations

import threading
from datetime import date
from typing import Iterable, Mapping, Protocol, Sequence

from .models import TradeRecord


class TradeStore(Protocol):
    """Durable store of reconciled insider trades."""

    def list_by_publishing_dates(self, dates: Iterable[date]) -> Sequence[TradeRecord]:
        ...

    def list_trades(self) -> Sequence[TradeRecord]:
        ...

    def commit(self, to_add: Sequence[TradeRecord], to_remove: Sequence[TradeRecord]) -> None:
        """Apply additions and removals together or not at all."""
        ...


class TickerLookup(Protocol):
    """Resolves an ISIN to a ticker symbol. Returns None when unresolved."""

    def resolve(self, isin: str, cancel: threading.Event | None = None) -> str | None:
        ...


class FeedSource(Protocol):
    """Provides raw disclosure rows for a publishing-date window."""

    def fetch_rows(self, from_date: date, to_date: date) -> Sequence[Mapping[str, str]]:
        ...
