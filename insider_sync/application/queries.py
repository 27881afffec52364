"""Read-side queries over stored trades."""
from __future__ import annotations

from datetime import date, timedelta
from typing import Sequence

from insider_sync.domain.models import TradeRecord
from insider_sync.domain.repositories import TradeStore


class TradeQueries:
    def __init__(self, store: TradeStore) -> None:
        self._store = store

    def latest(self, limit: int | None = None) -> Sequence[TradeRecord]:
        trades = sorted(self._store.list_trades(), key=lambda t: t.publishing_date, reverse=True)
        return trades[:limit] if limit else trades

    def top_by_value(self, as_of: date, limit: int = 10) -> Sequence[TradeRecord]:
        """Largest trades by price * shares published yesterday or today."""
        window = {as_of - timedelta(days=1), as_of}
        trades = self._store.list_by_publishing_dates(window)
        return sorted(trades, key=lambda t: t.value, reverse=True)[:limit]
