"""Application services orchestrating the insider trade ingestion workflow."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Sequence

from insider_sync.application.dto import SyncRequest, SyncResponse
from insider_sync.domain.models import TradeRecord
from insider_sync.domain.repositories import FeedSource, TradeStore
from insider_sync.domain.results import IngestionOutcome
from insider_sync.domain.services import SymbolResolver, TradeReconciler
from insider_sync.infrastructure.parsing.insyn import normalize_rows

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IngestionContext:
    store: TradeStore
    resolver: SymbolResolver
    reconciler: TradeReconciler


class IngestTradesUseCase:
    """Resolve symbols, reconcile against stored trades and commit the net effect once."""

    def __init__(self, context: IngestionContext) -> None:
        self._context = context

    def execute(self, trades: Sequence[TradeRecord], cancel: threading.Event | None = None) -> IngestionOutcome:
        if not trades:
            return IngestionOutcome(received=0)

        dates = {trade.publishing_date.date() for trade in trades}
        existing = list(self._context.store.list_by_publishing_dates(dates))

        resolved = self._context.resolver.resolve(trades, existing, cancel)
        plan = self._context.reconciler.reconcile(trades, existing)

        if plan.has_changes():
            self._context.store.commit(plan.to_add, plan.to_remove)
        outcome = IngestionOutcome(
            received=len(trades),
            added=plan.added,
            removed=plan.removed,
            resolved_symbols=resolved,
        )
        logger.info("%s (%d received, %d compared)", outcome.message, len(trades), len(existing))
        return outcome


class SyncInsiderTradesUseCase:
    """Fetch a publishing-date window from the feed, normalize it and ingest it."""

    def __init__(self, feed: FeedSource, ingest: IngestTradesUseCase) -> None:
        self._feed = feed
        self._ingest = ingest

    def execute(self, request: SyncRequest, cancel: threading.Event | None = None) -> SyncResponse:
        rows = self._feed.fetch_rows(request.from_date, request.to_date)
        normalized = normalize_rows(rows)
        outcome = self._ingest.execute(list(normalized.trades), cancel)
        return SyncResponse(
            outcome=outcome,
            fetched_rows=len(rows),
            excluded_rows=normalized.excluded,
            invalid_rows=normalized.invalid,
        )
