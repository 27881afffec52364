"""Domain services implementing reconciliation and symbol resolution rules."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Iterable, Sequence

from .errors import IngestionCancelled
from .models import FigiCandidate, TradeKey, TradeRecord
from .repositories import TickerLookup
from .results import ReconciliationPlan

logger = logging.getLogger(__name__)


def _present(value: str | None) -> bool:
    return bool(value and value.strip())


def _fold(value: str | None) -> str:
    return (value or "").strip().casefold()


def raise_if_cancelled(cancel: threading.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise IngestionCancelled("Ingestion run was cancelled")


@dataclass
class _ReconciliationState:
    """Accumulator folded over one batch.

    Buckets keep insertion order so the first stored match for a key is stable.
    """

    index: dict[TradeKey, list[TradeRecord]] = field(default_factory=dict)
    to_add: list[TradeRecord] = field(default_factory=list)
    to_remove: list[TradeRecord] = field(default_factory=list)
    added: int = 0
    removed: int = 0

    @classmethod
    def seed(cls, existing: Iterable[TradeRecord]) -> "_ReconciliationState":
        state = cls()
        for record in existing:
            state.index.setdefault(record.key(), []).append(record)
        return state

    def find(self, key: TradeKey) -> TradeRecord | None:
        bucket = self.index.get(key)
        return bucket[0] if bucket else None

    def insert(self, record: TradeRecord) -> None:
        self.index.setdefault(record.key(), []).append(record)

    def discard(self, record: TradeRecord) -> None:
        key = record.key()
        bucket = [item for item in self.index.get(key, []) if item is not record]
        if bucket:
            self.index[key] = bucket
        else:
            self.index.pop(key, None)


class TradeReconciler:
    """Classifies incoming trades as new, duplicate or revision against stored trades."""

    def reconcile(
        self,
        new_records: Sequence[TradeRecord],
        existing_records: Iterable[TradeRecord],
    ) -> ReconciliationPlan:
        state = _ReconciliationState.seed(existing_records)
        for record in new_records:
            self._apply(state, record)
        return ReconciliationPlan(
            to_add=tuple(state.to_add),
            to_remove=tuple(state.to_remove),
            added=state.added,
            removed=state.removed,
        )

    @staticmethod
    def _apply(state: _ReconciliationState, record: TradeRecord) -> None:
        match = state.find(record.key())

        if record.is_revision():
            if match is None:
                logger.debug("Revision for %s on %s matches nothing stored", record.company_name, record.publishing_date)
                return
            state.discard(match)
            state.removed += 1
            pending = [item for item in state.to_add if item is not match]
            if len(pending) < len(state.to_add):
                # Added earlier in this batch; never stored, so just drop it
                state.to_add = pending
            else:
                state.to_remove.append(match)
            return

        if match is not None:
            return

        state.insert(record)
        state.to_add.append(record)
        state.added += 1


@dataclass(frozen=True)
class ListingPreference:
    """Home-market preference used to choose one listing among several."""

    exch_code: str = "SS"
    mic_code: str = "XSTO"
    market_sector: str = "Equity"

    def pick(self, candidates: Sequence[FigiCandidate]) -> FigiCandidate | None:
        if not candidates:
            return None
        criteria: tuple[Callable[[FigiCandidate], bool], ...] = (
            lambda c: _fold(c.exch_code) == _fold(self.exch_code),
            lambda c: _fold(c.mic_code) == _fold(self.mic_code),
            lambda c: _fold(c.market_sector) == _fold(self.market_sector),
        )
        for matches in criteria:
            for candidate in candidates:
                if matches(candidate):
                    return candidate
        return candidates[0]


class SymbolResolver:
    """Assigns best-effort ticker symbols to new trades using run-scoped caches."""

    def __init__(self, lookup: TickerLookup) -> None:
        self._lookup = lookup

    def resolve(
        self,
        new_records: Sequence[TradeRecord],
        existing_records: Iterable[TradeRecord],
        cancel: threading.Event | None = None,
    ) -> int:
        existing = list(existing_records)
        by_company = self._company_cache(existing)
        by_isin = self._isin_cache(existing)
        # ISIN -> ticker for lookups issued in this run; None records a miss
        run_memo: dict[str, str | None] = {}
        resolved = 0

        for record in new_records:
            raise_if_cancelled(cancel)

            if _present(record.symbol):
                if _present(record.isin):
                    by_isin.setdefault(_fold(record.isin), record.symbol)
                if _present(record.company_name):
                    by_company.setdefault(_fold(record.company_name), record.symbol)
                continue

            ticker: str | None = None

            if _present(record.isin):
                isin_key = _fold(record.isin)
                ticker = by_isin.get(isin_key)
                if ticker is None and isin_key in run_memo:
                    ticker = run_memo[isin_key]
                elif ticker is None:
                    raise_if_cancelled(cancel)
                    ticker = self._lookup.resolve(record.isin.strip(), cancel)
                    ticker = ticker.strip() if _present(ticker) else None
                    run_memo[isin_key] = ticker
                    if ticker:
                        by_isin[isin_key] = ticker

            if ticker is None and _present(record.company_name):
                ticker = by_company.get(_fold(record.company_name))

            if ticker:
                record.symbol = ticker
                resolved += 1
                if _present(record.company_name):
                    by_company.setdefault(_fold(record.company_name), ticker)

        logger.info(
            "Resolved symbols for %d of %d trades (%d external lookups)",
            resolved,
            len(new_records),
            len(run_memo),
        )
        return resolved

    @staticmethod
    def _company_cache(records: Sequence[TradeRecord]) -> dict[str, str]:
        return {
            _fold(record.company_name): record.symbol
            for record in records
            if _present(record.company_name) and _present(record.symbol)
        }

    @staticmethod
    def _isin_cache(records: Sequence[TradeRecord]) -> dict[str, str]:
        return {
            _fold(record.isin): record.symbol
            for record in records
            if _present(record.isin) and _present(record.symbol)
        }
