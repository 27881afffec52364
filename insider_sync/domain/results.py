"""Domain-level results for trade reconciliation and ingestion."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from .models import TradeRecord


@dataclass(frozen=True)
class ReconciliationPlan:
    """Net changes for one batch.

    ``added``/``removed`` count per-record decisions; the sets hold the net
    effect, so a trade added and retracted within one batch appears in neither.
    """

    to_add: Sequence[TradeRecord] = field(default_factory=tuple)
    to_remove: Sequence[TradeRecord] = field(default_factory=tuple)
    added: int = 0
    removed: int = 0

    def has_changes(self) -> bool:
        return bool(self.to_add or self.to_remove)


@dataclass(frozen=True)
class IngestionOutcome:
    received: int
    added: int = 0
    removed: int = 0
    resolved_symbols: int = 0

    @property
    def message(self) -> str:
        if self.received == 0:
            return "No data provided."
        if self.added and self.removed:
            return f"{self.added} new trades added. {self.removed} trades removed."
        if self.added:
            return f"{self.added} new trades added."
        if self.removed:
            return f"{self.removed} trades removed."
        return "No new data was added."
