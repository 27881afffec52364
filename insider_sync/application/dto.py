"""Application-level DTOs for insider trade syncing."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from insider_sync.domain.results import IngestionOutcome


@dataclass(slots=True, frozen=True)
class SyncRequest:
    from_date: date
    to_date: date


@dataclass(slots=True, frozen=True)
class SyncResponse:
    outcome: IngestionOutcome
    fetched_rows: int
    excluded_rows: int
    invalid_rows: int
