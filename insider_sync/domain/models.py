"""Domain models for insider trade reconciliation.

These dataclasses capture the canonical schema for normalized insider trade
disclosures and the candidates returned by ticker lookups.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

REVISION_STATUS = "Reviderad"


@dataclass(frozen=True)
class TradeKey:
    """Natural key identifying one disclosure, independent of its status."""

    company_name: str
    insider_name: str
    position: str
    transaction_type: str
    shares: int
    price: Decimal
    publishing_date: datetime


@dataclass(slots=True)
class TradeRecord:
    """Normalized insider trade as produced by the feed or loaded from storage."""

    company_name: str
    insider_name: str
    position: str
    transaction_type: str
    shares: int
    price: Decimal
    publishing_date: datetime
    currency: str = ""
    transaction_date: datetime | None = None
    status: str = ""
    isin: str | None = None
    symbol: str | None = None
    record_id: str | None = None

    def key(self) -> TradeKey:
        return TradeKey(
            company_name=self.company_name,
            insider_name=self.insider_name,
            position=self.position,
            transaction_type=self.transaction_type,
            shares=self.shares,
            price=self.price,
            publishing_date=self.publishing_date,
        )

    def is_revision(self) -> bool:
        return (self.status or "").strip().casefold() == REVISION_STATUS.casefold()

    @property
    def value(self) -> Decimal:
        return self.price * self.shares


@dataclass(frozen=True)
class FigiCandidate:
    """One listing returned by OpenFIGI for an ISIN."""

    ticker: str
    exch_code: str | None = None
    mic_code: str | None = None
    market_sector: str | None = None
