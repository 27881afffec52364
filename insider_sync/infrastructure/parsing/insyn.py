"""Finansinspektionen Insyn CSV parser producing canonical trade records."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import Iterable, Mapping, Sequence

import pandas as pd

from insider_sync.domain.models import TradeRecord
from insider_sync.infrastructure.parsing.utils import (
    clean_text,
    ensure_bytes,
    parse_decimal,
    parse_timestamp,
    parse_volume,
)

logger = logging.getLogger(__name__)

COL_PUBLISHED = "Publiceringsdatum"
COL_ISSUER = "Emittent"
COL_PERSON = "Person i ledande ställning"
COL_POSITION = "Befattning"
COL_NATURE = "Karaktär"
COL_ISIN = "ISIN"
COL_TRADED = "Transaktionsdatum"
COL_VOLUME = "Volym"
COL_PRICE = "Pris"
COL_CURRENCY = "Valuta"
COL_STATUS = "Status"

# Loans, pledges, dividends and corporate-action adjustments are not trades
EXCLUDED_TRANSACTION_TYPES = frozenset(
    {
        "Lån mottaget",
        "Lån utlåning",
        "Lån återgång ökning",
        "Lån återgång minskning",
        "Utdelning lämnad",
        "Lösen minskning",
        "Lösen ökning",
        "Utbyte minskning",
        "Utbyte ökning",
        "Pantsättning",
        "Bodelning minskning",
        "Bodelning ökning",
        "Arv mottagen",
        "Konvertering ökning",
    }
)

_INTERNAL_PREFIX = re.compile(r"^\s*Interntransaktion\s*[–—-]\s*", re.IGNORECASE)
_PUBL = re.compile(r"\s*\(publ\)", re.IGNORECASE)
_AB = re.compile(r"\s*\bAB\b", re.IGNORECASE)


def strip_internal_prefix(label: str) -> str:
    return _INTERNAL_PREFIX.sub("", label).strip()


def strip_legal_form(name: str) -> str:
    if not name:
        return name
    return _AB.sub("", _PUBL.sub("", name)).strip()


def read_insyn_raw(source: BytesIO | Path | bytes | str) -> pd.DataFrame:
    frame = pd.read_csv(
        BytesIO(ensure_bytes(source)),
        sep=";",
        dtype=str,
        keep_default_na=False,
        encoding="utf-8-sig",
    )
    frame.columns = [str(col).strip() for col in frame.columns]
    return frame


def parse_insyn_csv(source: BytesIO | Path | bytes | str) -> list[dict[str, str]]:
    """Decode an Insyn export into raw rows keyed by the export's column names."""
    return read_insyn_raw(source).to_dict(orient="records")


def normalize_row(row: Mapping[str, object]) -> TradeRecord | None:
    """Map one raw row to a TradeRecord; None when its transaction type is excluded.

    Raises ValueError when a natural-key field is missing or unparseable.
    """
    transaction_type = strip_internal_prefix(clean_text(row.get(COL_NATURE)))
    if transaction_type in EXCLUDED_TRANSACTION_TYPES:
        return None

    published = parse_timestamp(row.get(COL_PUBLISHED))
    company = strip_legal_form(clean_text(row.get(COL_ISSUER)))
    insider = clean_text(row.get(COL_PERSON))
    if published is None or not company or not insider:
        raise ValueError("Row lacks publishing date, issuer or person")

    return TradeRecord(
        company_name=company,
        insider_name=insider,
        position=clean_text(row.get(COL_POSITION)),
        transaction_type=transaction_type,
        shares=parse_volume(row.get(COL_VOLUME)),
        price=parse_decimal(row.get(COL_PRICE)),
        publishing_date=published,
        currency=clean_text(row.get(COL_CURRENCY)),
        transaction_date=parse_timestamp(row.get(COL_TRADED)),
        status=clean_text(row.get(COL_STATUS)),
        isin=clean_text(row.get(COL_ISIN)).upper() or None,
    )


@dataclass(frozen=True)
class NormalizationResult:
    trades: Sequence[TradeRecord] = field(default_factory=tuple)
    excluded: int = 0
    invalid: int = 0


def normalize_rows(rows: Iterable[Mapping[str, object]]) -> NormalizationResult:
    trades: list[TradeRecord] = []
    excluded = 0
    invalid = 0
    for idx, row in enumerate(rows):
        try:
            trade = normalize_row(row)
        except ValueError as exc:
            invalid += 1
            logger.warning("Skipping feed row %d: %s", idx, exc)
            continue
        if trade is None:
            excluded += 1
            continue
        trades.append(trade)
    if excluded:
        logger.debug("Excluded %d non-trade rows", excluded)
    return NormalizationResult(trades=tuple(trades), excluded=excluded, invalid=invalid)
