"""Shared parsing utilities for feed ingestion."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation
from io import BytesIO
from pathlib import Path

import pandas as pd


def ensure_bytes(source: BytesIO | Path | bytes | str) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, str):
        return source.encode("utf-8")
    if isinstance(source, BytesIO):
        return source.getvalue()
    if isinstance(source, Path):
        return source.read_bytes()
    raise TypeError(f"Unsupported source type: {type(source)!r}")


def clean_text(value: object) -> str:
    if value is None:
        return ""
    s = str(value).strip()
    if s.upper() == "NAN":
        return ""
    return s


def parse_decimal(value: object) -> Decimal:
    """Parse a number written with Swedish or English separators."""
    s = clean_text(value)
    if not s:
        return Decimal("0")
    for ch in [" ", "\u00a0", "\u202f"]:
        s = s.replace(ch, "")
    if "," in s:
        # "1.234,56" and "123,45" both use the comma as decimal mark
        s = s.replace(".", "").replace(",", ".")
    try:
        return Decimal(s)
    except InvalidOperation as exc:
        raise ValueError(f"Not a number: {value!r}") from exc


def parse_volume(value: object) -> int:
    """Volumes may carry decimals in the feed; they are truncated to whole shares."""
    return int(parse_decimal(value))


def parse_timestamp(value: object) -> datetime | None:
    s = clean_text(value)
    if not s:
        return None
    parsed = pd.to_datetime(s, errors="coerce")
    if pd.isna(parsed):
        raise ValueError(f"Not a timestamp: {value!r}")
    return parsed.to_pydatetime()
