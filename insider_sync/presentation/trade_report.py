"""Report generators for stored insider trades."""
from __future__ import annotations

import csv
import io
from html import escape
from typing import Sequence

import pandas as pd

from insider_sync.domain.models import TradeRecord

COLUMNS = [
    "published",
    "company",
    "symbol",
    "insider",
    "position",
    "transaction_type",
    "shares",
    "price",
    "currency",
    "value",
    "transaction_date",
    "status",
    "isin",
]


def trades_to_rows(trades: Sequence[TradeRecord]) -> list[dict[str, str]]:
    rows: list[dict[str, str]] = []
    for trade in trades:
        rows.append(
            {
                "published": trade.publishing_date.isoformat(sep=" "),
                "company": trade.company_name,
                "symbol": trade.symbol or "",
                "insider": trade.insider_name,
                "position": trade.position,
                "transaction_type": trade.transaction_type,
                "shares": str(trade.shares),
                "price": str(trade.price),
                "currency": trade.currency,
                "value": str(trade.value),
                "transaction_date": trade.transaction_date.date().isoformat() if trade.transaction_date else "",
                "status": trade.status,
                "isin": trade.isin or "",
            }
        )
    return rows


def trades_to_dataframe(trades: Sequence[TradeRecord]) -> pd.DataFrame:
    return pd.DataFrame(trades_to_rows(trades), columns=COLUMNS)


def render_csv(trades: Sequence[TradeRecord]) -> bytes:
    rows = trades_to_rows(trades)
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=COLUMNS)
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue().encode("utf-8")


def render_html(trades: Sequence[TradeRecord]) -> str:
    rows = trades_to_rows(trades)
    if not rows:
        return "<p>No trades stored.</p>"
    header = "".join(f"<th>{col}</th>" for col in COLUMNS)
    body_parts = []
    for row in rows:
        body_parts.append("<tr>" + "".join(f"<td>{escape(row[col])}</td>" for col in COLUMNS) + "</tr>")
    body_html = "".join(body_parts)
    return f"<table><thead><tr>{header}</tr></thead><tbody>{body_html}</tbody></table>"


def render_xlsx(trades: Sequence[TradeRecord], sheet_name: str = "trades") -> bytes:
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="xlsxwriter") as writer:
        trades_to_dataframe(trades).to_excel(writer, sheet_name=sheet_name, index=False)
    return buf.getvalue()
