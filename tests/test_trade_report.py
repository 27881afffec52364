import csv
import io
from datetime import datetime
from decimal import Decimal

from insider_sync.domain.models import TradeRecord
from insider_sync.presentation.trade_report import COLUMNS, render_csv, render_html, render_xlsx, trades_to_rows


def make_trade() -> TradeRecord:
    return TradeRecord(
        company_name="Foo & Bar",
        insider_name="Alice",
        position="CFO",
        transaction_type="Förvärv",
        shares=100,
        price=Decimal("10.5"),
        publishing_date=datetime(2024, 6, 1, 13, 37, 17),
        currency="SEK",
        transaction_date=datetime(2024, 5, 31),
        status="Aktuell",
        symbol="FOO",
    )


def test_rows_include_value_and_blank_optionals():
    [row] = trades_to_rows([make_trade()])

    assert list(row) == COLUMNS
    assert row["value"] == "1050.0"
    assert row["published"] == "2024-06-01 13:37:17"
    assert row["transaction_date"] == "2024-05-31"
    assert row["isin"] == ""


def test_render_csv():
    data = render_csv([make_trade()]).decode("utf-8")

    rows = list(csv.DictReader(io.StringIO(data)))
    assert rows[0]["symbol"] == "FOO"
    assert rows[0]["transaction_type"] == "Förvärv"


def test_render_html_escapes_values():
    html = render_html([make_trade()])

    assert "Foo &amp; Bar" in html
    assert render_html([]) == "<p>No trades stored.</p>"


def test_render_xlsx_produces_workbook():
    data = render_xlsx([make_trade()])

    assert data[:2] == b"PK"
