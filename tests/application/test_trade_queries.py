from datetime import date, datetime
from decimal import Decimal

from insider_sync.application.queries import TradeQueries
from insider_sync.domain.models import TradeRecord


class InMemoryStore:
    def __init__(self, trades):
        self._trades = list(trades)

    def list_trades(self):
        return list(self._trades)

    def list_by_publishing_dates(self, dates):
        wanted = set(dates)
        return [t for t in self._trades if t.publishing_date.date() in wanted]

    def commit(self, to_add, to_remove):
        raise AssertionError("queries must not write")


def make_trade(published: datetime, shares: int, price: str) -> TradeRecord:
    return TradeRecord(
        company_name="Foo Corp",
        insider_name="Alice",
        position="CFO",
        transaction_type="Förvärv",
        shares=shares,
        price=Decimal(price),
        publishing_date=published,
    )


def test_latest_orders_newest_first_and_limits():
    old = make_trade(datetime(2024, 6, 1, 9), 1, "1")
    new = make_trade(datetime(2024, 6, 3, 9), 1, "1")
    mid = make_trade(datetime(2024, 6, 2, 9), 1, "1")
    queries = TradeQueries(InMemoryStore([old, new, mid]))

    assert queries.latest() == [new, mid, old]
    assert queries.latest(limit=2) == [new, mid]


def test_top_by_value_covers_yesterday_and_today():
    today = make_trade(datetime(2024, 6, 3, 9), 10, "5")
    yesterday = make_trade(datetime(2024, 6, 2, 18), 100, "5")
    too_old = make_trade(datetime(2024, 6, 1, 9), 100000, "5")
    queries = TradeQueries(InMemoryStore([today, yesterday, too_old]))

    top = queries.top_by_value(date(2024, 6, 3))

    assert top == [yesterday, today]
    assert queries.top_by_value(date(2024, 6, 3), limit=1) == [yesterday]
