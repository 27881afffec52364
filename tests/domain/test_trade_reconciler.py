from datetime import datetime
from decimal import Decimal

from insider_sync.domain.models import TradeRecord
from insider_sync.domain.services import TradeReconciler

PUBLISHED = datetime(2024, 6, 1, 13, 37, 17)


def make_trade(status: str = "Aktuell", **overrides) -> TradeRecord:
    fields = dict(
        company_name="Foo Corp",
        insider_name="Alice",
        position="CFO",
        transaction_type="Buy",
        shares=100,
        price=Decimal("10.5"),
        publishing_date=PUBLISHED,
        currency="SEK",
        transaction_date=PUBLISHED,
        status=status,
    )
    fields.update(overrides)
    return TradeRecord(**fields)


def test_new_trade_is_added():
    plan = TradeReconciler().reconcile([make_trade()], [])

    assert plan.added == 1
    assert plan.removed == 0
    assert plan.has_changes()


def test_exact_duplicate_is_skipped():
    stored = make_trade(record_id="a")
    plan = TradeReconciler().reconcile([make_trade()], [stored])

    assert plan.added == 0
    assert plan.removed == 0
    assert not plan.has_changes()


def test_status_and_supplementary_fields_do_not_affect_matching():
    stored = make_trade(status="Aktuell", isin="SE0000000001", symbol="FOO", record_id="a")
    incoming = make_trade(status="Publicerad", isin="SE0000000999", currency="EUR")

    plan = TradeReconciler().reconcile([incoming], [stored])

    assert plan.added == 0


def test_any_natural_key_difference_makes_a_new_trade():
    stored = make_trade(record_id="a")
    variants = [
        make_trade(company_name="foo corp"),
        make_trade(insider_name="Bob"),
        make_trade(position="CEO"),
        make_trade(transaction_type="Sell"),
        make_trade(shares=101),
        make_trade(price=Decimal("10.51")),
        make_trade(publishing_date=datetime(2024, 6, 1, 13, 37, 18)),
    ]

    plan = TradeReconciler().reconcile(variants, [stored])

    assert plan.added == len(variants)


def test_revision_retracts_stored_trade():
    stored = make_trade(record_id="a")
    plan = TradeReconciler().reconcile([make_trade(status="Reviderad")], [stored])

    assert plan.added == 0
    assert plan.removed == 1
    assert plan.to_remove[0] is stored


def test_revision_marker_is_case_insensitive():
    stored = make_trade(record_id="a")
    plan = TradeReconciler().reconcile([make_trade(status="REVIDERAD")], [stored])

    assert plan.removed == 1


def test_revision_without_match_is_a_no_op():
    stored = make_trade(record_id="a")
    revision = make_trade(status="Reviderad", company_name="Bar Corp", insider_name="Bob")

    plan = TradeReconciler().reconcile([revision], [stored])

    assert not plan.has_changes()


def test_later_records_see_earlier_additions_in_the_same_batch():
    plan = TradeReconciler().reconcile([make_trade(), make_trade()], [])

    assert plan.added == 1


def test_revision_of_trade_added_in_same_batch_keeps_counts_but_nets_out():
    new_trade = make_trade()
    revision = make_trade(status="Reviderad")

    plan = TradeReconciler().reconcile([new_trade, revision], [])

    assert plan.added == 1
    assert plan.removed == 1
    assert plan.to_add == ()
    assert plan.to_remove == ()
    assert not plan.has_changes()


def test_first_stored_match_is_retracted_when_store_holds_duplicates():
    first = make_trade(record_id="a")
    second = make_trade(record_id="b")

    plan = TradeReconciler().reconcile([make_trade(status="Reviderad")], [first, second])

    assert plan.to_remove == (first,)


def test_two_revisions_retract_two_stored_copies():
    first = make_trade(record_id="a")
    second = make_trade(record_id="b")
    revisions = [make_trade(status="Reviderad"), make_trade(status="Reviderad")]

    plan = TradeReconciler().reconcile(revisions, [first, second])

    assert plan.to_remove == (first, second)


def test_caller_sequence_is_not_mutated():
    stored = [make_trade(record_id="a")]
    TradeReconciler().reconcile([make_trade(status="Reviderad"), make_trade(shares=5)], stored)

    assert len(stored) == 1
