"""Command-line entrypoint for insider trade syncing."""
from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from insider_sync.application.dto import SyncRequest
from insider_sync.application.queries import TradeQueries
from insider_sync.application.use_cases import (
    IngestionContext,
    IngestTradesUseCase,
    SyncInsiderTradesUseCase,
)
from insider_sync.config import SETTINGS
from insider_sync.domain.errors import FeedError, IngestionCancelled, StoreError
from insider_sync.domain.services import SymbolResolver, TradeReconciler
from insider_sync.infrastructure.feed.fi_client import FiInsynFeed, default_window
from insider_sync.infrastructure.lookup.openfigi import OpenFigiTickerLookup
from insider_sync.infrastructure.parsing.insyn import normalize_rows, parse_insyn_csv
from insider_sync.infrastructure.storage.trade_store import JsonTradeStore
from insider_sync.presentation.trade_report import render_csv, trades_to_dataframe

logger = logging.getLogger("insider_sync")


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sync Finansinspektionen insider trades into the local trade store")
    parser.add_argument("--store", type=str, help="Path to the trade store JSON file")
    sub = parser.add_subparsers(dest="command", required=True)

    sync = sub.add_parser("sync", help="Fetch trades published in a date window and ingest them")
    sync.add_argument("--from", dest="from_date", type=date.fromisoformat, help="First publishing date (YYYY-MM-DD)")
    sync.add_argument("--to", dest="to_date", type=date.fromisoformat, help="Last publishing date (YYYY-MM-DD)")

    ingest = sub.add_parser("ingest", help="Ingest a downloaded Insyn CSV export")
    ingest.add_argument("path", type=str, help="Path to the CSV file")

    listing = sub.add_parser("list", help="Print stored trades")
    listing.add_argument("--limit", type=int, default=20, help="Rows to print (0 for all)")
    listing.add_argument("--top", action="store_true", help="Largest trades published yesterday or today")
    listing.add_argument("--csv", type=str, default=None, help="Also write the listed trades to a CSV path")
    return parser.parse_args(argv)


def build_ingestion(store: JsonTradeStore) -> IngestTradesUseCase:
    context = IngestionContext(
        store=store,
        resolver=SymbolResolver(OpenFigiTickerLookup()),
        reconciler=TradeReconciler(),
    )
    return IngestTradesUseCase(context)


def _run_sync(args: argparse.Namespace, store: JsonTradeStore) -> int:
    default_from, default_to = default_window()
    from_date = args.from_date or default_from
    to_date = args.to_date or default_to

    use_case = SyncInsiderTradesUseCase(FiInsynFeed(), build_ingestion(store))
    response = use_case.execute(SyncRequest(from_date=from_date, to_date=to_date))
    print(f"Fetched {response.fetched_rows} rows ({response.excluded_rows} excluded, {response.invalid_rows} invalid).")
    print(response.outcome.message)
    print(f"Resolved symbols for {response.outcome.resolved_symbols} trades.")
    return 0


def _run_ingest(args: argparse.Namespace, store: JsonTradeStore) -> int:
    rows = parse_insyn_csv(Path(args.path))
    normalized = normalize_rows(rows)
    outcome = build_ingestion(store).execute(list(normalized.trades))
    print(f"Read {len(rows)} rows ({normalized.excluded} excluded, {normalized.invalid} invalid).")
    print(outcome.message)
    print(f"Resolved symbols for {outcome.resolved_symbols} trades.")
    return 0


def _run_list(args: argparse.Namespace, store: JsonTradeStore) -> int:
    queries = TradeQueries(store)
    if args.top:
        trades = queries.top_by_value(date.today(), limit=args.limit or 10)
    else:
        trades = queries.latest(limit=args.limit or None)

    if not trades:
        print("No trades stored.")
    else:
        print(trades_to_dataframe(trades).to_string(index=False))

    if args.csv:
        Path(args.csv).write_bytes(render_csv(trades))
        print(f"\nWrote {args.csv}.")
    return 0


COMMANDS = {
    "sync": _run_sync,
    "ingest": _run_ingest,
    "list": _run_list,
}


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    logging.basicConfig(
        level=SETTINGS.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    store = JsonTradeStore(Path(args.store) if args.store else None)

    try:
        return COMMANDS[args.command](args, store)
    except (IngestionCancelled, KeyboardInterrupt):
        print("Cancelled; nothing was committed.", file=sys.stderr)
        return 130
    except (FeedError, StoreError, OSError) as exc:
        logger.error("%s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
