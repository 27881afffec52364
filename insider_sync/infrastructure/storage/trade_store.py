"""JSON file storage for reconciled insider trades."""
from __future__ import annotations

import json
import logging
import os
import threading
import uuid
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Iterable, Sequence

from insider_sync.config import SETTINGS
from insider_sync.domain.errors import StoreCommitError, StoreError
from insider_sync.domain.models import TradeRecord

logger = logging.getLogger(__name__)


def _format_ts(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_ts(value: Any) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(str(value))


def trade_to_payload(record: TradeRecord) -> dict[str, Any]:
    return {
        "id": record.record_id,
        "company_name": record.company_name,
        "insider_name": record.insider_name,
        "position": record.position,
        "transaction_type": record.transaction_type,
        "shares": record.shares,
        "price": str(record.price),
        "currency": record.currency,
        "status": record.status,
        "isin": record.isin,
        "symbol": record.symbol,
        "publishing_date": _format_ts(record.publishing_date),
        "transaction_date": _format_ts(record.transaction_date),
    }


def trade_from_payload(item: dict[str, Any]) -> TradeRecord:
    return TradeRecord(
        company_name=item["company_name"],
        insider_name=item["insider_name"],
        position=item.get("position") or "",
        transaction_type=item.get("transaction_type") or "",
        shares=int(item["shares"]),
        price=Decimal(str(item["price"])),
        publishing_date=_parse_ts(item["publishing_date"]),
        currency=item.get("currency") or "",
        transaction_date=_parse_ts(item.get("transaction_date")),
        status=item.get("status") or "",
        isin=item.get("isin") or None,
        symbol=item.get("symbol") or None,
        record_id=item.get("id"),
    )


class JsonTradeStore:
    """Keeps all trades in one JSON document replaced atomically on commit."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = Path(path or SETTINGS.store_path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> list[TradeRecord]:
        if not self._path.exists():
            return []
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return [trade_from_payload(item) for item in data.get("trades", [])]
        except (OSError, AttributeError, KeyError, TypeError, ValueError, InvalidOperation) as exc:
            raise StoreError(f"Trade store {self._path} is unreadable: {exc}") from exc

    def list_trades(self) -> Sequence[TradeRecord]:
        return self._load()

    def list_by_publishing_dates(self, dates: Iterable[date]) -> Sequence[TradeRecord]:
        wanted = set(dates)
        if not wanted:
            return []
        return [record for record in self._load() if record.publishing_date.date() in wanted]

    def commit(self, to_add: Sequence[TradeRecord], to_remove: Sequence[TradeRecord]) -> None:
        with self._lock:
            current = self._load()
            stored_ids = {record.record_id for record in current}

            remove_ids: set[str] = set()
            for record in to_remove:
                if not record.record_id or record.record_id not in stored_ids:
                    raise StoreCommitError(
                        f"Trade {record.company_name}/{record.insider_name} on {record.publishing_date} is not stored"
                    )
                remove_ids.add(record.record_id)

            pending = [(record, uuid.uuid4().hex) for record in to_add]
            kept = [record for record in current if record.record_id not in remove_ids]
            payload = [trade_to_payload(record) for record in kept]
            for record, record_id in pending:
                item = trade_to_payload(record)
                item["id"] = record_id
                payload.append(item)

            self._write({"trades": payload})

            for record, record_id in pending:
                record.record_id = record_id

        logger.info("Committed %d additions and %d removals to %s", len(to_add), len(remove_ids), self._path)

    def _write(self, document: dict[str, Any]) -> None:
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise StoreCommitError(f"Could not write trade store {self._path}: {exc}") from exc
