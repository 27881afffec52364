"""Insider trade ingestion with reconciliation and ticker enrichment."""
from insider_sync.application.use_cases import (
    IngestionContext,
    IngestTradesUseCase,
    SyncInsiderTradesUseCase,
)
from insider_sync.domain.models import TradeRecord
from insider_sync.domain.services import SymbolResolver, TradeReconciler
from insider_sync.infrastructure.lookup.openfigi import OpenFigiTickerLookup
from insider_sync.infrastructure.storage.trade_store import JsonTradeStore

__all__ = [
    "IngestionContext",
    "IngestTradesUseCase",
    "SyncInsiderTradesUseCase",
    "TradeRecord",
    "SymbolResolver",
    "TradeReconciler",
    "OpenFigiTickerLookup",
    "JsonTradeStore",
]
