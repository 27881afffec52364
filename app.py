"""Streamlit front-end for the insider trade sync pipeline."""
from __future__ import annotations

from datetime import date

import streamlit as st

from insider_sync import (
    IngestionContext,
    IngestTradesUseCase,
    JsonTradeStore,
    OpenFigiTickerLookup,
    SymbolResolver,
    SyncInsiderTradesUseCase,
    TradeReconciler,
)
from insider_sync.application.dto import SyncRequest
from insider_sync.application.queries import TradeQueries
from insider_sync.domain.errors import FeedError, StoreError
from insider_sync.infrastructure.feed.fi_client import FiInsynFeed, default_window
from insider_sync.infrastructure.parsing.insyn import normalize_rows, parse_insyn_csv
from insider_sync.presentation.trade_report import render_csv, render_html, render_xlsx, trades_to_dataframe


st.set_page_config(page_title="Insider Trades", layout="wide")
st.title("Insider Trade Sync")

store = JsonTradeStore()


def build_ingestion() -> IngestTradesUseCase:
    context = IngestionContext(
        store=store,
        resolver=SymbolResolver(OpenFigiTickerLookup()),
        reconciler=TradeReconciler(),
    )
    return IngestTradesUseCase(context)


if "last_message" not in st.session_state:
    st.session_state["last_message"] = None


col1, col2 = st.columns(2)
with col1:
    st.subheader("Fetch from Finansinspektionen")
    default_from, default_to = default_window()
    from_date = st.date_input("Published from", value=default_from)
    to_date = st.date_input("Published to", value=default_to)
    fetch_btn = st.button("Fetch and ingest", key="fetch_btn")
with col2:
    st.subheader("Upload an Insyn export")
    csv_file = st.file_uploader("Upload CSV", type=["csv"])
    upload_btn = st.button("Ingest upload", disabled=not csv_file, key="upload_btn")

if fetch_btn:
    with st.spinner("Fetching and reconciling..."):
        try:
            response = SyncInsiderTradesUseCase(FiInsynFeed(), build_ingestion()).execute(
                SyncRequest(from_date=from_date, to_date=to_date)
            )
            st.session_state["last_message"] = (
                f"{response.outcome.message} "
                f"({response.fetched_rows} rows fetched, {response.excluded_rows} excluded, "
                f"{response.outcome.resolved_symbols} symbols resolved)"
            )
        except (FeedError, StoreError) as exc:
            st.error(str(exc))

if upload_btn and csv_file:
    with st.spinner("Reconciling..."):
        try:
            normalized = normalize_rows(parse_insyn_csv(csv_file.read()))
            outcome = build_ingestion().execute(list(normalized.trades))
            st.session_state["last_message"] = f"{outcome.message} ({outcome.resolved_symbols} symbols resolved)"
        except StoreError as exc:
            st.error(str(exc))

if st.session_state["last_message"]:
    st.success(st.session_state["last_message"])

queries = TradeQueries(store)
try:
    latest = queries.latest()
    top = queries.top_by_value(date.today())
except StoreError as exc:
    st.error(str(exc))
    latest, top = [], []

st.metric("Stored trades", len(latest))
tabs = st.tabs(["Latest", "Top today"])
with tabs[0]:
    st.dataframe(trades_to_dataframe(latest), use_container_width=True)
    st.download_button(
        "Download CSV",
        data=render_csv(latest),
        file_name="insider_trades.csv",
        mime="text/csv",
    )
    st.download_button(
        "Download Excel",
        data=render_xlsx(latest),
        file_name="insider_trades.xlsx",
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
    st.download_button(
        "Download HTML",
        data=render_html(latest),
        file_name="insider_trades.html",
        mime="text/html",
    )
with tabs[1]:
    st.dataframe(trades_to_dataframe(top), use_container_width=True)
