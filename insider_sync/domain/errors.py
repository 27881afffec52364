"""Errors surfaced by the ingestion pipeline."""
from __future__ import annotations


class InsiderSyncError(Exception):
    """Base class for errors raised to callers of the ingestion pipeline."""


class FeedError(InsiderSyncError):
    """The disclosure feed could not be fetched or decoded."""


class StoreError(InsiderSyncError):
    """The trade store could not be read."""


class StoreCommitError(StoreError):
    """A commit to the trade store failed; nothing was written."""


class IngestionCancelled(InsiderSyncError):
    """The run was cancelled before anything was committed."""
