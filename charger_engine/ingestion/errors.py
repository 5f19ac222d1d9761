from __future__ import annotations


class ChargerSyncError(Exception):
    """Base class for every error raised by the sync and lookup paths."""


class ClientInputError(ChargerSyncError):
    """A required request parameter was missing or blank."""


class SyncInProgressError(ChargerSyncError):
    """Another reconciliation run already holds the run lock."""


class UpstreamFetchError(ChargerSyncError):
    """The upstream station API was unreachable or returned unusable data."""


class MalformedStationError(UpstreamFetchError):
    """A single upstream station record is missing its identifier."""


class StoreError(ChargerSyncError):
    """Base class for station store failures."""


class StoreReadError(StoreError):
    """A query or key scan against the station table failed."""


class StoreWriteError(StoreError):
    """A batch put or batch delete against the station table failed."""
