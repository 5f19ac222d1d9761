"""Ingestion subpackage.

Fetches charging stations from Open Charge Map, normalizes them and mirrors
them into the station table.
"""

from .client import StationClient, OpenChargeMapClient
from .reconcile import Reconciler, ReconcileResult
from .storage import StationStore

__all__ = ["StationClient", "OpenChargeMapClient", "Reconciler", "ReconcileResult", "StationStore"]
