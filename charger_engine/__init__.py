"""Charger engine package for ChargerSync.

Subpackages:
- ingestion: Upstream client, normalization, storage and reconciliation.
- tests: Unit tests for the charger_engine package.
"""

__all__ = [
    "ingestion",
]
