"""HTTP surface for ChargerSync: town lookup and sync trigger endpoints."""
