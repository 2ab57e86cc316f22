"""Snapshot capture, restore and catalog for the point-of-sale database."""

from .catalog import CatalogStore, SnapshotRecord, SnapshotStatus
from .engine import SnapshotEngine

__all__ = ["CatalogStore", "SnapshotEngine", "SnapshotRecord", "SnapshotStatus"]
