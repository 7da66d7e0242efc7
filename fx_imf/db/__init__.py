"""In-memory storage for parsed IMF rates."""

from __future__ import annotations

from fx_imf.db.memory_store import RateSnapshot, RateStore

__all__ = ["RateSnapshot", "RateStore"]
