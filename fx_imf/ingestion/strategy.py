"""Contracts between feed suppliers and the components that consume feeds."""

from __future__ import annotations

from pathlib import Path
from typing import IO, Protocol

from fx_imf.utils.logger import get_logger

LOGGER = get_logger(__name__)


class FeedListener(Protocol):
    """Anything that can ingest a freshly supplied feed."""

    def on_new_data(self, stream: IO[bytes]) -> None:
        ...  # pragma: no cover - protocol definition


class FeedSupplier(Protocol):
    """Contract for handing raw feed bytes to listeners.

    Suppliers own acquisition and scheduling; listeners only parse.
    """

    def subscribe(self, listener: FeedListener) -> None:
        ...  # pragma: no cover - protocol definition

    def refresh(self) -> int:
        ...  # pragma: no cover - protocol definition


class LocalFeedSupplier:
    """Serve a cached feed file from disk to every subscribed listener."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._listeners: list[FeedListener] = []

    def subscribe(self, listener: FeedListener) -> None:
        """Register ``listener`` and hand it the cached file if one exists."""

        self._listeners.append(listener)
        if self.path.exists():
            self._deliver(listener)
        else:
            LOGGER.info("No cached IMF feed at %s yet", self.path)

    def refresh(self) -> int:
        """Re-deliver the file to all listeners; returns how many were notified."""

        if not self.path.exists():
            raise FileNotFoundError(self.path)
        for listener in self._listeners:
            self._deliver(listener)
        return len(self._listeners)

    def _deliver(self, listener: FeedListener) -> None:
        with self.path.open("rb") as handle:
            listener.on_new_data(handle)


__all__ = ["FeedListener", "FeedSupplier", "LocalFeedSupplier"]
