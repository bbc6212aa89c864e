from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class PersistentStore(Protocol):
    def load(self, key: str) -> dict[str, Any] | None: ...
    def save(self, key: str, document: dict[str, Any]) -> None: ...
    def delete(self, key: str) -> None: ...


@runtime_checkable
class SnapshotCache(Protocol):
    def get(self) -> Any | None: ...
    def set(self, data: Any) -> None: ...
    def clear(self) -> None: ...


@runtime_checkable
class PageFetcher(Protocol):
    async def fetch_all(self, url: str) -> list[dict[str, Any]]: ...
