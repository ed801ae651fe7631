from __future__ import annotations
from typing import Protocol

class ObjectStoragePort(Protocol):
    """
    Narrow capability over a binary object store.
    upload/delete raise StorageUnavailableError on failure; resolve is a pure
    string transform with no I/O.
    """
    def upload(self, key: str, data: bytes, content_type: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def resolve(self, key: str) -> str: ...
