# mediashelf/services/storage/local_object_storage.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from mediashelf.common.logging import get_logger
from mediashelf.common.path.safe import resolve_root, safe_join
from mediashelf.common.settings import Settings, get_settings
from mediashelf.domain.errors import StorageUnavailableError
from mediashelf.domain.ports.object_storage import ObjectStoragePort

logger = get_logger(__name__)


class LocalObjectStorage(ObjectStoragePort):
    """
    Object storage on the local filesystem. Keys map to paths under `root`;
    public URLs are `<public_base_url>/<key>`.
    """

    def __init__(self, root: Path | str, public_base_url: str) -> None:
        self.root = resolve_root(root)
        self.public_base_url = public_base_url.rstrip("/")

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "LocalObjectStorage":
        cfg = settings or get_settings()
        return cls(cfg.storage.root, cfg.storage.public_base_url)

    def path_for(self, key: str) -> Path:
        return safe_join(self.root, key)

    def upload(self, key: str, data: bytes, content_type: str) -> None:
        dst = self.path_for(key)
        tmp = dst.with_name(dst.name + ".part")
        try:
            dst.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_bytes(data)
            # atomic on the same filesystem; a reader never sees a partial object
            os.replace(tmp, dst)
        except OSError as exc:
            if tmp.exists():
                tmp.unlink()
            raise StorageUnavailableError("upload", key, str(exc)) from exc
        logger.debug("stored object key=%s bytes=%d type=%s", key, len(data), content_type)

    def delete(self, key: str) -> None:
        """Deleting a missing object is a no-op."""
        try:
            self.path_for(key).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageUnavailableError("delete", key, str(exc)) from exc

    def resolve(self, key: str) -> str:
        return f"{self.public_base_url}/{key.lstrip('/')}"

    def exists(self, key: str) -> bool:
        return self.path_for(key).is_file()
