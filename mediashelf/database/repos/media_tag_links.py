# mediashelf/database/repos/media_tag_links.py
from __future__ import annotations

from typing import List
from uuid import UUID

from sqlalchemy import and_, delete, func, insert, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from mediashelf.common.logging import get_logger
from mediashelf.database.models.taxonomy import MediaTag
from mediashelf.domain.entities.links.media_tag_link import MediaTagLink

logger = get_logger(__name__)


class MediaTagLinker:
    """
    Idempotent Media <-> Tag link edits.

    Runs inside the caller's transaction: nothing here begins, commits or
    retries. Uniqueness is guaranteed by the (media_id, tag_id) primary key;
    the existence check below only short-circuits the common repeat call.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def _pair(self, media_id: UUID, tag_id: UUID):
        return and_(MediaTag.media_id == media_id, MediaTag.tag_id == tag_id)

    def exists(self, media_id: UUID, tag_id: UUID) -> bool:
        stmt = select(MediaTag.media_id).where(self._pair(media_id, tag_id)).limit(1)
        return self.db.execute(stmt).first() is not None

    def _insert_ignoring_conflict(self, media_id: UUID, tag_id: UUID):
        values = {"media_id": media_id, "tag_id": tag_id}
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return pg_insert(MediaTag).values(**values).on_conflict_do_nothing(
                index_elements=[MediaTag.media_id, MediaTag.tag_id]
            )
        if dialect == "sqlite":
            return sqlite_insert(MediaTag).values(**values).on_conflict_do_nothing(
                index_elements=[MediaTag.media_id, MediaTag.tag_id]
            )
        # other backends: a lost race surfaces as IntegrityError from the PK
        return insert(MediaTag).values(**values)

    def link(self, media_id: UUID, tag_id: UUID) -> bool:
        """Create the link if absent. Returns True when a row was written."""
        if self.exists(media_id, tag_id):
            logger.debug("link media=%s tag=%s already present", media_id, tag_id)
            return False
        result = self.db.execute(self._insert_ignoring_conflict(media_id, tag_id))
        inserted = (result.rowcount or 0) > 0
        if not inserted:
            logger.debug("link media=%s tag=%s lost insert race; row already present", media_id, tag_id)
        return inserted

    def unlink(self, media_id: UUID, tag_id: UUID) -> bool:
        """Delete the link if present. Absence is not an error."""
        result = self.db.execute(delete(MediaTag).where(self._pair(media_id, tag_id)))
        return (result.rowcount or 0) > 0

    def unlink_all_for_media(self, media_id: UUID) -> int:
        result = self.db.execute(delete(MediaTag).where(MediaTag.media_id == media_id))
        return result.rowcount or 0

    def unlink_all_for_tag(self, tag_id: UUID) -> int:
        result = self.db.execute(delete(MediaTag).where(MediaTag.tag_id == tag_id))
        return result.rowcount or 0

    def links_for_media(self, media_id: UUID) -> List[MediaTagLink]:
        stmt = select(MediaTag.media_id, MediaTag.tag_id).where(MediaTag.media_id == media_id)
        return [MediaTagLink(media_id=m, tag_id=t) for (m, t) in self.db.execute(stmt).all()]

    def count_for_tag(self, tag_id: UUID) -> int:
        stmt = select(func.count()).select_from(MediaTag).where(MediaTag.tag_id == tag_id)
        return int(self.db.execute(stmt).scalar_one())
