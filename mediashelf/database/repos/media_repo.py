# mediashelf/database/repos/media_repo.py
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence
from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from mediashelf.common.logging import get_logger
from mediashelf.database.core.transaction import transactional
from mediashelf.database.models.media import Media as DBMedia
from mediashelf.database.models.taxonomy import Tag as DBTag
from mediashelf.database.repos._mapping import apply_media_to_orm, to_domain_media
from mediashelf.database.repos.media_query import MediaQueryRepo
from mediashelf.database.repos.media_tag_links import MediaTagLinker
from mediashelf.domain.dataclasses.paging import DEFAULT_MAX_PAGE_SIZE, MediaFilter, Page, PageWindow
from mediashelf.domain.entities.media import Media as DomainMedia
from mediashelf.domain.entities.todo import as_utc
from mediashelf.domain.errors import InvalidReferenceError, MediaShelfError, NotFoundError, StorageUnavailableError
from mediashelf.domain.policies.object_keys import kind_for_content_type, object_key_for
from mediashelf.domain.ports.object_storage import ObjectStoragePort

logger = get_logger(__name__)


class SqlAlchemyMediaRepo:
    """
    Media persistence facade.

    Collaborators are injected: the Session (transaction handle), the object
    storage port and the page-size bound. Every read resolves tags from the
    association table at read time and recomputes `display_url` for
    storage-backed media; nothing derived is ever written back.
    """

    def __init__(
        self,
        db: Session,
        storage: ObjectStoragePort,
        max_page_size: int = DEFAULT_MAX_PAGE_SIZE,
    ) -> None:
        self.db = db
        self.storage = storage
        self.max_page_size = max_page_size
        self.query = MediaQueryRepo(db)
        self.links = MediaTagLinker(db)

    # -------------------------------------------------------------------------
    # Enrichment
    # -------------------------------------------------------------------------
    def _display_url(self, row: DBMedia) -> Optional[str]:
        if row.kind.uses_object_storage and row.storage_key:
            return self.storage.resolve(row.storage_key)
        return None

    def _hydrate(self, rows: Sequence[DBMedia]) -> List[DomainMedia]:
        tags_by_media = self.query.batch_tags_for_media(r.id for r in rows)
        return [
            to_domain_media(r, tags_by_media.get(r.id, []), self._display_url(r))
            for r in rows
        ]

    def _window(self, offset: int, limit: int) -> PageWindow:
        return PageWindow(offset=offset, limit=limit, max_page_size=self.max_page_size)

    def _require_row(self, media_id: UUID) -> DBMedia:
        row = self.query.get_row(media_id)
        if row is None:
            raise NotFoundError("Media", media_id)
        return row

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------
    def find_by_id(self, media_id: UUID) -> DomainMedia:
        return self._hydrate([self._require_row(media_id)])[0]

    def find_all(self) -> List[DomainMedia]:
        return self._hydrate(self.query.list_rows())

    def find_all_paginated(self, offset: int, limit: int) -> Page[DomainMedia]:
        return self.find_all_filtered(offset, limit)

    def find_all_filtered(
        self,
        offset: int,
        limit: int,
        title_contains: Optional[str] = None,
        tag_ids: Optional[Iterable[UUID]] = None,
    ) -> Page[DomainMedia]:
        window = self._window(offset, limit)
        flt = MediaFilter.of(title_contains=title_contains, tag_ids=tag_ids)
        rows, total = self.query.page_rows(flt, window)
        return Page(items=self._hydrate(rows), total=total, offset=window.offset, limit=window.limit)

    def find_by_tag(self, tag_id: UUID) -> List[DomainMedia]:
        return self._hydrate(self.query.list_rows(MediaFilter.of(tag_ids=[tag_id])))

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------
    def create(self, media: DomainMedia, tag_ids: Optional[Iterable[UUID]] = None) -> DomainMedia:
        """
        Insert the media row and link every tag in one transaction. Any
        unknown tag id fails the whole call and nothing is persisted.
        `tag_ids` defaults to the ids of `media.tags`.
        """
        wanted = list(dict.fromkeys(tag_ids if tag_ids is not None else media.tag_ids()))

        with transactional(self.db):
            missing = set(wanted) - self.query.existing_tag_ids(wanted)
            if missing:
                raise InvalidReferenceError("Tag", missing)

            orm = DBMedia(id=media.id or uuid4())
            apply_media_to_orm(orm, media)
            if media.date_created is not None:
                orm.date_created = as_utc(media.date_created)
            self.db.add(orm)
            # links reference the row through an FK
            self.db.flush()

            for tag_id in wanted:
                self.links.link(orm.id, tag_id)

        logger.info("media created id=%s kind=%s tags=%d", orm.id, orm.kind, len(wanted))
        return self.find_by_id(orm.id)

    def create_from_upload(
        self,
        data: bytes,
        content_type: str,
        filename: Optional[str],
        title: str,
        description: Optional[str] = None,
        tag_ids: Optional[Iterable[UUID]] = None,
    ) -> DomainMedia:
        """
        Store an image/audio payload in object storage, then catalog it.
        """
        kind = kind_for_content_type(content_type)
        key = object_key_for(kind, filename)
        media = DomainMedia(kind=kind, title=title, description=description, storage_key=key)

        self.storage.upload(key, data, content_type)
        try:
            return self.create(media, tag_ids=tag_ids or [])
        except MediaShelfError:
            logger.warning("catalog insert failed after upload; object key=%s is unreferenced", key)
            raise

    def update(self, media: DomainMedia) -> DomainMedia:
        """
        Whole-record replace. Tag links are left as they are.
        A stored object whose key is dropped by the update is not deleted;
        its key is logged as unreferenced.
        """
        if media.id is None:
            raise NotFoundError("Media", None)
        with transactional(self.db):
            orm = self._require_row(media.id)
            old_key = orm.storage_key if orm.kind.uses_object_storage else None
            apply_media_to_orm(orm, media)
            self.db.flush()
            new_key = orm.storage_key if orm.kind.uses_object_storage else None

        if old_key and old_key != new_key:
            logger.warning("media id=%s updated away from object key=%s; object is unreferenced", media.id, old_key)
        return self.find_by_id(media.id)

    def delete(self, media_id: UUID) -> None:
        """
        Remove links, then the stored object (storage-backed kinds), then the
        row. A storage failure rolls the whole thing back and the row survives.
        """
        with transactional(self.db):
            orm = self._require_row(media_id)
            removed = self.links.unlink_all_for_media(media_id)

            if orm.kind.uses_object_storage and orm.storage_key:
                try:
                    self.storage.delete(orm.storage_key)
                except StorageUnavailableError:
                    logger.warning("storage delete failed for media id=%s key=%s", media_id, orm.storage_key)
                    raise
                except OSError as exc:
                    logger.warning("storage delete failed for media id=%s key=%s", media_id, orm.storage_key)
                    raise StorageUnavailableError("delete", orm.storage_key, str(exc)) from exc

            self.db.delete(orm)
            self.db.flush()

        logger.info("media deleted id=%s links_removed=%d", media_id, removed)

    def associate_tag(self, media_id: UUID, tag_id: UUID) -> bool:
        """
        Link a tag to a medium. Returns False when the link already existed.
        Tag scope (`applies_to`) is not checked against the media kind.
        """
        with transactional(self.db):
            self._require_row(media_id)
            if self.db.get(DBTag, tag_id) is None:
                raise InvalidReferenceError("Tag", [tag_id])
            return self.links.link(media_id, tag_id)

    def remove_tag(self, media_id: UUID, tag_id: UUID) -> bool:
        """Idempotent: removing a link that is not there is a no-op."""
        with transactional(self.db):
            removed = self.links.unlink(media_id, tag_id)
        if not removed:
            logger.debug("remove_tag media=%s tag=%s: no link present", media_id, tag_id)
        return removed
