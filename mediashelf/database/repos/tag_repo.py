# mediashelf/database/repos/tag_repo.py
from __future__ import annotations

from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from mediashelf.common.logging import get_logger
from mediashelf.database.core.transaction import transactional
from mediashelf.database.models.taxonomy import Tag as DBTag
from mediashelf.database.repos._mapping import apply_tag_to_orm, to_domain_tag
from mediashelf.database.repos.media_tag_links import MediaTagLinker
from mediashelf.database.repos.predicates import Listing, Predicate, contains_ci, listing_statements
from mediashelf.domain.dataclasses.paging import DEFAULT_MAX_PAGE_SIZE, Page, PageWindow, TagFilter
from mediashelf.domain.entities.tag import Tag as DomainTag
from mediashelf.domain.enums.tag_scope import TagScope
from mediashelf.domain.errors import DuplicateError, NotFoundError

logger = get_logger(__name__)

TAG_ORDERING = (DBTag.name.asc(), DBTag.id.asc())


def tag_predicate(flt: Optional[TagFilter]) -> Predicate:
    pred = Predicate("and")
    if flt is None:
        return pred
    pred.add(contains_ci(DBTag.name, flt.name_contains))
    if flt.applies_to is not None:
        pred.add(DBTag.applies_to == flt.applies_to)
    return pred


def tag_listing(flt: Optional[TagFilter], window: Optional[PageWindow] = None) -> Listing:
    return listing_statements(DBTag, tag_predicate(flt), TAG_ORDERING, window)


class SqlAlchemyTagRepo:
    """
    Tag persistence. Names are unique and compared exactly (case-sensitive);
    the pre-check gives a clean DuplicateError and `uq_tag_name` catches races.
    """

    def __init__(self, db: Session, max_page_size: int = DEFAULT_MAX_PAGE_SIZE) -> None:
        self.db = db
        self.max_page_size = max_page_size
        self.links = MediaTagLinker(db)

    def _require_row(self, tag_id: UUID) -> DBTag:
        row = self.db.get(DBTag, tag_id)
        if row is None:
            raise NotFoundError("Tag", tag_id)
        return row

    def _row_by_name(self, name: str) -> Optional[DBTag]:
        stmt = select(DBTag).where(DBTag.name == name).limit(1)
        return self.db.execute(stmt).scalars().first()

    # ---------- reads ----------

    def find_by_id(self, tag_id: UUID) -> DomainTag:
        return to_domain_tag(self._require_row(tag_id))

    def find_by_name(self, name: str) -> Optional[DomainTag]:
        row = self._row_by_name(name)
        return to_domain_tag(row) if row is not None else None

    def find_all(self) -> List[DomainTag]:
        rows = self.db.execute(tag_listing(None).rows).scalars().all()
        return [to_domain_tag(r) for r in rows]

    def find_all_paginated(self, offset: int, limit: int) -> Page[DomainTag]:
        return self.find_all_filtered(offset, limit)

    def find_all_filtered(
        self,
        offset: int,
        limit: int,
        name_contains: Optional[str] = None,
        applies_to: Optional[TagScope] = None,
    ) -> Page[DomainTag]:
        window = PageWindow(offset=offset, limit=limit, max_page_size=self.max_page_size)
        listing = tag_listing(TagFilter(name_contains=name_contains, applies_to=applies_to), window)
        total = int(self.db.execute(listing.count).scalar_one())
        rows = self.db.execute(listing.rows).scalars().all()
        return Page(items=[to_domain_tag(r) for r in rows], total=total, offset=window.offset, limit=window.limit)

    # ---------- writes ----------

    def create(self, tag: DomainTag) -> DomainTag:
        with transactional(self.db):
            if self._row_by_name(tag.name) is not None:
                raise DuplicateError("Tag", "name", tag.name)
            orm = DBTag(id=tag.id or uuid4())
            apply_tag_to_orm(orm, tag)
            self.db.add(orm)
            self.db.flush()
        logger.info("tag created id=%s name=%r", orm.id, orm.name)
        return to_domain_tag(orm)

    def update(self, tag: DomainTag) -> DomainTag:
        """
        Rename and/or rescope. Existing links stay; a narrowed `applies_to`
        is not checked against media already carrying the tag.
        """
        if tag.id is None:
            raise NotFoundError("Tag", None)
        with transactional(self.db):
            orm = self._require_row(tag.id)
            if tag.name != orm.name:
                clash = self._row_by_name(tag.name)
                if clash is not None and clash.id != orm.id:
                    raise DuplicateError("Tag", "name", tag.name)
            apply_tag_to_orm(orm, tag)
            self.db.flush()
        return to_domain_tag(orm)

    def delete(self, tag_id: UUID) -> None:
        with transactional(self.db):
            orm = self._require_row(tag_id)
            removed = self.links.unlink_all_for_tag(tag_id)
            self.db.delete(orm)
            self.db.flush()
        logger.info("tag deleted id=%s links_removed=%d", tag_id, removed)
