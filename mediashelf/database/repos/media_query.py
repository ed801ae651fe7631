# mediashelf/database/repos/media_query.py
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Set, Tuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from mediashelf.database.models import Media as DBMedia, MediaTag as DBMediaTag, Tag as DBTag
from mediashelf.database.repos.predicates import Listing, Predicate, contains_ci, listing_statements
from mediashelf.domain.dataclasses.paging import MediaFilter, PageWindow

# newest first; id breaks ties so pages stay stable across calls
MEDIA_ORDERING = (DBMedia.date_created.desc(), DBMedia.id.desc())


def tag_membership_clause(tag_ids: Iterable[UUID]) -> Optional[ColumnElement[bool]]:
    """
    Media carrying ANY of the tags. Membership against the distinct media ids
    in the association table, so a medium with two matching tags is still one row.
    """
    ids = list(tag_ids or ())
    if not ids:
        return None
    members = select(DBMediaTag.media_id).where(DBMediaTag.tag_id.in_(ids)).distinct()
    return DBMedia.id.in_(members)


def media_predicate(flt: Optional[MediaFilter]) -> Predicate:
    pred = Predicate("and")
    if flt is None:
        return pred
    return pred.extend([
        contains_ci(DBMedia.title, flt.title_contains),
        tag_membership_clause(flt.tag_ids),
    ])


def media_listing(flt: Optional[MediaFilter], window: Optional[PageWindow] = None) -> Listing:
    return listing_statements(DBMedia, media_predicate(flt), MEDIA_ORDERING, window)


class MediaQueryRepo:
    """
    Read-only queries for Media rows. Returns ORM rows; the facade maps and
    enriches them.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_row(self, media_id: UUID) -> Optional[DBMedia]:
        return self.session.get(DBMedia, media_id)

    def list_rows(self, flt: Optional[MediaFilter] = None) -> List[DBMedia]:
        return list(self.session.execute(media_listing(flt).rows).scalars().all())

    def page_rows(self, flt: Optional[MediaFilter], window: PageWindow) -> Tuple[List[DBMedia], int]:
        listing = media_listing(flt, window)
        total = int(self.session.execute(listing.count).scalar_one())
        rows = list(self.session.execute(listing.rows).scalars().all())
        return rows, total

    def count(self, flt: Optional[MediaFilter] = None) -> int:
        return int(self.session.execute(media_listing(flt).count).scalar_one())

    def batch_tags_for_media(self, media_ids: Iterable[UUID]) -> Dict[UUID, List[DBTag]]:
        """
        Map of media_id -> [Tag], read from the association table as it is now.
        """
        ids = list(media_ids)
        if not ids:
            return {}
        stmt = (
            select(DBMediaTag.media_id, DBTag)
            .join(DBTag, DBTag.id == DBMediaTag.tag_id)
            .where(DBMediaTag.media_id.in_(ids))
            .order_by(DBMediaTag.media_id.asc(), DBTag.name.asc())
        )
        out: Dict[UUID, List[DBTag]] = {}
        for mid, tag in self.session.execute(stmt).all():
            out.setdefault(mid, []).append(tag)
        return out

    def existing_tag_ids(self, tag_ids: Iterable[UUID]) -> Set[UUID]:
        ids = set(tag_ids)
        if not ids:
            return set()
        stmt = select(DBTag.id).where(DBTag.id.in_(ids))
        return set(self.session.execute(stmt).scalars().all())
