# mediashelf/database/repos/_mapping.py
from __future__ import annotations

from typing import Iterable, Optional

from mediashelf.database.models.media import Media as DBMedia
from mediashelf.database.models.taxonomy import Tag as DBTag
from mediashelf.database.models.todo import Todo as DBTodo
from mediashelf.domain.entities.media import Media as DomainMedia
from mediashelf.domain.entities.tag import Tag as DomainTag
from mediashelf.domain.entities.todo import Todo as DomainTodo, as_utc


def to_domain_tag(row: DBTag) -> DomainTag:
    return DomainTag(
        id=row.id,
        name=row.name,
        applies_to=row.applies_to,
        date_created=as_utc(row.date_created),
        last_updated=as_utc(row.last_updated),
    )


def to_domain_media(
    row: DBMedia,
    tags: Iterable[DBTag] = (),
    display_url: Optional[str] = None,
) -> DomainMedia:
    return DomainMedia(
        id=row.id,
        kind=row.kind,
        title=row.title,
        description=row.description,
        storage_key=row.storage_key,
        external_url=row.external_url,
        display_url=display_url,
        tags=[to_domain_tag(t) for t in tags],
        date_created=as_utc(row.date_created),
        last_updated=as_utc(row.last_updated),
    )


def to_domain_todo(row: DBTodo) -> DomainTodo:
    return DomainTodo(
        id=row.id,
        title=row.title,
        description=row.description,
        start_date=as_utc(row.start_date),
        end_date=as_utc(row.end_date),
        due_date=as_utc(row.due_date),
        completed=row.completed,
        date_created=as_utc(row.date_created),
        last_updated=as_utc(row.last_updated),
    )


def apply_media_to_orm(orm: DBMedia, dom: DomainMedia) -> None:
    # whole-record replace; display_url and tags are not columns
    orm.kind = dom.kind
    orm.title = dom.title
    orm.description = dom.description
    orm.storage_key = dom.storage_key
    orm.external_url = dom.external_url


def apply_tag_to_orm(orm: DBTag, dom: DomainTag) -> None:
    orm.name = dom.name
    orm.applies_to = dom.applies_to


def apply_todo_to_orm(orm: DBTodo, dom: DomainTodo) -> None:
    orm.title = dom.title
    orm.description = dom.description
    orm.start_date = as_utc(dom.start_date)
    orm.end_date = as_utc(dom.end_date)
    orm.due_date = as_utc(dom.due_date)
    orm.completed = bool(dom.completed)
