"""Descriptors of the five entity kinds: storage table, models and allow-lists"""

from dataclasses import dataclass, field

from pydantic import BaseModel

from nuleaf.entities import (
    BaseEntity,
    Event,
    EventCreate,
    EventUpdate,
    Post,
    PostCreate,
    PostUpdate,
    Seminar,
    SeminarCreate,
    SeminarUpdate,
    Team,
    TeamCreate,
    TeamUpdate,
    User,
    UserCreate,
    UserUpdate,
)
from nuleaf.filters import DateAxis, FilterSpec


@dataclass(frozen=True)
class EntityKind[T: BaseEntity]:
    name: str
    table: str
    entity_class: type[T]
    create_class: type[BaseModel]
    update_class: type[BaseModel]
    filters: FilterSpec
    sortable: frozenset[str]
    # Kept in storage, left out of HTTP responses
    hidden: frozenset[str] = field(default_factory=frozenset)


EVENTS = EntityKind(
    name="events",
    table="events",
    entity_class=Event,
    create_class=EventCreate,
    update_class=EventUpdate,
    filters=FilterSpec(
        text=("title", "location"),
        dates=(DateAxis("date", after="start_date", before="end_date"),),
    ),
    sortable=frozenset({"title", "date", "location"}),
)

POSTS = EntityKind(
    name="posts",
    table="posts",
    entity_class=Post,
    create_class=PostCreate,
    update_class=PostUpdate,
    filters=FilterSpec(
        text=("title", "content"),
        references=("author",),
        dates=(
            DateAxis("date_created", after="created_after", before="created_before"),
            DateAxis(
                "date_published", after="published_after", before="published_before"
            ),
            DateAxis("date_modified", after="modified_after", before="modified_before"),
        ),
    ),
    sortable=frozenset(
        {"title", "author", "date_created", "date_published", "date_modified"}
    ),
)

SEMINARS = EntityKind(
    name="seminars",
    table="seminars",
    entity_class=Seminar,
    create_class=SeminarCreate,
    update_class=SeminarUpdate,
    filters=FilterSpec(
        text=("title", "location", "host"),
        dates=(DateAxis("date", after="start_date", before="end_date"),),
    ),
    sortable=frozenset({"title", "date", "location", "host"}),
)

TEAMS = EntityKind(
    name="teams",
    table="teams",
    entity_class=Team,
    create_class=TeamCreate,
    update_class=TeamUpdate,
    filters=FilterSpec(text=("name",)),
    sortable=frozenset({"name"}),
)

USERS = EntityKind(
    name="users",
    table="users",
    entity_class=User,
    create_class=UserCreate,
    update_class=UserUpdate,
    filters=FilterSpec(
        text=("username", "email", "firstname", "lastname", "team_name"),
        boolean=("is_active",),
        references=("team_id",),
        active_field="is_active",
    ),
    sortable=frozenset(
        {"username", "email", "firstname", "lastname", "is_active", "team_name"}
    ),
    hidden=frozenset({"password"}),
)

KINDS: dict[str, EntityKind] = {
    kind.name: kind for kind in (EVENTS, POSTS, SEMINARS, TEAMS, USERS)
}
