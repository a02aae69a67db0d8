"""Entity models and their create/update payload models"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any, ClassVar, get_args
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, ValidationInfo, field_validator
from pydantic.config import ConfigDict
from pydantic.fields import FieldInfo

from nuleaf.errors import InvalidArgument
from nuleaf.parsing import parse_datetime


class BaseEntity(BaseModel):
    """Base entity class for all stored records."""

    model_config: ClassVar[ConfigDict] = ConfigDict(
        use_enum_values=True, extra="ignore"
    )
    id: UUID = Field(default_factory=uuid4)


def _is_datetime_field(field_info: FieldInfo) -> bool:
    annotation = field_info.annotation
    return annotation is datetime or datetime in get_args(annotation)


class Payload(BaseModel):
    """Base for create/update payloads; unknown keys are dropped"""

    model_config: ClassVar[ConfigDict] = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def parse_date_text(cls, value: Any, info: ValidationInfo) -> Any:
        """Date strings accept the same formats as the search filters"""
        field_info = cls.model_fields[info.field_name]
        if isinstance(value, str) and _is_datetime_field(field_info):
            try:
                return parse_datetime(info.field_name, value)
            except InvalidArgument as exc:
                raise ValueError(exc.message) from exc
        return value

    @field_validator("*", mode="after")
    @classmethod
    def assume_utc(cls, value: Any) -> Any:
        """Naive timestamps are stored as UTC"""
        if isinstance(value, datetime) and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


# Events
class Event(BaseEntity):
    title: str
    date: datetime | None = None
    location: str | None = None


class EventCreate(Payload):
    title: str = Field(min_length=1, max_length=128)
    date: datetime | None = None
    location: str | None = Field(default=None, max_length=128)


class EventUpdate(Payload):
    title: str | None = Field(default=None, min_length=1, max_length=128)
    date: datetime | None = None
    location: str | None = Field(default=None, max_length=128)


# Posts
class Post(BaseEntity):
    title: str
    content: str
    author: UUID | None = None
    date_created: datetime | None = None
    date_published: datetime | None = None
    date_modified: datetime | None = None


class PostCreate(Payload):
    title: str = Field(min_length=1, max_length=128)
    content: str = Field(min_length=1)
    author: UUID | None = None
    date_created: datetime | None = None
    date_published: datetime | None = None
    date_modified: datetime | None = None


class PostUpdate(Payload):
    title: str | None = Field(default=None, min_length=1, max_length=128)
    content: str | None = Field(default=None, min_length=1)
    author: UUID | None = None
    date_created: datetime | None = None
    date_published: datetime | None = None
    date_modified: datetime | None = None


# Seminars
class Seminar(BaseEntity):
    title: str
    date: datetime | None = None
    location: str | None = None
    host: str | None = None
    image_file: str | None = None
    description: str | None = None


class SeminarCreate(Payload):
    title: str = Field(min_length=1, max_length=128)
    date: datetime | None = None
    location: str | None = Field(default=None, max_length=128)
    host: str | None = Field(default=None, max_length=128)
    image_file: str | None = Field(default=None, max_length=256)
    description: str | None = None


class SeminarUpdate(Payload):
    title: str | None = Field(default=None, min_length=1, max_length=128)
    date: datetime | None = None
    location: str | None = Field(default=None, max_length=128)
    host: str | None = Field(default=None, max_length=128)
    image_file: str | None = Field(default=None, max_length=256)
    description: str | None = None


# Teams
class Team(BaseEntity):
    name: str


class TeamCreate(Payload):
    name: str = Field(min_length=1, max_length=128)


class TeamUpdate(Payload):
    name: str | None = Field(default=None, min_length=1, max_length=128)


# Users
class User(BaseEntity):
    username: str
    email: str
    password: str
    firstname: str | None = None
    lastname: str | None = None
    image1: str = ""
    image2: str = ""
    is_active: bool = True
    team_id: UUID | None = None
    team_name: str | None = None
    description: str = ""


class UserCreate(Payload):
    """team_name is derived from team_id and never accepted from the caller"""

    username: str = Field(min_length=1, max_length=128)
    email: str = Field(min_length=1, max_length=128)
    password: str = Field(min_length=1, max_length=128)
    firstname: str | None = Field(default=None, max_length=64)
    lastname: str | None = Field(default=None, max_length=64)
    image1: str = Field(default="", max_length=256)
    image2: str = Field(default="", max_length=256)
    is_active: bool = True
    # Resolved against the teams table, so malformed ids surface as DependencyMissing
    team_id: UUID | str | None = None
    description: str = Field(default="", max_length=1000)


class UserUpdate(Payload):
    username: str | None = Field(default=None, min_length=1, max_length=128)
    email: str | None = Field(default=None, min_length=1, max_length=128)
    password: str | None = Field(default=None, min_length=1, max_length=128)
    firstname: str | None = Field(default=None, max_length=64)
    lastname: str | None = Field(default=None, max_length=64)
    image1: str | None = Field(default=None, max_length=256)
    image2: str | None = Field(default=None, max_length=256)
    is_active: bool | None = None
    team_id: UUID | str | None = None
    description: str | None = Field(default=None, max_length=1000)
