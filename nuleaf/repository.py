"""Repository class"""

import logging
from collections.abc import Mapping
from typing import Any
from uuid import UUID, uuid4

import pydantic
from pydantic import BaseModel, Field, model_validator

from nuleaf.database_operations import DatabaseOperations
from nuleaf.db_context import Database
from nuleaf.entities import BaseEntity
from nuleaf.entity_mapper import EntityMapper
from nuleaf.errors import NotFound, ValidationError
from nuleaf.filters import compile_filters
from nuleaf.kinds import EntityKind
from nuleaf.pagination import DEFAULT_LIMIT, MAX_LIMIT, Page, resolve_page
from nuleaf.parsing import parse_identifier
from nuleaf.query_builder import QueryBuilder
from nuleaf.sanitizer import sanitize

logger = logging.getLogger(__name__)


class RepositoryConfig(BaseModel):
    """Configuration options for Repository"""

    db_schema: str | None = Field(default=None, description="Database schema name")
    default_limit: int = Field(default=DEFAULT_LIMIT, ge=1)
    max_limit: int = Field(default=MAX_LIMIT, ge=1)
    strict_sort: bool = Field(
        default=False, description="Reject unknown sortBy values instead of ignoring them"
    )

    @model_validator(mode="after")
    def check_limits(self) -> "RepositoryConfig":
        if self.default_limit > self.max_limit:
            raise ValueError("default_limit cannot exceed max_limit")
        return self


def _describe_validation_error(exc: pydantic.ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "body"
        problems.append(f"{location}: {error['msg']}")
    return "; ".join(problems)


class Repository[T: BaseEntity]:
    """Search/create/get/update/delete for one entity kind.

    Search parameters are the loosely typed request values: filter keys from
    the kind's FilterSpec plus skip, limit, sortBy and sort.
    """

    def __init__(
        self,
        database: Database,
        kind: EntityKind[T],
        config: RepositoryConfig | None = None,
    ):
        if database is None:
            raise ValueError("database is required")
        if kind is None:
            raise ValueError("kind is required")

        self.kind = kind
        self.config = config or RepositoryConfig()
        self._qualified_table_name = (
            f"{self.config.db_schema}.{kind.table}"
            if self.config.db_schema
            else kind.table
        )

        self.db_ops = DatabaseOperations(database)
        self.entity_mapper = EntityMapper(kind)

    def query(self) -> QueryBuilder:
        return QueryBuilder(self._qualified_table_name)

    def resolve_page(self, conditions: Mapping[str, Any]) -> Page:
        return resolve_page(
            self.kind.sortable,
            skip=conditions.get("skip"),
            limit=conditions.get("limit"),
            sort_by=conditions.get("sortBy"),
            sort=conditions.get("sort"),
            default_limit=self.config.default_limit,
            max_limit=self.config.max_limit,
            strict_sort=self.config.strict_sort,
        )

    def build_search(self, conditions: Mapping[str, Any] | None = None) -> QueryBuilder:
        """Compile filters and pagination into a SELECT without running it"""
        conditions = conditions or {}
        predicate = compile_filters(self.kind, conditions)
        page = self.resolve_page(conditions)
        return page.apply(predicate.apply(self.query()))

    async def find(self, conditions: Mapping[str, Any] | None = None) -> list[T]:
        """Return one page of matching entities; no match is an empty list"""
        query, params = self.build_search(conditions).build()
        rows = await self.db_ops.fetch_all(query, params)
        return self.entity_mapper.to_entities(rows)

    async def count(self, conditions: Mapping[str, Any] | None = None) -> int:
        """Count matching entities; pagination keys are ignored"""
        predicate = compile_filters(self.kind, conditions)
        query, params = predicate.apply(self.query()).select("COUNT(*)").build()
        result = await self.db_ops.fetch_value(query, params)
        return result or 0

    async def find_by_id(self, entity_id: UUID | str) -> T | None:
        entity_uuid = parse_identifier(entity_id)
        query, params = self.query().where("id", entity_uuid).limit(1).build()
        row = await self.db_ops.fetch_one(query, params)
        return self.entity_mapper.to_optional_entity(row)

    async def get(self, entity_id: UUID | str) -> T:
        """Fetch one entity, raising InvalidIdentifier or NotFound"""
        entity = await self.find_by_id(entity_id)
        if entity is None:
            raise NotFound(f"{self.kind.name} {entity_id} does not exist")
        return entity

    def validate_create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        try:
            payload = self.kind.create_class.model_validate(dict(data))
        except pydantic.ValidationError as exc:
            raise ValidationError(_describe_validation_error(exc)) from exc
        return payload.model_dump()

    def validate_update(self, changes: Mapping[str, Any]) -> dict[str, Any]:
        try:
            payload = self.kind.update_class.model_validate(dict(changes))
        except pydantic.ValidationError as exc:
            raise ValidationError(_describe_validation_error(exc)) from exc
        # Only fields the caller actually sent
        return payload.model_dump(exclude_unset=True)

    async def before_create(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Hook called with validated fields before they are inserted"""
        return fields

    async def before_update(
        self, entity_id: UUID, fields: dict[str, Any]
    ) -> dict[str, Any]:
        """Hook called with validated changes before they are applied"""
        return fields

    async def create(self, data: Mapping[str, Any]) -> T:
        """Validate and insert a new entity, returning it with its generated id"""
        fields = await self.before_create(self.validate_create(data))
        fields = {**fields, "id": uuid4()}

        columns = ", ".join(fields.keys())
        placeholders = ", ".join(f"${i + 1}" for i in range(len(fields)))
        row = await self.db_ops.fetch_one(
            f"INSERT INTO {self._qualified_table_name} ({columns}) "
            f"VALUES ({placeholders}) RETURNING *",
            list(fields.values()),
        )

        entity = self.entity_mapper.to_entity(row)
        logger.info("Created %s %s", self.kind.name, entity.id)
        return entity

    async def update(self, entity_id: UUID | str, changes: Mapping[str, Any]) -> T:
        """Apply a partial update; absent (None) fields are left untouched"""
        entity_uuid = parse_identifier(entity_id)
        fields = self.validate_update(sanitize(changes))
        fields = await self.before_update(entity_uuid, fields)

        if not fields:
            return await self.get(entity_uuid)

        set_clause = ", ".join(f"{k} = ${i + 2}" for i, k in enumerate(fields.keys()))
        row = await self.db_ops.fetch_one(
            f"UPDATE {self._qualified_table_name} SET {set_clause} "
            f"WHERE id = $1 RETURNING *",
            [entity_uuid, *fields.values()],
        )
        if row is None:
            raise NotFound(f"{self.kind.name} {entity_uuid} does not exist")

        logger.info("Updated %s %s (%s)", self.kind.name, entity_uuid, ", ".join(fields))
        return self.entity_mapper.to_entity(row)

    async def delete(self, entity_id: UUID | str) -> bool:
        """Delete by id. Deleting a missing record is not an error; returns
        whether a record was removed."""
        entity_uuid = parse_identifier(entity_id)
        result = await self.db_ops.execute_query(
            f"DELETE FROM {self._qualified_table_name} WHERE id = $1", [entity_uuid]
        )
        deleted = result != "DELETE 0"
        if deleted:
            logger.info("Deleted %s %s", self.kind.name, entity_uuid)
        return deleted
