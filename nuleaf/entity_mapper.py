from typing import Any

from nuleaf.entities import BaseEntity
from nuleaf.kinds import EntityKind


class EntityMapper[T: BaseEntity]:
    """Converts between store rows, entities and public JSON documents"""

    def __init__(self, kind: EntityKind[T]):
        self.kind = kind
        self.entity_class = kind.entity_class

    def to_entity(self, row: Any) -> T:
        return self.entity_class(**dict(row))

    def to_optional_entity(self, row: Any) -> T | None:
        return None if row is None else self.to_entity(row)

    def to_entities(self, rows: list[Any]) -> list[T]:
        return [self.to_entity(row) for row in rows]

    def to_document(self, entity: T) -> dict[str, Any]:
        """JSON-ready representation without the kind's hidden fields"""
        return entity.model_dump(mode="json", exclude=set(self.kind.hidden))
