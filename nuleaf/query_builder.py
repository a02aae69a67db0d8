"""
Immutable SELECT builder for a single collection table.
Every method returns a new builder, so partially built queries can be shared.
"""

from typing import Any

LIKE_ESCAPE = "\\"


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so the text is matched literally"""
    return (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class QueryBuilder:
    """
    Query builder for SELECT statements with positional ($n) parameters.

    Usage:
        builder = QueryBuilder("events")
        query, params = builder.where_contains("title", "launch").limit(10).build()
    """

    def __init__(self, table_name: str):
        self.table_name = table_name
        self.select_fields = "*"
        self.where_conditions: list[str] = []
        self.params: list[Any] = []
        self.order_by_parts: list[str] = []
        self.limit_count: int | None = None
        self.offset_count: int | None = None

    def _clone(self) -> "QueryBuilder":
        new_builder = QueryBuilder(self.table_name)
        new_builder.select_fields = self.select_fields
        new_builder.where_conditions = self.where_conditions.copy()
        new_builder.params = self.params.copy()
        new_builder.order_by_parts = self.order_by_parts.copy()
        new_builder.limit_count = self.limit_count
        new_builder.offset_count = self.offset_count
        return new_builder

    def _add_condition(self, field: str, value: Any, operator: str) -> "QueryBuilder":
        new_builder = self._clone()

        if value is None and operator == "=":
            condition = f"{field} IS NULL"
        elif value is None and operator in ("!=", "<>"):
            condition = f"{field} IS NOT NULL"
        else:
            new_builder.params.append(value)
            condition = f"{field} {operator} ${len(new_builder.params)}"

        new_builder.where_conditions.append(condition)
        return new_builder

    def select(self, *fields: str) -> "QueryBuilder":
        """Set the SELECT list; no fields means *"""
        new_builder = self._clone()
        new_builder.select_fields = ", ".join(fields) if fields else "*"
        return new_builder

    def where(self, field: str, *args: Any) -> "QueryBuilder":
        """Add an AND condition.

        Supports both call styles:
        - where(field, value) -> operator defaults to '='
        - where(field, operator, value)
        """
        if len(args) == 2:
            operator, value = args
            return self._add_condition(field, value, operator)
        if len(args) == 1:
            return self._add_condition(field, args[0], "=")
        raise TypeError("where() expects (field, value) or (field, operator, value)")

    def where_contains(self, field: str, text: str) -> "QueryBuilder":
        """Case-insensitive substring match"""
        return self._add_condition(field, f"%{escape_like(text)}%", "ILIKE")

    def order_by(self, field: str) -> "QueryBuilder":
        """Add ORDER BY ascending for a field. Chain to add multiple fields."""
        new_builder = self._clone()
        new_builder.order_by_parts.append(field)
        return new_builder

    def order_by_desc(self, field: str) -> "QueryBuilder":
        """Add ORDER BY ... DESC for a field. Chain to add multiple fields."""
        new_builder = self._clone()
        new_builder.order_by_parts.append(f"{field} DESC")
        return new_builder

    def limit(self, count: int) -> "QueryBuilder":
        new_builder = self._clone()
        new_builder.limit_count = count
        return new_builder

    def offset(self, count: int) -> "QueryBuilder":
        new_builder = self._clone()
        new_builder.offset_count = count
        return new_builder

    def build(self) -> tuple[str, list[Any]]:
        """Build the final SQL query and parameters"""
        query_parts = [f"SELECT {self.select_fields} FROM {self.table_name}"]

        if self.where_conditions:
            query_parts.append(f"WHERE {' AND '.join(self.where_conditions)}")

        if self.order_by_parts:
            query_parts.append(f"ORDER BY {', '.join(self.order_by_parts)}")

        if self.limit_count is not None:
            query_parts.append(f"LIMIT {self.limit_count}")

        if self.offset_count is not None:
            query_parts.append(f"OFFSET {self.offset_count}")

        return " ".join(query_parts), self.params

    def to_sql(self) -> str:
        query, _ = self.build()
        return query

    def __str__(self) -> str:
        query, params = self.build()
        return f"Query: {query}\nParams: {params}"
