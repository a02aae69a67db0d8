"""Pagination and sort resolution against an entity's sortable allow-list"""

from collections.abc import Collection
from dataclasses import dataclass
from typing import Any

from nuleaf.entities import SortOrder
from nuleaf.errors import InvalidArgument
from nuleaf.parsing import parse_count
from nuleaf.query_builder import QueryBuilder

DEFAULT_LIMIT = 100
MAX_LIMIT = 1000

# Appended to every ORDER BY so equal sort keys still page deterministically
TIEBREAK_FIELD = "id"


@dataclass(frozen=True)
class SortSpec:
    field: str
    order: SortOrder = SortOrder.ASC


@dataclass(frozen=True)
class Page:
    skip: int = 0
    limit: int = DEFAULT_LIMIT
    sort: SortSpec | None = None

    def apply(self, builder: QueryBuilder) -> QueryBuilder:
        if self.sort is not None:
            if self.sort.order == SortOrder.DESC:
                builder = builder.order_by_desc(self.sort.field)
            else:
                builder = builder.order_by(self.sort.field)
        if self.sort is None or self.sort.field != TIEBREAK_FIELD:
            builder = builder.order_by(TIEBREAK_FIELD)
        return builder.limit(self.limit).offset(self.skip)


def resolve_skip(skip: Any) -> int:
    """Absent or non-numeric means 0; negative values are rejected"""
    count = parse_count(skip)
    if count is None:
        return 0
    if count < 0:
        raise InvalidArgument("skip cannot be negative")
    return count


def resolve_limit(
    limit: Any, default_limit: int = DEFAULT_LIMIT, max_limit: int = MAX_LIMIT
) -> int:
    """Absent, non-numeric or zero means default_limit.

    The result never exceeds max_limit.
    """
    count = parse_count(limit)
    if count is None or count == 0:
        return min(default_limit, max_limit)
    if count < 0:
        raise InvalidArgument("limit cannot be negative")
    return min(count, max_limit)


def resolve_sort_order(sort: Any) -> SortOrder:
    """Negative numbers sort descending; anything else sorts ascending"""
    direction = parse_count(sort)
    if direction is not None and direction < 0:
        return SortOrder.DESC
    return SortOrder.ASC


def resolve_sort(
    sortable: Collection[str], sort_by: Any, sort: Any, strict: bool = False
) -> SortSpec | None:
    if sort_by is None or sort_by == "":
        return None
    if not isinstance(sort_by, str) or sort_by not in sortable:
        if strict:
            raise InvalidArgument(f"Cannot sort by {sort_by!r}")
        return None
    return SortSpec(sort_by, resolve_sort_order(sort))


def resolve_page(
    sortable: Collection[str],
    skip: Any = None,
    limit: Any = None,
    sort_by: Any = None,
    sort: Any = None,
    *,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int = MAX_LIMIT,
    strict_sort: bool = False,
) -> Page:
    return Page(
        skip=resolve_skip(skip),
        limit=resolve_limit(limit, default_limit, max_limit),
        sort=resolve_sort(sortable, sort_by, sort, strict_sort),
    )
