"""
Filter compiler: turns loosely typed search parameters into a predicate
that can be applied to a QueryBuilder.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from nuleaf.errors import InvalidArgument
from nuleaf.parsing import (
    is_present,
    parse_bool,
    parse_datetime,
    parse_reference,
    parse_text,
)
from nuleaf.query_builder import QueryBuilder

if TYPE_CHECKING:
    from nuleaf.kinds import EntityKind

CONTAINS = "contains"

ACTIVE_FLAG = "active"
INACTIVE_FLAG = "inactive"


@dataclass(frozen=True)
class DateAxis:
    """A timestamp field searchable by exact value or by an inclusive range"""

    field: str
    after: str
    before: str


@dataclass(frozen=True)
class FilterSpec:
    """Allow-list of the filterable fields of an entity kind"""

    text: tuple[str, ...] = ()
    boolean: tuple[str, ...] = ()
    references: tuple[str, ...] = ()
    dates: tuple[DateAxis, ...] = ()
    # Maps the 'active'/'inactive' request flags onto this boolean field
    active_field: str | None = None


@dataclass(frozen=True)
class Condition:
    field: str
    operator: str
    value: Any


@dataclass(frozen=True)
class Predicate:
    """Conjunction of conditions; no conditions matches every record"""

    conditions: tuple[Condition, ...] = field(default_factory=tuple)

    @property
    def matches_all(self) -> bool:
        return not self.conditions

    def apply(self, builder: QueryBuilder) -> QueryBuilder:
        for condition in self.conditions:
            if condition.operator == CONTAINS:
                builder = builder.where_contains(condition.field, condition.value)
            else:
                builder = builder.where(
                    condition.field, condition.operator, condition.value
                )
        return builder


def compile_filters(
    kind: "EntityKind", conditions: Mapping[str, Any] | None = None
) -> Predicate:
    """Compile search parameters for the given entity kind into a Predicate.

    Unknown keys are ignored. Present values of the wrong type raise
    InvalidArgument.
    """
    if not conditions:
        return Predicate()

    spec = kind.filters
    compiled: list[Condition] = []

    for name in spec.text:
        value = conditions.get(name)
        if is_present(value):
            compiled.append(Condition(name, CONTAINS, parse_text(name, value)))

    for name in spec.references:
        value = conditions.get(name)
        if is_present(value):
            compiled.append(Condition(name, "=", parse_reference(name, value)))

    for name in spec.boolean:
        value = conditions.get(name)
        if is_present(value):
            compiled.append(Condition(name, "=", parse_bool(name, value)))

    if spec.active_field is not None:
        active = _resolve_active_flags(spec.active_field, conditions)
        if active is not None:
            compiled.append(Condition(spec.active_field, "=", active))

    for axis in spec.dates:
        compiled.extend(_compile_date_axis(axis, conditions))

    return Predicate(tuple(compiled))


def _resolve_active_flags(field_name: str, conditions: Mapping[str, Any]) -> bool | None:
    """The flags are matched by key presence, so '?active' alone is enough"""
    has_active = ACTIVE_FLAG in conditions
    has_inactive = INACTIVE_FLAG in conditions
    if not has_active and not has_inactive:
        return None
    if has_active and has_inactive:
        raise InvalidArgument("active and inactive cannot be combined")
    if is_present(conditions.get(field_name)):
        raise InvalidArgument(
            f"{field_name} cannot be combined with the active/inactive flags"
        )
    return has_active


def _compile_date_axis(axis: DateAxis, conditions: Mapping[str, Any]) -> list[Condition]:
    exact = conditions.get(axis.field)
    if is_present(exact):
        return [Condition(axis.field, "=", parse_datetime(axis.field, exact))]

    compiled = []
    after = conditions.get(axis.after)
    if is_present(after):
        compiled.append(Condition(axis.field, ">=", parse_datetime(axis.after, after)))
    before = conditions.get(axis.before)
    if is_present(before):
        compiled.append(
            Condition(axis.field, "<=", parse_datetime(axis.before, before))
        )
    return compiled
