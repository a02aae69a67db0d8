from datetime import UTC, datetime
from uuid import uuid4

import pytest

from nuleaf.errors import InvalidArgument, ValidationError
from nuleaf.filters import CONTAINS, Condition, Predicate, compile_filters
from nuleaf.kinds import EVENTS, KINDS, POSTS, SEMINARS, TEAMS, USERS
from nuleaf.query_builder import QueryBuilder


class TestTextFilters:
    def test_text_value_becomes_contains(self):
        predicate = compile_filters(EVENTS, {"title": "Event"})

        assert predicate.conditions == (Condition("title", CONTAINS, "Event"),)

    def test_empty_text_value_is_ignored(self):
        predicate = compile_filters(TEAMS, {"name": ""})

        assert predicate.matches_all

    def test_non_string_text_value_is_rejected(self):
        with pytest.raises(InvalidArgument, match="location must be a string"):
            compile_filters(EVENTS, {"location": 1})

    def test_invalid_argument_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            compile_filters(SEMINARS, {"host": ["a", "b"]})

    def test_all_user_text_fields(self):
        conditions = {
            "username": "ann",
            "email": "@example",
            "firstname": "An",
            "lastname": "Lee",
            "team_name": "Core",
        }
        predicate = compile_filters(USERS, conditions)

        assert {c.field for c in predicate.conditions} == set(conditions)
        assert all(c.operator == CONTAINS for c in predicate.conditions)

    def test_contains_is_applied_as_ilike(self):
        predicate = compile_filters(EVENTS, {"title": "Event"})
        query, params = predicate.apply(QueryBuilder("events")).build()

        assert query == "SELECT * FROM events WHERE title ILIKE $1"
        assert params == ["%Event%"]


class TestNoFilters:
    @pytest.mark.parametrize("kind", list(KINDS.values()), ids=list(KINDS))
    def test_no_conditions_match_everything(self, kind):
        assert compile_filters(kind, None).matches_all
        assert compile_filters(kind, {}).matches_all

    def test_unknown_and_pagination_keys_are_ignored(self):
        predicate = compile_filters(
            EVENTS, {"colour": "red", "skip": "10", "limit": "5", "sortBy": "title"}
        )

        assert predicate.matches_all
        assert predicate.apply(QueryBuilder("events")).to_sql() == "SELECT * FROM events"


class TestBooleanFilters:
    def test_is_active_only_when_present(self):
        assert compile_filters(USERS, {"username": "a"}).conditions == (
            Condition("username", CONTAINS, "a"),
        )

    @pytest.mark.parametrize(
        "raw, expected",
        [(True, True), (False, False), ("true", True), ("false", False), ("0", False)],
    )
    def test_is_active_values(self, raw, expected):
        predicate = compile_filters(USERS, {"is_active": raw})

        assert predicate.conditions == (Condition("is_active", "=", expected),)

    def test_is_active_garbage_is_rejected(self):
        with pytest.raises(InvalidArgument):
            compile_filters(USERS, {"is_active": "maybe"})

    def test_active_flag(self):
        predicate = compile_filters(USERS, {"active": ""})

        assert predicate.conditions == (Condition("is_active", "=", True),)

    def test_inactive_flag(self):
        predicate = compile_filters(USERS, {"inactive": ""})

        assert predicate.conditions == (Condition("is_active", "=", False),)

    def test_active_and_inactive_are_exclusive(self):
        with pytest.raises(InvalidArgument, match="cannot be combined"):
            compile_filters(USERS, {"active": "", "inactive": ""})

    def test_flag_with_explicit_is_active_is_rejected(self):
        with pytest.raises(InvalidArgument):
            compile_filters(USERS, {"active": "", "is_active": "true"})

    def test_flags_mean_nothing_for_other_kinds(self):
        assert compile_filters(EVENTS, {"active": ""}).matches_all


class TestReferenceFilters:
    def test_team_id_is_exact_match(self):
        team_id = uuid4()
        predicate = compile_filters(USERS, {"team_id": str(team_id)})

        assert predicate.conditions == (Condition("team_id", "=", team_id),)

    def test_malformed_author_is_rejected(self):
        with pytest.raises(InvalidArgument, match="author"):
            compile_filters(POSTS, {"author": "not-an-id"})


class TestDateFilters:
    def test_range_on_event_date(self):
        predicate = compile_filters(
            EVENTS, {"start_date": "2024-01-01", "end_date": "2024-12-31T23:59:59Z"}
        )

        assert predicate.conditions == (
            Condition("date", ">=", datetime(2024, 1, 1, tzinfo=UTC)),
            Condition("date", "<=", datetime(2024, 12, 31, 23, 59, 59, tzinfo=UTC)),
        )

    def test_single_bound_applies_one_side(self):
        predicate = compile_filters(SEMINARS, {"end_date": "01/01/01"})

        assert predicate.conditions == (
            Condition("date", "<=", datetime(2001, 1, 1, tzinfo=UTC)),
        )

    def test_exact_value_wins_over_range(self):
        predicate = compile_filters(
            EVENTS,
            {"date": "2024-05-01", "start_date": "2024-01-01", "end_date": "2024-12-31"},
        )

        assert predicate.conditions == (
            Condition("date", "=", datetime(2024, 5, 1, tzinfo=UTC)),
        )

    def test_bad_date_is_rejected(self):
        with pytest.raises(InvalidArgument, match="start_date"):
            compile_filters(EVENTS, {"start_date": "13/13/13"})

    def test_post_axes_are_independent(self):
        predicate = compile_filters(
            POSTS,
            {
                "created_after": "2024-01-01",
                "published_before": "2024-06-01",
                "date_modified": "2024-03-01",
            },
        )

        assert predicate.conditions == (
            Condition("date_created", ">=", datetime(2024, 1, 1, tzinfo=UTC)),
            Condition("date_published", "<=", datetime(2024, 6, 1, tzinfo=UTC)),
            Condition("date_modified", "=", datetime(2024, 3, 1, tzinfo=UTC)),
        )

    def test_post_range_bounds_are_inclusive_in_sql(self):
        predicate = compile_filters(
            POSTS, {"created_after": "2024-01-01", "created_before": "2024-02-01"}
        )
        query, _ = predicate.apply(QueryBuilder("posts")).build()

        assert query == (
            "SELECT * FROM posts WHERE date_created >= $1 AND date_created <= $2"
        )


def test_empty_predicate_applies_nothing():
    builder = QueryBuilder("teams")

    assert Predicate().apply(builder).to_sql() == "SELECT * FROM teams"
