"""
Tests for SQL generation in QueryBuilder.
"""

from nuleaf.query_builder import QueryBuilder, escape_like


class TestQueryBuilder:
    """Test cases for the query builder"""

    def test_simple_select_all(self):
        query, params = QueryBuilder("events").build()

        assert query == "SELECT * FROM events"
        assert params == []

    def test_where_with_default_operator(self):
        query, params = QueryBuilder("users").where("is_active", True).build()

        assert query == "SELECT * FROM users WHERE is_active = $1"
        assert params == [True]

    def test_where_with_explicit_operator(self):
        query, params = QueryBuilder("events").where("date", ">=", "2024-01-01").build()

        assert query == "SELECT * FROM events WHERE date >= $1"
        assert params == ["2024-01-01"]

    def test_where_none_becomes_is_null(self):
        query, params = QueryBuilder("users").where("team_id", None).build()

        assert query == "SELECT * FROM users WHERE team_id IS NULL"
        assert params == []

    def test_where_not_none_becomes_is_not_null(self):
        query, params = QueryBuilder("users").where("team_id", "!=", None).build()

        assert query == "SELECT * FROM users WHERE team_id IS NOT NULL"
        assert params == []

    def test_multiple_conditions_are_anded(self):
        query, params = (
            QueryBuilder("events")
            .where_contains("title", "launch")
            .where("date", ">=", 1)
            .where("date", "<=", 2)
            .build()
        )

        assert query == (
            "SELECT * FROM events WHERE title ILIKE $1 AND date >= $2 AND date <= $3"
        )
        assert params == ["%launch%", 1, 2]

    def test_where_contains_escapes_wildcards(self):
        _, params = QueryBuilder("events").where_contains("title", "100%_off").build()

        assert params == ["%100\\%\\_off%"]

    def test_order_limit_offset(self):
        query, _ = (
            QueryBuilder("posts")
            .order_by_desc("date_created")
            .order_by("id")
            .limit(10)
            .offset(20)
            .build()
        )

        assert query == "SELECT * FROM posts ORDER BY date_created DESC, id LIMIT 10 OFFSET 20"

    def test_select_count_keeps_conditions(self):
        query, params = QueryBuilder("teams").where("name", "x").select("COUNT(*)").build()

        assert query == "SELECT COUNT(*) FROM teams WHERE name = $1"
        assert params == ["x"]

    def test_builder_is_immutable(self):
        base = QueryBuilder("events")
        filtered = base.where("title", "a")

        assert base.to_sql() == "SELECT * FROM events"
        assert filtered.to_sql() == "SELECT * FROM events WHERE title = $1"
        assert base.params == []

    def test_str_shows_query_and_params(self):
        text = str(QueryBuilder("teams").where("name", "x"))

        assert "Query: SELECT * FROM teams WHERE name = $1" in text
        assert "Params: ['x']" in text


def test_escape_like_escapes_backslash_first():
    assert escape_like("a\\b%") == "a\\\\b\\%"
