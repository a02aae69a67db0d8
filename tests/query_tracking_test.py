import pytest

from nuleaf.db_context import QueryTracker


class TestQueryTracker:
    def test_disabled_tracker_records_nothing(self):
        tracker = QueryTracker()

        tracker.log_query("SELECT 1", [])

        assert tracker.count() == 0

    def test_to_dict(self):
        tracker = QueryTracker()
        tracker.enable()
        tracker.log_query("SELECT * FROM events WHERE id = $1", ["x"])

        (entry,) = tracker.to_dict()
        assert entry["query"] == "SELECT * FROM events WHERE id = $1"
        assert entry["params"] == ["x"]

    def test_clear(self):
        tracker = QueryTracker()
        tracker.enable()
        tracker.log_query("SELECT 1", [])
        tracker.clear()

        assert tracker.get_queries() == []


class TestTrackQueries:
    @pytest.mark.asyncio
    async def test_records_repository_statements(self, memory_db, memory_repos):
        async with memory_db.track_queries() as tracker:
            await memory_repos.events.create({"title": "Launch"})
            await memory_repos.events.find({"title": "launch"})

        queries = [log.query for log in tracker.get_queries()]
        assert queries[0].startswith("INSERT INTO events")
        assert queries[1].startswith("SELECT * FROM events WHERE title ILIKE $1")
        assert tracker.get_queries()[1].params == ["%launch%"]

    @pytest.mark.asyncio
    async def test_stack_trace_points_at_caller(self, memory_db, memory_repos):
        async with memory_db.track_queries() as tracker:
            await memory_repos.teams.count()

        assert "test_stack_trace_points_at_caller" in tracker.get_queries()[0].stack_trace

    @pytest.mark.asyncio
    async def test_nothing_recorded_outside_block(self, memory_db, memory_repos):
        async with memory_db.track_queries() as tracker:
            pass
        await memory_repos.teams.count()

        assert tracker.count() == 0
        assert memory_db.get_query_tracker() is None

    @pytest.mark.asyncio
    async def test_nested_blocks_share_tracker(self, memory_db, memory_repos):
        async with memory_db.track_queries() as outer:
            await memory_repos.teams.count()
            async with memory_db.track_queries() as inner:
                await memory_repos.events.count()

        assert inner is outer
        assert outer.count() == 2
