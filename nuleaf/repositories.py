"""Concrete repositories for the five entity kinds"""

import logging
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from nuleaf.db_context import Database
from nuleaf.entities import Event, Post, Seminar, Team, User
from nuleaf.errors import DependencyMissing, InvalidIdentifier, NotFound
from nuleaf.kinds import EVENTS, POSTS, SEMINARS, TEAMS, USERS
from nuleaf.repository import Repository, RepositoryConfig

logger = logging.getLogger(__name__)


class EventRepository(Repository[Event]):
    def __init__(self, database: Database, config: RepositoryConfig | None = None):
        super().__init__(database, EVENTS, config)


class PostRepository(Repository[Post]):
    def __init__(self, database: Database, config: RepositoryConfig | None = None):
        super().__init__(database, POSTS, config)


class SeminarRepository(Repository[Seminar]):
    def __init__(self, database: Database, config: RepositoryConfig | None = None):
        super().__init__(database, SEMINARS, config)


class TeamRepository(Repository[Team]):
    def __init__(self, database: Database, config: RepositoryConfig | None = None):
        super().__init__(database, TEAMS, config)


class UserRepository(Repository[User]):
    """Users carry a copy of their team's name (team_name).

    Whenever a create or update supplies team_id, the team is looked up and
    its current name copied onto the user before the write. The lookup and
    the write are separate statements: a rename of the team in between, or
    any later rename, leaves team_name stale until the user is written again
    with a team_id.
    """

    def __init__(
        self,
        database: Database,
        teams: TeamRepository | None = None,
        config: RepositoryConfig | None = None,
    ):
        super().__init__(database, USERS, config)
        self.teams = teams or TeamRepository(database, config)

    async def resolve_team(self, team_id: UUID | str) -> Team:
        """The referenced team; DependencyMissing if the id is malformed or unknown"""
        try:
            return await self.teams.get(team_id)
        except (InvalidIdentifier, NotFound) as exc:
            logger.warning("Rejected user write referencing team %s", team_id)
            raise DependencyMissing(f"Team does not exist: {team_id}") from exc

    async def copy_team_name(self, fields: dict[str, Any]) -> dict[str, Any]:
        if fields.get("team_id") is not None:
            team = await self.resolve_team(fields["team_id"])
            fields["team_id"] = team.id
            fields["team_name"] = team.name
        return fields

    async def before_create(self, fields: dict[str, Any]) -> dict[str, Any]:
        return await self.copy_team_name(fields)

    async def before_update(
        self, entity_id: UUID, fields: dict[str, Any]
    ) -> dict[str, Any]:
        return await self.copy_team_name(fields)


@dataclass(frozen=True)
class Repositories:
    events: EventRepository
    posts: PostRepository
    seminars: SeminarRepository
    teams: TeamRepository
    users: UserRepository

    def by_kind(self, kind_name: str) -> Repository:
        return getattr(self, kind_name)


def build_repositories(
    database: Database, config: RepositoryConfig | None = None
) -> Repositories:
    teams = TeamRepository(database, config)
    return Repositories(
        events=EventRepository(database, config),
        posts=PostRepository(database, config),
        seminars=SeminarRepository(database, config),
        teams=teams,
        users=UserRepository(database, teams, config),
    )
