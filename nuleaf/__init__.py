"""Nuleaf Source data-access layer and REST API"""

from nuleaf.db_context import Database
from nuleaf.errors import (
    DependencyMissing,
    InternalError,
    InvalidArgument,
    InvalidIdentifier,
    NotFound,
    RepositoryError,
    ValidationError,
)
from nuleaf.filters import compile_filters
from nuleaf.pagination import resolve_page
from nuleaf.repositories import (
    EventRepository,
    PostRepository,
    Repositories,
    SeminarRepository,
    TeamRepository,
    UserRepository,
    build_repositories,
)
from nuleaf.repository import Repository, RepositoryConfig
from nuleaf.sanitizer import sanitize

__all__ = [
    "Database",
    "Repository",
    "RepositoryConfig",
    "Repositories",
    "EventRepository",
    "PostRepository",
    "SeminarRepository",
    "TeamRepository",
    "UserRepository",
    "build_repositories",
    "compile_filters",
    "resolve_page",
    "sanitize",
    "RepositoryError",
    "InvalidIdentifier",
    "NotFound",
    "ValidationError",
    "InvalidArgument",
    "DependencyMissing",
    "InternalError",
]
