"""Error taxonomy shared by the repositories and the HTTP layer"""


class RepositoryError(Exception):
    """Base class for every error raised by the data-access layer"""

    def __init__(self, message: str = "Repository error"):
        self.message = message
        super().__init__(message)


class InvalidIdentifier(RepositoryError, ValueError):
    """An identifier is not a well-formed record id and cannot be looked up"""


class NotFound(RepositoryError):
    """A well-formed identifier does not match any record"""


class ValidationError(RepositoryError, ValueError):
    """Missing required field, length or uniqueness violation, bad input type"""


class InvalidArgument(ValidationError):
    """A filter or pagination argument cannot be interpreted"""


class DependencyMissing(RepositoryError):
    """A referenced record (e.g. a user's team) does not exist"""


class InternalError(RepositoryError):
    """Unclassified store or connectivity failure"""
