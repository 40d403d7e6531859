"""Exceptions raised by Suricate."""

from collections.abc import Iterable

from suricate.domain.entities.error_event import SchemaIssue


class SuricateError(Exception):
    """Base class for all Suricate errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InitializationError(SuricateError):
    """Raised when an operation runs before a database connection exists."""

    pass


class ValidationError(SuricateError):
    """Raised when a payload does not satisfy the collection schema.

    Args:
        message: Summary of all issues.
        issues: The individual field-level issues.
    """

    def __init__(self, message: str, issues: Iterable[SchemaIssue] = ()) -> None:
        self.issues = tuple(issues)
        super().__init__(message)

    @property
    def fields(self) -> list[str]:
        """Names of the offending fields, in issue order and without duplicates."""
        seen: dict[str, None] = {}
        for issue in self.issues:
            seen.setdefault(issue.field, None)
        return list(seen)


class AppServicesError(SuricateError):
    """Raised by the App Services driver when a request fails.

    Args:
        message: Error message reported by the server, or the HTTP reason.
        status_code: HTTP status code of the failed response.
        error_code: App Services error code (e.g. ``InvalidSession``), if any.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_code: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(message)
