"""
Error hierarchy.

The scheduling engine itself never raises for bad catalog data; these
errors come from the I/O edges (catalog file, advisory service).
TransientAdvisorError is the only one the advisor retries.
"""


class CourseGridError(Exception):
    """Base exception for all coursegrid errors."""

    pass


class CatalogError(CourseGridError):
    """Catalog file exists but cannot be read or has the wrong shape."""

    pass


class AdvisorError(CourseGridError):
    """Base exception for the course load advisory call."""

    pass


class TransientAdvisorError(AdvisorError):
    """Temporary failure that may succeed on retry.

    Examples: connection errors, timeouts, 429 Too Many Requests, 5xx.
    """

    pass


class PermanentAdvisorError(AdvisorError):
    """Failure that won't succeed on retry.

    Examples: missing API key, 4xx responses, response without text.
    """

    pass
