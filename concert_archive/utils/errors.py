"""Custom exception hierarchy for the concert archive tooling.

All application exceptions inherit from :class:`ConcertArchiveError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "setlistfm") or data file caused the failure.

The hierarchy is organized by concern:

    ConcertArchiveError  (base -- catch-all for any concert archive error)
    +-- DatasetLoadError         (unreadable or invalid JSON data file)
    +-- ConfigurationError       (startup / missing config or API key)
    +-- SetlistLookupError       (setlist search request failed)
    +-- RateLimitError           (provider rate-limit exceeded)

Data problems inside the reconciliation core are never raised; they are
collected as ValidationIssue records.  Only infrastructure failures use
these exceptions, and the CLI tools turn them into a non-zero exit code.
"""


class ConcertArchiveError(Exception):
    """Base exception for all concert archive errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service or file triggered
    the error.  ``__str__`` prefixes the provider name in brackets,
    e.g. ``[setlistfm] Rate limit exceeded``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Data file errors
# ---------------------------------------------------------------------------

class DatasetLoadError(ConcertArchiveError):
    """Raised when a dataset file is missing, unreadable, or not valid JSON."""

    def __init__(
        self,
        message: str = "Dataset file could not be loaded",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(ConcertArchiveError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# External service / provider errors
# ---------------------------------------------------------------------------

class SetlistLookupError(ConcertArchiveError):
    """Raised when a setlist search request fails or returns garbage."""

    def __init__(
        self,
        message: str = "Setlist lookup failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class RateLimitError(ConcertArchiveError):
    """Raised when an API rate limit is exceeded.

    The setlist pre-fetch job catches this and waits a fixed backoff
    interval before moving on to the next artist.
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
