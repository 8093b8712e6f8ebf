# leaguetracker/api/exception.py

# SECTION: MODULE DOCSTRING
"""Exception hierarchy for fetching and decoding league data."""

# SECTION: IMPORTS
from typing import Any

# SECTION: EXCEPTION CLASSES


# KLASS: LeagueAPIError
class LeagueAPIError(Exception):
    """Base error for everything that goes wrong talking to the league sources."""

    # FUNC: __init__
    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
        response_data: Any | None = None,
    ):
        """Initialize the error with request context.

        Args:
            message: The main error message.
            status_code: The HTTP status code, if a response was received.
            url: The URL that was requested, if known.
            response_data: A preview of the response body, if available.
        """
        super().__init__(message)
        self.status_code = status_code
        self.url = url
        self.response_data = response_data

    # FUNC: __str__
    def __str__(self) -> str:
        details: list[str] = []
        if self.status_code is not None:
            details.append(f"Status={self.status_code}")
        if self.url:
            details.append(f"URL='{self.url}'")
        base_msg = super().__str__()
        details_str = f" ({', '.join(details)})" if details else ""
        return f"{base_msg}{details_str}"


# KLASS: NetworkError
class NetworkError(LeagueAPIError):
    """Transport failure or a non-success HTTP status."""


# KLASS: FormatError
class FormatError(LeagueAPIError):
    """The response could not be decoded or does not have the expected shape."""


# KLASS: ParseError
class ParseError(FormatError):
    """The task document does not contain the expected table structure."""


# KLASS: NotFoundError
class NotFoundError(LeagueAPIError):
    """A lookup (player to clan, clan roster) produced nothing usable."""
