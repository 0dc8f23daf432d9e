from typing import Optional

KEYWORD_REQUIRED = "Keyword is required and cannot be empty"
STORE_FAILED = "Failed to store search results in database"
FETCH_FAILED = "Failed to fetch search results from database"
KEYWORD_FETCH_FAILED = "Failed to fetch search results"


class RepoFinderError(Exception):
    """Base error; every subclass maps to one HTTP status."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(RepoFinderError):
    status_code = 400


class ProviderError(RepoFinderError):
    def __init__(self, message: str, upstream_status: Optional[int] = None):
        super().__init__(message)
        self.upstream_status = upstream_status


class PersistenceError(RepoFinderError):
    pass
