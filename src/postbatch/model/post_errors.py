"""
Error taxonomy for the post batch service.

InvalidRequestError is a caller problem and maps to 400. UpstreamFetchError and
StorageError are server-side failures and map to 500 with the class name as the
error kind.
"""
from typing import Optional


class PostBatchError(Exception):
    """Base exception for post batch service errors."""

    @property
    def kind(self) -> str:
        return type(self).__name__


class InvalidRequestError(PostBatchError):
    """Request parameters are missing or out of range."""
    pass


class UpstreamFetchError(PostBatchError):
    """The post source was unreachable, answered non-2xx or sent a malformed body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class StorageError(PostBatchError):
    """Reading from or writing to the posts table failed."""
    pass
