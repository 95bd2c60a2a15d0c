from typing import Optional


class PhotoSearchError(RuntimeError):
    """Base class for failures while fetching a page of search results."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "")
        self.message = message


class TransportFailure(PhotoSearchError):
    """The request never produced an HTTP response (connection error, timeout...)."""


class ServerError(PhotoSearchError):
    """The API answered, but not with a usable successful response."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        super().__init__(message or f"HTTP {status_code}")
        self.status_code = status_code
