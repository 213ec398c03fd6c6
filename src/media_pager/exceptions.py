"""Custom exceptions for the media pager."""


class MediaPagerError(Exception):
    """Base exception for media pager errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class RemoteFetchError(MediaPagerError):
    """Raised when the remote catalog returns an unusable response."""

    def __init__(self, message: str, status: int | None = None, retryable: bool = False):
        super().__init__(message)
        self.status = status
        self.retryable = retryable


class RetryExhaustedError(MediaPagerError):
    """Raised when a remote call keeps failing after every retry."""

    def __init__(self, attempts: int, last_error: BaseException):
        super().__init__(f"Remote call failed after {attempts} attempts: {last_error}")
        self.attempts = attempts
        self.last_error = last_error


class PreferenceStoreError(MediaPagerError):
    """Raised when a sort preference cannot be parsed."""

    pass


class PagerDisconnectedError(MediaPagerError):
    """Raised when connecting a pager that has already been disconnected."""

    def __init__(self) -> None:
        super().__init__("Pager has been disconnected")
