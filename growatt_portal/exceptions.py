"""Exceptions raised by the Growatt web portal client."""


class GrowattError(Exception):
    """Base class for all Growatt portal errors."""


class GrowattRequestError(GrowattError):
    """Raised when the HTTP request fails or returns a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """
        Initialize the error.

        Args:
            message (str): Description of the failure.
            status_code (int, optional): HTTP status, when one was received.

        """
        super().__init__(message)
        self.status_code = status_code


class GrowattMalformedJsonError(GrowattError):
    """Raised when a body is not JSON or does not fit the requested shape."""


class GrowattAuthenticationError(GrowattError):
    """Raised when the portal rejects the supplied credentials."""

    def __init__(self, msg: str) -> None:
        super().__init__(f"Authentication failed: {msg}")
        self.msg = msg


class GrowattInvalidResponseError(GrowattError):
    """Raised when a well-formed response is empty or lacks expected fields."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Invalid response: {message}")
        self.message = message


class GrowattNotAuthenticatedError(GrowattError):
    """Raised when no session exists and no credentials are stored."""

    def __init__(self) -> None:
        super().__init__("Not logged in")


class GrowattParameterError(GrowattError, ValueError):
    """Raised when an endpoint method receives invalid arguments."""
