# src/qobuz_api/core/errors.py


class QobuzApiError(Exception):
    """Base error for the Qobuz client.

    Everything raised on purpose by this package derives from it, so callers
    (and the CLI) can catch a single type and print a readable message.
    """

    pass


class ApiErrorResponse(QobuzApiError):
    """The API answered with ``"status": "error"``."""

    def __init__(self, code: str = "", message: str = "", status: str = "") -> None:
        self.code = code
        self.message = message
        self.status = status
        super().__init__(f"API Error - Code: {code}, Message: {message}, Status: {status}")


class ApiResponseParseError(QobuzApiError):
    """The response body could not be decoded into the expected shape."""

    def __init__(self, message: str, content: str = "") -> None:
        self.content = content
        super().__init__(f"Failed to parse API response: {message}")


class HttpError(QobuzApiError):
    pass


class CredentialsError(QobuzApiError):
    pass


class AuthenticationError(QobuzApiError):
    pass


class DownloadError(QobuzApiError):
    pass


class MetadataError(QobuzApiError):
    pass


class InvalidParameterError(QobuzApiError):
    pass


class ResourceNotFoundError(QobuzApiError):
    def __init__(self, resource_type: str, resource_id: str) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f"Resource not found: {resource_type} with ID {resource_id}")
