"""Errors raised by the qBittorrent API client"""


class QbitError(Exception):
    """Base exception for qBittorrent client errors"""


class HttpError(QbitError):
    """Transport level failure (connection refused, timeout, TLS, ...)"""

    def __init__(self, error: Exception):
        super().__init__(f'Http error: {error}')
        self.error = error


class BadResponseError(QbitError):
    """Response body did not match the expected shape"""

    def __init__(self, explain: str):
        super().__init__(f'API returned bad response: {explain}')
        self.explain = explain


class UnknownStatusCodeError(QbitError):
    """Non-2xx status without a known meaning for the call"""

    def __init__(self, status_code: int):
        super().__init__(f'API returned unknown status code: {status_code}')
        self.status_code = status_code


class ApiError(QbitError):
    """Failure the API reports through its status code"""

    default_message = 'API error'

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class IpBannedError(ApiError):
    default_message = "User's IP is banned for too many failed login attempts"


class NotLoggedInError(ApiError):
    default_message = 'API routes requires login, try again'


class LoginFailedError(ApiError):
    default_message = 'Login failed, check username and password'


class TorrentNotFoundError(ApiError):
    default_message = 'Torrent not found'


class InvalidArgumentError(ApiError):
    default_message = 'Invalid argument'


class AccessDeniedError(ApiError):
    default_message = 'Access denied'


class ConflictError(ApiError):
    default_message = 'Request conflicts with the current state'


class InvalidTorrentError(ApiError):
    default_message = 'Torrent file is not valid'
