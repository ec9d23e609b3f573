"""Translation of HTTP status codes into API errors"""

from collections.abc import Mapping
from types import MappingProxyType

from .errors import ApiError, IpBannedError, NotLoggedInError, QbitError, TorrentNotFoundError, UnknownStatusCodeError

ErrorEntry = tuple[type[ApiError], str | None]


class StatusMap:
    """Immutable partial mapping from status code to API error

    Built by chaining ``on`` calls, each returning a new map:

        StatusMap().on(404, TorrentNotFoundError).on(409, ConflictError, 'Name is empty')
    """

    def __init__(self, entries: Mapping[int, ErrorEntry] | None = None):
        self._entries: Mapping[int, ErrorEntry] = MappingProxyType(dict(entries or {}))

    def on(self, status: int, error: type[ApiError], message: str | None = None) -> 'StatusMap':
        """Return a copy that maps ``status`` to ``error``"""
        return StatusMap({**self._entries, status: (error, message)})

    def lookup(self, status: int) -> ApiError | None:
        """Build the error for ``status`` or None when unmapped"""
        entry = self._entries.get(status)
        if entry is None:
            return None
        error, message = entry
        return error(message)

    def __contains__(self, status: object) -> bool:
        return status in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        items = ', '.join(f'{status}: {error.__name__}' for status, (error, _) in sorted(self._entries.items()))
        return f'StatusMap({{{items}}})'


NO_OVERRIDES = StatusMap()

# Applies to every call unless the call's own table maps the status
DEFAULT_STATUSES = StatusMap().on(403, NotLoggedInError)

# Login is the only call where 403 means the client IP is banned
LOGIN_STATUSES = StatusMap().on(403, IpBannedError)

TORRENT_NOT_FOUND = StatusMap().on(404, TorrentNotFoundError)


def is_success(status: int) -> bool:
    return 200 <= status < 300


def classify(status: int, overrides: StatusMap | None = None) -> QbitError | None:
    """Map a response status to an error, None for success

    The call's override table wins over the default table. Unmapped non-2xx
    statuses become ``UnknownStatusCodeError``. The body is never looked at.
    """
    if is_success(status):
        return None

    if overrides is not None:
        error = overrides.lookup(status)
        if error is not None:
            return error

    error = DEFAULT_STATUSES.lookup(status)
    if error is not None:
        return error

    return UnknownStatusCodeError(status)
