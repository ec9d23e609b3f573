"""Request pipeline building blocks for the qBittorrent Web API"""

from .codec import Hashes, Sep, encode_body, encode_query
from .errors import (
    AccessDeniedError,
    ApiError,
    BadResponseError,
    ConflictError,
    HttpError,
    InvalidArgumentError,
    InvalidTorrentError,
    IpBannedError,
    LoginFailedError,
    NotLoggedInError,
    QbitError,
    TorrentNotFoundError,
    UnknownStatusCodeError,
)
from .session import Credential, SessionCell
from .status import StatusMap, classify

__all__ = [
    'AccessDeniedError',
    'ApiError',
    'BadResponseError',
    'ConflictError',
    'Credential',
    'Hashes',
    'HttpError',
    'InvalidArgumentError',
    'InvalidTorrentError',
    'IpBannedError',
    'LoginFailedError',
    'NotLoggedInError',
    'QbitError',
    'SessionCell',
    'Sep',
    'StatusMap',
    'TorrentNotFoundError',
    'UnknownStatusCodeError',
    'classify',
    'encode_body',
    'encode_query',
]
