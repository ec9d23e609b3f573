"""Async client for the qBittorrent Web API"""

from .api import (
    ApiError,
    BadResponseError,
    Credential,
    Hashes,
    HttpError,
    IpBannedError,
    NotLoggedInError,
    QbitError,
    Sep,
    TorrentNotFoundError,
    UnknownStatusCodeError,
)
from .api.client import QBittorrentClient
from .factory import get_qbit_client

__all__ = [
    'ApiError',
    'BadResponseError',
    'Credential',
    'Hashes',
    'HttpError',
    'IpBannedError',
    'NotLoggedInError',
    'QBittorrentClient',
    'QbitError',
    'Sep',
    'TorrentNotFoundError',
    'UnknownStatusCodeError',
    'get_qbit_client',
]
