"""qBittorrent Web API client"""

import json
import logging
from collections.abc import Iterable, Mapping
from os import PathLike
from pathlib import Path
from types import TracebackType
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel

from qbit_client.models import (
    AddTorrentArg,
    BuildInfo,
    Category,
    GetLogsArg,
    GetTorrentListArg,
    Log,
    PeerLog,
    PeerSyncData,
    PieceState,
    Preferences,
    Priority,
    SetTorrentSharedLimitArg,
    SyncData,
    Torrent,
    TorrentContent,
    TorrentProperty,
    TorrentSource,
    Tracker,
    TransferInfo,
    WebSeed,
)

from . import endpoints as ep
from .codec import Hashes, Sep, encode_body, encode_query
from .endpoints import Endpoint
from .errors import ApiError, BadResponseError, HttpError, LoginFailedError
from .session import Credential, SessionCell
from .status import classify

log = logging.getLogger(__name__)

T = TypeVar('T')

HashesLike = Hashes | Iterable[str] | str
Query = Mapping[str, Any] | BaseModel | None

API_PREFIX = 'api/v2/'
DEFAULT_COOKIE_NAME = 'SID'
DEFAULT_TIMEOUT = 30.0


def resolve_api_url(endpoint: str | httpx.URL) -> httpx.URL:
    """Validate the daemon base URL and return the API root under it

    Raises:
        ValueError: the URL is not an absolute http(s) URL
    """
    try:
        url = httpx.URL(str(endpoint))
    except httpx.InvalidURL as e:
        raise ValueError(f'Invalid API endpoint: {endpoint}') from e

    if url.scheme not in ('http', 'https') or not url.host:
        raise ValueError(f'Invalid API endpoint: {endpoint}')

    if not url.path.endswith('/'):
        url = url.copy_with(path=f'{url.path}/')
    return url.join(API_PREFIX)


class QBittorrentClient:
    """Typed client for the qBittorrent Web API v2

    Logs in lazily on the first call and reuses the session cookie for the
    lifetime of the client. Either a credential or a session cookie must be
    given, never both. The session cookie is removed from the HTTP client's
    cookie jar after login and sent explicitly on every request.
    """

    def __init__(
        self,
        endpoint: str | httpx.URL,
        credential: Credential | None = None,
        client: httpx.AsyncClient | None = None,
        *,
        cookie: str | None = None,
        cookie_name: str = DEFAULT_COOKIE_NAME,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        if (credential is None) == (cookie is None):
            raise ValueError('Exactly one of credential or cookie is required')

        self.api_url = resolve_api_url(endpoint)
        self.cookie_name = cookie_name
        self._credential = credential
        self._session = SessionCell(cookie)
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(timeout=timeout)

    @classmethod
    def with_cookie(
        cls,
        endpoint: str | httpx.URL,
        cookie: str,
        client: httpx.AsyncClient | None = None,
        *,
        cookie_name: str = DEFAULT_COOKIE_NAME,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> 'QBittorrentClient':
        """Create a client from an existing session cookie, login is never attempted"""
        return cls(endpoint, client=client, cookie=cookie, cookie_name=cookie_name, timeout=timeout)

    async def __aenter__(self) -> 'QBittorrentClient':
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.disconnect()

    async def disconnect(self) -> None:
        """Close the HTTP client if this instance created it"""
        if self._owns_client:
            await self._client.aclose()

    async def get_cookie(self) -> str | None:
        """Current session cookie value, None before the first login"""
        return self._session.get()

    # Request pipeline

    def _url(self, path: str) -> httpx.URL:
        return self.api_url.join(path)

    async def _send(self, request: httpx.Request) -> httpx.Response:
        log.debug('Sending request %s %s', request.method, request.url.path)
        try:
            response = await self._client.send(request)
        except httpx.HTTPError as e:
            raise HttpError(e) from e
        log.debug('Received %s from %s', response.status_code, request.url.path)
        return response

    async def _login(self) -> str:
        assert self._credential is not None  # Cookie clients never reach login

        request = self._client.build_request(
            ep.LOGIN.method,
            self._url(ep.LOGIN.path),
            params=encode_query(self._credential),
        )
        response = await self._send(request)

        error = classify(response.status_code, ep.LOGIN.statuses)
        if error is not None:
            raise error

        if ep.LOGIN.decode(response).strip() == 'Fails.':
            raise LoginFailedError()

        cookie = response.cookies.get(self.cookie_name)
        if not cookie:
            raise BadResponseError(f'Login response did not set the `{self.cookie_name}` cookie')

        # The token lives in the session cell only, not in a possibly shared cookie jar
        self._client.cookies.delete(self.cookie_name)

        log.debug('Log in success')
        return cookie

    async def _request(
        self,
        endpoint: Endpoint[Any],
        query: Query = None,
        *,
        body: BaseModel | Mapping[str, Any] | None = None,
        form: Mapping[str, str] | None = None,
        files: list[tuple[str, tuple[str, bytes, str]]] | None = None,
    ) -> httpx.Response:
        cookie = await self._session.get_or_login(self._login)

        request = self._client.build_request(
            endpoint.method,
            self._url(endpoint.path),
            params=encode_query(query) or None,
            json=encode_body(body) if body is not None else None,
            data=form,
            files=files,
            headers={'Cookie': f'{self.cookie_name}={cookie}'},
        )
        response = await self._send(request)

        error = classify(response.status_code, endpoint.statuses)
        if error is not None:
            log.debug('Request to %s failed: %s', endpoint.path, error)
            raise error
        return response

    async def _call(self, endpoint: Endpoint[T], query: Query = None, **kwargs: Any) -> T:
        response = await self._request(endpoint, query, **kwargs)
        return endpoint.decode(response)

    # Authentication and application

    async def logout(self) -> None:
        """End the session on the daemon side, the cached cookie is kept"""
        await self._call(ep.LOGOUT)

    async def get_version(self) -> str:
        return await self._call(ep.VERSION)

    async def get_webapi_version(self) -> str:
        return await self._call(ep.WEBAPI_VERSION)

    async def get_build_info(self) -> BuildInfo:
        return await self._call(ep.BUILD_INFO)

    async def shutdown(self) -> None:
        await self._call(ep.SHUTDOWN)

    async def get_preferences(self) -> Preferences:
        return await self._call(ep.PREFERENCES)

    async def set_preferences(self, preferences: Preferences | Mapping[str, Any]) -> None:
        """Change application preferences

        Only the fields set on ``preferences`` are sent, the daemon keeps the
        rest unchanged. The daemon reads the JSON record from the ``json``
        form field.
        """
        await self._call(ep.SET_PREFERENCES, form={'json': json.dumps(encode_body(preferences))})

    async def get_default_save_path(self) -> Path:
        return await self._call(ep.DEFAULT_SAVE_PATH)

    # Log

    async def get_logs(self, arg: GetLogsArg | None = None) -> list[Log]:
        return await self._call(ep.LOGS, arg)

    async def get_peer_logs(self, last_known_id: int | None = None) -> list[PeerLog]:
        return await self._call(ep.PEER_LOGS, {'last_known_id': last_known_id})

    # Sync

    async def sync(self, rid: int | None = None) -> SyncData:
        """Main data changes since response id ``rid``, full data when omitted"""
        return await self._call(ep.MAINDATA, {'rid': rid})

    async def get_torrent_peers(self, hash: str, rid: int | None = None) -> PeerSyncData:
        return await self._call(ep.TORRENT_PEERS, {'hash': hash, 'rid': rid})

    # Transfer

    async def get_transfer_info(self) -> TransferInfo:
        return await self._call(ep.TRANSFER_INFO)

    async def get_speed_limits_mode(self) -> bool:
        """Whether alternative speed limits are enabled"""
        return await self._call(ep.SPEED_LIMITS_MODE)

    async def toggle_speed_limits_mode(self) -> None:
        await self._call(ep.TOGGLE_SPEED_LIMITS_MODE)

    async def get_download_limit(self) -> int:
        """Global download limit in bytes/second, 0 means unlimited"""
        return await self._call(ep.DOWNLOAD_LIMIT)

    async def set_download_limit(self, limit: int) -> None:
        await self._call(ep.SET_DOWNLOAD_LIMIT, {'limit': limit})

    async def get_upload_limit(self) -> int:
        """Global upload limit in bytes/second, 0 means unlimited"""
        return await self._call(ep.UPLOAD_LIMIT)

    async def set_upload_limit(self, limit: int) -> None:
        await self._call(ep.SET_UPLOAD_LIMIT, {'limit': limit})

    async def ban_peers(self, peers: Iterable[str] | str) -> None:
        """Ban peers given as ``host:port``"""
        await self._call(ep.BAN_PEERS, {'peers': Sep(peers, '|')})

    # Torrents

    async def get_torrent_list(self, arg: GetTorrentListArg | None = None) -> list[Torrent]:
        return await self._call(ep.TORRENT_LIST, arg)

    async def get_torrent_properties(self, hash: str) -> TorrentProperty:
        return await self._call(ep.TORRENT_PROPERTIES, {'hash': hash})

    async def get_torrent_trackers(self, hash: str) -> list[Tracker]:
        return await self._call(ep.TORRENT_TRACKERS, {'hash': hash})

    async def get_torrent_web_seeds(self, hash: str) -> list[WebSeed]:
        return await self._call(ep.TORRENT_WEB_SEEDS, {'hash': hash})

    async def get_torrent_contents(self, hash: str, indexes: Iterable[int] | None = None) -> list[TorrentContent]:
        """Files of a torrent, restricted to ``indexes`` when given"""
        return await self._call(
            ep.TORRENT_CONTENTS,
            {'hash': hash, 'indexes': Sep(indexes, '|') if indexes is not None else None},
        )

    async def get_torrent_pieces_states(self, hash: str) -> list[PieceState]:
        return await self._call(ep.TORRENT_PIECES_STATES, {'hash': hash})

    async def get_torrent_pieces_hashes(self, hash: str) -> list[str]:
        return await self._call(ep.TORRENT_PIECES_HASHES, {'hash': hash})

    async def pause_torrents(self, hashes: HashesLike) -> None:
        await self._call(ep.PAUSE, {'hashes': Hashes.coerce(hashes)})

    async def resume_torrents(self, hashes: HashesLike) -> None:
        await self._call(ep.RESUME, {'hashes': Hashes.coerce(hashes)})

    async def delete_torrents(self, hashes: HashesLike, delete_files: bool | None = None) -> None:
        await self._call(ep.DELETE, {'hashes': Hashes.coerce(hashes), 'deleteFiles': delete_files})

    async def recheck_torrents(self, hashes: HashesLike) -> None:
        await self._call(ep.RECHECK, {'hashes': Hashes.coerce(hashes)})

    async def reannounce_torrents(self, hashes: HashesLike) -> None:
        await self._call(ep.REANNOUNCE, {'hashes': Hashes.coerce(hashes)})

    async def add_torrent(self, src: TorrentSource, arg: AddTorrentArg | None = None) -> None:
        """Add torrents from URLs/magnets or ``.torrent`` file contents

        Args:
            src: URLs and/or files to add
            arg: Options applied to every added torrent

        Raises:
            ValueError: ``src`` holds neither URLs nor files
            InvalidTorrentError: a torrent file is not valid
            ApiError: the daemon refused to add the torrents
        """
        if not src.urls and not src.files:
            raise ValueError('Torrent source is empty')

        fields: dict[str, Any] = arg.model_dump(by_alias=True, exclude_none=True) if arg is not None else {}
        if 'tags' in fields:
            fields['tags'] = Sep(fields['tags'], ',')
        if src.urls:
            fields['urls'] = Sep(src.urls, '\n')

        files = [('torrents', (name, content, 'application/x-bittorrent')) for name, content in src.files.items()]

        result = await self._call(ep.ADD, form=encode_query(fields), files=files or None)
        if result.strip() == 'Fails.':
            raise ApiError('Daemon refused to add the torrents')

    async def add_trackers(self, hash: str, urls: Iterable[str] | str) -> None:
        await self._call(ep.ADD_TRACKERS, {'hash': hash, 'urls': Sep(urls, '\n')})

    async def edit_trackers(self, hash: str, orig_url: str | httpx.URL, new_url: str | httpx.URL) -> None:
        await self._call(ep.EDIT_TRACKER, {'hash': hash, 'origUrl': str(orig_url), 'newUrl': str(new_url)})

    async def remove_trackers(self, hash: str, urls: Iterable[str] | str) -> None:
        await self._call(ep.REMOVE_TRACKERS, {'hash': hash, 'urls': Sep(urls, '|')})

    async def add_peers(self, hashes: HashesLike, peers: Iterable[str] | str) -> None:
        """Add peers given as ``host:port`` to the torrents"""
        await self._call(ep.ADD_PEERS, {'hashes': Hashes.coerce(hashes), 'peers': Sep(peers, '|')})

    async def increase_priority(self, hashes: HashesLike) -> None:
        await self._call(ep.INCREASE_PRIORITY, {'hashes': Hashes.coerce(hashes)})

    async def decrease_priority(self, hashes: HashesLike) -> None:
        await self._call(ep.DECREASE_PRIORITY, {'hashes': Hashes.coerce(hashes)})

    async def maximal_priority(self, hashes: HashesLike) -> None:
        await self._call(ep.MAXIMAL_PRIORITY, {'hashes': Hashes.coerce(hashes)})

    async def minimal_priority(self, hashes: HashesLike) -> None:
        await self._call(ep.MINIMAL_PRIORITY, {'hashes': Hashes.coerce(hashes)})

    async def set_file_priority(self, hash: str, indexes: Iterable[int] | int, priority: Priority) -> None:
        await self._call(ep.FILE_PRIORITY, {'hash': hash, 'id': Sep(indexes, '|'), 'priority': priority})

    async def get_torrent_download_limit(self, hashes: HashesLike) -> dict[str, int]:
        return await self._call(ep.TORRENT_DOWNLOAD_LIMIT, {'hashes': Hashes.coerce(hashes)})

    async def set_torrent_download_limit(self, hashes: HashesLike, limit: int) -> None:
        await self._call(ep.SET_TORRENT_DOWNLOAD_LIMIT, {'hashes': Hashes.coerce(hashes), 'limit': limit})

    async def get_torrent_upload_limit(self, hashes: HashesLike) -> dict[str, int]:
        return await self._call(ep.TORRENT_UPLOAD_LIMIT, {'hashes': Hashes.coerce(hashes)})

    async def set_torrent_upload_limit(self, hashes: HashesLike, limit: int) -> None:
        await self._call(ep.SET_TORRENT_UPLOAD_LIMIT, {'hashes': Hashes.coerce(hashes), 'limit': limit})

    async def set_torrent_shared_limit(self, arg: SetTorrentSharedLimitArg) -> None:
        await self._call(ep.SET_SHARE_LIMITS, arg)

    async def set_torrent_location(self, hashes: HashesLike, location: str | PathLike[str]) -> None:
        await self._call(ep.SET_LOCATION, {'hashes': Hashes.coerce(hashes), 'location': str(location)})

    async def set_torrent_name(self, hash: str, name: str) -> None:
        await self._call(ep.RENAME, {'hash': hash, 'name': name})

    async def set_torrent_category(self, hashes: HashesLike, category: str) -> None:
        """Set the category, an empty string removes it"""
        await self._call(ep.SET_CATEGORY, {'hashes': Hashes.coerce(hashes), 'category': category})

    # Categories and tags

    async def get_categories(self) -> dict[str, Category]:
        return await self._call(ep.CATEGORIES)

    async def add_category(self, category: str, save_path: str | PathLike[str]) -> None:
        await self._call(ep.CREATE_CATEGORY, {'category': category, 'savePath': str(save_path)})

    async def edit_category(self, category: str, save_path: str | PathLike[str]) -> None:
        await self._call(ep.EDIT_CATEGORY, {'category': category, 'savePath': str(save_path)})

    async def remove_categories(self, categories: Iterable[str] | str) -> None:
        await self._call(ep.REMOVE_CATEGORIES, {'categories': Sep(categories, '\n')})

    async def add_torrent_tags(self, hashes: HashesLike, tags: Iterable[str] | str) -> None:
        await self._call(ep.ADD_TAGS, {'hashes': Hashes.coerce(hashes), 'tags': Sep(tags, '\n')})

    async def remove_torrent_tags(self, hashes: HashesLike, tags: Iterable[str] | str | None = None) -> None:
        """Remove ``tags`` from the torrents, every tag when ``tags`` is None"""
        await self._call(
            ep.REMOVE_TAGS,
            {'hashes': Hashes.coerce(hashes), 'tags': Sep(tags, '\n') if tags is not None else None},
        )

    async def get_all_tags(self) -> list[str]:
        return await self._call(ep.TAGS)

    async def create_tags(self, tags: Iterable[str] | str) -> None:
        await self._call(ep.CREATE_TAGS, {'tags': Sep(tags, ',')})

    async def delete_tags(self, tags: Iterable[str] | str) -> None:
        await self._call(ep.DELETE_TAGS, {'tags': Sep(tags, ',')})

    # Torrent flags

    async def set_auto_management(self, hashes: HashesLike, enable: bool) -> None:
        await self._call(ep.SET_AUTO_MANAGEMENT, {'hashes': Hashes.coerce(hashes), 'enable': enable})

    async def toggle_torrent_sequential_download(self, hashes: HashesLike) -> None:
        await self._call(ep.TOGGLE_SEQUENTIAL_DOWNLOAD, {'hashes': Hashes.coerce(hashes)})

    async def toggle_first_last_piece_priority(self, hashes: HashesLike) -> None:
        await self._call(ep.TOGGLE_FIRST_LAST_PIECE_PRIORITY, {'hashes': Hashes.coerce(hashes)})

    async def set_force_start(self, hashes: HashesLike, value: bool) -> None:
        await self._call(ep.SET_FORCE_START, {'hashes': Hashes.coerce(hashes), 'value': value})

    async def set_super_seeding(self, hashes: HashesLike, value: bool) -> None:
        await self._call(ep.SET_SUPER_SEEDING, {'hashes': Hashes.coerce(hashes), 'value': value})

    async def rename_file(self, hash: str, old_path: str | PathLike[str], new_path: str | PathLike[str]) -> None:
        await self._call(ep.RENAME_FILE, {'hash': hash, 'oldPath': str(old_path), 'newPath': str(new_path)})

    async def rename_folder(self, hash: str, old_path: str | PathLike[str], new_path: str | PathLike[str]) -> None:
        await self._call(ep.RENAME_FOLDER, {'hash': hash, 'oldPath': str(old_path), 'newPath': str(new_path)})
