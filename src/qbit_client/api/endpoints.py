"""Declarations of the Web API v2 operations

Each operation is a relative path, an HTTP method, a status override table
and a body decoder. Read-only calls are GET, everything that changes daemon
state is POST.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Generic, TypeVar

from qbit_client.models import (
    BuildInfo,
    Category,
    Log,
    PeerLog,
    PeerSyncData,
    PieceState,
    Preferences,
    SyncData,
    Torrent,
    TorrentContent,
    TorrentProperty,
    Tracker,
    TransferInfo,
    WebSeed,
)

from . import decoders
from .decoders import Decoder
from .errors import AccessDeniedError, ConflictError, InvalidArgumentError, InvalidTorrentError, TorrentNotFoundError
from .status import LOGIN_STATUSES, NO_OVERRIDES, TORRENT_NOT_FOUND, StatusMap

T = TypeVar('T')

GET = 'GET'
POST = 'POST'


@dataclass(frozen=True)
class Endpoint(Generic[T]):
    path: str
    method: str = GET
    statuses: StatusMap = field(default=NO_OVERRIDES)
    decode: Decoder[T] = field(default=decoders.discard)  # type: ignore[assignment]


def _json(tp: Any, path: str) -> Decoder[Any]:
    return decoders.json_as(tp, f'Received malformed JSON on `{path}`')


def _number(path: str) -> Decoder[int]:
    return decoders.integer(f'Received non-number response body on `{path}`')


QUEUEING_DISABLED = StatusMap().on(409, ConflictError, 'Torrent queueing is not enabled')
RENAME_PATH = StatusMap().on(400, InvalidArgumentError, 'Missing newPath parameter').on(
    409, ConflictError, 'Invalid newPath or oldPath, or newPath already in use'
)

LOGIN = Endpoint[str]('auth/login', POST, LOGIN_STATUSES, decoders.text)
LOGOUT = Endpoint[None]('auth/logout', POST)

VERSION = Endpoint[str]('app/version', GET, decode=decoders.text)
WEBAPI_VERSION = Endpoint[str]('app/webapiVersion', GET, decode=decoders.text)
BUILD_INFO = Endpoint[BuildInfo]('app/buildInfo', GET, decode=_json(BuildInfo, 'app/buildInfo'))
SHUTDOWN = Endpoint[None]('app/shutdown', POST)
PREFERENCES = Endpoint[Preferences]('app/preferences', GET, decode=_json(Preferences, 'app/preferences'))
SET_PREFERENCES = Endpoint[None]('app/setPreferences', POST)
DEFAULT_SAVE_PATH = Endpoint[Path]('app/defaultSavePath', GET, decode=lambda r: Path(r.text))

LOGS = Endpoint[list[Log]]('log/main', GET, decode=_json(list[Log], 'log/main'))
PEER_LOGS = Endpoint[list[PeerLog]]('log/peers', GET, decode=_json(list[PeerLog], 'log/peers'))

MAINDATA = Endpoint[SyncData]('sync/maindata', GET, decode=_json(SyncData, 'sync/maindata'))
TORRENT_PEERS = Endpoint[PeerSyncData](
    'sync/torrentPeers', GET, TORRENT_NOT_FOUND, _json(PeerSyncData, 'sync/torrentPeers')
)

TRANSFER_INFO = Endpoint[TransferInfo]('transfer/info', GET, decode=_json(TransferInfo, 'transfer/info'))
SPEED_LIMITS_MODE = Endpoint[bool](
    'transfer/speedLimitsMode',
    GET,
    decode=decoders.flag('Received non-number response body on `transfer/speedLimitsMode`'),
)
TOGGLE_SPEED_LIMITS_MODE = Endpoint[None]('transfer/toggleSpeedLimitsMode', POST)
DOWNLOAD_LIMIT = Endpoint[int]('transfer/downloadLimit', GET, decode=_number('transfer/downloadLimit'))
SET_DOWNLOAD_LIMIT = Endpoint[None]('transfer/setDownloadLimit', POST)
UPLOAD_LIMIT = Endpoint[int]('transfer/uploadLimit', GET, decode=_number('transfer/uploadLimit'))
SET_UPLOAD_LIMIT = Endpoint[None]('transfer/setUploadLimit', POST)
BAN_PEERS = Endpoint[None]('transfer/banPeers', POST)

TORRENT_LIST = Endpoint[list[Torrent]]('torrents/info', GET, decode=_json(list[Torrent], 'torrents/info'))
TORRENT_PROPERTIES = Endpoint[TorrentProperty](
    'torrents/properties', GET, TORRENT_NOT_FOUND, _json(TorrentProperty, 'torrents/properties')
)
TORRENT_TRACKERS = Endpoint[list[Tracker]](
    'torrents/trackers', GET, TORRENT_NOT_FOUND, _json(list[Tracker], 'torrents/trackers')
)
TORRENT_WEB_SEEDS = Endpoint[list[WebSeed]](
    'torrents/webseeds', GET, TORRENT_NOT_FOUND, _json(list[WebSeed], 'torrents/webseeds')
)
TORRENT_CONTENTS = Endpoint[list[TorrentContent]](
    'torrents/files', GET, TORRENT_NOT_FOUND, _json(list[TorrentContent], 'torrents/files')
)
TORRENT_PIECES_STATES = Endpoint[list[PieceState]](
    'torrents/pieceStates', GET, TORRENT_NOT_FOUND, _json(list[PieceState], 'torrents/pieceStates')
)
TORRENT_PIECES_HASHES = Endpoint[list[str]](
    'torrents/pieceHashes', GET, TORRENT_NOT_FOUND, _json(list[str], 'torrents/pieceHashes')
)

PAUSE = Endpoint[None]('torrents/pause', POST)
RESUME = Endpoint[None]('torrents/resume', POST)
DELETE = Endpoint[None]('torrents/delete', POST)
RECHECK = Endpoint[None]('torrents/recheck', POST)
REANNOUNCE = Endpoint[None]('torrents/reannounce', POST)
ADD = Endpoint[str](
    'torrents/add', POST, StatusMap().on(415, InvalidTorrentError, 'Torrent file is not valid'), decoders.text
)

ADD_TRACKERS = Endpoint[None]('torrents/addTrackers', POST, TORRENT_NOT_FOUND)
EDIT_TRACKER = Endpoint[None](
    'torrents/editTracker',
    POST,
    TORRENT_NOT_FOUND.on(400, InvalidArgumentError, 'newUrl is not a valid URL').on(
        409, ConflictError, 'newUrl already exists for the torrent or origUrl was not found'
    ),
)
REMOVE_TRACKERS = Endpoint[None](
    'torrents/removeTrackers', POST, TORRENT_NOT_FOUND.on(409, ConflictError, 'All urls were not found')
)
ADD_PEERS = Endpoint[None](
    'torrents/addPeers', POST, StatusMap().on(400, InvalidArgumentError, 'None of the supplied peers are valid')
)

INCREASE_PRIORITY = Endpoint[None]('torrents/increasePrio', POST, QUEUEING_DISABLED)
DECREASE_PRIORITY = Endpoint[None]('torrents/decreasePrio', POST, QUEUEING_DISABLED)
MAXIMAL_PRIORITY = Endpoint[None]('torrents/topPrio', POST, QUEUEING_DISABLED)
MINIMAL_PRIORITY = Endpoint[None]('torrents/bottomPrio', POST, QUEUEING_DISABLED)
FILE_PRIORITY = Endpoint[None](
    'torrents/filePrio',
    POST,
    TORRENT_NOT_FOUND.on(400, InvalidArgumentError, 'Priority is invalid or at least one file id is not an integer').on(
        409, ConflictError, 'Torrent metadata has not downloaded yet or at least one file id was not found'
    ),
)

TORRENT_DOWNLOAD_LIMIT = Endpoint[dict[str, int]](
    'torrents/downloadLimit', POST, decode=_json(dict[str, int], 'torrents/downloadLimit')
)
SET_TORRENT_DOWNLOAD_LIMIT = Endpoint[None]('torrents/setDownloadLimit', POST)
TORRENT_UPLOAD_LIMIT = Endpoint[dict[str, int]](
    'torrents/uploadLimit', POST, decode=_json(dict[str, int], 'torrents/uploadLimit')
)
SET_TORRENT_UPLOAD_LIMIT = Endpoint[None]('torrents/setUploadLimit', POST)
SET_SHARE_LIMITS = Endpoint[None]('torrents/setShareLimits', POST)

SET_LOCATION = Endpoint[None](
    'torrents/setLocation',
    POST,
    StatusMap()
    .on(400, InvalidArgumentError, 'Save path is empty')
    .on(403, AccessDeniedError, 'User does not have write access to directory')
    .on(409, ConflictError, 'Unable to create save path directory'),
)
RENAME = Endpoint[None]('torrents/rename', POST, TORRENT_NOT_FOUND.on(409, ConflictError, 'Torrent name is empty'))
SET_CATEGORY = Endpoint[None](
    'torrents/setCategory', POST, StatusMap().on(409, ConflictError, 'Category name does not exist')
)

CATEGORIES = Endpoint[dict[str, Category]](
    'torrents/categories', GET, decode=_json(dict[str, Category], 'torrents/categories')
)
CREATE_CATEGORY = Endpoint[None](
    'torrents/createCategory',
    POST,
    StatusMap().on(400, InvalidArgumentError, 'Category name is empty').on(
        409, ConflictError, 'Category name is invalid'
    ),
)
EDIT_CATEGORY = Endpoint[None](
    'torrents/editCategory',
    POST,
    StatusMap().on(400, InvalidArgumentError, 'Category name is empty').on(
        409, ConflictError, 'Category editing failed'
    ),
)
REMOVE_CATEGORIES = Endpoint[None]('torrents/removeCategories', POST)

ADD_TAGS = Endpoint[None]('torrents/addTags', POST)
REMOVE_TAGS = Endpoint[None]('torrents/removeTags', POST)
TAGS = Endpoint[list[str]]('torrents/tags', GET, decode=_json(list[str], 'torrents/tags'))
CREATE_TAGS = Endpoint[None]('torrents/createTags', POST)
DELETE_TAGS = Endpoint[None]('torrents/deleteTags', POST)

SET_AUTO_MANAGEMENT = Endpoint[None]('torrents/setAutoManagement', POST)
TOGGLE_SEQUENTIAL_DOWNLOAD = Endpoint[None]('torrents/toggleSequentialDownload', POST)
TOGGLE_FIRST_LAST_PIECE_PRIORITY = Endpoint[None]('torrents/toggleFirstLastPiecePrio', POST)
SET_FORCE_START = Endpoint[None]('torrents/setForceStart', POST)
SET_SUPER_SEEDING = Endpoint[None]('torrents/setSuperSeeding', POST)
RENAME_FILE = Endpoint[None]('torrents/renameFile', POST, RENAME_PATH)
RENAME_FOLDER = Endpoint[None]('torrents/renameFolder', POST, RENAME_PATH)
