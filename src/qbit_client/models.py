"""Pydantic schemas for API arguments and responses."""

from enum import IntEnum, StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from qbit_client.api.codec import Hashes


class Record(BaseModel):
    """Response record, unknown fields from newer daemons are kept"""

    model_config = ConfigDict(extra='allow', populate_by_name=True)


class Arg(BaseModel):
    """Argument record, fields left as None are not sent"""

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)


class LogType(IntEnum):
    NORMAL = 1
    INFO = 2
    WARNING = 4
    CRITICAL = 8


class Priority(IntEnum):
    """File download priority"""

    DO_NOT_DOWNLOAD = 0
    NORMAL = 1
    HIGH = 6
    MAXIMAL = 7


class PieceState(IntEnum):
    NOT_DOWNLOADED = 0
    DOWNLOADING = 1
    DOWNLOADED = 2


class TrackerStatus(IntEnum):
    DISABLED = 0
    NOT_CONTACTED = 1
    WORKING = 2
    UPDATING = 3
    NOT_WORKING = 4


class ConnectionStatus(StrEnum):
    CONNECTED = 'connected'
    FIREWALLED = 'firewalled'
    DISCONNECTED = 'disconnected'


class TorrentFilter(StrEnum):
    ALL = 'all'
    DOWNLOADING = 'downloading'
    SEEDING = 'seeding'
    COMPLETED = 'completed'
    PAUSED = 'paused'
    ACTIVE = 'active'
    INACTIVE = 'inactive'
    RESUMED = 'resumed'
    STALLED = 'stalled'
    STALLED_UPLOADING = 'stalled_uploading'
    STALLED_DOWNLOADING = 'stalled_downloading'
    ERRORED = 'errored'


class BuildInfo(Record):
    """Versions of the libraries the daemon was built with"""

    qt: str
    libtorrent: str
    boost: str
    openssl: str
    bitness: int
    zlib: str | None = None


class Preferences(Record):
    """Application preferences

    Every field is optional so a partial record can be sent back through
    ``set_preferences``, only the fields that are set are changed.
    """

    locale: str | None = None
    save_path: str | None = None
    temp_path_enabled: bool | None = None
    temp_path: str | None = None
    create_subfolder_enabled: bool | None = None
    start_paused_enabled: bool | None = None
    auto_tmm_enabled: bool | None = None
    preallocate_all: bool | None = None
    incomplete_files_ext: bool | None = None
    export_dir: str | None = None
    queueing_enabled: bool | None = None
    max_active_downloads: int | None = None
    max_active_torrents: int | None = None
    max_active_uploads: int | None = None
    dont_count_slow_torrents: bool | None = None
    max_ratio_enabled: bool | None = None
    max_ratio: float | None = None
    max_ratio_act: int | None = None
    max_seeding_time_enabled: bool | None = None
    max_seeding_time: int | None = None
    listen_port: int | None = None
    upnp: bool | None = None
    random_port: bool | None = None
    dl_limit: int | None = None
    up_limit: int | None = None
    alt_dl_limit: int | None = None
    alt_up_limit: int | None = None
    max_connec: int | None = None
    max_connec_per_torrent: int | None = None
    max_uploads: int | None = None
    max_uploads_per_torrent: int | None = None
    scheduler_enabled: bool | None = None
    dht: bool | None = None
    pex: bool | None = None
    lsd: bool | None = None
    encryption: int | None = None
    anonymous_mode: bool | None = None
    web_ui_port: int | None = None
    web_ui_username: str | None = None
    bypass_local_auth: bool | None = None


class Log(Record):
    id: int
    message: str
    timestamp: int
    type: LogType


class PeerLog(Record):
    id: int
    ip: str
    timestamp: int
    blocked: bool
    reason: str = ''


class GetLogsArg(Arg):
    """Filter for ``log/main``, unset flags use the daemon defaults"""

    normal: bool | None = None
    info: bool | None = None
    warning: bool | None = None
    critical: bool | None = None
    last_known_id: int | None = None


class Torrent(Record):
    """Torrent entry from ``torrents/info`` or a ``sync/maindata`` delta"""

    hash: str | None = None
    name: str | None = None
    state: str | None = None
    size: int | None = None
    total_size: int | None = None
    progress: float | None = None
    dlspeed: int | None = None
    upspeed: int | None = None
    dl_limit: int | None = None
    up_limit: int | None = None
    downloaded: int | None = None
    uploaded: int | None = None
    downloaded_session: int | None = None
    uploaded_session: int | None = None
    amount_left: int | None = None
    completed: int | None = None
    ratio: float | None = None
    ratio_limit: float | None = None
    max_ratio: float | None = None
    seeding_time: int | None = None
    seeding_time_limit: int | None = None
    max_seeding_time: int | None = None
    eta: int | None = None
    num_seeds: int | None = None
    num_leechs: int | None = None
    num_complete: int | None = None
    num_incomplete: int | None = None
    priority: int | None = None
    category: str | None = None
    tags: str | None = None
    tracker: str | None = None
    save_path: str | None = None
    content_path: str | None = None
    magnet_uri: str | None = None
    added_on: int | None = None
    completion_on: int | None = None
    last_activity: int | None = None
    seen_complete: int | None = None
    time_active: int | None = None
    availability: float | None = None
    auto_tmm: bool | None = None
    force_start: bool | None = None
    seq_dl: bool | None = None
    f_l_piece_prio: bool | None = None
    super_seeding: bool | None = None


class GetTorrentListArg(Arg):
    """Filter, sort and paging options for ``torrents/info``"""

    filter: TorrentFilter | None = None
    category: str | None = None
    tag: str | None = None
    sort: str | None = None
    reverse: bool | None = None
    limit: int | None = None
    offset: int | None = None
    hashes: Hashes | None = None

    @field_validator('hashes', mode='before')
    @classmethod
    def coerce_hashes(cls, v: Any) -> Hashes | None:
        return None if v is None else Hashes.coerce(v)


class TorrentProperty(Record):
    """Generic properties of one torrent"""

    save_path: str | None = None
    creation_date: int | None = None
    piece_size: int | None = None
    comment: str | None = None
    total_wasted: int | None = None
    total_uploaded: int | None = None
    total_uploaded_session: int | None = None
    total_downloaded: int | None = None
    total_downloaded_session: int | None = None
    total_size: int | None = None
    up_limit: int | None = None
    dl_limit: int | None = None
    time_elapsed: int | None = None
    seeding_time: int | None = None
    nb_connections: int | None = None
    nb_connections_limit: int | None = None
    share_ratio: float | None = None
    addition_date: int | None = None
    completion_date: int | None = None
    created_by: str | None = None
    dl_speed: int | None = None
    dl_speed_avg: int | None = None
    up_speed: int | None = None
    up_speed_avg: int | None = None
    eta: int | None = None
    last_seen: int | None = None
    peers: int | None = None
    peers_total: int | None = None
    seeds: int | None = None
    seeds_total: int | None = None
    pieces_have: int | None = None
    pieces_num: int | None = None
    reannounce: int | None = None


class Tracker(Record):
    url: str
    status: TrackerStatus
    tier: int | str
    num_peers: int
    num_seeds: int
    num_leeches: int
    num_downloaded: int
    msg: str = ''


class WebSeed(Record):
    url: str


class TorrentContent(Record):
    """File inside a torrent"""

    index: int | None = None
    name: str
    size: int
    progress: float
    priority: Priority
    is_seed: bool | None = None
    piece_range: list[int] = Field(default_factory=list)
    availability: float | None = None


class Category(Record):
    name: str
    save_path: str = Field(default='', alias='savePath')


class TransferInfo(Record):
    """Global transfer statistics"""

    dl_info_speed: int
    dl_info_data: int
    up_info_speed: int
    up_info_data: int
    dl_rate_limit: int
    up_rate_limit: int
    dht_nodes: int
    connection_status: ConnectionStatus


class ServerState(Record):
    """Partial transfer statistics carried by ``sync/maindata``"""

    dl_info_speed: int | None = None
    dl_info_data: int | None = None
    up_info_speed: int | None = None
    up_info_data: int | None = None
    dl_rate_limit: int | None = None
    up_rate_limit: int | None = None
    dht_nodes: int | None = None
    connection_status: ConnectionStatus | None = None
    alltime_dl: int | None = None
    alltime_ul: int | None = None
    free_space_on_disk: int | None = None
    queueing: bool | None = None
    use_alt_speed_limits: bool | None = None
    refresh_interval: int | None = None


class SyncData(Record):
    """Main data delta since response id ``rid``"""

    rid: int
    full_update: bool | None = None
    torrents: dict[str, Torrent] | None = None
    torrents_removed: list[str] | None = None
    categories: dict[str, Category] | None = None
    categories_removed: list[str] | None = None
    tags: list[str] | None = None
    tags_removed: list[str] | None = None
    server_state: ServerState | None = None


class Peer(Record):
    ip: str | None = None
    port: int | None = None
    client: str | None = None
    connection: str | None = None
    country: str | None = None
    country_code: str | None = None
    flags: str | None = None
    flags_desc: str | None = None
    files: str | None = None
    progress: float | None = None
    relevance: float | None = None
    dl_speed: int | None = None
    up_speed: int | None = None
    downloaded: int | None = None
    uploaded: int | None = None


class PeerSyncData(Record):
    """Peer data delta of one torrent since response id ``rid``"""

    rid: int
    full_update: bool | None = None
    show_flags: bool | None = None
    peers: dict[str, Peer] | None = None
    peers_removed: list[str] | None = None


class AddTorrentArg(Arg):
    """Options for ``torrents/add``"""

    savepath: str | None = None
    cookie: str | None = None
    category: str | None = None
    tags: list[str] | None = None
    skip_checking: bool | None = None
    paused: bool | None = None
    root_folder: bool | None = None
    rename: str | None = None
    up_limit: int | None = Field(default=None, alias='upLimit')
    dl_limit: int | None = Field(default=None, alias='dlLimit')
    ratio_limit: float | None = Field(default=None, alias='ratioLimit')
    seeding_time_limit: int | None = Field(default=None, alias='seedingTimeLimit')
    auto_tmm: bool | None = Field(default=None, alias='autoTMM')
    sequential_download: bool | None = Field(default=None, alias='sequentialDownload')
    first_last_piece_prio: bool | None = Field(default=None, alias='firstLastPiecePrio')


class TorrentSource(BaseModel):
    """Torrents to add, either by URL/magnet or as ``.torrent`` file contents"""

    urls: list[str] = Field(default_factory=list)
    files: dict[str, bytes] = Field(default_factory=dict)

    @classmethod
    def from_urls(cls, *urls: str) -> 'TorrentSource':
        return cls(urls=list(urls))

    @classmethod
    def from_file(cls, name: str, content: bytes) -> 'TorrentSource':
        return cls(files={name: content})


class SetTorrentSharedLimitArg(Arg):
    """Share ratio and seeding time limits, -2 means global limit, -1 no limit"""

    hashes: Hashes
    ratio_limit: float | None = Field(default=None, alias='ratioLimit')
    seeding_time_limit: int | None = Field(default=None, alias='seedingTimeLimit')
    inactive_seeding_time_limit: int | None = Field(default=None, alias='inactiveSeedingTimeLimit')

    @field_validator('hashes', mode='before')
    @classmethod
    def coerce_hashes(cls, v: Any) -> Hashes:
        return Hashes.coerce(v)
