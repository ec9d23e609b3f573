"""Unit tests for the request pipeline of QBittorrentClient"""

import asyncio
import json

import httpx
import pytest

from qbit_client.api import endpoints as ep
from qbit_client.api.client import QBittorrentClient, resolve_api_url
from qbit_client.api.errors import (
    AccessDeniedError,
    BadResponseError,
    HttpError,
    IpBannedError,
    LoginFailedError,
    NotLoggedInError,
    TorrentNotFoundError,
    UnknownStatusCodeError,
)
from qbit_client.models import BuildInfo, Preferences

BUILD_INFO = {'qt': '6.5.2', 'libtorrent': '2.0.9.0', 'boost': '1.83.0', 'openssl': '3.1.3', 'bitness': 64}


class TestConstruction:
    """Test endpoint validation and credential handling"""

    def test_api_url_is_joined(self):
        """Test API root is appended to the base URL"""
        assert str(resolve_api_url('http://localhost:8080')) == 'http://localhost:8080/api/v2/'

    def test_api_url_keeps_base_path(self):
        """Test base path of a reverse proxied Web UI is kept"""
        assert str(resolve_api_url('https://example.org/qbittorrent')) == 'https://example.org/qbittorrent/api/v2/'

    @pytest.mark.parametrize('endpoint', ['', 'not a url', 'ftp://example.org', '/api'])
    def test_malformed_base_fails_at_construction(self, endpoint, credential):
        """Test malformed base URL is rejected by the constructor"""
        with pytest.raises(ValueError, match='Invalid API endpoint'):
            QBittorrentClient(endpoint, credential)

    def test_credential_and_cookie_are_exclusive(self, base_url, credential):
        """Test credential and cookie cannot be given together"""
        with pytest.raises(ValueError, match='Exactly one'):
            QBittorrentClient(base_url, credential, cookie='abc')

    def test_credential_or_cookie_required(self, base_url):
        """Test client without credential or cookie is rejected"""
        with pytest.raises(ValueError, match='Exactly one'):
            QBittorrentClient(base_url)


class TestLogin:
    """Test the lazy login flow"""

    @pytest.mark.asyncio
    async def test_first_call_logs_in_before_target(self, qb, daemon):
        """Test first call sends login before the target request"""
        daemon.route('app/version', text='v4.6.2')

        assert await qb.get_version() == 'v4.6.2'

        assert daemon.paths == ['auth/login', 'app/version']
        login = daemon.requests[0]
        assert login.method == 'POST'
        assert login.url.params['username'] == 'admin'
        assert login.url.params['password'] == 'adminadmin'
        assert daemon.requests[1].headers['cookie'] == f'SID={daemon.cookie}'
        assert await qb.get_cookie() == daemon.cookie

    @pytest.mark.asyncio
    async def test_login_happens_once(self, qb, daemon):
        """Test session cookie is reused by later calls"""
        daemon.route('app/version', text='v4.6.2')

        await qb.get_version()
        await qb.get_version()

        assert daemon.paths == ['auth/login', 'app/version', 'app/version']

    @pytest.mark.asyncio
    async def test_concurrent_calls_share_one_login(self, qb, daemon):
        """Test concurrent first calls trigger a single login"""
        daemon.route('app/version', text='v4.6.2')

        results = await asyncio.gather(*(qb.get_version() for _ in range(5)))

        assert results == ['v4.6.2'] * 5
        assert daemon.paths.count('auth/login') == 1
        assert daemon.paths.count('app/version') == 5
        assert daemon.paths[0] == 'auth/login'

    @pytest.mark.asyncio
    async def test_preset_cookie_never_logs_in(self, base_url, http_client, daemon):
        """Test preset session cookie skips login"""
        daemon.route('app/version', text='v4.6.2')
        qb = QBittorrentClient.with_cookie(base_url, 'preset', http_client)

        await qb.get_version()
        await qb.get_version()

        assert 'auth/login' not in daemon.paths
        assert daemon.last('app/version').headers['cookie'] == 'SID=preset'
        assert await qb.get_cookie() == 'preset'

    @pytest.mark.asyncio
    async def test_custom_cookie_name(self, base_url, http_client, credential, daemon):
        """Test session cookie is read and sent under a custom name"""
        daemon.routes['auth/login'] = lambda request: httpx.Response(
            200, text='Ok.', headers={'set-cookie': 'QBT_SID_8080=custom; path=/'}
        )
        daemon.route('app/version', text='v5.0.0')
        qb = QBittorrentClient(base_url, credential, http_client, cookie_name='QBT_SID_8080')

        await qb.get_version()

        assert daemon.last('app/version').headers['cookie'] == 'QBT_SID_8080=custom'

    @pytest.mark.asyncio
    async def test_login_cookie_is_not_left_in_shared_jar(self, qb, daemon, http_client):
        """Test session cookie is kept out of the HTTP client cookie jar"""
        daemon.route('app/version', text='v4.6.2')

        await qb.get_version()
        await qb.get_version()

        assert http_client.cookies.get('SID') is None
        assert daemon.last('app/version').headers['cookie'] == f'SID={daemon.cookie}'

    @pytest.mark.asyncio
    async def test_forbidden_login_is_ip_banned(self, qb, daemon):
        """Test 403 on login means the IP is banned"""
        daemon.route('auth/login', status=403)

        with pytest.raises(IpBannedError):
            await qb.get_version()

        assert daemon.paths == ['auth/login']
        assert await qb.get_cookie() is None

    @pytest.mark.asyncio
    async def test_failed_login_is_retried_on_next_call(self, qb, daemon):
        """Test failed login is attempted again by the next call"""
        daemon.route('auth/login', status=403)
        daemon.route('app/version', text='v4.6.2')

        with pytest.raises(IpBannedError):
            await qb.get_version()

        del daemon.routes['auth/login']
        assert await qb.get_version() == 'v4.6.2'
        assert daemon.paths == ['auth/login', 'auth/login', 'app/version']

    @pytest.mark.asyncio
    async def test_wrong_credentials(self, qb, daemon):
        """Test Fails. body on login raises LoginFailedError"""
        daemon.route('auth/login', text='Fails.')

        with pytest.raises(LoginFailedError):
            await qb.get_version()
        assert await qb.get_cookie() is None

    @pytest.mark.asyncio
    async def test_login_without_cookie(self, qb, daemon):
        """Test login response without a session cookie"""
        daemon.route('auth/login', text='Ok.')

        with pytest.raises(BadResponseError, match='`SID` cookie'):
            await qb.get_version()

    @pytest.mark.asyncio
    async def test_unknown_login_status(self, qb, daemon):
        """Test unmapped status on login"""
        daemon.route('auth/login', status=500)

        with pytest.raises(UnknownStatusCodeError) as exc_info:
            await qb.get_version()
        assert exc_info.value.status_code == 500


class TestStatusHandling:
    """Test status classification on regular calls"""

    @pytest.mark.asyncio
    async def test_forbidden_is_not_logged_in_and_not_retried(self, qb, daemon):
        """Test 403 after login raises NotLoggedInError without a retry"""
        daemon.route('app/version', status=403)

        with pytest.raises(NotLoggedInError):
            await qb.get_version()

        assert daemon.paths == ['auth/login', 'app/version']
        assert await qb.get_cookie() == daemon.cookie

    @pytest.mark.asyncio
    async def test_torrent_not_found(self, qb, daemon, torrent_hash):
        """Test 404 on a torrent call raises TorrentNotFoundError"""
        daemon.route('torrents/properties', status=404)

        with pytest.raises(TorrentNotFoundError):
            await qb.get_torrent_properties(torrent_hash)

        assert daemon.last('torrents/properties').url.params['hash'] == torrent_hash

    @pytest.mark.asyncio
    async def test_unknown_status(self, qb, daemon):
        """Test unmapped status raises UnknownStatusCodeError"""
        daemon.route('app/buildInfo', status=418, json=BUILD_INFO)

        with pytest.raises(UnknownStatusCodeError, match='418'):
            await qb.get_build_info()

    @pytest.mark.asyncio
    async def test_override_beats_default_forbidden(self, qb, daemon, torrent_hash):
        """Test per call 403 override wins over the default"""
        daemon.route('torrents/setLocation', status=403)

        with pytest.raises(AccessDeniedError):
            await qb.set_torrent_location(torrent_hash, '/downloads/movies')

    @pytest.mark.asyncio
    async def test_error_status_with_text_body(self, qb, daemon):
        """Test error status is classified before the body is decoded"""
        daemon.route('transfer/speedLimitsMode', status=500, text='1')

        with pytest.raises(UnknownStatusCodeError):
            await qb.get_speed_limits_mode()


class TestTransportErrors:
    """Test wrapping of transport failures"""

    @pytest.mark.asyncio
    async def test_connection_error_is_wrapped(self, base_url, credential):
        """Test connection failure surfaces as HttpError"""

        def refuse(request):
            raise httpx.ConnectError('Connection refused', request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(refuse)) as http_client:
            qb = QBittorrentClient(base_url, credential, http_client)
            with pytest.raises(HttpError) as exc_info:
                await qb.get_version()

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert isinstance(exc_info.value.error, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_timeout_on_call_is_wrapped(self, base_url, http_client, daemon):
        """Test read timeout surfaces as HttpError"""

        def timeout(request):
            raise httpx.ReadTimeout('timed out', request=request)

        daemon.routes['app/version'] = timeout
        qb = QBittorrentClient.with_cookie(base_url, 'preset', http_client)

        with pytest.raises(HttpError, match='timed out'):
            await qb.get_version()


class TestRequestBody:
    """Test JSON bodies built by the pipeline"""

    @pytest.mark.asyncio
    async def test_record_is_sent_as_json(self, qb, daemon):
        """Test record body is sent as JSON without unset fields"""
        daemon.route('app/setPreferences')

        await qb._call(ep.SET_PREFERENCES, body=Preferences(dht=False))

        request = daemon.last('app/setPreferences')
        assert request.method == 'POST'
        assert request.headers['content-type'] == 'application/json'
        assert json.loads(request.content) == {'dht': False}
        assert request.headers['cookie'] == f'SID={daemon.cookie}'

    @pytest.mark.asyncio
    async def test_mapping_body_drops_none(self, qb, daemon):
        """Test mapping body leaves out None values"""
        daemon.route('app/setPreferences')

        await qb._call(ep.SET_PREFERENCES, {'rid': None}, body={'dl_limit': 0, 'up_limit': None})

        request = daemon.last('app/setPreferences')
        assert json.loads(request.content) == {'dl_limit': 0}
        assert dict(request.url.params) == {}


class TestDecoding:
    """Test typed decoding of response bodies"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(('body', 'expected'), [('1', True), ('0', False)])
    async def test_speed_limits_mode(self, qb, daemon, body, expected):
        """Test alternative speed limits mode flag"""
        daemon.route('transfer/speedLimitsMode', text=body)
        assert await qb.get_speed_limits_mode() is expected

    @pytest.mark.asyncio
    async def test_speed_limits_mode_rejects_other_values(self, qb, daemon):
        """Test speed limits mode other than 0 or 1"""
        daemon.route('transfer/speedLimitsMode', text='7')

        with pytest.raises(BadResponseError, match='transfer/speedLimitsMode'):
            await qb.get_speed_limits_mode()

    @pytest.mark.asyncio
    async def test_download_limit(self, qb, daemon):
        """Test global download limit"""
        daemon.route('transfer/downloadLimit', text='1048576')
        assert await qb.get_download_limit() == 1048576

    @pytest.mark.asyncio
    async def test_upload_limit_rejects_text(self, qb, daemon):
        """Test non-number upload limit"""
        daemon.route('transfer/uploadLimit', text='unlimited')

        with pytest.raises(BadResponseError, match='non-number'):
            await qb.get_upload_limit()

    @pytest.mark.asyncio
    @pytest.mark.parametrize('body', ['²', '١٢', '-1', '1.5', ''])
    async def test_download_limit_rejects_non_decimal(self, qb, daemon, body):
        """Test limit that is not a plain ASCII number"""
        daemon.route('transfer/downloadLimit', text=body)

        with pytest.raises(BadResponseError, match='transfer/downloadLimit'):
            await qb.get_download_limit()

    @pytest.mark.asyncio
    async def test_build_info_is_idempotent(self, qb, daemon):
        """Test build info is decoded to equal records"""
        daemon.route('app/buildInfo', json=BUILD_INFO)

        first = await qb.get_build_info()
        second = await qb.get_build_info()

        assert isinstance(first, BuildInfo)
        assert first == second
        assert first.bitness == 64

    @pytest.mark.asyncio
    async def test_malformed_json(self, qb, daemon):
        """Test truncated JSON body"""
        daemon.route('app/buildInfo', text='{"qt": ')

        with pytest.raises(BadResponseError, match='app/buildInfo'):
            await qb.get_build_info()

    @pytest.mark.asyncio
    async def test_wrong_json_shape(self, qb, daemon):
        """Test JSON body of the wrong shape"""
        daemon.route('torrents/info', json={'not': 'a list'})

        with pytest.raises(BadResponseError):
            await qb.get_torrent_list()

    @pytest.mark.asyncio
    async def test_default_save_path(self, qb, daemon):
        """Test default save path"""
        daemon.route('app/defaultSavePath', text='/downloads')
        assert str(await qb.get_default_save_path()) == '/downloads'


class TestLifecycle:
    """Test ownership of the HTTP client"""

    @pytest.mark.asyncio
    async def test_owned_client_is_closed(self, base_url, credential):
        """Test client created by QBittorrentClient is closed on exit"""
        qb = QBittorrentClient(base_url, credential)
        async with qb:
            pass
        assert qb._client.is_closed

    @pytest.mark.asyncio
    async def test_injected_client_is_left_open(self, qb, http_client):
        """Test injected client is left open on exit"""
        async with qb:
            pass
        assert not http_client.is_closed
