"""Pytest configuration and shared fixtures"""

import asyncio
from collections.abc import AsyncGenerator, Callable
from typing import Any

import httpx
import pytest
import pytest_asyncio
from faker import Faker

from qbit_client.api.client import QBittorrentClient
from qbit_client.api.session import Credential
from qbit_client.config import Settings

fake = Faker()

BASE_URL = 'http://qbt.example.org:8080/'
SESSION_COOKIE = 'c2Vzc2lvbi1jb29raWU'

Route = Callable[[httpx.Request], httpx.Response]


class FakeDaemon:
    """In-memory qBittorrent Web API behind an httpx.MockTransport"""

    def __init__(self, cookie: str = SESSION_COOKIE):
        self.cookie = cookie
        self.requests: list[httpx.Request] = []
        self.routes: dict[str, Route] = {}

    def route(
        self,
        path: str,
        status: int = 200,
        text: str | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Answer ``path`` with a fresh response for every request"""

        def respond(request: httpx.Request) -> httpx.Response:
            if json is not None:
                return httpx.Response(status, json=json, headers=headers)
            return httpx.Response(status, text=text or '', headers=headers)

        self.routes[path] = respond

    def login_ok(self) -> httpx.Response:
        return httpx.Response(200, text='Ok.', headers={'set-cookie': f'SID={self.cookie}; HttpOnly; path=/'})

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = self.path_of(request)

        if path == 'auth/login':
            # Let concurrent callers interleave while the login is in flight
            await asyncio.sleep(0)

        route = self.routes.get(path)
        if route is not None:
            return route(request)
        if path == 'auth/login':
            return self.login_ok()
        return httpx.Response(404)

    @staticmethod
    def path_of(request: httpx.Request) -> str:
        return request.url.path.removeprefix('/api/v2/')

    @property
    def paths(self) -> list[str]:
        return [self.path_of(request) for request in self.requests]

    def last(self, path: str) -> httpx.Request:
        for request in reversed(self.requests):
            if self.path_of(request) == path:
                return request
        raise AssertionError(f'No request to {path}')


@pytest.fixture
def daemon() -> FakeDaemon:
    return FakeDaemon()


@pytest_asyncio.fixture
async def http_client(daemon: FakeDaemon) -> AsyncGenerator[httpx.AsyncClient]:
    async with httpx.AsyncClient(transport=httpx.MockTransport(daemon.handler)) as client:
        yield client


@pytest.fixture
def credential() -> Credential:
    return Credential(username='admin', password='adminadmin')


@pytest.fixture
def qb(base_url: str, http_client: httpx.AsyncClient, credential: Credential) -> QBittorrentClient:
    """Credential based client talking to the fake daemon"""
    return QBittorrentClient(base_url, credential, http_client)


@pytest.fixture
def torrent_hash() -> str:
    return fake.sha1()


@pytest.fixture
def piece_hashes() -> list[str]:
    return [fake.sha1() for _ in range(4)]


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        base_url=BASE_URL,
        username='admin',
        password='adminadmin',
        session_cookie=None,
        timeout=5,
        log_level='DEBUG',
    )


@pytest.fixture
def base_url() -> str:
    return BASE_URL
