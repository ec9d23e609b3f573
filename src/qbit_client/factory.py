"""Factory for creating client instances"""

import httpx

from qbit_client.api.client import QBittorrentClient
from qbit_client.api.session import Credential
from qbit_client.config import Settings, settings


def get_qbit_client(config: Settings | None = None, client: httpx.AsyncClient | None = None) -> QBittorrentClient:
    """Get a client configured from settings

    A configured session cookie takes precedence over username/password.

    Args:
        config: Settings to use, the global settings by default
        client: Optional HTTP client to send requests through

    Returns:
        QBittorrentClient instance
    """
    config = config or settings

    if config.session_cookie:
        return QBittorrentClient.with_cookie(
            config.base_url,
            config.session_cookie,
            client,
            cookie_name=config.session_cookie_name,
            timeout=config.timeout,
        )
    return QBittorrentClient(
        config.base_url,
        Credential(username=config.username, password=config.password),
        client,
        cookie_name=config.session_cookie_name,
        timeout=config.timeout,
    )
