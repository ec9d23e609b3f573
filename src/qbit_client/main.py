"""Command line entry point for qbit-client"""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel

from qbit_client.api.client import QBittorrentClient
from qbit_client.api.errors import QbitError
from qbit_client.config import Settings, settings
from qbit_client.factory import get_qbit_client
from qbit_client.models import GetTorrentListArg, TorrentFilter

log = logging.getLogger(f'{settings.log_prefix}.cli')

Command = Callable[[QBittorrentClient, argparse.Namespace], Awaitable[Any]]


async def _version(client: QBittorrentClient, args: argparse.Namespace) -> dict[str, str]:
    return {'version': await client.get_version(), 'webapi': await client.get_webapi_version()}


async def _build_info(client: QBittorrentClient, args: argparse.Namespace) -> Any:
    return await client.get_build_info()


async def _torrents(client: QBittorrentClient, args: argparse.Namespace) -> Any:
    arg = GetTorrentListArg(filter=args.filter, category=args.category, limit=args.limit)
    return await client.get_torrent_list(arg)


async def _transfer(client: QBittorrentClient, args: argparse.Namespace) -> Any:
    return await client.get_transfer_info()


async def _speed_mode(client: QBittorrentClient, args: argparse.Namespace) -> dict[str, bool]:
    if args.toggle:
        await client.toggle_speed_limits_mode()
    return {'alternative': await client.get_speed_limits_mode()}


COMMANDS: dict[str, Command] = {
    'version': _version,
    'build-info': _build_info,
    'torrents': _torrents,
    'transfer': _transfer,
    'speed-mode': _speed_mode,
}


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode='json', exclude_none=True)
    if isinstance(value, list):
        return [_to_jsonable(item) for item in value]
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='qbit-client', description='Query a qBittorrent daemon')
    parser.add_argument('--config', default='config.toml', help='Path to config.toml')
    parser.add_argument('--base-url', help='Override the configured Web UI base URL')
    subparsers = parser.add_subparsers(dest='command', required=True)

    subparsers.add_parser('version', help='Show daemon and Web API versions')
    subparsers.add_parser('build-info', help='Show library versions of the daemon build')

    torrents = subparsers.add_parser('torrents', help='List torrents')
    torrents.add_argument('--filter', choices=[f.value for f in TorrentFilter], default=None)
    torrents.add_argument('--category', default=None)
    torrents.add_argument('--limit', type=int, default=None)

    subparsers.add_parser('transfer', help='Show global transfer info')

    speed_mode = subparsers.add_parser('speed-mode', help='Show alternative speed limits mode')
    speed_mode.add_argument('--toggle', action='store_true', help='Toggle the mode first')

    return parser


async def run(config: Settings, args: argparse.Namespace) -> Any:
    """Run one command against the configured daemon"""
    async with get_qbit_client(config) as client:
        return _to_jsonable(await COMMANDS[args.command](client, args))


def main(argv: list[str] | None = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    config = Settings.from_toml(args.config) if args.config != 'config.toml' else settings
    if args.base_url:
        config = config.model_copy(update={'base_url': args.base_url})

    logging.basicConfig(level=config.log_level, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    try:
        result = asyncio.run(run(config, args))
    except QbitError as e:
        log.error('Command %s failed: %s', args.command, e)
        return 1
    except ValueError as e:
        log.error('Invalid configuration: %s', e)
        return 1

    json.dump(result, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write('\n')
    return 0


if __name__ == '__main__':
    sys.exit(main())
