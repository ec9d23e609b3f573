"""Encoding of call arguments into query strings and JSON bodies"""

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar('T', str, int)


class Sep(Generic[T]):
    """List argument sent as one field joined by a fixed separator"""

    __slots__ = ('items', 'separator')

    def __init__(self, items: Iterable[T] | T, separator: str):
        if isinstance(items, str | int):
            items = [items]
        self.items: tuple[T, ...] = tuple(items)
        self.separator = separator

    def __str__(self) -> str:
        return self.separator.join(str(item) for item in self.items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sep):
            return NotImplemented
        return self.items == other.items and self.separator == other.separator

    def __hash__(self) -> int:
        return hash((self.items, self.separator))

    def __repr__(self) -> str:
        return f'Sep({list(self.items)!r}, {self.separator!r})'


class Hashes:
    """Set of torrent hashes, or every torrent the daemon knows about

    ``Hashes.ALL`` serializes to ``all`` and is not the same thing as an
    empty hash set, which serializes to an empty string.
    """

    ALL: 'Hashes'

    __slots__ = ('_hashes', '_all')

    def __init__(self, hashes: Iterable[str] | str = (), *, _all: bool = False):
        if isinstance(hashes, str):
            hashes = [hashes]
        self._hashes: tuple[str, ...] = tuple(hashes)
        self._all = _all

    @classmethod
    def coerce(cls, value: 'Hashes | Iterable[str] | str') -> 'Hashes':
        if isinstance(value, Hashes):
            return value
        if isinstance(value, str) and value == 'all':
            return cls.ALL
        return cls(value)

    @property
    def is_all(self) -> bool:
        return self._all

    @property
    def hashes(self) -> tuple[str, ...]:
        return self._hashes

    def __str__(self) -> str:
        if self._all:
            return 'all'
        return '|'.join(self._hashes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Hashes):
            return NotImplemented
        return self._all == other._all and self._hashes == other._hashes

    def __hash__(self) -> int:
        return hash((self._all, self._hashes))

    def __repr__(self) -> str:
        return 'Hashes.ALL' if self._all else f'Hashes({list(self._hashes)!r})'


Hashes.ALL = Hashes(_all=True)


def encode_value(value: Any) -> str:
    """Encode one non-None argument value as a query string value"""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, Enum):
        return encode_value(value.value)
    if isinstance(value, Sep | Hashes):
        return str(value)
    if isinstance(value, int | float | str):
        return str(value)
    raise TypeError(f'Cannot encode {type(value).__name__} as a query value')


def _record_fields(record: BaseModel) -> dict[str, Any]:
    return record.model_dump(by_alias=True, exclude_none=True)


def encode_query(args: Mapping[str, Any] | BaseModel | None) -> dict[str, str]:
    """Encode call arguments into a flat query mapping

    Keys whose value is None are left out instead of being sent empty.
    """
    if args is None:
        return {}
    if isinstance(args, BaseModel):
        args = _record_fields(args)
    return {key: encode_value(value) for key, value in args.items() if value is not None}


def encode_body(record: BaseModel | Mapping[str, Any]) -> dict[str, Any]:
    """Encode a structured record as a JSON-ready dict without unset fields"""
    if isinstance(record, BaseModel):
        return record.model_dump(mode='json', by_alias=True, exclude_none=True)
    return {key: value for key, value in record.items() if value is not None}
