"""Decoding of successful response bodies into typed values"""

from collections.abc import Callable
from typing import Any, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from .errors import BadResponseError

T = TypeVar('T')

Decoder = Callable[[httpx.Response], T]


def discard(response: httpx.Response) -> None:
    """Ignore the body of a call that returns nothing"""
    return None


def text(response: httpx.Response) -> str:
    return response.text


def json_as(tp: Any, explain: str) -> Decoder[Any]:
    """Decode a JSON body and validate it against ``tp``"""
    adapter: TypeAdapter[Any] = TypeAdapter(tp)

    def decode(response: httpx.Response) -> Any:
        try:
            return adapter.validate_json(response.content)
        except ValidationError as e:
            raise BadResponseError(explain) from e

    return decode


def integer(explain: str) -> Decoder[int]:
    """Decode a bare decimal number sent as plain text"""

    def decode(response: httpx.Response) -> int:
        body = response.text.strip()
        if not (body.isascii() and body.isdigit()):
            raise BadResponseError(explain)
        return int(body)

    return decode


def flag(explain: str) -> Decoder[bool]:
    """Decode a ``0``/``1`` plain text body, anything else is rejected"""

    def decode(response: httpx.Response) -> bool:
        body = response.text.strip()
        if body == '0':
            return False
        if body == '1':
            return True
        raise BadResponseError(explain)

    return decode
