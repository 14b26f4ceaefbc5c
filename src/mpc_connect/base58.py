"""
Base58 codec (Bitcoin alphabet, no checksum).

Bytes are read as a big-endian integer; each leading zero byte is written as
a leading '1'. All arithmetic is exact integer arithmetic.
"""

import math
from typing import Union

from mpc_connect.errors import InvalidCharacterError

ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
BASE = len(ALPHABET)

_INDEX = {char: value for value, char in enumerate(ALPHABET)}

BinaryLike = Union[bytes, bytearray, memoryview, str]


def _as_bytes(source: BinaryLike) -> bytes:
    if isinstance(source, str):
        return source.encode("utf-8")
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)
    raise TypeError(
        f"The input must be bytes, bytearray, memoryview or str. "
        f"Received a value of the type {type(source).__name__}."
    )


def max_encoded_length(size: int) -> int:
    """Upper bound on the encoded length of ``size`` input bytes."""
    return math.ceil(size * math.log(256) / math.log(BASE)) + 1


def encode(data: BinaryLike) -> str:
    """Encode bytes (or UTF-8 text) as base58.

    >>> encode(b"Hello World!")
    '2NEpo7TZRRrLZSi2U'
    """
    raw = _as_bytes(data)
    stripped = raw.lstrip(b"\x00")
    zeroes = len(raw) - len(stripped)

    number = int.from_bytes(stripped, "big")
    digits = []
    while number > 0:
        number, remainder = divmod(number, BASE)
        digits.append(ALPHABET[remainder])

    return "1" * zeroes + "".join(reversed(digits))


def decode(text: str) -> bytes:
    """Decode a base58 string.

    Raises InvalidCharacterError for characters outside the alphabet; its
    index counts from the start of the stripped input, leading '1's included.
    """
    text = text.strip()
    body = text.lstrip("1")
    ones = len(text) - len(body)

    number = 0
    for index, char in enumerate(text):
        if index < ones:
            continue
        value = _INDEX.get(char)
        if value is None:
            raise InvalidCharacterError(index, char)
        number = number * BASE + value

    if not body:
        return b"\x00" * ones
    return b"\x00" * ones + number.to_bytes((number.bit_length() + 7) // 8, "big")
