"""
Response decoding for completed poll results.
"""

import base64
import binascii
import json
from typing import Any, Callable, Mapping, Optional

from mpc_connect import base58
from mpc_connect.errors import DecodingError, ResponseDecodingError, WalletPublicKeyError
from mpc_connect.models.envelope import SignedTransaction, TransactionKind

PUBLIC_KEY_LENGTH = 32

TransactionFactory = Callable[[bytes], Any]


def _default_factory(kind: TransactionKind) -> TransactionFactory:
    return lambda raw: SignedTransaction(kind=kind, data=raw)


def _load(data: Any) -> Any:
    if isinstance(data, (str, bytes)):
        try:
            return json.loads(data)
        except json.JSONDecodeError as e:
            raise ResponseDecodingError(f"Response is not valid JSON: {e}")
    return data


def decode_transactions(
    data: Any,
    factories: Optional[Mapping[TransactionKind, TransactionFactory]] = None,
) -> list[Any]:
    """Decode a send/sign-transaction response into transactions, in order.

    Each element is ``{"t": kind, "d": base64}``. ``factories`` maps a kind to
    a callable rebuilding the caller's transaction type from raw bytes.
    """
    items = _load(data)
    if not isinstance(items, list):
        raise ResponseDecodingError(f"Expected a list of transactions, got {type(items).__name__}")

    factories = factories or {}
    decoded = []
    for position, item in enumerate(items):
        if not isinstance(item, dict) or "t" not in item or "d" not in item:
            raise ResponseDecodingError(f"Malformed transaction at position {position}: {item!r}")
        try:
            if type(item["t"]) is not int:
                raise ValueError(item["t"])
            kind = TransactionKind(item["t"])
        except ValueError:
            raise ResponseDecodingError(
                f"Unknown transaction kind {item['t']!r} at position {position}",
                details={"position": position, "kind": item["t"]},
            )
        try:
            raw = base64.b64decode(item["d"], validate=True)
        except (binascii.Error, TypeError, ValueError) as e:
            raise ResponseDecodingError(f"Malformed base64 at position {position}: {e}")

        factory = factories.get(kind) or _default_factory(kind)
        try:
            decoded.append(factory(raw))
        except Exception as e:
            raise ResponseDecodingError(f"Cannot rebuild {kind.name.lower()} transaction at position {position}: {e}") from e
    return decoded


def decode_signature(data: Any) -> Any:
    """Message signatures are opaque and passed through as received."""
    return data


def decode_public_key(data: Any) -> str:
    if not isinstance(data, str):
        raise WalletPublicKeyError(f"Expected a base58 public key, got {type(data).__name__}")
    try:
        raw = base58.decode(data)
    except DecodingError as e:
        raise WalletPublicKeyError(str(e)) from e
    if len(raw) != PUBLIC_KEY_LENGTH:
        raise WalletPublicKeyError(f"Public key must be {PUBLIC_KEY_LENGTH} bytes, got {len(raw)}")
    return data.strip()
