"""
Envelope construction and token encoding.

A token is base58(compact JSON of the envelope wire form).
"""

import json
import uuid
from typing import Any, Optional, Sequence, Union

from pydantic import ValidationError

from mpc_connect import base58
from mpc_connect.errors import DecodingError
from mpc_connect.models.envelope import (
    ChainDescriptor,
    PreconnectEnvelope,
    RequestEnvelope,
    RequestKind,
    TaggedBlob,
    UnsignedTransaction,
)

TransactionLike = Union[TaggedBlob, UnsignedTransaction]


def new_session_id() -> str:
    return str(uuid.uuid4())


def build_connect(
    chain: ChainDescriptor,
    session_id: str,
    origin: str,
    redirect: Optional[str] = None,
) -> RequestEnvelope:
    return RequestEnvelope(
        kind=RequestKind.CONNECT,
        session_id=session_id,
        origin=origin,
        chain=chain,
        redirect=redirect,
    )


def build_sign(
    chain: ChainDescriptor,
    message: Union[bytes, str],
    session_id: str,
    origin: str,
    redirect: Optional[str] = None,
) -> RequestEnvelope:
    """Raw message bytes are base58 encoded; text is carried unchanged."""
    if isinstance(message, (bytes, bytearray, memoryview)):
        message = base58.encode(message)
    return RequestEnvelope(
        kind=RequestKind.SIGN,
        session_id=session_id,
        origin=origin,
        chain=chain,
        payload=message,
        redirect=redirect,
    )


def to_tagged_blob(tx: TransactionLike) -> TaggedBlob:
    if isinstance(tx, TaggedBlob):
        return tx
    return TaggedBlob(kind=tx.kind, data=base58.encode(tx.data))


def build_send(
    chain: ChainDescriptor,
    transactions: Sequence[TransactionLike],
    session_id: str,
    origin: str,
    redirect: Optional[str] = None,
) -> RequestEnvelope:
    return RequestEnvelope(
        kind=RequestKind.SEND,
        session_id=session_id,
        origin=origin,
        chain=chain,
        payload=tuple(to_tagged_blob(tx) for tx in transactions),
        redirect=redirect,
    )


def build_preconnect(session_id: str) -> PreconnectEnvelope:
    return PreconnectEnvelope(session_id=session_id)


def encode_token(envelope: Union[RequestEnvelope, PreconnectEnvelope]) -> str:
    body = json.dumps(envelope.to_wire(), separators=(",", ":"))
    return base58.encode(body.encode("utf-8"))


def _from_wire(wire: dict[str, Any]) -> Union[RequestEnvelope, PreconnectEnvelope]:
    if wire.get("p"):
        return PreconnectEnvelope(session_id=wire["i"])
    kind = RequestKind(wire["t"])
    d = wire.get("d")
    if kind == RequestKind.CONNECT:
        origin, payload = d, None
    else:
        origin, payload = "", d
    return RequestEnvelope(
        kind=kind,
        session_id=wire["i"],
        origin=origin,
        chain=ChainDescriptor.model_validate(wire.get("c") or {}),
        payload=payload,
        redirect=wire.get("r"),
    )


def parse_token(token: str) -> Union[RequestEnvelope, PreconnectEnvelope]:
    """Parse a companion token back into an envelope.

    Only CONNECT tokens carry the origin; SIGN/SEND come back with origin "".
    """
    raw = base58.decode(token)
    try:
        wire = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecodingError(f"Token is not an encoded JSON envelope: {e}")
    if not isinstance(wire, dict):
        raise DecodingError("Token does not encode a JSON object")
    try:
        return _from_wire(wire)
    except (KeyError, ValueError, ValidationError) as e:
        raise DecodingError(f"Malformed envelope: {e}")
