"""Envelope construction and token encoding."""

import json

import pytest

from mpc_connect import base58
from mpc_connect.errors import DecodingError
from mpc_connect.models.envelope import (
    SOLANA_MAINNET,
    ChainDescriptor,
    PreconnectEnvelope,
    RequestKind,
    TaggedBlob,
    TransactionKind,
    UnsignedTransaction,
)
from mpc_connect.transport.envelope import (
    build_connect,
    build_preconnect,
    build_send,
    build_sign,
    encode_token,
    new_session_id,
    parse_token,
)


def _wire(token: str) -> dict:
    return json.loads(base58.decode(token))


def test_session_ids_are_unique():
    assert new_session_id() != new_session_id()


def test_connect_wire_form():
    env = build_connect(SOLANA_MAINNET, "sid-1", "https://app.example", "")
    assert env.kind == RequestKind.CONNECT
    assert env.payload is None
    assert env.redirect is None
    assert env.to_wire() == {
        "t": 0,
        "i": "sid-1",
        "d": "https://app.example",
        "c": {"t": 1, "i": 0},
        "r": None,
    }


def test_token_is_compact_json():
    env = build_connect(SOLANA_MAINNET, "sid-1", "origin")
    raw = base58.decode(encode_token(env)).decode()
    assert raw == '{"t":0,"i":"sid-1","d":"origin","c":{"t":1,"i":0},"r":null}'


def test_sign_encodes_message_bytes():
    env = build_sign(SOLANA_MAINNET, b"hello", "sid-2", "origin", redirect="https://back")
    assert env.kind == RequestKind.SIGN
    assert env.payload == base58.encode(b"hello")
    wire = _wire(encode_token(env))
    assert wire["d"] == base58.encode(b"hello")
    assert wire["r"] == "https://back"


def test_sign_keeps_text_message():
    env = build_sign(SOLANA_MAINNET, "already-encoded", "sid", "origin")
    assert env.payload == "already-encoded"


def test_send_tag_fidelity_round_trip():
    txs = [
        UnsignedTransaction(kind=TransactionKind.LEGACY, data=b"\x01\x02"),
        UnsignedTransaction(kind=TransactionKind.VERSIONED, data=b"\x80\x00\x03"),
    ]
    env = build_send(SOLANA_MAINNET, txs, "sid-3", "origin")
    parsed = parse_token(encode_token(env))

    assert parsed.kind == RequestKind.SEND
    assert [blob.kind for blob in parsed.payload] == [TransactionKind.LEGACY, TransactionKind.VERSIONED]
    assert [base58.decode(blob.data) for blob in parsed.payload] == [b"\x01\x02", b"\x80\x00\x03"]
    assert parsed.payload == env.payload


def test_send_accepts_prebuilt_blobs():
    blob = TaggedBlob(kind=TransactionKind.VERSIONED, data="3yZe7d")
    env = build_send(SOLANA_MAINNET, [blob], "sid", "origin")
    assert env.to_wire()["d"] == [{"t": 1, "d": "3yZe7d"}]


def test_envelope_is_immutable():
    env = build_connect(SOLANA_MAINNET, "sid", "origin")
    with pytest.raises(Exception):
        env.session_id = "other"


def test_send_payload_cannot_change_after_build():
    env = build_send(SOLANA_MAINNET, [TaggedBlob(kind=TransactionKind.LEGACY, data="2")], "sid", "origin")
    published = encode_token(env)
    with pytest.raises(AttributeError):
        env.payload.append(TaggedBlob(kind=TransactionKind.VERSIONED, data="3"))
    assert encode_token(env) == published
    assert parse_token(published).payload == env.payload


def test_preconnect_token():
    pre = build_preconnect("sid-4")
    assert _wire(encode_token(pre)) == {"i": "sid-4", "p": 1}
    parsed = parse_token(encode_token(pre))
    assert isinstance(parsed, PreconnectEnvelope)
    assert parsed.session_id == "sid-4"


def test_connect_round_trip_keeps_origin_and_chain():
    chain = ChainDescriptor(type=2, id=5)
    env = build_connect(chain, "sid", "https://app.example", "https://back")
    assert parse_token(encode_token(env)) == env


@pytest.mark.parametrize("token", [
    base58.encode(b"not json"),
    base58.encode(b"[1, 2]"),
    base58.encode(b'{"t": 9, "i": "x"}'),
    base58.encode(b'{"d": "x"}'),
])
def test_parse_token_rejects_malformed(token):
    with pytest.raises(DecodingError):
        parse_token(token)
