"""
Request envelope records published to the companion signer.

Wire keys are single letters; attribute names are the long form.
"""

from enum import IntEnum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RequestKind(IntEnum):
    CONNECT = 0
    SIGN = 1
    SEND = 2


class TransactionKind(IntEnum):
    LEGACY = 0
    VERSIONED = 1


class ChainDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: int = Field(1, alias="t")  # 1 = Solana
    id: int = Field(0, alias="i")    # 0 = mainnet


SOLANA_MAINNET = ChainDescriptor(type=1, id=0)


class TaggedBlob(BaseModel):
    """A transaction blob tagged with its serialization format."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: TransactionKind = Field(alias="t")
    data: str = Field(alias="d")  # base58 outbound, base64 inbound


class UnsignedTransaction(BaseModel):
    """Caller-serialized transaction bytes awaiting a signature.

    LEGACY carries the serialized message, VERSIONED the full serialization.
    """

    model_config = ConfigDict(frozen=True)

    kind: TransactionKind
    data: bytes


class SignedTransaction(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: TransactionKind
    data: bytes


Payload = Union[None, str, tuple[TaggedBlob, ...]]


class RequestEnvelope(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: RequestKind
    session_id: str
    origin: str
    chain: ChainDescriptor = SOLANA_MAINNET
    payload: Payload = None
    redirect: Optional[str] = None

    @field_validator("redirect")
    @classmethod
    def _empty_redirect_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    def to_wire(self) -> dict[str, Any]:
        """Wire form. `d` carries the origin for CONNECT, the payload otherwise."""
        if self.kind == RequestKind.CONNECT:
            d: Any = self.origin
        elif isinstance(self.payload, tuple):
            d = [blob.model_dump(by_alias=True, mode="json") for blob in self.payload]
        else:
            d = self.payload
        return {
            "t": int(self.kind),
            "i": self.session_id,
            "d": d,
            "c": self.chain.model_dump(by_alias=True),
            "r": self.redirect,
        }


class PreconnectEnvelope(BaseModel):
    """Short token published once the full envelope was POSTed ahead of time."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    preconnected: bool = True

    def to_wire(self) -> dict[str, Any]:
        return {"i": self.session_id, "p": 1}


class PollResult(BaseModel):
    present: bool = False
    data: Optional[Any] = None

    @classmethod
    def empty(cls) -> "PollResult":
        return cls()
