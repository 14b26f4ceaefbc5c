"""
mpc-connect — out-of-band companion signer client for Python.

Publishes base58 request tokens to a companion signing app and polls for
its answer.
"""

from mpc_connect.client import MpcWallet, AsyncMpcWallet
from mpc_connect.channel import RemoteChannel
from mpc_connect.polling import CancelToken, Poller, PollOutcome, PollState
from mpc_connect.presentation import BrowserPresenter, CallbackPresenter, Presenter
from mpc_connect.models.account import WalletAccount
from mpc_connect.models.config import MpcConfig
from mpc_connect.models.envelope import (
    ChainDescriptor,
    RequestEnvelope,
    RequestKind,
    SignedTransaction,
    TaggedBlob,
    TransactionKind,
    UnsignedTransaction,
)
from mpc_connect.errors import (
    MpcConnectError,
    TransportError,
    PreconnectError,
    DecodingError,
    InvalidCharacterError,
    ResponseDecodingError,
    WalletError,
    WalletNotConnectedError,
    WalletConnectionError,
    WalletPublicKeyError,
    WalletSignMessageError,
    WalletSignTransactionError,
)

__version__ = "0.1.0"
__all__ = [
    "MpcWallet",
    "AsyncMpcWallet",
    "RemoteChannel",
    "CancelToken",
    "Poller",
    "PollOutcome",
    "PollState",
    "BrowserPresenter",
    "CallbackPresenter",
    "Presenter",
    "WalletAccount",
    "MpcConfig",
    "ChainDescriptor",
    "RequestEnvelope",
    "RequestKind",
    "SignedTransaction",
    "TaggedBlob",
    "TransactionKind",
    "UnsignedTransaction",
    "MpcConnectError",
    "TransportError",
    "PreconnectError",
    "DecodingError",
    "InvalidCharacterError",
    "ResponseDecodingError",
    "WalletError",
    "WalletNotConnectedError",
    "WalletConnectionError",
    "WalletPublicKeyError",
    "WalletSignMessageError",
    "WalletSignTransactionError",
]
