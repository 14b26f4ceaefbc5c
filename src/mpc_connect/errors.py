"""
mpc-connect error types.

Timeouts, cancelled polls and an unavailable presentation surface are not
errors: they surface as a falsy PollOutcome or a None result.
"""

from typing import Any, Optional


class MpcConnectError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class TransportError(MpcConnectError):
    def __init__(self, message: str, code: str = "transport_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class PreconnectError(TransportError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, code="preconnect_error", details=details)


class DecodingError(MpcConnectError):
    def __init__(self, message: str, code: str = "decoding_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class InvalidCharacterError(DecodingError):
    """A base58 string contained a character outside the alphabet."""

    def __init__(self, index: int, character: str):
        super().__init__(
            f"Invalid base58 char at index {index} with value {character!r}",
            code="invalid_character",
            details={"index": index, "character": character},
        )
        self.index = index
        self.character = character


class ResponseDecodingError(DecodingError):
    """The companion signer returned a payload that cannot be decoded."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, code="response_decoding_error", details=details)


class WalletError(MpcConnectError):
    code = "wallet_error"

    def __init__(self, message: str = "", details: Optional[dict[str, Any]] = None):
        super().__init__(type(self).code, message or type(self).__name__, details)


class WalletNotConnectedError(WalletError):
    code = "wallet_not_connected"


class WalletConnectionError(WalletError):
    code = "wallet_connection_error"


class WalletPublicKeyError(WalletError):
    code = "wallet_public_key_error"


class WalletSignMessageError(WalletError):
    code = "wallet_sign_message_error"


class WalletSignTransactionError(WalletError):
    code = "wallet_sign_transaction_error"
