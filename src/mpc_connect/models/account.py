"""
Wallet account — the caller-visible state a connect() produces.
"""

from typing import Optional

from pydantic import BaseModel

from mpc_connect import base58


class WalletAccount(BaseModel):
    public_key: Optional[str] = None
    connected: bool = False

    @property
    def public_key_bytes(self) -> Optional[bytes]:
        if self.public_key is None:
            return None
        return base58.decode(self.public_key)
