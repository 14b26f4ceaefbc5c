"""
Client configuration.
"""

from pydantic import BaseModel, Field

from mpc_connect.models.envelope import SOLANA_MAINNET, ChainDescriptor

DEFAULT_BASE_URL = "https://mpcapi.sidcloud.cn"
DEFAULT_ACTION_URL = "https://mpc.sidcloud.cn/qr.html?token="
DEFAULT_POLL_INTERVAL_MS = 500
DEFAULT_MAX_POLL_ATTEMPTS = 120


class MpcConfig(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    action_url: str = DEFAULT_ACTION_URL
    poll_interval_ms: int = Field(DEFAULT_POLL_INTERVAL_MS, ge=0)
    max_poll_attempts: int = Field(DEFAULT_MAX_POLL_ATTEMPTS, ge=1)
    http_timeout: float = Field(30.0, gt=0)
    # Set when signing is routed through an in-app mechanism, so polling
    # proceeds even if no presentation handle was obtained.
    in_app_signing: bool = False
    origin: str = "python"
    chain: ChainDescriptor = SOLANA_MAINNET

    @property
    def poll_budget_seconds(self) -> float:
        return self.poll_interval_ms * self.max_poll_attempts / 1000
