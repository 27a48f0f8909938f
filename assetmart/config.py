"""Runtime configuration — env-driven.

Centralized config using pydantic-settings. Reads from a .env file and
ASSETMART_* environment variables.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from assetmart.models.fees import OverpaymentPolicy


class MarketConfig(BaseSettings):
    """Marketplace configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export ASSETMART_FEE_PERCENT=2
        export ASSETMART_FEE_ACCOUNT=treasury
        export ASSETMART_OVERPAYMENT_POLICY=retain
        export ASSETMART_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="ASSETMART_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"
    debug: bool = False

    # Fee policy
    fee_percent: int = Field(default=1, ge=0)
    fee_account: str = "deployer"
    overpayment_policy: OverpaymentPolicy = OverpaymentPolicy.REFUND

    # Reference registry
    registry_name: str = "DApp NFT"
    registry_symbol: str = "DAPP"

    # Display units
    decimals: int = Field(default=18, ge=0)

    @property
    def is_production(self) -> bool:
        """Whether running in production mode."""
        return self.environment == "production"


# Module-level settings — import as `from assetmart.config import config`
config = MarketConfig()
