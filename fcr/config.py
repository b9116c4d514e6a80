"""
Configuration management for the FCR client.

Loads settings from environment variables with validation.
"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FCRSettings(BaseSettings):
    """
    FCR client settings.

    Loads from environment variables with FCR_ prefix.
    """
    model_config = SettingsConfigDict(
        env_prefix="FCR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Chain configuration
    rpc_url: str = Field(default="http://localhost:8545", description="JSON-RPC endpoint")
    chain_id: Optional[int] = Field(None, description="Expected chain ID (checked on connect)")

    # Registry deployment
    token_address: Optional[str] = Field(None, description="Registry (FCR) token address")
    lmsr_address: Optional[str] = Field(None, description="LMSR market maker address")

    # Events
    from_block: int = Field(default=0, ge=0, description="First block scanned for past events")
    event_poll_interval: float = Field(default=2.0, gt=0, description="Live event poll interval (seconds)")

    # Transactions
    receipt_timeout: float = Field(default=120.0, ge=1.0, description="Receipt wait timeout (seconds)")
    gas: Optional[int] = Field(None, gt=0, description="Explicit gas limit per transaction")
    gas_price_gwei: Optional[float] = Field(None, gt=0, description="Explicit gas price (gwei)")
    max_gas_price_gwei: float = Field(default=500.0, gt=0, description="Maximum accepted gas price")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # Metrics
    enable_metrics: bool = Field(default=False, description="Enable Prometheus metrics")
    metrics_port: int = Field(default=9090, ge=1024, le=65535, description="Metrics server port")

    def __repr__(self) -> str:
        """Short repr without the full endpoint."""
        return (
            f"FCRSettings("
            f"chain_id={self.chain_id}, "
            f"token={self.token_address}, "
            f"lmsr={self.lmsr_address}"
            ")"
        )


def get_settings() -> FCRSettings:
    """
    Get FCR settings.

    Returns:
        Validated settings instance
    """
    return FCRSettings()
