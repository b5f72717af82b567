"""Application configuration using pydantic-settings.

The three legacy bridge variants differ only in a handful of behaviours;
each one is a setting here rather than a separate server.
"""

from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ApprovalMode(str, Enum):
    """How a pairing approval is resolved after /connect."""

    INLINE = "inline"  # /connect waits for the wallet and stores the session
    DEFERRED = "deferred"  # /connect returns the uri, /approve resolves it


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # API
    # ======================
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=5000, description="API server port")
    static_dir: str = Field(
        default="build", description="Directory holding the built web UI"
    )

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=True, description="Enable debug mode")

    # ======================
    # Pairing (WalletConnect)
    # ======================
    pairing_backend: str = Field(
        default="dryrun", description="Pairing backend: dryrun or sidecar"
    )
    project_id: str = Field(default="", description="WalletConnect cloud project id")
    pairing_sidecar_url: str = Field(
        default="http://127.0.0.1:5100",
        description="Base URL of the WalletConnect sign-client sidecar",
    )
    dryrun_wallet_private_key: Optional[str] = Field(
        default=None, description="Key for the simulated dry-run wallet (random if unset)"
    )

    # ======================
    # Custody (Fireblocks)
    # ======================
    custody_backend: str = Field(
        default="dryrun", description="Custody backend: dryrun or fireblocks"
    )
    fireblocks_url: str = Field(
        default="https://api.fireblocks.io", description="Fireblocks API base URL"
    )
    api_key: str = Field(default="", description="Fireblocks API key")
    private_key_path: Optional[str] = Field(
        default=None, description="Path to the Fireblocks API secret key (PEM)"
    )
    vault_account_id: int = Field(default=0, description="Vault account used for connections")
    fee_level: str = Field(default="MEDIUM", description="Custody fee level")
    custody_chain_ids: str = Field(
        default="ETH", description="Comma-separated custody chain ids"
    )
    custody_auto_approve: bool = Field(
        default=True, description="Approve the custody connection right after creating it"
    )
    custody_approval_url: str = Field(
        default="",
        description="Console URL template for manual approval, e.g. https://console/{id}",
    )

    # ======================
    # Chain
    # ======================
    chain_id: str = Field(default="goerli", description="Target chain name")

    # ======================
    # Bridge behaviour
    # ======================
    approval_mode: ApprovalMode = Field(
        default=ApprovalMode.INLINE, description="inline or deferred pairing approval"
    )
    order_interval_seconds: float = Field(
        default=12.0, description="Seconds between recurring order firings"
    )
    one_order_per_session: bool = Field(
        default=False, description="A new order replaces the session's previous orders"
    )
    clear_all_orders_on_disconnect: bool = Field(
        default=False,
        description="Legacy behaviour: disconnect cancels every order, not only the session's",
    )
    default_recipient: Optional[str] = Field(
        default=None, description="Recipient used by /send when the body has no 'to'"
    )
    default_send_amount: str = Field(
        default="0x16345785d8a0000", description="Hex wei amount used by /send (0.1 ETH)"
    )

    @property
    def custody_chains(self) -> list[str]:
        """Parse custody chain ids into a list."""
        return [c.strip() for c in self.custody_chain_ids.split(",") if c.strip()]

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "api_host": self.api_host,
            "api_port": self.api_port,
            "chain": self.chain_id,
            "pairing": {
                "backend": self.pairing_backend,
                "project_id": "***" if self.project_id else "(not set)",
                "sidecar_url": self.pairing_sidecar_url,
            },
            "custody": {
                "backend": self.custody_backend,
                "url": self.fireblocks_url,
                "api_key": "***" if self.api_key else "(not set)",
                "private_key_path": "***" if self.private_key_path else "(not set)",
                "vault_account_id": self.vault_account_id,
                "chain_ids": self.custody_chains,
                "auto_approve": self.custody_auto_approve,
            },
            "orders": {
                "interval_seconds": self.order_interval_seconds,
                "one_per_session": self.one_order_per_session,
                "clear_all_on_disconnect": self.clear_all_orders_on_disconnect,
            },
            "approval_mode": self.approval_mode.value,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
