from pathlib import Path
from typing import Dict

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]

# Restricted-zone contracts for the chains the Doma marketplace runs on.
DEFAULT_ZONES: Dict[str, str] = {
    "eip155:97476": "0xCEF2071b4246DB4D0E076A377348339f31a07dEA",
    "eip155:11155111": "0x037e8f3FD62BD12B1C116bD48588793e98211acb",
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    log_level: str = Field(default="INFO", description="Logging level")

    # Marketplace API
    marketplace_api_url: str = Field(
        default="https://api-testnet.doma.xyz",
        description="Base URL of the Doma orderbook REST API",
        validation_alias=AliasChoices("marketplace_api_url", "DOMA_URL"),
    )
    marketplace_api_key: str = Field(
        default="",
        description="API key sent in the Api-Key header",
        validation_alias=AliasChoices("marketplace_api_key", "DOMA_API_KEY"),
    )
    marketplace_source: str = Field(
        default="domain-space",
        description="Source tag attached to orders created by this client",
        validation_alias=AliasChoices("marketplace_source", "APP_NAME"),
    )
    request_timeout_seconds: int = Field(default=30, description="Request timeout")

    # Chains (keyed by CAIP-2 id, e.g. "eip155:97476")
    rpc_urls: Dict[str, str] = Field(
        default_factory=dict,
        description="JSON-RPC endpoint per chain",
    )
    zones: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_ZONES),
        description="Protocol zone contract per chain",
    )
    wrapped_native_tokens: Dict[str, str] = Field(
        default_factory=dict,
        description="Wrapped native currency contract per chain",
    )

    # Transaction confirmation
    confirmation_timeout_seconds: int = Field(
        default=300,
        ge=1,
        description="Max seconds to wait for a transaction receipt",
    )
    receipt_poll_interval_seconds: float = Field(
        default=2.0,
        gt=0,
        description="Delay between receipt polls",
    )

    # Orders
    default_offer_duration_ms: int = Field(
        default=24 * 60 * 60 * 1000,
        gt=0,
        description="Offer lifetime used when an item carries no duration",
    )

    @property
    def has_marketplace_key(self) -> bool:
        return bool(self.marketplace_api_key)


# Global settings instance
settings = Settings()
