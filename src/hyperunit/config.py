# src/hyperunit/config.py
"""Runtime configuration loaded from environment variables."""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from hyperunit.core.enums import Environment

BASE_URL: Dict[Environment, str] = {
    Environment.TESTNET: "https://api.hyperunit-testnet.xyz",
    Environment.MAINNET: "https://api.hyperunit.xyz",
}


class Settings(BaseSettings):
    """Process-wide defaults, overridable with HYPERUNIT_* variables."""

    environment: Environment = Field(
        Environment.MAINNET,
        description="Network to talk to and verify guardian signatures against",
    )
    timeout: float = Field(
        30.0,
        gt=0,
        description="Per-request timeout in seconds",
    )
    min_signatures: Optional[int] = Field(
        None,
        ge=1,
        description="Minimum valid guardian signatures, required signer included",
    )
    testnet_url: str = Field(BASE_URL[Environment.TESTNET])
    mainnet_url: str = Field(BASE_URL[Environment.MAINNET])
    log_level: str = Field("WARNING", description="Log level used by the CLI")

    model_config = SettingsConfigDict(
        env_prefix="HYPERUNIT_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    def base_url(self, environment: Environment) -> str:
        if Environment(environment) is Environment.TESTNET:
            return self.testnet_url
        return self.mainnet_url


def get_settings() -> Settings:
    return Settings()


class HyperUnitConfig(BaseModel):
    """
    Per-client configuration. Unset fields fall back to `Settings`.
    """

    environment: Optional[Environment] = None
    timeout: Optional[float] = Field(default=None, gt=0)
    headers: Dict[str, str] = Field(default_factory=dict)
    base_url: Optional[str] = None
    min_signatures: Optional[int] = Field(default=None, ge=1)

    def resolve(self, settings: Optional[Settings] = None) -> "HyperUnitConfig":
        """Return a copy with every unset field filled from settings."""
        settings = settings or get_settings()
        environment = self.environment or settings.environment
        return self.model_copy(
            update={
                "environment": environment,
                "timeout": self.timeout or settings.timeout,
                "base_url": self.base_url or settings.base_url(environment),
                "min_signatures": self.min_signatures or settings.min_signatures,
            }
        )
