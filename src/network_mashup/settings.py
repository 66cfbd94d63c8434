"""Application settings for network-mashup."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from network_mashup.router import ECHO_URL, TOP_FREE_URL, TOP_PAID_URL, Endpoints
from network_mashup.runtime_config import current_runtime_config


class Settings(BaseSettings):
    """Runtime settings for the feed and echo endpoints."""

    model_config = SettingsConfigDict(
        env_prefix="NETWORK_MASHUP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    top_free_url: str = TOP_FREE_URL
    top_paid_url: str = TOP_PAID_URL
    echo_url: str = ECHO_URL
    max_workers: int = Field(default=4, ge=1)
    log_level: str = "WARNING"

    def endpoints(self) -> Endpoints:
        return Endpoints(
            top_free_url=self.top_free_url,
            top_paid_url=self.top_paid_url,
            echo_url=self.echo_url,
        )

    @classmethod
    def from_runtime(cls) -> "Settings":
        """Construct settings from runtime config; NETWORK_MASHUP_* env vars still win."""
        runtime = current_runtime_config()
        defaults = {
            "top_free_url": runtime.top_free_url,
            "top_paid_url": runtime.top_paid_url,
            "echo_url": runtime.echo_url,
            "max_workers": runtime.max_workers,
            "log_level": runtime.log_level,
        }
        from_env = cls()
        overrides = {
            name: getattr(from_env, name)
            for name in from_env.model_fields_set
            if name in defaults
        }
        return cls(**{**defaults, **overrides})
