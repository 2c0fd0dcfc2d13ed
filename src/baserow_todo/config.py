"""Configuration for Baserow Todo."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration.

    Values are read from ``BASEROW_TODO_*`` environment variables.
    """

    model_config = SettingsConfigDict(env_prefix="BASEROW_TODO_", env_file=".env", extra="ignore")

    baserow_url: str = Field(default="https://api.baserow.io")
    api_token: str = Field(default="")
    table_id: str = Field(default="623600")
    user_field_names: bool = Field(default=True)
    request_timeout: float = Field(default=30.0)  # seconds
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000)
    log_level: str = Field(default="INFO")

    @property
    def rows_url(self) -> str:
        """Row collection URL of the configured table."""
        return f"{self.baserow_url.rstrip('/')}/api/database/rows/table/{self.table_id}/"
