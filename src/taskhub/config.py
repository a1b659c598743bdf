from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str  # MongoDB URL including the database name, e.g. mongodb://localhost/taskhub
    host: str
    port: int
    debug: bool
    jwt_secret: str = Field(..., min_length=1)  # Shared by the server and edge token codecs
    environment: Literal["development", "production", "test"] = "development"
    cors_origins: list[str] = []

    model_config = {
        "env_file": [".env"],
        "env_prefix": "TASKHUB_",
        "extra": "ignore",
    }

    @property
    def is_production(self) -> bool:
        """Whether cookies must carry the Secure flag."""
        return self.environment == "production"
