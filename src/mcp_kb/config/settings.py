"""Application settings using Pydantic Settings."""

import json
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # General
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"
    json_logs: bool = False

    # Storage root: config.json, data/ and repos/ live under it
    base_dir: str = "~/.claude-kb"

    # GitHub content provider
    github_token: str | None = None
    github_user: str | None = None
    github_api_url: str = "https://api.github.com"
    github_web_url: str = "https://github.com"
    claude_credentials_path: str = "~/.claude/.credentials.json"
    provider_timeout_seconds: float = 30.0
    provider_max_retries: int = 3

    # API
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.base_dir = str(Path(self.base_dir).expanduser())
        self.claude_credentials_path = str(Path(self.claude_credentials_path).expanduser())

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    def resolve_github_token(self) -> str | None:
        """Return the GitHub token from the environment or the Claude credential store.

        The credential store is a JSON file with the token under ``github.token``.
        Unreadable or malformed stores are treated as absent.
        """
        if self.github_token:
            return self.github_token

        try:
            creds = json.loads(Path(self.claude_credentials_path).read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return None

        github = creds.get("github") if isinstance(creds, dict) else None
        if isinstance(github, dict) and github.get("token"):
            return str(github["token"])
        return None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
