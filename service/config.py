"""
Server Configuration

Loads configuration from environment variables and provides defaults.
Supports loading from .env file using python-dotenv.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ranking.models import DEFAULT_CONFIG, RankingConfig

BASE_DIR = Path(__file__).resolve().parent.parent

root_env = BASE_DIR / ".env"
if root_env.exists():
    load_dotenv(root_env)


@dataclass
class ServerConfig:
    """Server configuration."""

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # Data source: "json" | "firebase" | None (in-memory, empty content)
    data_source: Optional[str] = None
    # When data_source=json: users/posts/comments/listings document
    content_json_path: Optional[Path] = None
    # Optional ranking config JSON (see RankingConfig.from_dict)
    ranking_config_path: Optional[Path] = None
    # When data_source=firebase: path to service account JSON and optional project id
    firebase_credentials_path: Optional[Path] = None
    firebase_project_id: Optional[str] = None

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Load configuration from environment variables."""
        data_source = os.getenv("DATA_SOURCE", "").strip().lower() or None
        if data_source and data_source not in ("json", "firebase"):
            data_source = None

        def _path_env(key: str, default: Optional[Path] = None) -> Optional[Path]:
            v = os.getenv(key)
            if not v:
                return default
            p = Path(v)
            return p if p.is_absolute() else (BASE_DIR / p).resolve()

        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            data_source=data_source,
            content_json_path=_path_env("CONTENT_JSON_PATH", BASE_DIR / "data" / "content.json"),
            ranking_config_path=_path_env("RANKING_CONFIG_PATH"),
            firebase_credentials_path=_path_env("FIREBASE_CREDENTIALS_PATH") or _path_env("GOOGLE_APPLICATION_CREDENTIALS"),
            firebase_project_id=os.getenv("FIREBASE_PROJECT_ID") or None,
        )

    def validate(self) -> tuple[bool, list[str]]:
        """
        Validate the configuration.

        Returns:
            (is_valid, list_of_errors)
        """
        errors = []
        if self.data_source == "json" and not (self.content_json_path and self.content_json_path.is_file()):
            errors.append(f"Content JSON not found: {self.content_json_path}")
        if self.data_source == "firebase" and not (
            self.firebase_credentials_path and self.firebase_credentials_path.is_file()
        ):
            errors.append(f"Firebase credentials not found: {self.firebase_credentials_path}")
        if self.ranking_config_path and not self.ranking_config_path.is_file():
            errors.append(f"Ranking config not found: {self.ranking_config_path}")
        return len(errors) == 0, errors

    def load_ranking_config(self) -> RankingConfig:
        """RankingConfig from ranking_config_path, or defaults when unset."""
        if not self.ranking_config_path:
            return DEFAULT_CONFIG
        with open(self.ranking_config_path) as f:
            return RankingConfig.from_dict(json.load(f))


# Global config instance
_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ServerConfig.from_env()
    return _config


def reload_config() -> ServerConfig:
    """Reload configuration from environment."""
    global _config
    _config = None
    return get_config()
