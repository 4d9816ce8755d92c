"""
Tag-affinity ranking service

Usage: uvicorn service:app --reload --port 8000
"""

from .app import app, create_app
from .config import ServerConfig, get_config, reload_config
from .state import AppState, get_state

__all__ = [
    "AppState",
    "ServerConfig",
    "app",
    "create_app",
    "get_config",
    "get_state",
    "reload_config",
]
