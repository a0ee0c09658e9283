"""
Process configuration.

Environment variables:
- RENDER_API_KEY: API key used as the bearer token in stdio mode
- RENDER_HOST: API base URL (default: https://api.render.com/v1/)
- RENDER_CONFIG_PATH: YAML config file (default: ~/.render/mcp-server.yaml)
- RENDER_WORKSPACE: workspace ID, overrides the persisted selection
- REDIS_URL: when set, HTTP sessions are stored in Redis instead of memory
- RENDER_DASHBOARD_URL: dashboard linked from tool messages (default: https://dashboard.render.com)

The config file only persists the selected workspace for the stdio
transport; everything else comes from the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

import yaml

from render_mcp.errors import ConfigError, NoWorkspaceError, NotAuthenticatedError
from render_mcp.logging_utils import get_logger

logger = get_logger(__name__)

CURRENT_VERSION = 1
DEFAULT_HOST = "https://api.render.com/v1/"
DEFAULT_DASHBOARD_URL = "https://dashboard.render.com"
DEFAULT_CONFIG_PATH = "~/.render/mcp-server.yaml"

CONFIG_PATH_ENV = "RENDER_CONFIG_PATH"
WORKSPACE_ENV = "RENDER_WORKSPACE"
API_KEY_ENV = "RENDER_API_KEY"
HOST_ENV = "RENDER_HOST"
REDIS_URL_ENV = "REDIS_URL"
DASHBOARD_URL_ENV = "RENDER_DASHBOARD_URL"


def get_host() -> str:
    return os.getenv(HOST_ENV) or DEFAULT_HOST


def get_api_key() -> str:
    return os.getenv(API_KEY_ENV, "")


def get_redis_url() -> Optional[str]:
    return os.getenv(REDIS_URL_ENV) or None


def get_dashboard_url() -> str:
    return (os.getenv(DASHBOARD_URL_ENV) or DEFAULT_DASHBOARD_URL).rstrip("/")


def get_config_path() -> Path:
    return Path(os.getenv(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH).expanduser()


@dataclass
class APIConfig:
    key: str
    host: str


def default_api_config() -> APIConfig:
    """
    API settings from the environment.

    Raises:
        NotAuthenticatedError: if RENDER_API_KEY is unset
    """
    key = get_api_key()
    if not key:
        raise NotAuthenticatedError()
    return APIConfig(key=key, host=get_host())


@dataclass
class Config:
    """Persisted state of the stdio server."""

    version: int = CURRENT_VERSION
    workspace: str = ""

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Config":
        """Load config from disk. A missing file yields the default config."""
        path = path or get_config_path()
        try:
            raw = path.read_text()
        except FileNotFoundError:
            return cls()
        except OSError as e:
            raise ConfigError(f"could not read config file {path}: {e}") from e

        try:
            data = yaml.safe_load(raw) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"config file {path} is not valid YAML: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"config file {path} must contain a mapping")

        return cls(
            version=int(data.get("version", CURRENT_VERSION)),
            workspace=str(data.get("workspace") or ""),
        )

    def persist(self, path: Optional[Path] = None) -> None:
        path = path or get_config_path()
        try:
            path.parent.mkdir(mode=0o755, parents=True, exist_ok=True)
            path.write_text(yaml.safe_dump(asdict(self), sort_keys=False))
            os.chmod(path, 0o600)
        except OSError as e:
            raise ConfigError(f"could not write config file {path}: {e}") from e
        logger.debug(f"Config persisted to {path}")


def current_workspace_id() -> str:
    """
    The selected workspace: RENDER_WORKSPACE wins, then the config file.

    Raises:
        NoWorkspaceError: if neither is set
    """
    workspace = os.getenv(WORKSPACE_ENV)
    if workspace:
        return workspace

    cfg = Config.load()
    if not cfg.workspace:
        raise NoWorkspaceError()
    return cfg.workspace


def select_workspace(workspace_id: str) -> None:
    cfg = Config.load()
    cfg.workspace = workspace_id
    cfg.persist()
