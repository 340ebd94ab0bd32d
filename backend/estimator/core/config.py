from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

from pydantic import BaseModel, Field, ValidationError, constr

PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_CONFIG_DIR = PROJECT_ROOT / "config"

_FALSY = {"0", "false", "no", "off"}


class DatabaseConfig(BaseModel):
    path: constr(strip_whitespace=True, min_length=1) = Field(
        ..., description="SQLite database file; relative paths resolve against the project root"
    )
    echo: bool = Field(False, description="Echo SQL statements to the log")
    seed_on_startup: bool = Field(True, description="Insert sample data when the database is empty")

    @property
    def resolved_path(self) -> Path:
        path = Path(self.path)
        if not path.is_absolute():
            path = PROJECT_ROOT / path
        return path

    @property
    def url(self) -> str:
        return f"sqlite:///{self.resolved_path.as_posix()}"


class MCPServerSettings(BaseModel):
    server_name: constr(strip_whitespace=True, min_length=1) = "construction-estimator"
    server_version: str = "1.0.0"
    protocol_version: str = "2024-11-05"
    log_level: str = Field("INFO", description="Log level for the stderr diagnostic channel")


class ApiConfig(BaseModel):
    base_url: str = Field(..., description="Base URL of the running REST API")
    openapi_path: str = Field("/openapi.json", description="Path of the OpenAPI document")
    request_timeout_seconds: float = Field(
        10,
        ge=1,
        description="Timeout in seconds for fetching the OpenAPI document",
    )

    @property
    def openapi_url(self) -> str:
        return self.base_url.rstrip("/") + "/" + self.openapi_path.lstrip("/")


class AppConfig(BaseModel):
    database: DatabaseConfig
    mcp: MCPServerSettings
    api: ApiConfig

    @property
    def safe_payload(self) -> Dict[str, object]:
        """Return a version of the configuration safe to expose to clients."""
        return {
            "mcp": self.mcp.model_dump(),
            "api": self.api.model_dump(),
        }


@dataclass
class ConfigSet:
    database: DatabaseConfig
    mcp: MCPServerSettings
    api: ApiConfig

    @property
    def app_config(self) -> AppConfig:
        return AppConfig(database=self.database, mcp=self.mcp, api=self.api)


class ConfigLoaderError(RuntimeError):
    pass


def _read_json(path: Path) -> dict:
    if not path.exists():
        raise ConfigLoaderError(f"Configuration file not found: {path}")
    try:
        return json.loads(path.read_text("utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigLoaderError(f"Invalid JSON in {path}: {exc}") from exc


def _apply_env_overrides(database: DatabaseConfig, mcp: MCPServerSettings, api: ApiConfig) -> None:
    """Apply environment variable overrides on top of the file configuration."""
    db_path = os.getenv("ESTIMATOR_DB_PATH")
    if db_path:
        database.path = db_path

    seed = os.getenv("ESTIMATOR_SEED_ON_STARTUP")
    if seed is not None:
        database.seed_on_startup = seed.strip().lower() not in _FALSY

    base_url = os.getenv("ESTIMATOR_API_BASE_URL")
    if base_url:
        api.base_url = base_url

    log_level = os.getenv("ESTIMATOR_LOG_LEVEL")
    if log_level:
        mcp.log_level = log_level.upper()


def load_config_set(config_dir: Path) -> ConfigSet:
    """Load all required configuration files from the provided directory."""
    try:
        database = DatabaseConfig(**_read_json(config_dir / "database.json"))
        mcp = MCPServerSettings(**_read_json(config_dir / "mcp.json"))
        api = ApiConfig(**_read_json(config_dir / "api.json"))
    except ValidationError as exc:
        raise ConfigLoaderError(str(exc)) from exc

    _apply_env_overrides(database, mcp, api)
    return ConfigSet(database=database, mcp=mcp, api=api)


def load_app_config(config_dir: Path) -> AppConfig:
    return load_config_set(config_dir).app_config
