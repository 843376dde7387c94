"""
Configuration management with schema validation.
Single source of truth for taskboard settings: optional YAML file,
${VAR:default} substitution, then TASKBOARD_* environment overrides.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigError

DEFAULT_SETTINGS_FILE = Path("settings.yaml")
DEV_JWT_SECRET = "fallback_secret"


class AppSettings(BaseModel):
    name: str = "Taskboard"
    version: str = "1.0.0"
    environment: str = "development"


class AuthSettings(BaseModel):
    jwt_secret: str = DEV_JWT_SECRET
    jwt_algorithm: str = "HS256"
    token_ttl_minutes: int = Field(default=60, gt=0)
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)
    admin_email: Optional[str] = None
    admin_password: Optional[str] = None


class StorageSettings(BaseModel):
    data_dir: str = "data"


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = Field(default="json", pattern="^(json|console)$")
    file_path: Optional[str] = None
    max_bytes: int = 10485760
    backup_count: int = 5


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"]
    )


class PolicySettings(BaseModel):
    # Off: any authenticated caller may update/delete any task (observed behavior)
    enforce_task_ownership: bool = False


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    policy: PolicySettings = Field(default_factory=PolicySettings)

    @property
    def data_path(self) -> Path:
        return Path(self.storage.data_dir)


# env var -> (section, key)
ENV_OVERRIDES = {
    "TASKBOARD_ENV": ("app", "environment"),
    "TASKBOARD_JWT_SECRET": ("auth", "jwt_secret"),
    "TASKBOARD_TOKEN_TTL_MINUTES": ("auth", "token_ttl_minutes"),
    "TASKBOARD_ADMIN_EMAIL": ("auth", "admin_email"),
    "TASKBOARD_ADMIN_PASSWORD": ("auth", "admin_password"),
    "TASKBOARD_DATA_DIR": ("storage", "data_dir"),
    "TASKBOARD_LOG_LEVEL": ("logging", "level"),
    "TASKBOARD_LOG_FORMAT": ("logging", "format"),
    "TASKBOARD_LOG_FILE": ("logging", "file_path"),
    "TASKBOARD_HOST": ("server", "host"),
    "TASKBOARD_PORT": ("server", "port"),
    "TASKBOARD_CORS_ORIGINS": ("server", "cors_origins"),
    "TASKBOARD_ENFORCE_TASK_OWNERSHIP": ("policy", "enforce_task_ownership"),
}


def _substitute_env_vars(value: Any) -> Any:
    """Recursively substitute ${VAR} and ${VAR:default} placeholders"""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            var_expr = value[2:-1]
            if ":" in var_expr:
                var_name, default = var_expr.split(":", 1)
                return os.getenv(var_name.strip(), default.strip())
            return os.getenv(var_expr, value)
    elif isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_substitute_env_vars(item) for item in value]
    return value


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read settings from {path}: {e}")
    if not isinstance(raw, dict):
        raise ConfigError(f"Settings file {path} must contain a mapping")
    return raw


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value is None or value == "":
            continue
        if key == "cors_origins":
            value = [origin.strip() for origin in value.split(",") if origin.strip()]
        data.setdefault(section, {})[key] = value
    return data


def load_settings(path: Optional[Path] = None) -> Settings:
    """
    Load and validate settings.

    Resolution order: defaults < YAML file < TASKBOARD_* environment.
    The YAML file is taken from `path`, then $TASKBOARD_SETTINGS, then
    ./settings.yaml if it exists.
    """
    load_dotenv()

    if path is None:
        env_path = os.getenv("TASKBOARD_SETTINGS")
        if env_path:
            path = Path(env_path)
        elif DEFAULT_SETTINGS_FILE.exists():
            path = DEFAULT_SETTINGS_FILE

    data: Dict[str, Any] = {}
    if path is not None:
        if not Path(path).exists():
            raise ConfigError(f"Settings file not found: {path}")
        data = _substitute_env_vars(_read_yaml(Path(path)))

    data = _apply_env_overrides(data)

    try:
        settings = Settings(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}")

    if (
        settings.app.environment.lower() == "production"
        and settings.auth.jwt_secret == DEV_JWT_SECRET
    ):
        raise ConfigError("TASKBOARD_JWT_SECRET must be set in production")

    return settings
