"""
Settings loader

Loads settings.yaml and resolves the database path and web binding
"""

from dataclasses import dataclass
from pathlib import Path

import yaml

from core.constants import Defaults, Paths
from core.types import AppMode


@dataclass(frozen=True)
class AppConfig:
    """Application settings (loaded from settings.yaml)

    Immutable so the configuration cannot drift at runtime
    """

    mode: AppMode
    web_host: str
    web_port: int
    db_path_override: Path | None = None


class SettingsLoadError(Exception):
    """Raised when settings.yaml cannot be loaded"""

    pass


def load_settings(path: Path | None = None) -> AppConfig:
    """Load settings.yaml

    Args:
        path: settings.yaml path (None uses the default path)

    Returns:
        AppConfig instance

    Raises:
        SettingsLoadError: the file is missing, empty or malformed
        ValueError: the mode is not a known AppMode
    """
    if path is None:
        path = Paths.SETTINGS_FILE

    if not path.exists():
        raise SettingsLoadError(f"settings.yaml not found: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"failed to parse settings.yaml: {e}") from e

    if data is None:
        raise SettingsLoadError("settings.yaml is empty")

    if not isinstance(data, dict):
        raise SettingsLoadError("settings.yaml must contain a mapping")

    mode_str = data.get("mode")
    if mode_str is None:
        raise SettingsLoadError("settings.yaml has no 'mode' field")

    try:
        mode = AppMode(str(mode_str).lower())
    except ValueError as e:
        valid_modes = [m.value for m in AppMode]
        raise ValueError(
            f"invalid mode: '{mode_str}'. "
            f"valid values: {valid_modes}"
        ) from e

    web_config = data.get("web") or {}
    web_host = web_config.get("host", Defaults.WEB_HOST)

    try:
        web_port = int(web_config.get("port", Defaults.WEB_PORT))
    except (TypeError, ValueError) as e:
        raise SettingsLoadError(
            f"settings.yaml web.port must be an integer: {web_config.get('port')!r}"
        ) from e

    database_config = data.get("database") or {}
    override = database_config.get("path")

    return AppConfig(
        mode=mode,
        web_host=web_host,
        web_port=web_port,
        db_path_override=Path(override) if override else None,
    )


def get_db_path(config: AppConfig) -> Path:
    """Return the database path for the configured mode

    Args:
        config: AppConfig instance

    Returns:
        DB file path (explicit override first, then the per-mode default)
    """
    if config.db_path_override is not None:
        return config.db_path_override

    if config.mode == AppMode.PRODUCTION:
        return Paths.PROD_DB
    else:
        return Paths.DEMO_DB


class Settings:
    """Application settings (singleton)

    Loads settings.yaml once and exposes the resolved values
    """

    _instance: "Settings | None" = None
    _config: AppConfig | None = None

    def __new__(cls, settings_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings_path: Path | None = None) -> None:
        if self._config is None:
            self._config = load_settings(settings_path)

    @property
    def mode(self) -> AppMode:
        """Current application mode"""
        assert self._config is not None
        return self._config.mode

    @property
    def web_host(self) -> str:
        assert self._config is not None
        return self._config.web_host

    @property
    def web_port(self) -> int:
        assert self._config is not None
        return self._config.web_port

    @property
    def db_path(self) -> Path:
        """Database path for the current mode"""
        assert self._config is not None
        return get_db_path(self._config)

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton instance (for tests)"""
        cls._instance = None
        cls._config = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Return the Settings instance

    Args:
        settings_path: settings.yaml path (None uses the default path)

    Returns:
        Settings singleton
    """
    return Settings(settings_path)
