"""Application configuration management."""

import json
import os
import platform
from pathlib import Path
from typing import Any, Optional

from loguru import logger


def _default_launchbox_dir() -> Path:
    """Return the default LaunchBox library root."""
    env = os.environ.get("RETRODECK_LAUNCHBOX_DIR")
    if env:
        return Path(env)
    return Path.home() / "LaunchBox"


def _default_data_dir() -> Path:
    """Return the default data directory for the application.

    On Windows the ``RetroDeck`` folder lives next to the LaunchBox folder
    so caches survive re-installs of the dashboard.
    """
    if platform.system() == "Windows":
        return _default_launchbox_dir().parent / "RetroDeck"
    elif platform.system() == "Darwin":
        return Path.home() / "Library" / "Application Support" / "RetroDeck"
    else:
        return Path.home() / ".config" / "RetroDeck"


_DEFAULT_CONFIG: dict[str, Any] = {
    "language": "en_US",
    "theme": "dark",
    "launchbox_dir": "",
    "bigbox_path": "",
    "poll_interval": 2.5,
    "query_timeout": 5.0,
    "generation_timeout": 30.0,
    "ai_model": "claude-sonnet-4-5",
    "retroarch_host": "127.0.0.1",
    "retroarch_port": 55355,
}

CREDENTIALS_FILE = "retrodeck-config.json"


class Config:
    """Singleton application configuration."""

    _instance: Optional["Config"] = None
    _data: dict[str, Any]
    _path: Path
    _data_dir: Path

    def __new__(cls, config_path: Optional[Path] = None) -> "Config":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None) -> None:
        if self._initialized:  # type: ignore[has-type]
            return
        self._initialized = True
        self._data_dir = config_path.parent if config_path else _default_data_dir()
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._path = config_path or (self._data_dir / "config.json")
        self._data = dict(_DEFAULT_CONFIG)
        self._load()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def launchbox_dir(self) -> Path:
        p = self._data.get("launchbox_dir", "")
        return Path(p) if p else _default_launchbox_dir()

    @property
    def bigbox_path(self) -> Path:
        p = self._data.get("bigbox_path", "")
        if p:
            return Path(p)
        return self.launchbox_dir / "BigBox.exe"

    @property
    def retroarch_cfg_path(self) -> Path:
        return self.launchbox_dir / "Emulators" / "RetroArch" / "retroarch.cfg"

    @property
    def credentials_path(self) -> Path:
        """JSON file holding the generation-service API key."""
        return self._data_dir / CREDENTIALS_FILE

    @property
    def controls_cache_path(self) -> Path:
        return self._data_dir / "game-controls.json"

    @property
    def controls_overrides_path(self) -> Path:
        return self._data_dir / "game-controls-overrides.json"

    @property
    def poll_interval(self) -> float:
        return float(self._data.get("poll_interval", 2.5))

    @property
    def query_timeout(self) -> float:
        return float(self._data.get("query_timeout", 5.0))

    @property
    def generation_timeout(self) -> float:
        return float(self._data.get("generation_timeout", 30.0))

    @property
    def ai_model(self) -> str:
        return self._data.get("ai_model", "claude-sonnet-4-5")

    @property
    def retroarch_host(self) -> str:
        return self._data.get("retroarch_host", "127.0.0.1")

    @property
    def retroarch_port(self) -> int:
        return int(self._data.get("retroarch_port", 55355))

    @property
    def language(self) -> str:
        return self._data.get("language", "en_US")

    @property
    def theme(self) -> str:
        return self._data.get("theme", "dark")

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._save()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _load(self) -> None:
        if self._path.exists():
            try:
                with open(self._path, "r", encoding="utf-8") as f:
                    saved = json.load(f)
                self._data.update(saved)
                logger.info("Configuration loaded from {}", self._path)
            except Exception as e:
                logger.warning("Failed to load config, using defaults: {}", e)

    def _save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=4, ensure_ascii=False)
        except Exception as e:
            logger.error("Failed to save config: {}", e)

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton (for testing)."""
        cls._instance = None
