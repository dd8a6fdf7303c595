"""Persistent stores for per-game controller mappings.

Three JSON files live in the RetroDeck data directory:

``game-controls-overrides.json``
    ``{title: {positionKey: label}}``: hand-written, unversioned, always
    honoured first.
``game-controls.json``
    ``{"version": N, "entries": {title: {positionKey: label}}}``:
    generated mappings.  A version other than :data:`CACHE_VERSION`
    invalidates the whole file.
``retrodeck-config.json``
    ``{"anthropicApiKey": "..."}``: the generation-service credential.

Each read goes to disk and each write rewrites the whole file; there is
only ever one writer.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger

from retrodeck.models.controls import (
    ControllerPositionMap,
    is_position_key,
    sanitize_position_map,
)

# Bump when the generation model or prompt changes significantly.
CACHE_VERSION = 2

API_KEY_FIELD = "anthropicApiKey"


def read_json_file(path: Path) -> Any | None:
    """Parsed JSON content, or ``None`` if missing / unreadable / malformed."""
    if not path.is_file():
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Failed to read {}: {}", path, e)
        return None


def write_json_file(path: Path, data: Any) -> bool:
    """Write *data* as pretty JSON.  Returns ``False`` on failure."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        return True
    except OSError as e:
        logger.error("Failed to write {}: {}", path, e)
        return False


def _clean_entry(entry: Any, title: str) -> ControllerPositionMap | None:
    """Known keys with string labels only; an entry with none of those is a miss."""
    if not isinstance(entry, dict):
        return None
    cleaned = sanitize_position_map(entry)
    if len(cleaned) != len(entry):
        logger.warning("Ignoring malformed controller positions for \"{}\"", title)
    return cleaned or None


class ControlsStore:
    """Override store, versioned generated cache and credential lookup."""

    def __init__(
        self,
        cache_path: Path,
        overrides_path: Path,
        credentials_path: Path,
        cache_version: int = CACHE_VERSION,
    ) -> None:
        self._cache_path = cache_path
        self._overrides_path = overrides_path
        self._credentials_path = credentials_path
        self._version = cache_version

    # ------------------------------------------------------------------
    # Overrides
    # ------------------------------------------------------------------

    def _read_overrides(self) -> dict[str, dict[str, str]]:
        raw = read_json_file(self._overrides_path)
        return raw if isinstance(raw, dict) else {}

    def get_override(self, title: str) -> ControllerPositionMap | None:
        return _clean_entry(self._read_overrides().get(title), title)

    def save_override(self, title: str, position_key: str, label: str) -> None:
        """Merge one position label into the override entry for *title*."""
        if not is_position_key(position_key):
            raise ValueError(f"Unknown controller position: {position_key!r}")
        overrides = self._read_overrides()
        entry = overrides.get(title)
        merged = dict(entry) if isinstance(entry, dict) else {}
        merged[position_key] = label
        overrides[title] = merged
        write_json_file(self._overrides_path, overrides)
        logger.info("Saved override for \"{}\" {}=\"{}\"", title, position_key, label)

    # ------------------------------------------------------------------
    # Generated cache
    # ------------------------------------------------------------------

    def _read_cache(self) -> dict[str, ControllerPositionMap]:
        raw = read_json_file(self._cache_path)
        if not isinstance(raw, dict):
            return {}
        if raw.get("version") != self._version:
            logger.info(
                "Controls cache version mismatch (have {}, want {}), discarding",
                raw.get("version", "none"), self._version,
            )
            return {}
        entries = raw.get("entries")
        return entries if isinstance(entries, dict) else {}

    def get_cached(self, title: str) -> ControllerPositionMap | None:
        return _clean_entry(self._read_cache().get(title), title)

    def save_generated(self, title: str, positions: ControllerPositionMap) -> None:
        cache = self._read_cache()
        cache[title] = sanitize_position_map(positions)
        write_json_file(self._cache_path, {"version": self._version, "entries": cache})
        logger.info("Cached controls for \"{}\"", title)

    # ------------------------------------------------------------------
    # Combined lookup
    # ------------------------------------------------------------------

    def get(self, title: str) -> ControllerPositionMap | None:
        """Manual override first, then the generated cache."""
        override = self.get_override(title)
        if override is not None:
            logger.debug("Using manual override for \"{}\"", title)
            return override
        cached = self.get_cached(title)
        if cached is not None:
            logger.debug("Cache hit for \"{}\"", title)
        return cached

    # ------------------------------------------------------------------
    # Credential
    # ------------------------------------------------------------------

    def get_api_key(self) -> str | None:
        raw = read_json_file(self._credentials_path)
        if not isinstance(raw, dict):
            return None
        key = raw.get(API_KEY_FIELD)
        return key.strip() if isinstance(key, str) and key.strip() else None

    def set_api_key(self, api_key: str) -> None:
        raw = read_json_file(self._credentials_path)
        data = raw if isinstance(raw, dict) else {}
        data[API_KEY_FIELD] = api_key.strip()
        write_json_file(self._credentials_path, data)

    def is_ai_configured(self) -> bool:
        return self.get_api_key() is not None
