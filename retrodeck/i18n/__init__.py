"""UI string tables.

Strings live in ``<lang>.json`` next to this module as nested objects and
are looked up with dot-separated keys: ``t("now_playing.play_count")``.
"""

import json
from pathlib import Path
from typing import Any, Optional

DEFAULT_LANGUAGE = "en_US"

_current_lang = DEFAULT_LANGUAGE
_translations: dict[str, dict[str, Any]] = {}
_i18n_dir = Path(__file__).parent


def load_language(lang: str) -> None:
    """Read ``<lang>.json`` into the table cache."""
    lang_file = _i18n_dir / f"{lang}.json"
    if not lang_file.exists():
        raise FileNotFoundError(f"Language file not found: {lang_file}")
    with open(lang_file, "r", encoding="utf-8") as f:
        _translations[lang] = json.load(f)


def set_language(lang: str) -> None:
    global _current_lang
    if lang not in _translations:
        load_language(lang)
    _current_lang = lang


def t(key: str, **kwargs: Any) -> str:
    """Translated string for *key*, with ``{name}`` placeholders filled from *kwargs*.

    Unknown keys come back unchanged, so a missing string shows up as its
    key in the UI rather than as an empty label.
    """
    data: Any = _translations.get(_current_lang) or _translations.get(DEFAULT_LANGUAGE, {})
    for part in key.split("."):
        if not isinstance(data, dict):
            return key
        data = data.get(part)
    if data is None:
        return key
    result = str(data)
    for name, value in kwargs.items():
        result = result.replace(f"{{{name}}}", str(value))
    return result


def get_current_language() -> str:
    return _current_lang


def get_available_languages() -> list[str]:
    return sorted(f.stem for f in _i18n_dir.glob("*.json"))


def init(lang: Optional[str] = None) -> None:
    """Load every language file and activate *lang* (falls back to English)."""
    for f in _i18n_dir.glob("*.json"):
        load_language(f.stem)
    set_language(lang if lang in _translations else DEFAULT_LANGUAGE)
