"""Data model for cataloged games."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Any


@dataclass
class GameImages:
    """Resolved artwork locations for a game.  Empty string = not found."""

    box_front: str = ""
    screenshot: str = ""
    clear_logo: str = ""
    fanart_background: str = ""

    def fill_missing(self, other: GameImages) -> None:
        """Copy slots from *other* into slots that are still empty."""
        for name in ("box_front", "screenshot", "clear_logo", "fanart_background"):
            if not getattr(self, name) and getattr(other, name):
                setattr(self, name, getattr(other, name))

    @property
    def found_count(self) -> int:
        return sum(
            1 for v in (self.box_front, self.screenshot, self.clear_logo, self.fanart_background) if v
        )


@dataclass
class GameRecord:
    """One game entry from the LaunchBox library."""

    id: str
    """LaunchBox game ID (GUID).  Empty for games not in the library."""

    title: str
    """Display title."""

    platform: str
    """LaunchBox platform name (e.g. 'Nintendo 64')."""

    application_path: str
    """ROM / disc image path, as stored in the platform XML."""

    developer: str = ""
    publisher: str = ""
    genre: str = ""
    release_date: str = ""
    rating: str = ""
    play_mode: str = ""

    play_count: int = 0
    """Number of launches recorded by LaunchBox."""

    play_time: int = 0
    """Cumulative play time in seconds."""

    images: GameImages = field(default_factory=GameImages)
    """Artwork, filled lazily on first detection."""

    @property
    def is_cataloged(self) -> bool:
        """Whether this record came from the library (vs. a placeholder)."""
        return bool(self.id)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class PlatformSummary:
    """A LaunchBox platform and how many playable games it holds."""

    name: str
    game_count: int = 0
