"""LaunchBox game catalog: path index and artwork lookup.

Index keys
──────────
Every game with an ``ApplicationPath`` is reachable under:

1. its absolute path (library root + relative path), normalised to forward
   slashes and lowercase;
2. its bare filename, **unless** an earlier game already claimed that
   filename (first writer wins, so entries from earlier platform files keep
   priority over later duplicates).

Platform files are read in sorted filename order, which makes the
filename-collision winner deterministic across filesystems.

Artwork
───────
LaunchBox stores images as ``Images/<Platform>/<Category>/[<Region>/]<Title>-01.png``.
Titles are matched by prefix on a normalised form so that
``The Legend of Zelda: The Wind Waker`` finds
``The Legend of Zelda - The Wind Waker-01.png``.
"""

from __future__ import annotations

import posixpath
import re
import xml.etree.ElementTree as ET
from pathlib import Path

from loguru import logger

from retrodeck.models.game import GameImages, GameRecord, PlatformSummary


_IMAGE_EXTS = (".png", ".jpg", ".jpeg", ".gif", ".webp")

# (GameImages attribute, LaunchBox image folder)
IMAGE_CATEGORIES: tuple[tuple[str, str], ...] = (
    ("box_front", "Box - Front"),
    ("screenshot", "Screenshot - Gameplay"),
    ("clear_logo", "Clear Logo"),
    ("fanart_background", "Fanart - Background"),
)

_WINDOWS_ABS_RE = re.compile(r"^(?:[A-Za-z]:[\\/]|\\\\)")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")
_SPACES_RE = re.compile(r"\s+")


# -----------------------------------------------------------------------
# Normalisation helpers
# -----------------------------------------------------------------------

def normalize_path(path: str) -> str:
    """Backslashes → forward slashes, lowercase."""
    return path.replace("\\", "/").lower()


def path_basename(path: str) -> str:
    """Filename component of a Windows or POSIX path string."""
    return path.replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]


def join_library_path(root: Path | str, relative: str) -> str:
    """Join a LaunchBox-relative path onto the library root.

    Absolute Windows paths (drive letter or UNC) are returned unchanged.
    ``..`` segments are collapsed the way Windows resolves them.
    """
    value = relative.strip().strip('"')
    if _WINDOWS_ABS_RE.match(value):
        return value
    base = str(root).replace("\\", "/").rstrip("/")
    joined = f"{base}/{value.replace(chr(92), '/').lstrip('/')}"
    return posixpath.normpath(joined)


def normalize_title(text: str) -> str:
    """Lowercase, strip punctuation, collapse whitespace."""
    lowered = _NON_ALNUM_RE.sub(" ", text.lower())
    return _SPACES_RE.sub(" ", lowered).strip()


# -----------------------------------------------------------------------
# Catalog
# -----------------------------------------------------------------------

class GameCatalog:
    """In-memory index of the LaunchBox library."""

    def __init__(self, launchbox_dir: Path) -> None:
        self._root = Path(launchbox_dir)
        self._index: dict[str, GameRecord] = {}
        self._platforms: list[PlatformSummary] = []

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def launchbox_dir(self) -> Path:
        return self._root

    @property
    def platforms_dir(self) -> Path:
        return self._root / "Data" / "Platforms"

    def __len__(self) -> int:
        return len(self._index)

    def keys(self) -> list[str]:
        return list(self._index.keys())

    def platforms(self) -> list[PlatformSummary]:
        """Platforms whose XML loaded, with their playable game counts."""
        return list(self._platforms)

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def build(self) -> GameCatalog:
        """Read every platform XML and (re)build the index."""
        self._index.clear()
        self._platforms.clear()

        platforms_dir = self.platforms_dir
        if not platforms_dir.is_dir():
            logger.error("Platforms directory not found at {}", platforms_dir)
            return self

        for xml_path in sorted(platforms_dir.glob("*.xml")):
            try:
                games = self._parse_platform_xml(xml_path)
            except (ET.ParseError, OSError) as e:
                logger.warning("Failed to parse {}: {}", xml_path.name, e)
                continue

            for game in games:
                self._insert(game)
            self._platforms.append(PlatformSummary(name=xml_path.stem, game_count=len(games)))

        logger.info("Indexed {} game entries from {} platforms", len(self._index), len(self._platforms))
        return self

    def _insert(self, game: GameRecord) -> None:
        absolute = join_library_path(self._root, game.application_path)
        self._index[normalize_path(absolute)] = game

        filename = normalize_path(path_basename(game.application_path))
        if filename and filename not in self._index:
            self._index[filename] = game

    def _parse_platform_xml(self, xml_path: Path) -> list[GameRecord]:
        """Parse one ``Data/Platforms/<Platform>.xml`` file.

        The whole file is parsed before anything is indexed so a file that
        fails half-way contributes nothing.
        """
        platform_name = xml_path.stem
        games: list[GameRecord] = []

        for _event, node in ET.iterparse(str(xml_path), events=("end",)):
            if node.tag != "Game":
                continue
            app_path = _text(node, "ApplicationPath")
            if not app_path:
                node.clear()
                continue

            games.append(GameRecord(
                id=_text(node, "ID"),
                title=_text(node, "Title"),
                platform=_text(node, "Platform") or platform_name,
                application_path=app_path,
                developer=_text(node, "Developer"),
                publisher=_text(node, "Publisher"),
                genre=_text(node, "Genre"),
                release_date=_text(node, "ReleaseDate"),
                rating=_text(node, "Rating"),
                play_mode=_text(node, "PlayMode"),
                play_count=_parse_int(_text(node, "PlayCount")),
                play_time=_parse_int(_text(node, "PlayTime")),
            ))
            node.clear()

        return games

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def lookup(self, rom_path: str) -> GameRecord | None:
        """Find the game for a detected ROM path.

        Tries the exact path, then the path relative to the library root,
        then the bare filename.
        """
        if not rom_path:
            return None

        exact = self._index.get(normalize_path(rom_path))
        if exact is not None:
            return exact

        relative = self._index.get(normalize_path(join_library_path(self._root, rom_path)))
        if relative is not None:
            return relative

        return self._index.get(normalize_path(path_basename(rom_path)))

    # ------------------------------------------------------------------
    # Artwork
    # ------------------------------------------------------------------

    def resolve_images(self, title: str, platform: str) -> GameImages:
        """Find box art, screenshot, logo and fanart for a game."""
        images = GameImages()
        base = self._root / "Images" / platform

        for attr, folder in IMAGE_CATEGORIES:
            found = find_image_in_dir(base / folder, title)
            if found is not None:
                setattr(images, attr, str(found))
                logger.debug("[Images] {}: {}", attr, found)

        if images.found_count == 0:
            logger.info("No images found for \"{}\" in {}", title, base)
        else:
            logger.info("Found {}/4 image types for \"{}\"", images.found_count, title)
        return images


def find_image_in_dir(directory: Path, title: str) -> Path | None:
    """First image in *directory* (then its region subfolders) matching *title*."""
    wanted = normalize_title(title)
    if not wanted or not directory.is_dir():
        return None

    try:
        entries = sorted(directory.iterdir(), key=lambda p: p.name.lower())
    except OSError as e:
        logger.debug("Cannot list {}: {}", directory, e)
        return None

    for entry in entries:
        if entry.is_file() and _matches(entry, wanted):
            return entry

    for entry in entries:
        if not entry.is_dir():
            continue
        try:
            sub_entries = sorted(entry.iterdir(), key=lambda p: p.name.lower())
        except OSError:
            continue
        for sub in sub_entries:
            if sub.is_file() and _matches(sub, wanted):
                return sub

    return None


def _matches(path: Path, wanted: str) -> bool:
    if path.suffix.lower() not in _IMAGE_EXTS:
        return False
    return normalize_title(path.name).startswith(wanted)


def _text(node: ET.Element, tag: str) -> str:
    child = node.find(tag)
    if child is None or child.text is None:
        return ""
    return child.text.strip()


def _parse_int(value: str) -> int:
    if not value:
        return 0
    try:
        return int(float(value))
    except ValueError:
        return 0
