"""Tests for the LaunchBox catalog index and artwork lookup."""

import textwrap
from pathlib import Path

from retrodeck.core.catalog import (
    GameCatalog,
    find_image_in_dir,
    join_library_path,
    normalize_title,
    path_basename,
)
from tests.conftest import write_platform


def _game_xml(title: str, app_path: str, platform: str = "") -> str:
    platform_tag = f"<Platform>{platform}</Platform>" if platform else ""
    return textwrap.dedent(f"""\
        <?xml version="1.0"?>
        <LaunchBox>
          <Game>
            <ID>{title.lower().replace(" ", "-")}</ID>
            <Title>{title}</Title>
            {platform_tag}
            <ApplicationPath>{app_path}</ApplicationPath>
          </Game>
        </LaunchBox>
    """)


# ── Path helpers ─────────────────────────────────────────────────────────

class TestPathHelpers:
    def test_join_relative_path(self):
        joined = join_library_path("/data/LaunchBox", "Games\\SNES\\Zelda.sfc")
        assert joined == "/data/LaunchBox/Games/SNES/Zelda.sfc"

    def test_join_collapses_parent_segments(self):
        joined = join_library_path("/data/LaunchBox", "..\\Roms\\N64\\Mario.z64")
        assert joined == "/data/Roms/N64/Mario.z64"

    def test_join_keeps_absolute_windows_paths(self):
        assert join_library_path("/data/LaunchBox", "D:\\Roms\\x.iso") == "D:\\Roms\\x.iso"
        assert join_library_path("/data/LaunchBox", "\\\\nas\\roms\\x.iso") == "\\\\nas\\roms\\x.iso"

    def test_basename_handles_both_separators(self):
        assert path_basename("C:\\Games\\N64\\Mario.z64") == "Mario.z64"
        assert path_basename("/games/n64/Mario.z64") == "Mario.z64"

    def test_normalize_title_strips_punctuation(self):
        assert normalize_title("The Legend of Zelda: The Wind Waker") == "the legend of zelda the wind waker"


# ── Build / lookup ───────────────────────────────────────────────────────

class TestCatalogLookup:
    def test_build_indexes_path_and_filename(self, launchbox: Path):
        catalog = GameCatalog(launchbox).build()
        # One game with a path → absolute key + filename key
        assert len(catalog) == 2
        assert [p.name for p in catalog.platforms()] == ["Nintendo 64"]
        assert catalog.platforms()[0].game_count == 1

    def test_lookup_absolute_path(self, launchbox: Path):
        catalog = GameCatalog(launchbox).build()
        rom = launchbox / "Games" / "Nintendo 64" / "Super Mario 64 (USA).z64"
        game = catalog.lookup(str(rom))
        assert game is not None
        assert game.title == "Super Mario 64"
        assert game.play_count == 12
        assert game.play_time == 4320

    def test_lookup_relative_path_case_insensitive(self, launchbox: Path):
        catalog = GameCatalog(launchbox).build()
        game = catalog.lookup("games\\nintendo 64\\SUPER MARIO 64 (USA).Z64")
        assert game is not None
        assert game.platform == "Nintendo 64"

    def test_lookup_by_filename_from_another_drive(self, launchbox: Path):
        catalog = GameCatalog(launchbox).build()
        game = catalog.lookup("E:\\Backups\\Super Mario 64 (USA).z64")
        assert game is not None
        assert game.id.endswith("0064")

    def test_lookup_miss_and_empty(self, launchbox: Path):
        catalog = GameCatalog(launchbox).build()
        assert catalog.lookup("C:\\Roms\\Unknown.sfc") is None
        assert catalog.lookup("") is None

    def test_filename_collision_first_platform_wins(self, tmp_path: Path):
        root = tmp_path / "LaunchBox"
        write_platform(root, "A Platform", _game_xml("First", "Games\\A\\Game.iso", "A Platform"))
        write_platform(root, "B Platform", _game_xml("Second", "Games\\B\\Game.iso", "B Platform"))
        catalog = GameCatalog(root).build()

        assert catalog.lookup("Z:\\Elsewhere\\Game.iso").title == "First"
        # Full paths still reach both
        assert catalog.lookup(str(root / "Games" / "B" / "Game.iso")).title == "Second"

    def test_platform_falls_back_to_file_name(self, tmp_path: Path):
        root = tmp_path / "LaunchBox"
        write_platform(root, "Sega Genesis", _game_xml("Sonic", "Games\\Genesis\\Sonic.md"))
        game = GameCatalog(root).build().lookup("Sonic.md")
        assert game is not None
        assert game.platform == "Sega Genesis"

    def test_malformed_file_contributes_nothing(self, tmp_path: Path):
        root = tmp_path / "LaunchBox"
        write_platform(root, "Good", _game_xml("Good Game", "Games\\good.sfc", "Good"))
        broken = (
            "<LaunchBox><Game><Title>Half</Title>"
            "<ApplicationPath>Games\\half.sfc</ApplicationPath></Game><Game><Title>"
        )
        write_platform(root, "Broken", broken)
        catalog = GameCatalog(root).build()

        assert catalog.lookup("good.sfc") is not None
        assert catalog.lookup("half.sfc") is None
        assert [p.name for p in catalog.platforms()] == ["Good"]

    def test_missing_platforms_dir(self, tmp_path: Path):
        catalog = GameCatalog(tmp_path / "Nowhere").build()
        assert len(catalog) == 0
        assert catalog.lookup("anything.z64") is None


# ── Artwork ──────────────────────────────────────────────────────────────

class TestArtwork:
    def _touch(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"\x89PNG")
        return path

    def test_resolve_images_top_level_and_region_folder(self, launchbox: Path):
        images_dir = launchbox / "Images" / "Nintendo 64"
        box = self._touch(images_dir / "Box - Front" / "Super Mario 64-01.png")
        shot = self._touch(images_dir / "Screenshot - Gameplay" / "North America" / "Super Mario 64-01.jpg")

        images = GameCatalog(launchbox).resolve_images("Super Mario 64", "Nintendo 64")
        assert images.box_front == str(box)
        assert images.screenshot == str(shot)
        assert images.clear_logo == ""
        assert images.found_count == 2

    def test_title_with_colon_matches_dashed_filename(self, tmp_path: Path):
        found = self._touch(tmp_path / "The Legend of Zelda - The Wind Waker-01.png")
        assert find_image_in_dir(tmp_path, "The Legend of Zelda: The Wind Waker") == found

    def test_non_image_files_are_ignored(self, tmp_path: Path):
        (tmp_path / "Super Mario 64.txt").write_text("notes")
        assert find_image_in_dir(tmp_path, "Super Mario 64") is None

    def test_missing_directory(self, tmp_path: Path):
        assert find_image_in_dir(tmp_path / "nope", "Anything") is None
