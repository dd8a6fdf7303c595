"""Turn a detected ROM path into a game record."""

from __future__ import annotations

import asyncio
import re

from loguru import logger

from retrodeck.core.catalog import GameCatalog, path_basename
from retrodeck.models.game import GameImages, GameRecord

UNKNOWN_PLATFORM = "Unknown"

_EXT_RE = re.compile(r"\.\w+$")


def placeholder_record(rom_path: str) -> GameRecord:
    """Record for a ROM that is not in the library: title from the filename."""
    title = _EXT_RE.sub("", path_basename(rom_path))
    return GameRecord(
        id="",
        title=title,
        platform=UNKNOWN_PLATFORM,
        application_path=rom_path,
        images=GameImages(),
    )


class GameResolver:
    """Catalog lookup with artwork enrichment, or a placeholder on a miss."""

    def __init__(self, catalog: GameCatalog) -> None:
        self._catalog = catalog

    @property
    def catalog(self) -> GameCatalog:
        return self._catalog

    def resolve(self, rom_path: str) -> GameRecord:
        game = self._catalog.lookup(rom_path)
        if game is None:
            logger.info("ROM not in library: {}", rom_path)
            return placeholder_record(rom_path)
        game.images.fill_missing(self._catalog.resolve_images(game.title, game.platform))
        return game

    async def resolve_async(self, rom_path: str) -> GameRecord:
        """:meth:`resolve` with the artwork directory scans off the event loop."""
        game = self._catalog.lookup(rom_path)
        if game is None:
            logger.info("ROM not in library: {}", rom_path)
            return placeholder_record(rom_path)
        loop = asyncio.get_running_loop()
        try:
            images = await loop.run_in_executor(
                None, self._catalog.resolve_images, game.title, game.platform,
            )
        except OSError as e:
            logger.debug("Artwork lookup failed for {}: {}", game.title, e)
            return game
        game.images.fill_missing(images)
        return game
