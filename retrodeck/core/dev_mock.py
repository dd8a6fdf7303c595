"""Built-in games for demo mode (no LaunchBox, or not on Windows)."""

from __future__ import annotations

import copy

from retrodeck.models.game import GameRecord

MOCK_GAMES: list[tuple[GameRecord, str]] = [
    (
        GameRecord(
            id="mock-n64-001",
            title="Super Mario 64",
            platform="Nintendo 64",
            application_path="Games/Nintendo 64/Super Mario 64 (USA)/Super Mario 64 (USA).z64",
            developer="Nintendo EAD",
            publisher="Nintendo",
            genre="Platform",
            release_date="1996-06-23",
            rating="E - Everyone",
            play_mode="Single Player",
            play_count=12,
            play_time=4320,
        ),
        "retroarch.exe",
    ),
    (
        GameRecord(
            id="mock-ps2-001",
            title="Shadow of the Colossus",
            platform="Sony Playstation 2",
            application_path="Games/Sony Playstation 2/Shadow of the Colossus.iso",
            developer="Team Ico",
            publisher="Sony Computer Entertainment",
            genre="Action; Adventure",
            release_date="2005-10-18",
            rating="T - Teen",
            play_mode="Single Player",
            play_count=3,
            play_time=7200,
        ),
        "pcsx2-qt.exe",
    ),
    (
        GameRecord(
            id="mock-gc-001",
            title="Super Smash Bros. Melee",
            platform="Nintendo GameCube",
            application_path="Games/Nintendo GameCube/Super Smash Bros. Melee.iso",
            developer="HAL Laboratory",
            publisher="Nintendo",
            genre="Fighting",
            release_date="2001-11-21",
            rating="T - Teen",
            play_mode="Multiplayer",
            play_count=45,
            play_time=18000,
        ),
        "Dolphin.exe",
    ),
]


def mock_game(index: int) -> tuple[GameRecord, str]:
    """A fresh copy of mock game *index* (wraps around) and its emulator process."""
    game, process = MOCK_GAMES[index % len(MOCK_GAMES)]
    return copy.deepcopy(game), process
