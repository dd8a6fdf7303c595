"""Shared fixtures: a throwaway LaunchBox tree and a plugin registry."""

import textwrap
from pathlib import Path

import pytest

from retrodeck.plugins.dolphin.plugin import DolphinPlugin
from retrodeck.plugins.pcsx2.plugin import Pcsx2Plugin
from retrodeck.plugins.plugin_manager import PluginManager
from retrodeck.plugins.retroarch.plugin import RetroArchPlugin


N64_XML = textwrap.dedent("""\
    <?xml version="1.0" standalone="yes"?>
    <LaunchBox>
      <Game>
        <ID>3f1c2a9e-0000-4000-8000-000000000064</ID>
        <Title>Super Mario 64</Title>
        <Platform>Nintendo 64</Platform>
        <ApplicationPath>Games\\Nintendo 64\\Super Mario 64 (USA).z64</ApplicationPath>
        <Developer>Nintendo EAD</Developer>
        <Publisher>Nintendo</Publisher>
        <Genre>Platform</Genre>
        <ReleaseDate>1996-06-23T00:00:00-07:00</ReleaseDate>
        <Rating>E - Everyone</Rating>
        <PlayMode>Single Player</PlayMode>
        <PlayCount>12</PlayCount>
        <PlayTime>4320</PlayTime>
      </Game>
      <Game>
        <ID>no-path</ID>
        <Title>Missing Path Game</Title>
      </Game>
    </LaunchBox>
""")


def write_platform(launchbox: Path, name: str, xml: str) -> Path:
    platforms = launchbox / "Data" / "Platforms"
    platforms.mkdir(parents=True, exist_ok=True)
    path = platforms / f"{name}.xml"
    path.write_text(xml, encoding="utf-8")
    return path


@pytest.fixture
def launchbox(tmp_path: Path) -> Path:
    root = tmp_path / "LaunchBox"
    write_platform(root, "Nintendo 64", N64_XML)
    return root


@pytest.fixture
def plugin_manager() -> PluginManager:
    pm = PluginManager()
    pm.register(RetroArchPlugin())
    pm.register(DolphinPlugin())
    pm.register(Pcsx2Plugin())
    return pm
