"""RetroDeck: entry point."""

import argparse
import asyncio
import sys

from PySide6 import QtAsyncio
from PySide6.QtCore import Qt
from PySide6.QtWidgets import QApplication
from loguru import logger

from retrodeck.config import Config
from retrodeck.core.ai_controls import ControllerMapResolver
from retrodeck.core.catalog import GameCatalog
from retrodeck.core.controls_cache import ControlsStore
from retrodeck.core.dev_mock import MOCK_GAMES, mock_game
from retrodeck.core.process_query import ProcessQuery
from retrodeck.core.remote import (
    RemoteControl, RetroArchCommander, ensure_network_cmd_enabled, is_windows,
)
from retrodeck.core.resolution import GameResolver
from retrodeck.core.text_generation import AnthropicTextGenerator
from retrodeck.core.watcher import GameWatcher
from retrodeck.i18n import init as i18n_init
from retrodeck.logger import setup_logger
from retrodeck.plugins.plugin_manager import PluginManager
from retrodeck.ui.main_window import MainWindow
from retrodeck.ui.state_bridge import StateBridge

DEMO_CYCLE_SECONDS = 20.0


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="retrodeck", description="LaunchBox companion dashboard")
    parser.add_argument("--demo", action="store_true", help="cycle through built-in games instead of polling")
    parser.add_argument("--log-level", default="DEBUG", help="console log level")
    # Qt consumes its own arguments; ignore anything we don't know.
    args, _ = parser.parse_known_args(argv)
    return args


async def _demo_cycle(watcher: GameWatcher) -> None:
    index = 0
    while True:
        game, process = mock_game(index)
        logger.info("Demo mode: showing {}", game.title)
        watcher.simulate(game, process)
        index += 1
        await asyncio.sleep(DEMO_CYCLE_SECONDS)


def main() -> None:
    args = _parse_args(sys.argv[1:])
    demo = args.demo or not is_windows()

    # ---- 1. Config ----
    config = Config()

    # ---- 2. Logger ----
    setup_logger(level=args.log_level)
    logger.info("RetroDeck starting (library: {})", config.launchbox_dir)

    # ---- 3. i18n ----
    i18n_init(config.language)

    # ---- 4. Plugin discovery ----
    pm = PluginManager()
    pm.discover()
    logger.info("Plugins loaded: {}", pm.get_plugin_names())

    # ---- 5. Core services ----
    catalog = GameCatalog(config.launchbox_dir).build()
    store = ControlsStore(
        config.controls_cache_path,
        config.controls_overrides_path,
        config.credentials_path,
    )
    generator = AnthropicTextGenerator(
        model=config.ai_model, request_timeout=config.generation_timeout,
    )
    controls = ControllerMapResolver(
        store, generator, config.launchbox_dir, config.generation_timeout,
    )
    watcher = GameWatcher(
        pm,
        ProcessQuery(pm, timeout=config.query_timeout),
        GameResolver(catalog),
        controls,
        poll_interval=config.poll_interval,
    )
    remote = RemoteControl(
        config.bigbox_path,
        RetroArchCommander(config.retroarch_host, config.retroarch_port),
        watcher.set_state,
        allow_system_actions=not demo,
        is_emulator=lambda name: pm.find_for_process(name) is not None,
    )
    if not demo:
        ensure_network_cmd_enabled(config.retroarch_cfg_path)

    # ---- 6. Qt Application ----
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough,
    )
    app = QApplication(sys.argv)

    # ---- 7. Main Window ----
    window = MainWindow(config)
    bridge = StateBridge(watcher, window)
    window.now_playing_page.set_remote(remote)
    window.now_playing_page.set_plugin_manager(pm)
    window.now_playing_page.set_library(catalog.platforms())
    window.controls_page.set_resolver(controls)
    window.controls_page.set_watcher(watcher)
    window.settings_page.set_config(config)
    window.settings_page.set_controls_store(store)
    window.attach(bridge)

    app.aboutToQuit.connect(watcher.stop)
    app.aboutToQuit.connect(bridge.detach)
    app.aboutToQuit.connect(generator.close)

    background: list[asyncio.Task] = []

    async def start() -> None:
        if demo:
            logger.info("Demo mode with {} built-in games", len(MOCK_GAMES))
            background.append(asyncio.ensure_future(_demo_cycle(watcher)))
        else:
            watcher.start()

    window.show()
    logger.info("Window shown, entering event loop")
    QtAsyncio.run(start(), keep_running=True, quit_qapp=True)


if __name__ == "__main__":
    main()
