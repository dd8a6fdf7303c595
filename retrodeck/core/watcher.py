"""Game watcher: polls for emulator processes and tracks the companion state.

Each tick
─────────
1. Query running processes known to the plugin registry.
2. Nothing found (or the query failed) → go idle, but only if a game was
   active; repeated empty ticks while idle emit nothing.
3. First process → its plugin → ROM path from the command line.  No plugin
   or no ROM path → ignore the tick.
4. Same ROM path as last time → nothing to do.
5. New ROM path → resolve the game, become ``game-active``, notify, and
   start resolving the controller map in the background.

The decision part of a tick is the pure function :func:`next_transition`;
:class:`GameWatcher` owns the timer, the state and the subscribers.

Background controller-map resolution can finish after the game it was
started for has closed.  Every state change bumps a transition counter
and a result is only applied if the counter has not moved since.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Sequence

from loguru import logger

from retrodeck.core.ai_controls import ControllerMapResolver
from retrodeck.core.process_query import DetectedProcess
from retrodeck.core.resolution import GameResolver
from retrodeck.models.controls import ControllerPositionMap
from retrodeck.models.game import GameRecord
from retrodeck.models.state import CompanionState, GameActiveState, IdleState
from retrodeck.plugins.base import EmulatorPlugin
from retrodeck.plugins.plugin_manager import PluginManager

ProcessQueryFn = Callable[[], Awaitable[list[DetectedProcess]]]
StateCallback = Callable[[CompanionState], None]

DEFAULT_POLL_INTERVAL = 2.5


class TickAction(str, Enum):
    """What a detection tick should do."""

    NONE = "none"           # no change
    GO_IDLE = "go_idle"     # game closed
    DETECTED = "detected"   # new ROM path


@dataclass(frozen=True)
class TickDecision:
    action: TickAction
    rom_path: str = ""
    process_name: str = ""


def next_transition(
    game_active: bool,
    current_rom_path: str | None,
    processes: Sequence[DetectedProcess],
    find_plugin: Callable[[str], EmulatorPlugin | None],
) -> TickDecision:
    """Pure transition logic for one detection tick."""
    if not processes:
        if game_active:
            return TickDecision(TickAction.GO_IDLE)
        return TickDecision(TickAction.NONE)

    detected = processes[0]
    plugin = find_plugin(detected.name)
    if plugin is None:
        return TickDecision(TickAction.NONE)

    rom_path = plugin.parse_rom_path(detected.command_line)
    if not rom_path or rom_path == current_rom_path:
        return TickDecision(TickAction.NONE)

    return TickDecision(TickAction.DETECTED, rom_path=rom_path, process_name=detected.name)


class GameWatcher:
    """Polls for running emulators and broadcasts :class:`CompanionState`."""

    def __init__(
        self,
        plugin_manager: PluginManager,
        query: ProcessQueryFn,
        resolver: GameResolver,
        controls: ControllerMapResolver | None = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self._pm = plugin_manager
        self._query = query
        self._resolver = resolver
        self._controls = controls
        self._interval = poll_interval

        self._state: CompanionState = IdleState()
        self._rom_path: str | None = None
        self._transition = 0
        self._subscribers: list[StateCallback] = []
        self._task: asyncio.Task | None = None
        self._pending: set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def current_state(self) -> CompanionState:
        return self._state

    @property
    def current_rom_path(self) -> str | None:
        return self._rom_path

    @property
    def active_emulator_process(self) -> str | None:
        if isinstance(self._state, GameActiveState):
            return self._state.emulator_process
        return None

    @property
    def active_plugin(self) -> EmulatorPlugin | None:
        process = self.active_emulator_process
        return self._pm.find_for_process(process) if process else None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, callback: StateCallback) -> Callable[[], None]:
        """Register *callback* for every state change.  Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _emit(self, state: CompanionState) -> None:
        for callback in list(self._subscribers):
            try:
                callback(state)
            except Exception as e:
                logger.error("State subscriber failed: {}", e)

    def _transition_to(self, state: CompanionState) -> None:
        self._transition += 1
        self._state = state
        self._emit(state)

    # ------------------------------------------------------------------
    # External state changes
    # ------------------------------------------------------------------

    def set_state(self, state: CompanionState) -> None:
        """Replace the state from outside the poll loop (errors, demo mode)."""
        self._rom_path = None
        self._transition_to(state)

    def set_controller_map(self, title: str, controller_map: ControllerPositionMap) -> bool:
        """Replace the active game's map after a manual edit.

        Bumps the transition, so a lookup still running for that game is dropped.
        """
        state = self._state
        if not isinstance(state, GameActiveState) or state.game.title != title:
            return False
        self._transition_to(state.with_controller_map(controller_map))
        return True

    def simulate(self, game: GameRecord, emulator_process: str = "retroarch.exe") -> None:
        """Pretend *game* was detected, including controller-map resolution."""
        self._rom_path = None
        state = GameActiveState(game=game, emulator_process=emulator_process)
        self._transition_to(state)
        self._schedule_controller_map(state)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start polling on the running event loop (first tick is immediate)."""
        if self.is_running:
            return
        logger.info("Starting emulator polling ({}s interval)", self._interval)
        self._task = asyncio.get_running_loop().create_task(self._run())

    def stop(self) -> None:
        """Stop polling.  In-flight controller-map lookups are left to finish."""
        if self._task is not None:
            self._task.cancel()
            self._task = None
        logger.info("Watcher stopped")

    async def _run(self) -> None:
        while True:
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.exception("Detection tick failed: {}", e)
            await asyncio.sleep(self._interval)

    # ------------------------------------------------------------------
    # Detection tick
    # ------------------------------------------------------------------

    async def poll_once(self) -> None:
        """Run one detection tick."""
        processes = await self._query()
        for p in processes:
            logger.debug("Process: {} | CmdLine: {}", p.name, p.command_line)

        decision = next_transition(
            isinstance(self._state, GameActiveState),
            self._rom_path,
            processes,
            self._pm.find_for_process,
        )

        if decision.action is TickAction.GO_IDLE:
            logger.info("Emulator closed, returning to idle")
            self._rom_path = None
            self._transition_to(IdleState())
            return
        if decision.action is TickAction.NONE:
            return

        logger.debug("Parsed ROM path: \"{}\"", decision.rom_path)
        token = self._transition
        game = await self._resolver.resolve_async(decision.rom_path)
        if token != self._transition:
            logger.debug("State changed while resolving \"{}\", dropping tick", decision.rom_path)
            return
        self._rom_path = decision.rom_path
        state = GameActiveState(game=game, emulator_process=decision.process_name)
        logger.info("Detected: {} ({}) via {}", game.title, game.platform, decision.process_name)
        self._transition_to(state)
        self._schedule_controller_map(state)

    # ------------------------------------------------------------------
    # Controller map
    # ------------------------------------------------------------------

    def _schedule_controller_map(self, state: GameActiveState) -> None:
        if self._controls is None:
            return
        task = asyncio.get_running_loop().create_task(
            self._attach_controller_map(state, self._transition)
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _attach_controller_map(self, state: GameActiveState, token: int) -> None:
        try:
            controller_map = await self._controls.resolve(state.game.title, state.game.platform)
        except Exception as e:
            logger.warning("Controller map resolution failed for \"{}\": {}", state.game.title, e)
            return

        if token != self._transition or self._state is not state:
            logger.debug("Discarding stale controller map for \"{}\"", state.game.title)
            return
        if not controller_map:
            return
        self._transition_to(state.with_controller_map(controller_map))

    async def wait_pending(self) -> None:
        """Wait for in-flight controller-map lookups (used by tests and shutdown)."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
