from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from typing import Callable, Optional

from fishsim.save import save_game
from fishsim.simulation import Simulation

log = logging.getLogger(__name__)


class GameEngine:
    """Host loop: drives Simulation.step at its tick rate and autosaves.

    Autosave runs on simulated play time, so a stalled host does not save
    more often than the game advances.
    """

    def __init__(
        self,
        sim: Simulation,
        save_path: Optional[Path] = None,
        autosave_seconds: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.sim = sim
        self.save_path = save_path
        self.autosave_seconds = autosave_seconds
        self.clock = clock
        self.running = False
        self.saves = 0
        self._last_save_ms = sim.state.play_time_ms

    @property
    def tick_interval(self) -> float:
        tps = self.sim.ticks_per_second
        return 1.0 / tps if tps > 0 else 1.0

    def save(self) -> bool:
        if self.save_path is None:
            return False
        ok = save_game(self.sim, self.save_path)
        if ok:
            self.saves += 1
        self._last_save_ms = self.sim.state.play_time_ms
        return ok

    def _maybe_autosave(self) -> None:
        if self.autosave_seconds <= 0:
            return
        elapsed_ms = self.sim.state.play_time_ms - self._last_save_ms
        if elapsed_ms < 0:
            # State was replaced (reset or import); count from its play time.
            self._last_save_ms = self.sim.state.play_time_ms
            return
        if elapsed_ms >= self.autosave_seconds * 1000.0:
            self.save()

    def run_ticks(self, count: int) -> None:
        """Advance ``count`` fixed ticks synchronously."""
        delta_ms = self.tick_interval * 1000.0
        for _ in range(count):
            self.sim.update(delta_ms)
            self._maybe_autosave()

    def stop(self) -> None:
        self.running = False

    async def run(self, max_ticks: Optional[int] = None) -> None:
        """Tick in real time until stopped (or ``max_ticks`` ticks have run)."""
        self.running = True
        start_ticks = self.sim.state.total_ticks
        last = self.clock()
        log.info("Engine started at %.0f ticks/s", self.sim.ticks_per_second)
        try:
            while self.running:
                now = self.clock()
                self.sim.step(now - last)
                last = now
                self._maybe_autosave()
                if max_ticks is not None and self.sim.state.total_ticks - start_ticks >= max_ticks:
                    break
                await asyncio.sleep(self.tick_interval)
        finally:
            self.running = False
            self.save()
            log.info("Engine stopped after %d ticks", self.sim.state.total_ticks - start_ticks)
