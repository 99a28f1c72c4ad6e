from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import threading
from pathlib import Path
from typing import List, Optional

from fishsim.config import load_settings
from fishsim.console import DebugConsole
from fishsim.engine import GameEngine
from fishsim.logger import setup_logging
from fishsim.save import load_game
from fishsim.simulation import new_simulation

log = logging.getLogger("fishsim.main")


def _start_stdin_reader(loop: asyncio.AbstractEventLoop, queue: "asyncio.Queue[str]") -> None:
    def _read() -> None:
        for line in sys.stdin:
            loop.call_soon_threadsafe(queue.put_nowait, line)
        loop.call_soon_threadsafe(queue.put_nowait, "")

    threading.Thread(target=_read, name="stdin-reader", daemon=True).start()


async def _console_loop(engine: GameEngine, console: DebugConsole) -> None:
    queue: "asyncio.Queue[str]" = asyncio.Queue()
    _start_stdin_reader(asyncio.get_running_loop(), queue)
    while engine.running:
        line = await queue.get()
        if not line:
            engine.stop()
            break
        line = line.strip()
        if line in ("quit", "exit"):
            engine.stop()
            break
        reply = console.execute(line)
        if reply:
            print(reply)


async def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Headless multiversal fishing simulator")
    parser.add_argument("--settings", type=Path, default=None, help="settings JSON file")
    parser.add_argument("--ticks", type=int, default=None, help="stop after this many ticks")
    parser.add_argument("--console", action="store_true", help="read debug commands from stdin")
    args = parser.parse_args(argv)

    settings = load_settings(args.settings)
    setup_logging(settings.log_level)

    sim = new_simulation(settings.ticks_per_second, settings.base_fishing_duration_ms)
    save_path = settings.save_file
    load_game(sim, save_path)

    engine = GameEngine(sim, save_path=save_path, autosave_seconds=settings.autosave_seconds)
    tasks = [asyncio.ensure_future(engine.run(max_ticks=args.ticks))]
    if args.console or settings.debug_console:
        console = DebugConsole(sim, save_path)
        print("Debug console ready. Type 'help' for commands, 'quit' to exit.")
        tasks.append(asyncio.ensure_future(_console_loop(engine, console)))
    try:
        await tasks[0]
    except (KeyboardInterrupt, asyncio.CancelledError):
        engine.stop()
    finally:
        for task in tasks[1:]:
            task.cancel()
        await asyncio.gather(*tasks[1:], return_exceptions=True)
        for key, value in sim.stats().items():
            log.info("%s: %s", key, value)


if __name__ == "__main__":
    asyncio.run(main())
