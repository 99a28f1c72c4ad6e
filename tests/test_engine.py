"""Tests for the host loop, fixed-timestep stepping and autosave."""
import asyncio

import pytest

from fishsim import bignum
from fishsim.engine import GameEngine
from fishsim.save import export_save, import_save, load_game
from fishsim.simulation import Simulation, new_simulation


class FakeClock:
    """Advances a fixed amount on every read."""

    def __init__(self, step):
        self.now = 0.0
        self.step = step

    def __call__(self):
        self.now += self.step
        return self.now


class TestStep:
    """Tests for Simulation.step."""

    def test_step_fires_fixed_ticks(self, sim):
        sim.step(0.35)
        assert sim.state.total_ticks == 3
        sim.step(0.06)
        assert sim.state.total_ticks == 4

    def test_play_time_tracks_ticks(self, sim):
        sim.step(1.0)
        assert sim.state.play_time_ms == pytest.approx(1000.0, abs=100.0)

    def test_new_simulation_overrides_duration(self):
        sim = new_simulation(ticks_per_second=20, base_fishing_duration_ms=500)
        assert sim.ticks_per_second == 20
        sim.start_fishing()
        for _ in range(10):
            sim.update(50.0)
        assert bignum.compare(sim.fish, 1) == 0


class TestGameEngine:
    """Tests for GameEngine."""

    def test_run_ticks(self, sim):
        engine = GameEngine(sim)
        engine.run_ticks(25)
        assert sim.state.total_ticks == 25
        assert engine.tick_interval == pytest.approx(0.1)

    def test_autosave_on_play_time(self, sim, tmp_path):
        path = tmp_path / "save.json"
        engine = GameEngine(sim, save_path=path, autosave_seconds=1.0)
        engine.run_ticks(9)
        assert engine.saves == 0
        engine.run_ticks(2)
        assert engine.saves == 1
        assert path.exists()

    def test_autosave_resumes_after_reset(self, sim, tmp_path):
        engine = GameEngine(sim, save_path=tmp_path / "save.json", autosave_seconds=1.0)
        engine.run_ticks(600)
        assert engine.saves == 60

        sim.reset_game()
        engine.run_ticks(300)
        assert engine.saves == 89

    def test_autosave_after_importing_older_save(self, tmp_path):
        older = Simulation()
        older.state.play_time_ms = 500.0
        text = export_save(older)

        sim = Simulation()
        engine = GameEngine(sim, save_path=tmp_path / "save.json", autosave_seconds=1.0)
        engine.run_ticks(50)
        assert import_save(sim, text)
        engine.run_ticks(20)
        assert engine.saves == 6

    def test_autosave_disabled(self, sim, tmp_path):
        engine = GameEngine(sim, save_path=tmp_path / "save.json", autosave_seconds=0)
        engine.run_ticks(100)
        assert engine.saves == 0

    def test_save_without_path(self, sim):
        assert not GameEngine(sim).save()

    def test_async_run_stops_and_saves(self, tmp_path):
        path = tmp_path / "save.json"
        sim = Simulation(ticks_per_second=100.0)
        sim.set_fish(42)
        engine = GameEngine(sim, save_path=path, clock=FakeClock(0.01))

        asyncio.run(engine.run(max_ticks=5))

        assert sim.state.total_ticks >= 5
        assert not engine.running
        restored = Simulation()
        assert load_game(restored, path)
        assert bignum.compare(restored.fish, 42) == 0
