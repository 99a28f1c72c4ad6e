"""
Unit tests for the tier ladder: multiply, ascend, new universe,
parallelize, crunch and the propagation bonuses.
"""
import pytest

from conftest import entry
from fishsim import bignum, fishing, progression
from fishsim.bignum import ZERO
from fishsim.types import Tier


# =============================================================================
# Test: multiply
# =============================================================================

class TestMultiply:
    """Tests for progression.multiply."""

    def test_resets_local_and_appends_container(self, sim):
        state = sim.state
        state.local.rod = 3
        state.fishing.queue = 4
        state.fishing.active = True
        state.nets.count = 2

        rate = progression.multiply(state)

        assert state.local.rod == 0
        assert state.nets.count == 0
        assert len(state.containers.ponds) == 1
        assert state.containers.ponds[0].fish_per_second == rate
        assert state.fishing.queue == 4

    def test_stores_net_plus_fishing_rate(self, sim):
        state = sim.state
        state.nets.count = 2
        expected = bignum.add(fishing.net_rate_per_second(state), fishing.fishing_fps(state))
        # 2 nets * 2 fish/s + 1 fish per 1s cast
        assert bignum.compare(expected, 5) == 0
        assert bignum.compare(progression.multiply(state), 5) == 0

    def test_buy_multiply_charges_cost(self, sim):
        sim.set_fish(5000)
        assert bignum.compare(sim.get_multiply_cost(), 1000) == 0
        assert sim.buy_multiply()
        assert bignum.compare(sim.fish, 4000) == 0
        # cost grows with entries already in the bucket
        assert bignum.compare(sim.get_multiply_cost(), 1500) == 0

    def test_buy_multiply_unaffordable(self, sim):
        sim.set_fish(999)
        sim.state.local.rod = 2
        assert not sim.buy_multiply()
        assert sim.state.local.rod == 2
        assert sim.state.containers.ponds == []


# =============================================================================
# Test: ascend
# =============================================================================

class TestAscend:
    """Tests for progression.ascend."""

    def test_aggregates_all_containers_into_next_tier(self, sim):
        state = sim.state
        state.containers.ponds.extend([entry(10), entry(20)])
        state.containers.lakes.append(entry(300))

        assert progression.ascend(state)

        assert state.current_tier is Tier.LAKE
        assert state.containers.ponds == []
        assert len(state.containers.lakes) == 1
        assert bignum.compare(state.containers.lakes[0].fish_per_second, 330) == 0

    def test_clears_every_bucket(self, sim):
        state = sim.state
        state.tiers.current_tier = Tier.OCEAN
        state.containers.galaxies.append(entry(5))
        state.containers.universes.append(entry(7))
        progression.ascend(state)
        assert state.current_tier is Tier.PLANET
        assert [len(state.containers.bucket(t)) for t in Tier] == [0, 0, 0, 1, 0, 0, 0]
        assert bignum.compare(state.containers.planets[0].fish_per_second, 12) == 0

    def test_preserves_fishing_queue(self, sim):
        sim.state.fishing.queue = 7
        sim.state.local.bait = 5
        progression.ascend(sim.state)
        assert sim.state.fishing.queue == 7
        assert sim.state.local.bait == 0

    def test_buy_ascend_cost(self, sim):
        assert bignum.compare(sim.get_ascend_cost(), 1e5) == 0
        sim.set_fish(1e5)
        assert sim.buy_ascend()
        assert sim.current_tier is Tier.LAKE
        assert sim.fish == ZERO
        assert bignum.compare(sim.get_ascend_cost(), 1e6) == 0


# =============================================================================
# Test: new universe
# =============================================================================

class TestNewUniverse:
    """Tests for ascending from the universe tier."""

    def test_new_universe_keeps_multiverse_sum(self, sim):
        state = sim.state
        state.tiers.current_tier = Tier.UNIVERSE
        state.containers.universes.append(entry(1000))
        state.containers.galaxies.append(entry(50))
        state.nets.count = 1

        assert progression.ascend(state)

        assert state.current_tier is Tier.POND
        assert state.tiers.universe_number == 2
        assert len(state.containers.universes) == 2
        assert bignum.compare(state.containers.universes[0].fish_per_second, 1000) == 0
        assert len(state.containers.galaxies) == 1

    def test_new_universe_only_at_universe(self, sim):
        assert not progression.new_universe(sim.state)

    def test_buy_new_universe(self, rich_sim):
        rich_sim.set_tier(Tier.UNIVERSE)
        assert rich_sim.buy_new_universe()
        assert rich_sim.state.tiers.universe_number == 2
        assert not rich_sim.buy_new_universe()


# =============================================================================
# Test: parallelize
# =============================================================================

class TestParallelize:
    """Tests for progression.parallelize."""

    def test_gains_one_plus_multiplier_level(self, sim):
        state = sim.state
        state.tiers.current_tier = Tier.UNIVERSE
        state.upgrades.levels["parallel_multiverse_multiplier"] = 2
        assert state.tiers.parallel_multiverses == 1

        assert progression.parallelize(state)

        assert state.tiers.parallel_multiverses == 4

    def test_only_at_universe(self, sim):
        assert not progression.parallelize(sim.state)
        assert sim.state.tiers.parallel_multiverses == 1

    def test_resets_everything_but_general_upgrades(self, sim):
        state = sim.state
        sim.set_fish(12345)
        state.tiers.current_tier = Tier.UNIVERSE
        state.tiers.universe_number = 3
        state.tiers.multiverse_multiplier = 1.3
        state.local.rod = 4
        state.nets.count = 9
        state.fishing.queue = 3
        state.containers.universes.append(entry(10))
        state.upgrades.levels["fishing_mastery"] = 2

        progression.parallelize(state)

        assert state.store.fish == ZERO
        assert bignum.compare(state.store.total_fish_caught, 12345) == 0
        assert state.current_tier is Tier.POND
        assert state.tiers.universe_number == 1
        assert state.tiers.multiverse_multiplier == 1.0
        assert state.local.rod == 0
        assert state.nets.count == 0
        assert state.fishing.queue == 0
        assert state.containers.all_entries() == []
        assert state.upgrades.level("fishing_mastery") == 2
        assert state.tiers.parallel_multiverses == 2

    def test_banks_parallelized_propagation(self, sim):
        state = sim.state
        state.tiers.current_tier = Tier.UNIVERSE
        state.upgrades.levels["parallelized_propagation"] = 2  # 20%
        state.containers.universes.append(entry(1000))
        # current rate: one 1s cast at universe tier = 1e6 fish/s
        expected = bignum.multiply(bignum.add(progression.current_fps(state), 1000), 0.2)

        progression.parallelize(state)

        assert bignum.compare(state.tiers.parallelized_propagation_fps, expected) == 0
        assert bignum.compare(progression.passive_fps(state), expected) == 0

    def test_parallelized_propagation_pays_every_tick(self, sim):
        sim.state.tiers.parallelized_propagation_fps = bignum.create(50)
        for _ in range(10):
            sim.update(100.0)
        assert bignum.compare(sim.fish, 50) == 0

    def test_buy_ascend_at_universe_parallelizes(self, rich_sim):
        rich_sim.set_tier(Tier.UNIVERSE)
        assert rich_sim.buy_ascend()
        assert rich_sim.state.tiers.parallel_multiverses == 2
        assert rich_sim.current_tier is Tier.POND

    def test_parallel_multiverses_scale_costs(self, sim):
        sim.state.tiers.parallel_multiverses = 4
        assert bignum.compare(sim.get_rod_cost(), 40) == 0
        assert bignum.compare(sim.get_ascend_cost(), 4e5) == 0


# =============================================================================
# Test: crunch and container income
# =============================================================================

class TestCrunchAndContainers:
    """Tests for crunch_universe and container payouts."""

    def test_crunch_removes_entry_and_raises_multiplier(self, sim):
        state = sim.state
        state.containers.universes.extend([entry(1), entry(2), entry(3)])
        assert sim.crunch_universe(1)
        assert [bignum.to_plain_number(e.fish_per_second) for e in state.containers.universes] == [1, 3]
        assert state.tiers.multiverse_multiplier == pytest.approx(1.1)

    def test_crunch_invalid_index(self, sim):
        assert not sim.crunch_universe(0)
        assert sim.state.tiers.multiverse_multiplier == 1.0

    def test_containers_pay_per_second(self, sim):
        sim.state.containers.ponds.append(entry(20))
        for _ in range(10):
            sim.update(100.0)
        assert bignum.compare(sim.fish, 20) == 0

    def test_multiverse_multiplier_scales_income(self, sim):
        sim.state.containers.ponds.append(entry(100))
        sim.state.tiers.multiverse_multiplier = 1.5
        for _ in range(10):
            sim.update(100.0)
        assert bignum.compare(sim.fish, 150) == 0


class TestMultiversalPropagation:
    """Tests for the previous-universe bonus."""

    def test_no_bonus_without_level(self, sim):
        sim.state.containers.universes.append(entry(1000))
        assert progression.multiversal_propagation_fps(sim.state) == ZERO

    def test_bonus_from_last_universe_divided_by_universe_number(self, sim):
        state = sim.state
        state.upgrades.levels["multiversal_propagation"] = 3
        state.containers.universes.extend([entry(10), entry(1000)])
        state.tiers.universe_number = 3
        # 1000 * 0.3 / 3
        assert bignum.compare(progression.multiversal_propagation_fps(state), 100) == 0

    def test_bonus_feeds_current_rate(self, sim):
        state = sim.state
        base = progression.current_fps(state)
        state.upgrades.levels["multiversal_propagation"] = 1
        state.containers.universes.append(entry(1000))
        assert bignum.compare(progression.current_fps(state), bignum.add(base, 100)) == 0
