"""
Unit tests for upgrade costs, purchase validation, max buyers and the
per-tick automatic buyers.
"""
import pytest

from fishsim import bignum
from fishsim.bignum import MAX_VALUE
from fishsim.catalog import UPGRADES, get_definition
from fishsim.types import Tier
from fishsim.upgrades import UpgradeManager, upgrade_cost


# =============================================================================
# Test: cost curves
# =============================================================================

class TestCosts:
    """Tests for upgrade_cost and the simulation cost getters."""

    def test_local_cost_curve(self, sim):
        assert bignum.compare(sim.get_rod_cost(), 10) == 0
        sim.state.local.rod = 2
        assert bignum.compare(sim.get_rod_cost(), 22.5) == 0

    def test_local_cost_scales_with_tier(self, sim):
        sim.set_tier(Tier.LAKE)
        assert bignum.compare(sim.get_net_cost(), 250) == 0
        sim.set_tier(Tier.UNIVERSE)
        assert bignum.compare(sim.get_bait_cost(), 5e7) == 0

    def test_general_cost_ignores_tier(self, sim):
        sim.set_tier(Tier.GALAXY)
        assert bignum.compare(sim.get_catch_fish_multiplier_cost(), 1000) == 0
        sim.upgrades.levels["catch_fish_multiplier"] = 3
        assert bignum.compare(sim.get_catch_fish_multiplier_cost(), 8000) == 0

    def test_one_time_cost_is_flat(self):
        defn = get_definition("auto_collect_nets")
        assert defn.one_time
        assert bignum.compare(upgrade_cost(defn, 0), 1e4) == 0
        assert bignum.compare(upgrade_cost(defn, 5), 1e4) == 0

    def test_unknown_upgrade_costs_sentinel(self):
        assert UpgradeManager().get_cost("does_not_exist") == MAX_VALUE

    @pytest.mark.parametrize("defn", UPGRADES, ids=lambda d: d.id)
    def test_every_cost_is_positive(self, defn):
        assert bignum.compare(upgrade_cost(defn, 0), 0) == 1


# =============================================================================
# Test: purchase validation
# =============================================================================

class TestPurchase:
    """Tests for validate -> deduct -> apply."""

    def test_successful_purchase_deducts_and_applies(self, sim):
        sim.set_fish(1500)
        assert sim.buy_catch_fish_multiplier()
        assert sim.upgrades.level("catch_fish_multiplier") == 1
        assert bignum.compare(sim.fish, 500) == 0
        assert bignum.compare(sim.store.total_fish_caught, 1500) == 0
        assert sim.state.catch_multiplier == 2

    def test_unaffordable_purchase_changes_nothing(self, sim):
        sim.set_fish(999)
        assert not sim.can_afford_catch_fish_multiplier()
        assert not sim.buy_catch_fish_multiplier()
        assert sim.upgrades.level("catch_fish_multiplier") == 0
        assert bignum.compare(sim.fish, 999) == 0

    def test_local_max_level(self, rich_sim):
        rich_sim.state.local.rod = 10
        before = rich_sim.fish
        assert not rich_sim.can_afford_rod_upgrade()
        assert not rich_sim.buy_rod_upgrade()
        assert rich_sim.state.local.rod == 10
        assert rich_sim.fish == before

    def test_one_time_upgrade_bought_once(self, rich_sim):
        assert rich_sim.buy_upgrade("auto_collect_nets")
        assert not rich_sim.buy_upgrade("auto_collect_nets")
        assert rich_sim.upgrades.level("auto_collect_nets") == 1

    def test_prerequisite_gate(self, rich_sim):
        assert not rich_sim.buy_upgrade("auto_net_collect_interval")
        assert rich_sim.buy_upgrade("auto_collect_nets")
        assert rich_sim.buy_upgrade("auto_net_collect_interval")

    def test_parallel_multiverse_gate(self, rich_sim):
        assert not rich_sim.buy_fishing_mastery()
        rich_sim.state.tiers.parallel_multiverses = 2
        assert rich_sim.buy_fishing_mastery()
        assert not rich_sim.buy_parallelized_propagation()
        rich_sim.state.tiers.parallel_multiverses = 5
        assert rich_sim.buy_parallelized_propagation()

    def test_unknown_upgrade(self, rich_sim):
        assert not rich_sim.buy_upgrade("golden_hook")
        assert not rich_sim.can_afford_upgrade("golden_hook")


class TestAutoToggles:
    """Tests for the auto-buy on/off switches."""

    def test_purchase_enables_toggle(self, rich_sim):
        rich_sim.buy_upgrade("auto_collect_nets")
        assert rich_sim.upgrades.auto_enabled["auto_collect_nets"] is True
        assert rich_sim.upgrades.auto_active("auto_collect_nets")

    def test_cannot_toggle_unowned(self, sim):
        assert not sim.set_auto_enabled("automaxer", False)
        assert not sim.set_auto_enabled("rod", True)

    def test_toggle_off(self, sim):
        sim.upgrades.levels["automaxer"] = 1
        assert sim.set_auto_enabled("automaxer", False)
        assert not sim.upgrades.auto_active("automaxer")

    def test_display_name(self):
        manager = UpgradeManager()
        assert manager.display_name("catch_fish_multiplier") == "Catch Fish"
        manager.levels["catch_fish_multiplier"] = 2
        assert manager.display_name("catch_fish_multiplier") == "Catch Fish 2"
        manager.levels["automaxer"] = 1
        assert manager.display_name("automaxer") == "Automaxer"


# =============================================================================
# Test: max buyers
# =============================================================================

class TestMaxBuyers:
    """Tests for buy_max_* helpers."""

    def test_requires_owning_the_buyer(self, rich_sim):
        assert rich_sim.buy_max_rod() == 0
        assert rich_sim.buy_max_all() == 0
        assert rich_sim.buy_max_catch_fish() == 0
        assert rich_sim.state.local.rod == 0

    def test_rod_max_buyer_stops_at_max_level(self, sim):
        sim.upgrades.levels["rod_max_buyer"] = 1
        sim.set_fish(1e6)
        assert sim.buy_max_rod() == 10
        assert sim.state.local.rod == 10
        assert sim.buy_max_rod() == 0

    def test_max_buyer_buys_all_local(self, rich_sim):
        rich_sim.upgrades.levels["max_buyer"] = 1
        assert rich_sim.buy_max_all() == 30
        assert rich_sim.state.local.all_maxed()
        assert rich_sim.state.nets.count == 10

    def test_catch_fish_buyer_until_broke(self, sim):
        sim.upgrades.levels["max_catch_fish_buyer"] = 1
        sim.set_fish(7000)
        # 1000 + 2000 + 4000
        assert sim.buy_max_catch_fish() == 3
        assert sim.upgrades.level("catch_fish_multiplier") == 3
        assert bignum.is_zero(sim.fish)


# =============================================================================
# Test: automatic buyers
# =============================================================================

class TestAutoPurchases:
    """Tests for run_auto_purchases during a tick."""

    def test_automaxer_maxes_local_upgrades(self, sim):
        sim.upgrades.levels["automaxer"] = 1
        sim.set_fish(1e6)
        sim.update(100.0)
        assert sim.state.local.all_maxed()

    def test_disabled_automaxer_buys_nothing(self, sim):
        sim.upgrades.levels["automaxer"] = 1
        sim.set_auto_enabled("automaxer", False)
        sim.set_fish(1e6)
        sim.update(100.0)
        assert sim.state.local.rod == 0

    def test_auto_catch_fish(self, sim):
        sim.upgrades.levels["auto_catch_fish"] = 1
        sim.set_fish(3000)
        sim.update(100.0)
        assert sim.upgrades.level("catch_fish_multiplier") == 2

    def test_auto_multiply_waits_for_maxed_local(self, sim):
        sim.upgrades.levels["auto_multiply"] = 1
        sim.set_fish(1e4)
        sim.update(100.0)
        assert sim.state.containers.ponds == []

        sim.state.local.rod = sim.state.local.net = sim.state.local.bait = 10
        sim.update(100.0)
        assert len(sim.state.containers.ponds) == 1
        assert sim.state.local.rod == 0

    def test_auto_ascend(self, sim):
        sim.upgrades.levels["auto_ascend"] = 1
        sim.set_fish(1e5)
        sim.update(100.0)
        assert sim.current_tier is Tier.LAKE

    def test_auto_ascend_stops_at_universe(self, rich_sim):
        rich_sim.upgrades.levels["auto_ascend"] = 1
        rich_sim.set_tier(Tier.UNIVERSE)
        rich_sim.update(100.0)
        assert rich_sim.current_tier is Tier.UNIVERSE
        assert rich_sim.state.tiers.parallel_multiverses == 1

    def test_auto_parallelize(self, rich_sim):
        rich_sim.upgrades.levels["auto_parallelize"] = 1
        rich_sim.set_tier(Tier.UNIVERSE)
        rich_sim.update(100.0)
        assert rich_sim.current_tier is Tier.POND
        assert rich_sim.state.tiers.parallel_multiverses == 2
