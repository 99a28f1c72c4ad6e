from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from fishsim import bignum, fishing, progression
from fishsim.bignum import BigNumber, Number
from fishsim.catalog import LOCAL_UPGRADE_IDS, MAX_BUYER_FOR, get_definition
from fishsim.formatting import format_duration, format_number
from fishsim.state import GameState
from fishsim.types import LOCAL_UPGRADE_MAX_LEVEL, Tier

log = logging.getLogger(__name__)

# Upper bound on repeat purchases of one upgrade within a single tick.
AUTO_PURCHASE_LIMIT = 100


@dataclass
class Simulation:
    """Fixed-timestep fishing simulation.

    Tick pipeline:
    1. Fishing cast progress (whole fish to the store)
    2. Net fill, capacity clamp and auto-collect
    3. Container + parallelized propagation income
    4. Auto-purchases (upgrades, then multiply/ascend/parallelize)

    Purchases and progression actions are called between ticks and return
    False when the player cannot afford them or they are not available.
    """
    state: GameState = field(default_factory=GameState)
    ticks_per_second: float = 10.0
    _tick_accumulator: float = 0.0

    def step(self, dt: float) -> None:
        """Accumulate wall time (seconds) and fire ticks at the fixed rate."""
        self._tick_accumulator += dt
        tick_interval = 1.0 / self.ticks_per_second if self.ticks_per_second > 0 else 1.0
        while self._tick_accumulator >= tick_interval:
            self._tick_accumulator -= tick_interval
            self.update(tick_interval * 1000.0)

    def update(self, delta_ms: float) -> None:
        """Run exactly one tick covering ``delta_ms`` of simulated time."""
        state = self.state
        state.total_ticks += 1
        state.play_time_ms += delta_ms

        fishing.update_fishing(state, delta_ms)
        fishing.update_nets(state, delta_ms)
        progression.update_containers(state, delta_ms)
        self.run_auto_purchases()

    # ── Shortcuts ──────────────────────────────────────────────────────

    @property
    def store(self):
        return self.state.store

    @property
    def upgrades(self):
        return self.state.upgrades

    @property
    def fish(self) -> BigNumber:
        return self.state.store.fish

    @property
    def current_tier(self) -> Tier:
        return self.state.current_tier

    # ── Fishing and nets ───────────────────────────────────────────────

    def start_fishing(self) -> None:
        fishing.start_fishing(self.state)

    def collect_nets(self) -> BigNumber:
        return fishing.collect_nets(self.state)

    def get_current_net_auto_collect_interval(self) -> float:
        return fishing.auto_collect_interval(self.state)

    def get_fishing_mastery_multiplier(self) -> BigNumber:
        return fishing.fishing_mastery_multiplier(self.state)

    def get_net_mastery_multiplier(self) -> BigNumber:
        return fishing.net_mastery_multiplier(self.state)

    def get_bait_mastery_multiplier(self) -> BigNumber:
        return fishing.bait_mastery_multiplier(self.state)

    def get_multiversal_propagation_effectiveness(self) -> float:
        return progression.multiversal_propagation_effectiveness(self.state)

    def get_parallelized_propagation_effectiveness(self) -> float:
        return progression.parallelized_propagation_effectiveness(self.state)

    # ── Local upgrades ─────────────────────────────────────────────────

    def _local_level(self, upgrade_id: str) -> int:
        return getattr(self.state.local, upgrade_id)

    def get_local_upgrade_cost(self, upgrade_id: str) -> BigNumber:
        return self.upgrades.get_cost(
            upgrade_id,
            level=self._local_level(upgrade_id),
            tier_multiplier=self.state.tier_multiplier,
            parallelize_multiplier=self.state.parallelize_multiplier,
        )

    def can_afford_local_upgrade(self, upgrade_id: str) -> bool:
        if upgrade_id not in LOCAL_UPGRADE_IDS:
            return False
        if self._local_level(upgrade_id) >= LOCAL_UPGRADE_MAX_LEVEL:
            return False
        return self.store.can_afford(self.get_local_upgrade_cost(upgrade_id))

    def buy_local_upgrade(self, upgrade_id: str) -> bool:
        if not self.can_afford_local_upgrade(upgrade_id):
            return False
        if not self.store.spend(self.get_local_upgrade_cost(upgrade_id)):
            return False
        local = self.state.local
        setattr(local, upgrade_id, self._local_level(upgrade_id) + 1)
        if upgrade_id == "net":
            self.state.nets.count += 1
        log.debug("Bought %s upgrade (level %d)", upgrade_id, self._local_level(upgrade_id))
        return True

    def get_rod_cost(self) -> BigNumber:
        return self.get_local_upgrade_cost("rod")

    def get_net_cost(self) -> BigNumber:
        return self.get_local_upgrade_cost("net")

    def get_bait_cost(self) -> BigNumber:
        return self.get_local_upgrade_cost("bait")

    def can_afford_rod_upgrade(self) -> bool:
        return self.can_afford_local_upgrade("rod")

    def can_afford_net_upgrade(self) -> bool:
        return self.can_afford_local_upgrade("net")

    def can_afford_bait_upgrade(self) -> bool:
        return self.can_afford_local_upgrade("bait")

    def buy_rod_upgrade(self) -> bool:
        return self.buy_local_upgrade("rod")

    def buy_net_upgrade(self) -> bool:
        return self.buy_local_upgrade("net")

    def buy_bait_upgrade(self) -> bool:
        return self.buy_local_upgrade("bait")

    # ── General upgrades ───────────────────────────────────────────────

    def get_upgrade_cost(self, upgrade_id: str) -> BigNumber:
        defn = get_definition(upgrade_id)
        if defn is not None and defn.local:
            return self.get_local_upgrade_cost(upgrade_id)
        return self.upgrades.get_cost(upgrade_id)

    def can_afford_upgrade(self, upgrade_id: str) -> bool:
        defn = get_definition(upgrade_id)
        if defn is None:
            return False
        if defn.local:
            return self.can_afford_local_upgrade(upgrade_id)
        return self.upgrades.can_purchase(
            upgrade_id, self.store, self.state.tiers.parallel_multiverses
        )

    def buy_upgrade(self, upgrade_id: str) -> bool:
        defn = get_definition(upgrade_id)
        if defn is None:
            return False
        if defn.local:
            return self.buy_local_upgrade(upgrade_id)
        return self.upgrades.purchase(upgrade_id, self.store, self.state.tiers.parallel_multiverses)

    def get_catch_fish_multiplier_cost(self) -> BigNumber:
        return self.get_upgrade_cost("catch_fish_multiplier")

    def can_afford_catch_fish_multiplier(self) -> bool:
        return self.can_afford_upgrade("catch_fish_multiplier")

    def buy_catch_fish_multiplier(self) -> bool:
        return self.buy_upgrade("catch_fish_multiplier")

    def buy_fishing_mastery(self) -> bool:
        return self.buy_upgrade("fishing_mastery")

    def buy_net_mastery(self) -> bool:
        return self.buy_upgrade("net_mastery")

    def buy_bait_mastery(self) -> bool:
        return self.buy_upgrade("bait_mastery")

    def buy_multiversal_propagation(self) -> bool:
        return self.buy_upgrade("multiversal_propagation")

    def buy_parallelized_propagation(self) -> bool:
        return self.buy_upgrade("parallelized_propagation")

    def buy_parallel_multiverse_multiplier(self) -> bool:
        return self.buy_upgrade("parallel_multiverse_multiplier")

    def set_auto_enabled(self, upgrade_id: str, enabled: bool) -> bool:
        return self.upgrades.set_auto_enabled(upgrade_id, enabled)

    # ── Max buyers ─────────────────────────────────────────────────────

    def _buy_repeatedly(self, upgrade_id: str, limit: int = AUTO_PURCHASE_LIMIT) -> int:
        bought = 0
        while bought < limit and self.buy_upgrade(upgrade_id):
            bought += 1
        return bought

    def buy_max_local(self, upgrade_id: str) -> int:
        owner = MAX_BUYER_FOR.get(upgrade_id)
        if owner is None:
            return 0
        if not (self.upgrades.owns(owner) or self.upgrades.owns("max_buyer")):
            return 0
        return self._buy_repeatedly(upgrade_id)

    def buy_max_rod(self) -> int:
        return self.buy_max_local("rod")

    def buy_max_net(self) -> int:
        return self.buy_max_local("net")

    def buy_max_bait(self) -> int:
        return self.buy_max_local("bait")

    def buy_max_all(self) -> int:
        if not self.upgrades.owns("max_buyer"):
            return 0
        return sum(self._buy_repeatedly(upgrade_id) for upgrade_id in ("rod", "net", "bait"))

    def buy_max_catch_fish(self) -> int:
        if not self.upgrades.owns("max_catch_fish_buyer"):
            return 0
        return self._buy_repeatedly("catch_fish_multiplier")

    # ── Progression ────────────────────────────────────────────────────

    def get_multiply_cost(self) -> BigNumber:
        return progression.multiply_cost(self.state)

    def can_afford_multiply(self) -> bool:
        return self.store.can_afford(self.get_multiply_cost())

    def buy_multiply(self) -> bool:
        if not self.can_afford_multiply():
            return False
        if not self.store.spend(self.get_multiply_cost()):
            return False
        progression.multiply(self.state)
        return True

    def get_ascend_cost(self) -> BigNumber:
        return progression.ascend_cost(self.state)

    def can_afford_ascend(self) -> bool:
        return self.store.can_afford(self.get_ascend_cost())

    def buy_ascend(self) -> bool:
        """Ascend below universe; parallelize at universe."""
        if not self.can_afford_ascend():
            return False
        if not self.store.spend(self.get_ascend_cost()):
            return False
        if self.current_tier is Tier.UNIVERSE:
            return progression.parallelize(self.state)
        return progression.ascend(self.state)

    def buy_new_universe(self) -> bool:
        if self.current_tier is not Tier.UNIVERSE or not self.can_afford_ascend():
            return False
        if not self.store.spend(self.get_ascend_cost()):
            return False
        return progression.new_universe(self.state)

    def crunch_universe(self, index: int) -> bool:
        return progression.crunch_universe(self.state, index)

    # ── Automation ─────────────────────────────────────────────────────

    def _auto_multiply(self) -> None:
        if self.state.local.all_maxed():
            self.buy_multiply()

    def _auto_ascend(self) -> None:
        if self.current_tier is not Tier.UNIVERSE:
            self.buy_ascend()

    def _auto_parallelize(self) -> None:
        if self.current_tier is Tier.UNIVERSE:
            self.buy_ascend()

    def _auto_actions(self) -> Dict[str, Callable[[], None]]:
        return {
            "auto_multiply": self._auto_multiply,
            "auto_ascend": self._auto_ascend,
            "auto_parallelize": self._auto_parallelize,
        }

    def run_auto_purchases(self) -> None:
        """Buy every upgrade whose automatic buyer is owned and enabled."""
        for defn in self.upgrades.auto_buy_targets():
            self._buy_repeatedly(defn.id)
        for upgrade_id, action in self._auto_actions().items():
            if self.upgrades.auto_active(upgrade_id):
                action()

    # ── Debug / host hooks ─────────────────────────────────────────────

    def add_fish(self, amount: Number) -> None:
        self.store.add_fish(amount)

    def set_fish(self, amount: Number) -> None:
        self.store.set_fish(amount)

    def set_tier(self, tier: Tier) -> None:
        self.state.tiers.current_tier = tier

    def add_nets(self, count: int) -> None:
        self.state.nets.count = max(0, self.state.nets.count + int(count))

    def set_fishing_speed(self, multiplier: float) -> bool:
        if multiplier <= 0.0:
            return False
        self.state.fishing.speed_multiplier = float(multiplier)
        return True

    @staticmethod
    def format_number(value: Number) -> str:
        return format_number(value)

    @staticmethod
    def compare_numbers(a: Number, b: Number) -> int:
        return bignum.compare(a, b)

    def current_fps(self) -> BigNumber:
        return progression.current_fps(self.state)

    def passive_fps(self) -> BigNumber:
        return progression.passive_fps(self.state)

    def reset_game(self) -> None:
        """Hard reset: every field back to defaults, upgrades included."""
        self.state = GameState(base_fishing_duration_ms=self.state.base_fishing_duration_ms)
        self._tick_accumulator = 0.0
        log.info("Game reset")

    def stats(self) -> Dict[str, str]:
        state = self.state
        tiers = state.tiers
        return {
            "fish": format_number(state.store.fish),
            "total_fish_caught": format_number(state.store.total_fish_caught),
            "current_fps": format_number(self.current_fps()),
            "container_fps": format_number(self.passive_fps()),
            "net_fish": f"{format_number(state.nets.fish)} / {format_number(fishing.net_capacity(state))}",
            "tier": state.current_tier.display_name,
            "universe_number": str(tiers.universe_number),
            "parallel_multiverses": str(tiers.parallel_multiverses),
            "multiverse_multiplier": f"{tiers.multiverse_multiplier:.1f}",
            "ticks": str(state.total_ticks),
            "play_time": format_duration(state.play_time_ms / 1000.0),
        }


def new_simulation(ticks_per_second: float = 10.0, base_fishing_duration_ms: Optional[float] = None) -> Simulation:
    sim = Simulation(ticks_per_second=ticks_per_second)
    if base_fishing_duration_ms is not None:
        sim.state.base_fishing_duration_ms = base_fishing_duration_ms
    return sim
