from __future__ import annotations

from dataclasses import dataclass, field

from fishsim.bignum import BigNumber, ZERO
from fishsim.store import FishStore
from fishsim.types import Containers, FishingState, LocalUpgrades, Nets, Tier, TierState
from fishsim.upgrades import UpgradeManager

BASE_FISHING_DURATION_MS = 1000.0


@dataclass
class GameState:
    """Everything the simulation mutates. Passed explicitly to each subsystem."""
    store: FishStore = field(default_factory=FishStore)
    upgrades: UpgradeManager = field(default_factory=UpgradeManager)
    local: LocalUpgrades = field(default_factory=LocalUpgrades)
    nets: Nets = field(default_factory=Nets)
    fishing: FishingState = field(default_factory=FishingState)
    containers: Containers = field(default_factory=Containers)
    tiers: TierState = field(default_factory=TierState)
    container_accumulator: BigNumber = ZERO

    base_fishing_duration_ms: float = BASE_FISHING_DURATION_MS
    total_ticks: int = 0
    play_time_ms: float = 0.0

    @property
    def current_tier(self) -> Tier:
        return self.tiers.current_tier

    @property
    def tier_multiplier(self) -> float:
        return self.tiers.current_tier.multiplier

    @property
    def parallelize_multiplier(self) -> float:
        return float(max(1, self.tiers.parallel_multiverses))

    @property
    def catch_multiplier(self) -> int:
        return self.upgrades.level("catch_fish_multiplier") + 1
