from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional

from fishsim.bignum import BigNumber, ZERO


class Tier(IntEnum):
    POND = 0
    LAKE = 1
    OCEAN = 2
    PLANET = 3
    SOLAR = 4
    GALAXY = 5
    UNIVERSE = 6

    @property
    def multiplier(self) -> float:
        return TIER_MULTIPLIERS[self]

    @property
    def container_key(self) -> str:
        return TIER_CONTAINER_KEYS[self]

    @property
    def display_name(self) -> str:
        return TIER_DISPLAY_NAMES[self]

    def next(self) -> Optional["Tier"]:
        if self is Tier.UNIVERSE:
            return None
        return Tier(self + 1)

    @classmethod
    def from_name(cls, name: str) -> Optional["Tier"]:
        """Accept enum names, container keys or display names, any case."""
        key = name.strip().lower().replace(" ", "_")
        for tier in cls:
            if key in (tier.name.lower(), tier.container_key, tier.display_name.lower().replace(" ", "_")):
                return tier
        return None


TIER_MULTIPLIERS: Dict[Tier, float] = {
    Tier.POND: 1.0,
    Tier.LAKE: 10.0,
    Tier.OCEAN: 100.0,
    Tier.PLANET: 1e3,
    Tier.SOLAR: 1e4,
    Tier.GALAXY: 1e5,
    Tier.UNIVERSE: 1e6,
}

TIER_CONTAINER_KEYS: Dict[Tier, str] = {
    Tier.POND: "ponds",
    Tier.LAKE: "lakes",
    Tier.OCEAN: "oceans",
    Tier.PLANET: "planets",
    Tier.SOLAR: "solar",
    Tier.GALAXY: "galaxies",
    Tier.UNIVERSE: "universes",
}

TIER_DISPLAY_NAMES: Dict[Tier, str] = {
    Tier.POND: "Pond",
    Tier.LAKE: "Lake",
    Tier.OCEAN: "Ocean",
    Tier.PLANET: "Planet",
    Tier.SOLAR: "Solar System",
    Tier.GALAXY: "Galaxy",
    Tier.UNIVERSE: "Universe",
}

LOCAL_UPGRADE_MAX_LEVEL = 10


@dataclass
class LocalUpgrades:
    """Per-tier upgrade levels, wiped on multiply/ascend/parallelize."""
    rod: int = 0
    net: int = 0
    bait: int = 0

    def all_maxed(self) -> bool:
        return min(self.rod, self.net, self.bait) >= LOCAL_UPGRADE_MAX_LEVEL


@dataclass
class Nets:
    count: int = 0
    fish: BigNumber = ZERO
    fractional_accumulator: BigNumber = ZERO
    auto_collect_timer: float = 0.0  # seconds remaining, 0 = not running


@dataclass
class FishingState:
    active: bool = False
    progress: float = 0.0  # ms into the current catch
    queue: int = 0
    fractional_accumulator: BigNumber = ZERO
    speed_multiplier: float = 1.0


@dataclass
class ContainerEntry:
    fish_per_second: BigNumber = ZERO


@dataclass
class Containers:
    buckets: Dict[Tier, List[ContainerEntry]] = field(
        default_factory=lambda: {tier: [] for tier in Tier}
    )

    def bucket(self, tier: Tier) -> List[ContainerEntry]:
        return self.buckets.setdefault(tier, [])

    def all_entries(self) -> List[ContainerEntry]:
        entries: List[ContainerEntry] = []
        for tier in Tier:
            entries.extend(self.bucket(tier))
        return entries

    def clear(self) -> None:
        for tier in Tier:
            self.bucket(tier).clear()

    def __getattr__(self, name: str) -> List[ContainerEntry]:
        # containers.ponds, containers.universes, ...
        for tier, key in TIER_CONTAINER_KEYS.items():
            if key == name:
                return self.bucket(tier)
        raise AttributeError(name)


@dataclass
class TierState:
    current_tier: Tier = Tier.POND
    universe_number: int = 1
    parallel_multiverses: int = 1
    multiverse_multiplier: float = 1.0
    parallelized_propagation_fps: BigNumber = ZERO
