from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class UpgradeDefinition:
    """A purchasable upgrade.

    cost = base_cost * cost_multiplier ** level; a cost_multiplier of 0 marks
    a one-time purchase. Local upgrades are further scaled by the tier
    multiplier and reset with the tier.
    """
    id: str
    name: str
    description: str
    base_cost: float
    cost_multiplier: float
    max_level: Optional[int] = None
    prerequisite: Optional[str] = None
    min_parallel_multiverses: int = 1
    auto_id: Optional[str] = None  # one-time upgrade that buys this automatically
    local: bool = False
    category: str = "general"

    @property
    def one_time(self) -> bool:
        return self.cost_multiplier == 0.0


LOCAL_UPGRADE_IDS = ("rod", "net", "bait")

UPGRADES: List[UpgradeDefinition] = [
    # Local (per-tier)
    UpgradeDefinition("rod", "Better Rod", "x1.5 fish per catch", 10, 1.5,
                      max_level=10, auto_id="automaxer", local=True, category="local"),
    UpgradeDefinition("net", "More Nets", "+1 net, x1.2 net rate and capacity", 25, 1.5,
                      max_level=10, auto_id="automaxer", local=True, category="local"),
    UpgradeDefinition("bait", "Better Bait", "x1.2 fishing speed", 50, 1.5,
                      max_level=10, auto_id="automaxer", local=True, category="local"),

    UpgradeDefinition("catch_fish_multiplier", "Catch Fish", "+1 fish caught per cast", 1000, 2,
                      auto_id="auto_catch_fish"),

    # Net automation
    UpgradeDefinition("auto_collect_nets", "Auto-Collect Nets",
                      "Collect nets automatically when full", 1e4, 0, max_level=1,
                      category="automation"),
    UpgradeDefinition("auto_net_collect_interval", "Faster Auto-Collect",
                      "-0.5s auto-collect interval", 5e4, 2, max_level=10,
                      prerequisite="auto_collect_nets", category="automation"),

    # Max buyers
    UpgradeDefinition("rod_max_buyer", "Rod Max Buyer", "Buy rod upgrades to max level", 5e4, 0,
                      max_level=1, category="automation"),
    UpgradeDefinition("net_max_buyer", "Net Max Buyer", "Buy net upgrades to max level", 5e4, 0,
                      max_level=1, category="automation"),
    UpgradeDefinition("bait_max_buyer", "Bait Max Buyer", "Buy bait upgrades to max level", 5e4, 0,
                      max_level=1, category="automation"),
    UpgradeDefinition("max_buyer", "Max Buyer", "Buy all local upgrades to max level", 2e5, 0,
                      max_level=1, category="automation"),
    UpgradeDefinition("max_catch_fish_buyer", "Max Catch Fish Buyer",
                      "Buy catch fish upgrades until broke", 5e5, 0, max_level=1,
                      prerequisite="max_buyer", category="automation"),
    UpgradeDefinition("automaxer", "Automaxer", "Automatically max local upgrades", 1e6, 0,
                      max_level=1, category="automation"),
    UpgradeDefinition("auto_multiply", "Auto-Multiply",
                      "Multiply automatically once local upgrades are maxed", 1e7, 0,
                      max_level=1, category="automation"),
    UpgradeDefinition("auto_ascend", "Auto-Ascend", "Ascend automatically when affordable", 1e8, 0,
                      max_level=1, prerequisite="auto_multiply", category="automation"),

    # Parallel (unlocked by parallel multiverses)
    UpgradeDefinition("multiversal_propagation", "Multiversal Propagation",
                      "Leak the previous universe's rate into this one", 1e9, 10,
                      min_parallel_multiverses=2, auto_id="auto_multiversal_propagation",
                      category="parallel"),
    UpgradeDefinition("fishing_mastery", "Fishing Mastery", "x1.1 fish per catch", 1e10, 10,
                      min_parallel_multiverses=2, auto_id="auto_fishing_mastery",
                      category="parallel"),
    UpgradeDefinition("net_mastery", "Net Mastery", "x1.1 net rate and capacity", 1e11, 10,
                      min_parallel_multiverses=2, auto_id="auto_net_mastery",
                      category="parallel"),
    UpgradeDefinition("bait_mastery", "Bait Mastery", "x1.1 fishing speed", 1e12, 10,
                      min_parallel_multiverses=2, auto_id="auto_bait_mastery",
                      category="parallel"),
    UpgradeDefinition("parallelized_propagation", "Parallelized Propagation",
                      "Keep part of your rate forever when parallelizing", 1e13, 10,
                      min_parallel_multiverses=5, auto_id="auto_parallelized_propagation",
                      category="parallel"),
    UpgradeDefinition("auto_parallelize", "Auto-Parallelize",
                      "Parallelize automatically when affordable", 1e9, 0, max_level=1,
                      min_parallel_multiverses=20, category="parallel"),
    UpgradeDefinition("auto_parallelized_propagation", "Auto-Parallelized Propagation",
                      "Automatically buys Parallelized Propagation", 1e12, 0, max_level=1,
                      min_parallel_multiverses=100, category="parallel"),
    UpgradeDefinition("auto_multiversal_propagation", "Auto-Multiversal Propagation",
                      "Automatically buys Multiversal Propagation", 1e12, 0, max_level=1,
                      min_parallel_multiverses=100, category="parallel"),
    UpgradeDefinition("auto_fishing_mastery", "Auto-Fishing Mastery",
                      "Automatically buys Fishing Mastery", 1e12, 0, max_level=1,
                      min_parallel_multiverses=100, category="parallel"),
    UpgradeDefinition("auto_net_mastery", "Auto-Net Mastery",
                      "Automatically buys Net Mastery", 1e12, 0, max_level=1,
                      min_parallel_multiverses=100, category="parallel"),
    UpgradeDefinition("auto_bait_mastery", "Auto-Bait Mastery",
                      "Automatically buys Bait Mastery", 1e12, 0, max_level=1,
                      min_parallel_multiverses=100, category="parallel"),
    UpgradeDefinition("auto_catch_fish", "Auto-Catch Fish",
                      "Automatically buys Catch Fish", 1e12, 0, max_level=1,
                      min_parallel_multiverses=100, category="parallel"),
    UpgradeDefinition("parallel_multiverse_multiplier", "Parallel Multiverse Multiplier",
                      "+1 parallel multiverse per parallelize", 1e15, 10,
                      min_parallel_multiverses=500, auto_id="auto_parallel_multiverse_multiplier",
                      category="parallel"),
    UpgradeDefinition("auto_parallel_multiverse_multiplier", "Auto-Parallel Multiverse Multiplier",
                      "Automatically buys Parallel Multiverse Multiplier", 1e18, 0, max_level=1,
                      min_parallel_multiverses=500, category="parallel"),
]

UPGRADES_BY_ID: Dict[str, UpgradeDefinition] = {u.id: u for u in UPGRADES}

# Upgrades that can be toggled on/off once owned.
AUTO_FLAG_IDS = tuple(sorted({u.auto_id for u in UPGRADES if u.auto_id}
                             | {"auto_collect_nets", "auto_multiply", "auto_ascend",
                                "auto_parallelize"}))

MAX_BUYER_FOR = {
    "rod": "rod_max_buyer",
    "net": "net_max_buyer",
    "bait": "bait_max_buyer",
}


def get_definition(upgrade_id: str) -> Optional[UpgradeDefinition]:
    return UPGRADES_BY_ID.get(upgrade_id)
