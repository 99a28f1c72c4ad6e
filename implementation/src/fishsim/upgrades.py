"""Upgrade levels, cost curves and purchase validation.

cost = base_cost * cost_multiplier ** level
Local upgrades (rod/net/bait) additionally scale with the tier multiplier
and the parallelize multiplier. One-time upgrades (cost_multiplier == 0)
always cost base_cost.

Purchases run validate -> deduct -> apply; any failed check leaves fish
and levels untouched and returns False.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional

from fishsim import bignum
from fishsim.bignum import BigNumber
from fishsim.catalog import AUTO_FLAG_IDS, UPGRADES, UpgradeDefinition, get_definition
from fishsim.store import FishStore

log = logging.getLogger(__name__)


def upgrade_cost(
    defn: UpgradeDefinition,
    level: int,
    tier_multiplier: float = 1.0,
    parallelize_multiplier: float = 1.0,
) -> BigNumber:
    cost = bignum.create(defn.base_cost)
    if not defn.one_time:
        cost = bignum.multiply(cost, bignum.power(defn.cost_multiplier, level))
    if defn.local:
        cost = bignum.multiply(cost, tier_multiplier)
        cost = bignum.multiply(cost, parallelize_multiplier)
    return cost


class UpgradeManager:
    """Owns general (tier-persistent) upgrade levels and auto-buy toggles.

    Local rod/net/bait levels live on the simulation's LocalUpgrades since
    they reset with the tier; their costs still come from ``upgrade_cost``.
    """

    def __init__(self) -> None:
        self.levels: Dict[str, int] = {}
        self.auto_enabled: Dict[str, bool] = {}

    def level(self, upgrade_id: str) -> int:
        return self.levels.get(upgrade_id, 0)

    def owns(self, upgrade_id: str) -> bool:
        return self.level(upgrade_id) > 0

    def is_unlocked(self, upgrade_id: str, parallel_multiverses: int) -> bool:
        defn = get_definition(upgrade_id)
        if defn is None:
            return False
        if parallel_multiverses < defn.min_parallel_multiverses:
            return False
        if defn.prerequisite is not None and not self.owns(defn.prerequisite):
            return False
        return True

    def is_maxed(self, upgrade_id: str, level: Optional[int] = None) -> bool:
        defn = get_definition(upgrade_id)
        if defn is None:
            return True
        lvl = self.level(upgrade_id) if level is None else level
        if defn.one_time and lvl > 0:
            return True
        return defn.max_level is not None and lvl >= defn.max_level

    def get_cost(
        self,
        upgrade_id: str,
        level: Optional[int] = None,
        tier_multiplier: float = 1.0,
        parallelize_multiplier: float = 1.0,
    ) -> BigNumber:
        defn = get_definition(upgrade_id)
        if defn is None:
            return bignum.MAX_VALUE
        lvl = self.level(upgrade_id) if level is None else level
        return upgrade_cost(defn, lvl, tier_multiplier, parallelize_multiplier)

    def can_purchase(
        self,
        upgrade_id: str,
        store: FishStore,
        parallel_multiverses: int,
        level: Optional[int] = None,
        tier_multiplier: float = 1.0,
        parallelize_multiplier: float = 1.0,
    ) -> bool:
        if not self.is_unlocked(upgrade_id, parallel_multiverses):
            return False
        if self.is_maxed(upgrade_id, level):
            return False
        cost = self.get_cost(upgrade_id, level, tier_multiplier, parallelize_multiplier)
        return store.can_afford(cost)

    def purchase(self, upgrade_id: str, store: FishStore, parallel_multiverses: int) -> bool:
        """Buy one level of a general upgrade."""
        defn = get_definition(upgrade_id)
        if defn is None or defn.local:
            return False
        if not self.can_purchase(upgrade_id, store, parallel_multiverses):
            return False
        if not store.spend(self.get_cost(upgrade_id)):
            return False
        self.levels[upgrade_id] = self.level(upgrade_id) + 1
        if upgrade_id in AUTO_FLAG_IDS:
            self.auto_enabled.setdefault(upgrade_id, True)
        log.debug("Purchased %s (level %d)", upgrade_id, self.levels[upgrade_id])
        return True

    def set_auto_enabled(self, upgrade_id: str, enabled: bool) -> bool:
        if upgrade_id not in AUTO_FLAG_IDS or not self.owns(upgrade_id):
            return False
        self.auto_enabled[upgrade_id] = bool(enabled)
        return True

    def auto_active(self, upgrade_id: str) -> bool:
        return self.owns(upgrade_id) and self.auto_enabled.get(upgrade_id, True)

    def display_name(self, upgrade_id: str) -> str:
        defn = get_definition(upgrade_id)
        if defn is None:
            return ""
        lvl = self.level(upgrade_id)
        if defn.one_time or lvl == 0:
            return defn.name
        return f"{defn.name} {lvl}"

    def auto_buy_targets(self):
        """Definitions whose automatic buyer is owned and switched on."""
        for defn in UPGRADES:
            if defn.auto_id is not None and self.auto_active(defn.auto_id):
                yield defn
