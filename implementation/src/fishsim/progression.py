"""Tier ladder and prestige layers.

multiply     stash the current rate in this tier's container bucket, reset the tier
ascend       fold every container into one entry of the next tier, reset the tier
new universe (ascend at universe) stash the rate in ``universes``, back to pond
parallelize  bank propagation FPS, gain parallel multiverses, reset everything
             except general upgrades and the multiverse counters
crunch       trade one universe container for +0.1 multiverse multiplier

Containers pay out every tick, scaled by the multiverse multiplier.
"""
from __future__ import annotations

import logging
from typing import Optional

from fishsim import bignum, fishing
from fishsim.bignum import BigNumber, ZERO
from fishsim.formatting import format_number
from fishsim.state import GameState
from fishsim.types import ContainerEntry, FishingState, LocalUpgrades, Nets, Tier

log = logging.getLogger(__name__)

CRUNCH_MULTIPLIER_STEP = 0.1
PROPAGATION_EFFECTIVENESS_STEP = 0.1

MULTIPLY_BASE_COST = 1000.0
MULTIPLY_COST_GROWTH = 1.5
ASCEND_BASE_COST = 1e5


# ── Rates ──────────────────────────────────────────────────────────────

def multiversal_propagation_effectiveness(state: GameState) -> float:
    return PROPAGATION_EFFECTIVENESS_STEP * state.upgrades.level("multiversal_propagation")


def parallelized_propagation_effectiveness(state: GameState) -> float:
    return PROPAGATION_EFFECTIVENESS_STEP * state.upgrades.level("parallelized_propagation")


def multiversal_propagation_fps(state: GameState) -> BigNumber:
    """Share of the previous universe's rate, diluted by the universe count."""
    effectiveness = multiversal_propagation_effectiveness(state)
    universes = state.containers.bucket(Tier.UNIVERSE)
    if effectiveness <= 0.0 or not universes:
        return ZERO
    bonus = bignum.multiply(universes[-1].fish_per_second, effectiveness)
    return bignum.divide(bonus, max(1, state.tiers.universe_number))


def current_fps(state: GameState) -> BigNumber:
    """Nets + fishing + multiversal propagation, the rate multiply stashes."""
    rate = bignum.add(fishing.net_rate_per_second(state), fishing.fishing_fps(state))
    return bignum.add(rate, multiversal_propagation_fps(state))


def container_fps(state: GameState) -> BigNumber:
    raw = bignum.total(entry.fish_per_second for entry in state.containers.all_entries())
    return bignum.multiply(raw, state.tiers.multiverse_multiplier)


def multiverse_fps(state: GameState) -> BigNumber:
    raw = bignum.total(entry.fish_per_second for entry in state.containers.bucket(Tier.UNIVERSE))
    return bignum.multiply(raw, state.tiers.multiverse_multiplier)


def passive_fps(state: GameState) -> BigNumber:
    return bignum.add(container_fps(state), state.tiers.parallelized_propagation_fps)


def update_containers(state: GameState, delta_ms: float) -> BigNumber:
    """Pay out container and parallelized-propagation income for one tick."""
    income = bignum.multiply(passive_fps(state), delta_ms / 1000.0)
    if bignum.is_zero(income):
        return ZERO
    state.container_accumulator = bignum.add(state.container_accumulator, income)
    whole, remainder = fishing.split_whole(state.container_accumulator)
    state.container_accumulator = remainder
    state.store.add_fish(whole)
    return whole


# ── Costs ──────────────────────────────────────────────────────────────

def multiply_cost(state: GameState) -> BigNumber:
    entries = len(state.containers.bucket(state.current_tier))
    cost = bignum.multiply(MULTIPLY_BASE_COST, state.tier_multiplier)
    cost = bignum.multiply(cost, bignum.power(MULTIPLY_COST_GROWTH, entries))
    return bignum.multiply(cost, state.parallelize_multiplier)


def ascend_cost(state: GameState) -> BigNumber:
    cost = bignum.multiply(ASCEND_BASE_COST, state.tier_multiplier)
    return bignum.multiply(cost, state.parallelize_multiplier)


# ── Resets ─────────────────────────────────────────────────────────────

def reset_local_state(state: GameState) -> None:
    """Wipe per-tier progress. The fishing queue and cast state survive."""
    state.local = LocalUpgrades()
    state.nets = Nets()
    state.fishing.progress = 0.0


def multiply(state: GameState) -> BigNumber:
    rate = current_fps(state)
    state.containers.bucket(state.current_tier).append(ContainerEntry(rate))
    reset_local_state(state)
    log.info("Multiplied %s: stored %s fish/s", state.current_tier.display_name, format_number(rate))
    return rate


def ascend(state: GameState) -> bool:
    """Fold all containers into the next tier. At universe, start a new universe."""
    next_tier: Optional[Tier] = state.current_tier.next()
    if next_tier is None:
        return new_universe(state)

    combined = bignum.total(entry.fish_per_second for entry in state.containers.all_entries())
    state.containers.clear()
    state.containers.bucket(next_tier).append(ContainerEntry(combined))
    state.tiers.current_tier = next_tier
    reset_local_state(state)
    log.info("Ascended to %s", next_tier.display_name)
    return True


def new_universe(state: GameState) -> bool:
    """Stash the current rate as a universe; the other containers are kept."""
    if state.current_tier is not Tier.UNIVERSE:
        return False
    rate = current_fps(state)
    state.containers.bucket(Tier.UNIVERSE).append(ContainerEntry(rate))
    state.tiers.universe_number += 1
    state.tiers.current_tier = Tier.POND
    reset_local_state(state)
    log.info("Started universe #%d", state.tiers.universe_number)
    return True


def parallelize(state: GameState) -> bool:
    if state.current_tier is not Tier.UNIVERSE:
        return False

    effectiveness = parallelized_propagation_effectiveness(state)
    if effectiveness > 0.0:
        banked = bignum.multiply(bignum.add(current_fps(state), multiverse_fps(state)), effectiveness)
        state.tiers.parallelized_propagation_fps = bignum.add(
            state.tiers.parallelized_propagation_fps, banked
        )

    gained = 1 + state.upgrades.level("parallel_multiverse_multiplier")
    state.tiers.parallel_multiverses += gained

    speed = state.fishing.speed_multiplier
    state.store.fish = ZERO
    state.fishing = FishingState(speed_multiplier=speed)
    state.nets = Nets()
    state.local = LocalUpgrades()
    state.containers.clear()
    state.container_accumulator = ZERO
    state.tiers.current_tier = Tier.POND
    state.tiers.universe_number = 1
    state.tiers.multiverse_multiplier = 1.0
    log.info("Parallelized: +%d parallel multiverses (now %d)", gained, state.tiers.parallel_multiverses)
    return True


def crunch_universe(state: GameState, index: int) -> bool:
    universes = state.containers.bucket(Tier.UNIVERSE)
    if index < 0 or index >= len(universes):
        return False
    universes.pop(index)
    state.tiers.multiverse_multiplier += CRUNCH_MULTIPLIER_STEP
    log.info("Crunched universe %d: multiverse multiplier now %.1f",
             index, state.tiers.multiverse_multiplier)
    return True
