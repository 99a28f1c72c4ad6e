"""Per-tick fish generation: the fishing action and the nets.

Both sources feed a fractional accumulator and only move whole fish out of
it, so sub-unit production carries over between ticks instead of being
truncated away.
"""
from __future__ import annotations

import math
from typing import Tuple

from fishsim import bignum
from fishsim.bignum import BigNumber, ZERO
from fishsim.state import GameState

ROD_MULTIPLIER_BASE = 1.5
BAIT_MULTIPLIER_BASE = 1.2
NET_LEVEL_MULTIPLIER_BASE = 1.2
MASTERY_MULTIPLIER_BASE = 1.1

NET_BASE_CAPACITY = 100.0
NET_RATE_PER_NET = 2.0  # fish/s per net before multipliers

AUTO_COLLECT_BASE_INTERVAL = 5.0  # seconds
AUTO_COLLECT_INTERVAL_STEP = 0.5


def split_whole(accumulator: BigNumber) -> Tuple[BigNumber, BigNumber]:
    """Return (whole units, remainder) of a non-negative accumulator."""
    whole = bignum.floor(accumulator)
    return whole, bignum.subtract(accumulator, whole)


# ── Multipliers ────────────────────────────────────────────────────────

def rod_multiplier(state: GameState) -> BigNumber:
    return bignum.power(ROD_MULTIPLIER_BASE, state.local.rod)


def bait_multiplier(state: GameState) -> BigNumber:
    return bignum.power(BAIT_MULTIPLIER_BASE, state.local.bait)


def net_level_multiplier(state: GameState) -> BigNumber:
    return bignum.power(NET_LEVEL_MULTIPLIER_BASE, state.local.net)


def mastery_multiplier(state: GameState, upgrade_id: str) -> BigNumber:
    return bignum.power(MASTERY_MULTIPLIER_BASE, state.upgrades.level(upgrade_id))


def fishing_mastery_multiplier(state: GameState) -> BigNumber:
    return mastery_multiplier(state, "fishing_mastery")


def net_mastery_multiplier(state: GameState) -> BigNumber:
    return mastery_multiplier(state, "net_mastery")


def bait_mastery_multiplier(state: GameState) -> BigNumber:
    return mastery_multiplier(state, "bait_mastery")


# ── Fishing ────────────────────────────────────────────────────────────

def effective_fishing_duration(state: GameState) -> float:
    """Milliseconds per catch after speed, bait and bait mastery."""
    speed = bignum.multiply(state.fishing.speed_multiplier, bait_multiplier(state))
    speed = bignum.multiply(speed, bait_mastery_multiplier(state))
    plain = bignum.to_plain_number(speed)
    if plain <= 0.0:
        return math.inf
    return state.base_fishing_duration_ms / plain


def fish_per_catch(state: GameState) -> BigNumber:
    amount = bignum.multiply(rod_multiplier(state), state.tier_multiplier)
    amount = bignum.multiply(amount, state.catch_multiplier)
    return bignum.multiply(amount, fishing_mastery_multiplier(state))


def fishing_fps(state: GameState) -> BigNumber:
    """Sustained fish/s if the player fished back to back."""
    duration = effective_fishing_duration(state)
    if not math.isfinite(duration):
        return ZERO
    return bignum.divide(fish_per_catch(state), duration / 1000.0)


def start_fishing(state: GameState) -> None:
    """Idle: begin a cast with catch_multiplier-1 queued. Active: queue more."""
    fishing = state.fishing
    if not fishing.active:
        fishing.active = True
        fishing.progress = 0.0
        fishing.queue = state.catch_multiplier - 1
    else:
        fishing.queue += state.catch_multiplier


def update_fishing(state: GameState, delta_ms: float) -> BigNumber:
    """Advance the current cast; returns whole fish landed this tick."""
    fishing = state.fishing
    if not fishing.active:
        if fishing.queue <= 0:
            return ZERO
        fishing.active = True
        fishing.progress = 0.0
        fishing.queue -= 1

    fishing.progress += delta_ms
    if fishing.progress < effective_fishing_duration(state):
        return ZERO

    fishing.fractional_accumulator = bignum.add(fishing.fractional_accumulator, fish_per_catch(state))
    whole, remainder = split_whole(fishing.fractional_accumulator)
    fishing.fractional_accumulator = remainder
    state.store.add_fish(whole)

    fishing.progress = 0.0
    if fishing.queue > 0:
        fishing.queue -= 1
    else:
        fishing.active = False
    return whole


# ── Nets ───────────────────────────────────────────────────────────────

def net_capacity(state: GameState) -> BigNumber:
    capacity = bignum.multiply(NET_BASE_CAPACITY, net_level_multiplier(state))
    capacity = bignum.multiply(capacity, net_mastery_multiplier(state))
    return bignum.multiply(capacity, state.tier_multiplier)


def net_rate_per_second(state: GameState) -> BigNumber:
    rate = bignum.multiply(state.nets.count, NET_RATE_PER_NET)
    rate = bignum.multiply(rate, net_level_multiplier(state))
    rate = bignum.multiply(rate, net_mastery_multiplier(state))
    return bignum.multiply(rate, state.tier_multiplier)


def auto_collect_interval(state: GameState) -> float:
    """Seconds between reaching capacity and an automatic collect."""
    level = state.upgrades.level("auto_net_collect_interval")
    return max(0.0, AUTO_COLLECT_BASE_INTERVAL - AUTO_COLLECT_INTERVAL_STEP * level)


def collect_nets(state: GameState) -> BigNumber:
    collected = state.nets.fish
    if bignum.is_zero(collected):
        return ZERO
    state.store.add_fish(collected)
    state.nets.fish = ZERO
    state.nets.auto_collect_timer = 0.0
    return collected


def update_nets(state: GameState, delta_ms: float) -> None:
    nets = state.nets
    capacity = net_capacity(state)
    below_capacity = bignum.compare(nets.fish, capacity) < 0
    if below_capacity:
        nets.auto_collect_timer = 0.0

    if below_capacity and nets.auto_collect_timer <= 0.0:
        generated = bignum.multiply(net_rate_per_second(state), delta_ms / 1000.0)
        nets.fractional_accumulator = bignum.add(nets.fractional_accumulator, generated)
        whole, _ = split_whole(nets.fractional_accumulator)
        room = bignum.subtract(capacity, nets.fish)
        transfer = bignum.safe_min(whole, room)
        nets.fish = bignum.add(nets.fish, transfer)
        # Anything that did not fit stays in the accumulator.
        nets.fractional_accumulator = bignum.subtract(nets.fractional_accumulator, transfer)

    if not state.upgrades.auto_active("auto_collect_nets"):
        return
    if bignum.compare(nets.fish, capacity) < 0:
        return
    interval = auto_collect_interval(state)
    if interval <= 0.0:
        collect_nets(state)
    elif nets.auto_collect_timer <= 0.0:
        nets.auto_collect_timer = interval
    else:
        nets.auto_collect_timer -= delta_ms / 1000.0
        if nets.auto_collect_timer <= 0.0:
            collect_nets(state)
