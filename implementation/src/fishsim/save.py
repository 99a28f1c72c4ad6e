"""Save/load and export/import of the game state.

Auto-save: JSON written atomically (tmp + rename) to a local file.
Snapshot layout: {"version": 2, "checksum": sha256, "state": {...}} where the
checksum covers the canonical (sorted, compact) JSON of "state".
Export: base64 of the compact snapshot.
Import: raw JSON or base64 JSON. Version 1 snapshots (flat state, no
checksum) are still accepted; anything newer must carry a matching
checksum. Fields missing from older snapshots take their defaults, and
non-finite or out-of-range values reject the whole snapshot.
"""
from __future__ import annotations

import base64
import binascii
import hashlib
import json
import logging
import math
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from fishsim import bignum
from fishsim.bignum import BigNumber, ZERO
from fishsim.catalog import AUTO_FLAG_IDS, UPGRADES_BY_ID
from fishsim.state import GameState
from fishsim.types import ContainerEntry, Tier

if TYPE_CHECKING:
    from fishsim.simulation import Simulation

log = logging.getLogger(__name__)

SAVE_VERSION = 2


def _num(value: BigNumber) -> dict:
    return value.to_dict()


def _read_num(data: dict, key: str) -> BigNumber:
    raw = data.get(key)
    if raw is None:
        return ZERO
    if not isinstance(raw, (dict, int, float, str)):
        raise TypeError(f"{key} is not a number")
    if isinstance(raw, dict):
        return BigNumber.from_dict(raw)
    return bignum.to_safe_number(raw)


def _read_float(data: dict, key: str, default: float, minimum: float = 0.0, positive: bool = False) -> float:
    """Read a finite float no smaller than ``minimum`` (strictly above it if ``positive``)."""
    value = float(data.get(key, default))
    if not math.isfinite(value):
        raise ValueError(f"{key} is not finite")
    if value < minimum or (positive and value == minimum):
        raise ValueError(f"{key} out of range: {value}")
    return value


def compute_checksum(state: dict) -> str:
    canonical = json.dumps(state, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def _build_state_dict(sim: Simulation) -> dict:
    """Build a JSON-serializable dict from simulation state."""
    state = sim.state
    containers = {
        tier.container_key: [{"fish_per_second": _num(e.fish_per_second)} for e in state.containers.bucket(tier)]
        for tier in Tier
    }
    return {
        "fish": _num(state.store.fish),
        "total_fish_caught": _num(state.store.total_fish_caught),
        "local_upgrades": {
            "rod": state.local.rod,
            "net": state.local.net,
            "bait": state.local.bait,
        },
        "general_upgrades": dict(state.upgrades.levels),
        "auto_buy": dict(state.upgrades.auto_enabled),
        "nets": {
            "count": state.nets.count,
            "fish": _num(state.nets.fish),
            "fractional_accumulator": _num(state.nets.fractional_accumulator),
            "auto_collect_timer": state.nets.auto_collect_timer,
        },
        "fishing": {
            "active": state.fishing.active,
            "progress": state.fishing.progress,
            "queue": state.fishing.queue,
            "fractional_accumulator": _num(state.fishing.fractional_accumulator),
            "speed_multiplier": state.fishing.speed_multiplier,
        },
        "containers": containers,
        "container_accumulator": _num(state.container_accumulator),
        "current_tier": state.current_tier.container_key,
        "universe_number": state.tiers.universe_number,
        "parallel_multiverses": state.tiers.parallel_multiverses,
        "multiverse_multiplier": state.tiers.multiverse_multiplier,
        "parallelized_propagation_fps": _num(state.tiers.parallelized_propagation_fps),
        "stats": {
            "total_ticks": state.total_ticks,
            "play_time_ms": state.play_time_ms,
        },
    }


def _build_save_dict(sim: Simulation) -> dict:
    state = _build_state_dict(sim)
    return {
        "version": SAVE_VERSION,
        "checksum": compute_checksum(state),
        "state": state,
    }


def _state_from_dict(data: dict, base_fishing_duration_ms: float) -> GameState:
    """Build a fresh GameState from a snapshot, defaulting missing fields.

    Raises KeyError/TypeError/ValueError on malformed values.
    """
    state = GameState(base_fishing_duration_ms=base_fishing_duration_ms)

    # 1. Ledger
    state.store.fish = _read_num(data, "fish")
    state.store.total_fish_caught = bignum.safe_max(_read_num(data, "total_fish_caught"), state.store.fish)

    # 2. Upgrades
    local = data.get("local_upgrades", {})
    state.local.rod = int(local.get("rod", 0))
    state.local.net = int(local.get("net", 0))
    state.local.bait = int(local.get("bait", 0))
    for upgrade_id, level in data.get("general_upgrades", {}).items():
        if upgrade_id not in UPGRADES_BY_ID:
            log.warning("Unknown upgrade '%s' in save, skipping", upgrade_id)
            continue
        state.upgrades.levels[upgrade_id] = int(level)
    for upgrade_id, enabled in data.get("auto_buy", {}).items():
        if upgrade_id in AUTO_FLAG_IDS:
            state.upgrades.auto_enabled[upgrade_id] = bool(enabled)

    # 3. Nets and fishing
    nets = data.get("nets", {})
    state.nets.count = int(nets.get("count", 0))
    state.nets.fish = _read_num(nets, "fish")
    state.nets.fractional_accumulator = _read_num(nets, "fractional_accumulator")
    state.nets.auto_collect_timer = _read_float(nets, "auto_collect_timer", 0.0)

    fishing = data.get("fishing", {})
    state.fishing.active = bool(fishing.get("active", False))
    state.fishing.progress = _read_float(fishing, "progress", 0.0)
    state.fishing.queue = int(fishing.get("queue", 0))
    state.fishing.fractional_accumulator = _read_num(fishing, "fractional_accumulator")
    state.fishing.speed_multiplier = _read_float(fishing, "speed_multiplier", 1.0, positive=True)

    # 4. Containers and tiers
    containers = data.get("containers", {})
    for tier in Tier:
        for entry in containers.get(tier.container_key, []):
            state.containers.bucket(tier).append(ContainerEntry(_read_num(entry, "fish_per_second")))
    state.container_accumulator = _read_num(data, "container_accumulator")

    tier_name = data.get("current_tier", "ponds")
    tier = Tier.from_name(str(tier_name))
    if tier is None:
        raise ValueError(f"unknown tier {tier_name!r}")
    state.tiers.current_tier = tier
    state.tiers.universe_number = max(1, int(data.get("universe_number", 1)))
    state.tiers.parallel_multiverses = max(1, int(data.get("parallel_multiverses", 1)))
    state.tiers.multiverse_multiplier = _read_float(data, "multiverse_multiplier", 1.0, minimum=1.0)
    state.tiers.parallelized_propagation_fps = _read_num(data, "parallelized_propagation_fps")

    # 5. Stats
    stats = data.get("stats", {})
    state.total_ticks = int(stats.get("total_ticks", 0))
    state.play_time_ms = _read_float(stats, "play_time_ms", 0.0)
    return state


def _restore_from_dict(sim: Simulation, data: dict) -> bool:
    """Restore simulation state from a snapshot. Returns True on success.

    The running state is only replaced once the whole snapshot parsed.
    """
    if not isinstance(data, dict):
        log.error("Save data is not an object")
        return False
    try:
        version = int(data.get("version", 1))
        if "state" in data:
            payload = data["state"]
            if not isinstance(payload, dict):
                raise TypeError("state is not an object")
            checksum = data.get("checksum")
            if checksum is None:
                log.error("Save has no checksum, refusing to load")
                return False
            if checksum != compute_checksum(payload):
                log.error("Save checksum mismatch, refusing to load")
                return False
        elif version >= 2:
            log.error("Version %d save has no state block", version)
            return False
        else:
            payload = data
        if version > SAVE_VERSION:
            log.warning("Save version %d is newer than supported %d", version, SAVE_VERSION)
        new_state = _state_from_dict(payload, sim.state.base_fishing_duration_ms)
    except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as e:
        log.error("Error restoring save data: %s", e)
        return False

    sim.state = new_state
    return True


def _try_import_data(encoded: str) -> Optional[dict]:
    """Parse raw JSON first, then base64-wrapped JSON."""
    text = encoded.strip()
    try:
        data = json.loads(text)
        if isinstance(data, dict) and "version" in data:
            return data
    except ValueError:
        pass

    try:
        raw = base64.b64decode(text, validate=True)
        data = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return None
    if isinstance(data, dict) and "version" in data:
        return data
    return None


def export_save(sim: Simulation) -> str:
    data = _build_save_dict(sim)
    json_str = json.dumps(data, separators=(",", ":"))
    return base64.b64encode(json_str.encode("utf-8")).decode("ascii")


def import_save(sim: Simulation, encoded: str) -> bool:
    data = _try_import_data(encoded)
    if data is None:
        log.error("Import failed: unrecognised save text")
        return False
    ok = _restore_from_dict(sim, data)
    if ok:
        log.info("Imported save")
    return ok


def save_game(sim: Simulation, path: Path) -> bool:
    """Write JSON atomically (tmp + rename)."""
    data = _build_save_dict(sim)
    tmp_path = path.with_suffix(".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        tmp_path.replace(path)
    except OSError as e:
        log.error("Error saving game: %s", e)
        return False
    log.debug("Saved game to %s", path)
    return True


def load_game(sim: Simulation, path: Path) -> bool:
    """Read JSON and restore state. Returns False on missing/corrupt file."""
    if not path.exists():
        return False
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text)
    except (OSError, ValueError) as e:
        log.error("Error loading save file: %s", e)
        return False
    ok = _restore_from_dict(sim, data)
    if ok:
        log.info("Loaded save from %s", path)
    return ok
