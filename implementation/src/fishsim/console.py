"""Debug console: one text command in, one text reply out."""
from __future__ import annotations

import shlex
from pathlib import Path
from typing import Callable, Dict, List, Optional

from fishsim import bignum, save
from fishsim.catalog import LOCAL_UPGRADE_IDS, UPGRADES
from fishsim.formatting import format_number
from fishsim.simulation import Simulation
from fishsim.types import LOCAL_UPGRADE_MAX_LEVEL, Tier

HELP_TEXT = """Commands:
  help                show this message
  fish                start fishing (queues more if already fishing)
  collect             collect the nets
  addfish <n>         add n fish (counts toward total caught)
  setfish <n>         set current fish to n
  settier <tier>      jump to a tier (pond, lake, ..., universe)
  addnets <n>         add n nets
  setspeed <x>        set fishing speed multiplier
  multiply            buy multiply
  ascend              buy ascend (parallelizes at universe)
  universe            buy a new universe (universe tier only)
  crunch <i>          crunch universe container i
  upgrades            list unlocked upgrades with costs
  buy <upgrade>       buy one level of an upgrade
  auto <upgrade> on|off  toggle an owned auto-buyer
  stats               show statistics
  export              print base64 save text
  import <text>       load base64 or JSON save text
  save                write the save file
  reset               wipe all progress"""


def _parse_number(text: str) -> Optional[bignum.BigNumber]:
    try:
        value = float(text)
    except ValueError:
        return None
    if value != value:
        return None
    return bignum.to_safe_number(value)


class DebugConsole:
    def __init__(self, sim: Simulation, save_path: Optional[Path] = None) -> None:
        self.sim = sim
        self.save_path = save_path
        self.commands: Dict[str, Callable[[List[str]], str]] = {
            "help": self._help,
            "fish": self._fish,
            "collect": self._collect,
            "addfish": self._addfish,
            "setfish": self._setfish,
            "settier": self._settier,
            "addnets": self._addnets,
            "setspeed": self._setspeed,
            "multiply": self._multiply,
            "ascend": self._ascend,
            "universe": self._universe,
            "crunch": self._crunch,
            "upgrades": self._upgrades,
            "buy": self._buy,
            "auto": self._auto,
            "stats": self._stats,
            "export": self._export,
            "import": self._import,
            "save": self._save,
            "reset": self._reset,
        }

    def execute(self, line: str) -> str:
        try:
            parts = shlex.split(line)
        except ValueError as e:
            return f"Parse error: {e}"
        if not parts:
            return ""
        name, args = parts[0].lower(), parts[1:]
        handler = self.commands.get(name)
        if handler is None:
            return f"Unknown command '{name}'. Type 'help' for a list."
        return handler(args)

    def _help(self, args: List[str]) -> str:
        return HELP_TEXT

    def _fish(self, args: List[str]) -> str:
        self.sim.start_fishing()
        return f"Fishing (queue {self.sim.state.fishing.queue})"

    def _collect(self, args: List[str]) -> str:
        return f"Collected {format_number(self.sim.collect_nets())} fish"

    def _amount(self, args: List[str], usage: str):
        if len(args) != 1:
            return None, f"Usage: {usage}"
        amount = _parse_number(args[0])
        if amount is None:
            return None, f"Not a number: {args[0]}"
        return amount, ""

    def _addfish(self, args: List[str]) -> str:
        amount, error = self._amount(args, "addfish <n>")
        if amount is None:
            return error
        self.sim.add_fish(amount)
        return f"Added {format_number(amount)} fish"

    def _setfish(self, args: List[str]) -> str:
        amount, error = self._amount(args, "setfish <n>")
        if amount is None:
            return error
        self.sim.set_fish(amount)
        return f"Fish set to {format_number(self.sim.fish)}"

    def _settier(self, args: List[str]) -> str:
        if len(args) != 1:
            return "Usage: settier <tier>"
        tier = Tier.from_name(args[0])
        if tier is None:
            names = ", ".join(t.name.lower() for t in Tier)
            return f"Unknown tier '{args[0]}'. Tiers: {names}"
        self.sim.set_tier(tier)
        return f"Tier set to {tier.display_name}"

    def _addnets(self, args: List[str]) -> str:
        if len(args) != 1:
            return "Usage: addnets <n>"
        try:
            count = int(args[0])
        except ValueError:
            return f"Not an integer: {args[0]}"
        self.sim.add_nets(count)
        return f"Nets: {self.sim.state.nets.count}"

    def _setspeed(self, args: List[str]) -> str:
        if len(args) != 1:
            return "Usage: setspeed <x>"
        try:
            speed = float(args[0])
        except ValueError:
            return f"Not a number: {args[0]}"
        if not self.sim.set_fishing_speed(speed):
            return "Speed must be positive"
        return f"Fishing speed x{speed:g}"

    def _multiply(self, args: List[str]) -> str:
        if self.sim.buy_multiply():
            return "Multiplied"
        return f"Cannot multiply (costs {format_number(self.sim.get_multiply_cost())})"

    def _ascend(self, args: List[str]) -> str:
        was_universe = self.sim.current_tier is Tier.UNIVERSE
        if self.sim.buy_ascend():
            if was_universe:
                return f"Parallelized ({self.sim.state.tiers.parallel_multiverses} parallel multiverses)"
            return f"Ascended to {self.sim.current_tier.display_name}"
        return f"Cannot ascend (costs {format_number(self.sim.get_ascend_cost())})"

    def _universe(self, args: List[str]) -> str:
        if self.sim.buy_new_universe():
            return f"Universe #{self.sim.state.tiers.universe_number}"
        return "Cannot start a new universe"

    def _crunch(self, args: List[str]) -> str:
        if len(args) != 1:
            return "Usage: crunch <i>"
        try:
            index = int(args[0])
        except ValueError:
            return f"Not an integer: {args[0]}"
        if not self.sim.crunch_universe(index):
            return f"No universe container at index {index}"
        return f"Multiverse multiplier x{self.sim.state.tiers.multiverse_multiplier:.1f}"

    def _upgrade_label(self, upgrade_id: str) -> str:
        if upgrade_id in LOCAL_UPGRADE_IDS:
            level = getattr(self.sim.state.local, upgrade_id)
            name = self.sim.upgrades.display_name(upgrade_id)
            return f"{name} {level}" if level else name
        return self.sim.upgrades.display_name(upgrade_id)

    def _upgrades(self, args: List[str]) -> str:
        sim = self.sim
        pm = sim.state.tiers.parallel_multiverses
        lines: List[str] = []
        category = None
        for defn in UPGRADES:
            if not sim.upgrades.is_unlocked(defn.id, pm):
                continue
            if defn.category != category:
                category = defn.category
                lines.append(f"[{category}]")
            if defn.local:
                maxed = getattr(sim.state.local, defn.id) >= LOCAL_UPGRADE_MAX_LEVEL
            else:
                maxed = sim.upgrades.is_maxed(defn.id)
            status = "max" if maxed else format_number(sim.get_upgrade_cost(defn.id))
            lines.append(f"  {defn.id}: {self._upgrade_label(defn.id)} - {defn.description} ({status})")
        return "\n".join(lines)

    def _buy(self, args: List[str]) -> str:
        if len(args) != 1:
            return "Usage: buy <upgrade>"
        upgrade_id = args[0]
        cost = self.sim.get_upgrade_cost(upgrade_id)
        if self.sim.buy_upgrade(upgrade_id):
            return f"Bought {self._upgrade_label(upgrade_id)} for {format_number(cost)}"
        return f"Cannot buy {upgrade_id}"

    def _auto(self, args: List[str]) -> str:
        if len(args) != 2 or args[1].lower() not in ("on", "off"):
            return "Usage: auto <upgrade> on|off"
        enabled = args[1].lower() == "on"
        if not self.sim.set_auto_enabled(args[0], enabled):
            return f"{args[0]} is not an owned auto-buyer"
        return f"{args[0]} {'enabled' if enabled else 'disabled'}"

    def _stats(self, args: List[str]) -> str:
        return "\n".join(f"{key}: {value}" for key, value in self.sim.stats().items())

    def _export(self, args: List[str]) -> str:
        return save.export_save(self.sim)

    def _import(self, args: List[str]) -> str:
        if len(args) != 1:
            return "Usage: import <text>"
        if save.import_save(self.sim, args[0]):
            return "Save imported"
        return "Import failed"

    def _save(self, args: List[str]) -> str:
        if self.save_path is None:
            return "No save path configured"
        if save.save_game(self.sim, self.save_path):
            return f"Saved to {self.save_path}"
        return "Save failed"

    def _reset(self, args: List[str]) -> str:
        self.sim.reset_game()
        return "Game reset"
