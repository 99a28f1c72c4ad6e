from __future__ import annotations

from dataclasses import dataclass

from fishsim import bignum
from fishsim.bignum import BigNumber, Number, ZERO


@dataclass
class FishStore:
    fish: BigNumber = ZERO
    total_fish_caught: BigNumber = ZERO

    def add_fish(self, amount: Number) -> None:
        amount = bignum.to_safe_number(amount)
        if bignum.compare(amount, ZERO) <= 0:
            return
        self.fish = bignum.add(self.fish, amount)
        self.total_fish_caught = bignum.add(self.total_fish_caught, amount)

    def can_afford(self, cost: Number) -> bool:
        return bignum.compare(self.fish, cost) >= 0

    def spend(self, cost: Number) -> bool:
        """Deduct ``cost`` if affordable. Lifetime total is untouched."""
        if not self.can_afford(cost):
            return False
        self.fish = bignum.subtract(self.fish, cost)
        return True

    def set_fish(self, amount: Number) -> None:
        """Overwrite spendable fish; raises the lifetime total if it would fall behind."""
        amount = bignum.to_safe_number(amount)
        if bignum.compare(amount, ZERO) < 0:
            amount = ZERO
        self.fish = amount
        self.total_fish_caught = bignum.safe_max(self.total_fish_caught, amount)
