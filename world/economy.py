# world/economy.py
from __future__ import annotations

import logging

from core.events import Signal

log = logging.getLogger(__name__)


class Economy:
    """
    Money / round ledger.
    - money never goes below zero: spends either fully succeed or change nothing
    - round only moves forward
    - game_over is write-once; kill rewards stop after it
    """

    def __init__(self, starting_money: int = 0, reward_per_kill: int = 0):
        self.money = max(0, int(starting_money))
        self.reward_per_kill = max(0, int(reward_per_kill))
        self.round = 0
        self.game_over = False

        self.money_changed = Signal("economy.money_changed")

    def can_afford(self, amount: int) -> bool:
        amount = int(amount)
        if amount <= 0:
            return True
        return self.money >= amount

    def try_spend(self, amount: int) -> bool:
        amount = int(amount)
        if amount <= 0:
            return True
        if self.money < amount:
            return False
        self.money -= amount
        self.money_changed.emit(self.money)
        return True

    def add_money(self, amount: int):
        if amount <= 0:
            return
        self.money += int(amount)
        self.money_changed.emit(self.money)

    def reward_kill(self):
        if self.game_over:
            return
        self.add_money(self.reward_per_kill)

    def advance_round(self, round_number: int) -> int:
        if round_number > self.round:
            self.round = int(round_number)
        return self.round

    def mark_game_over(self) -> bool:
        """Returns False if it was already over."""
        if self.game_over:
            return False
        self.game_over = True
        return True
