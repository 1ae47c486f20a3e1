# ui/hud.py
import pygame

from core.events import SubscriptionScope
from core.settings import HUD_COLOR


class HUD:
    """
    Read-only view of the director:
    - listens to money/round/game notifications instead of polling
    - bind() drops any previous subscriptions, close() drops them all
    """

    def __init__(self, font_size: int = 18):
        pygame.font.init()
        fs = max(10, min(48, int(font_size)))
        self.font = pygame.font.SysFont("consolas", fs)

        self._scope = SubscriptionScope()
        self.director = None
        self.money = 0
        self.round = 0
        self.in_progress = False
        self.started = False
        self.game_over = False

    def bind(self, director):
        self.close()
        self.director = director
        self._scope.connect(director.money_changed, self._on_money)
        self._scope.connect(director.round_changed, self._on_round)
        self._scope.connect(director.game_started, self._on_started)
        self._scope.connect(director.game_over_triggered, self._on_game_over)

        self.money = director.current_money
        self.round = director.current_round if director.has_started else director.starting_round
        self.in_progress = director.round_in_progress
        self.started = director.has_started
        self.game_over = director.is_game_over

    def close(self):
        self._scope.close()
        self.director = None

    def _on_money(self, total: int):
        self.money = total

    def _on_round(self, round_number: int, in_progress: bool):
        self.round = round_number
        self.in_progress = in_progress

    def _on_started(self):
        self.started = True

    def _on_game_over(self):
        self.game_over = True

    def draw(self, surf: pygame.Surface, tower=None):
        x = 14
        y = 12

        # -------------------------
        # Tower health
        # -------------------------
        if tower is not None:
            w = 240
            h = 16
            pct = max(0.0, min(1.0, tower.health / max(1e-6, tower.max_health)))
            pygame.draw.rect(surf, (40, 40, 55), (x, y, w, h))
            pygame.draw.rect(surf, (80, 210, 120), (x, y, int(w * pct), h))
            pygame.draw.rect(surf, (230, 230, 240), (x, y, w, h), 2)

            txt = self.font.render(f"TOWER {tower.health:.0f}/{tower.max_health:.0f}", True, HUD_COLOR)
            surf.blit(txt, (x, y + 20))

        # -------------------------
        # Money / round
        # -------------------------
        state = "FIGHT" if self.in_progress else "PREP"
        txt2 = self.font.render(f"${self.money}   ROUND {self.round} {state}", True, HUD_COLOR)
        surf.blit(txt2, (x + 260, y))

        if self.game_over:
            msg = "GAME OVER - ESC to quit"
        elif not self.started:
            msg = "ENTER to start"
        else:
            nxt = tower.next_upgrade() if tower is not None else None
            msg = f"U: {nxt.label} ${nxt.cost}" if nxt else "Tower fully upgraded"

        txt3 = self.font.render(msg, True, (210, 210, 225))
        surf.blit(txt3, (x, y + 44))
