# core/game.py
import logging

import pygame

from core.config import GameConfig
from core.context import build_context
from core.settings import (
    BG_COLOR, FPS, HEIGHT, MAX_FRAME_DT, PATH_COLOR, SPAWN_MARKER_COLOR, TITLE, WIDTH,
)
from entities.tower import Tower
from ui.hud import HUD
from world.paths import PathProvider, demo_paths
from world.waves import RoundDirector

log = logging.getLogger(__name__)


class Game:
    """Composition root: owns the context, director and HUD, and drives tick(dt)."""

    def __init__(self, config: GameConfig = None, seed: int = None):
        pygame.init()
        pygame.display.set_caption(TITLE)

        self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
        self.clock = pygame.time.Clock()
        self.running = True

        self.config = config or GameConfig()
        self.tower = Tower(WIDTH * 0.5, HEIGHT * 0.5, self.config.tower)
        self.ctx = build_context(self.config, seed=seed, tower=self.tower)

        self.paths = PathProvider(demo_paths(WIDTH, HEIGHT))
        self.director = RoundDirector(self.ctx, self.paths)

        self.hud = HUD()
        self.hud.bind(self.director)

        if self.config.start_on_launch:
            self.director.begin_game()

    def run(self):
        try:
            while self.running:
                dt = self.clock.tick(FPS) / 1000.0
                if dt > MAX_FRAME_DT:
                    dt = MAX_FRAME_DT

                self._handle_events()
                self.update(dt)

                self.screen.fill(BG_COLOR)
                self.draw(self.screen)
                pygame.display.flip()
        finally:
            self.shutdown()
            pygame.quit()

    def update(self, dt: float):
        self.director.tick(dt)

        actors = self.director.actors
        for a in actors:
            a.update(dt)
        self.tower.update(dt, actors)

    def draw(self, surf):
        for path in self.paths.paths():
            if not path:
                continue
            pygame.draw.lines(surf, PATH_COLOR, False, [(p.x, p.y) for p in path], 6)
            pygame.draw.circle(surf, SPAWN_MARKER_COLOR, (int(path[0].x), int(path[0].y)), 8)

        self.tower.draw(surf)
        for a in self.director.actors:
            a.draw(surf)

        self.hud.draw(surf, self.tower)

    def try_upgrade_tower(self) -> bool:
        step = self.tower.next_upgrade()
        if step is None:
            return False
        if not self.director.try_purchase(step.cost):
            return False
        self.tower.apply_upgrade(step)
        return True

    def shutdown(self):
        self.hud.close()
        self.director.shutdown()
        self.ctx.shutdown()

    def _handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False

                if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                    self.director.begin_game()

                if event.key == pygame.K_u:
                    self.try_upgrade_tower()


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    Game().run()


if __name__ == "__main__":
    main()
