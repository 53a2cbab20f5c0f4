import logging
import sys

import pygame

from towergen.config import WIDTH, HEIGHT, FPS
from towergen.core.event_bus import Events
from towergen.host.pygame_host import PygameHost
from towergen.level.generation_config import load_generation_config
from towergen.playground import PlaygroundRules, build_handlers, dispatch
from towergen.session import GameSession

logger = logging.getLogger(__name__)


class Game:
    def __init__(self):
        pygame.init()
        self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
        pygame.display.set_caption("Towergen")
        self.clock = pygame.time.Clock()
        self.config = load_generation_config()
        self.new_session()

    def new_session(self):
        start = (self.config.game_width / 2, self.config.start_platform_y - 24)
        self.host = PygameHost(self.screen, start)
        self.session = GameSession(self.host, self.config)
        self.session.events.on(Events.PLAYER_CAUGHT, self.on_player_caught)
        self.handlers = build_handlers(self.session)
        self.playground = False

    def on_player_caught(self, player_y, riser_y):
        logger.info("Caught at y=%.0f (riser %.0f); press Enter to restart", player_y, riser_y)

    def toggle_playground(self):
        self.playground = not self.playground
        if self.playground:
            PlaygroundRules.apply_start_rules(self.session)
        else:
            PlaygroundRules.release(self.session)

    def handle_key(self, key):
        if key == pygame.K_p:
            self.toggle_playground()
        elif key == pygame.K_RETURN and self.session.game_over:
            self.session.close()
            self.new_session()
        elif self.playground and pygame.K_1 <= key <= pygame.K_9:
            dispatch(self.handlers, 'maze', key - pygame.K_1)
        elif self.playground and key == pygame.K_s:
            dispatch(self.handlers, 'platform', 0)
        elif self.playground and key == pygame.K_m:
            dispatch(self.handlers, 'platform', 1)
        elif self.playground and key == pygame.K_e:
            dispatch(self.handlers, 'enemy', 0)
        elif key == pygame.K_r:
            dispatch(self.handlers, 'riser', 0)

    def run(self):
        while True:
            dt = self.clock.tick(FPS) / 1000.0
            for ev in pygame.event.get():
                if ev.type == pygame.QUIT or (ev.type == pygame.KEYDOWN and ev.key == pygame.K_ESCAPE):
                    self.session.close()
                    pygame.quit()
                    sys.exit()
                elif ev.type == pygame.KEYDOWN:
                    self.handle_key(ev.key)

            if not self.session.game_over and not self.playground:
                self.host.advance_climber(dt, self.session.level.rows)
            self.session.update(dt)
            self.host.draw(self.session, paused=self.playground)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s: %(message)s")
    Game().run()
