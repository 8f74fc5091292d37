import sys
from pathlib import Path

import pygame

from settings import WINDOW_WIDTH, WINDOW_HEIGHT, TITLE, FPS
from engine.config import load_rules
from engine.error_handler import get_logger, handle_critical_error
from engine.game import Game
from world.layouts import DESERT_CROSSING

log = get_logger("main")


def _read_layout(argv) -> str:
    """Optional first argument: path to an ASCII layout file."""
    if len(argv) < 2:
        return DESERT_CROSSING
    path = Path(argv[1])
    log.info("Loading layout from %s", path)
    return path.read_text(encoding="utf-8")


def main() -> None:
    pygame.init()
    pygame.display.set_caption(TITLE)

    screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
    clock = pygame.time.Clock()

    rules = load_rules()
    game = Game(screen, layout_text=_read_layout(sys.argv), rules=rules)

    # --- Main loop ---
    running = True
    while running:
        dt = clock.tick(FPS) / 1000.0

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
                continue

            try:
                game.handle_event(event)
            except Exception as e:
                if not handle_critical_error(e, "handle_event", recovery_action=game.engine.reset_run):
                    raise

        game.update(dt)
        game.draw()
        pygame.display.flip()

    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()
