from __future__ import annotations

import argparse
from typing import Dict, Optional, Sequence

import pygame

from tetris_engine.game import (
    Difficulty,
    GameConfig,
    GameMode,
    GameOver,
    GameWon,
    InputController,
    InputSymbol,
    TetrisEngine,
)
from .renderer import Renderer


KEY_TO_INPUT: Dict[int, InputSymbol] = {
    pygame.K_LEFT: InputSymbol.MOVE_LEFT,
    pygame.K_RIGHT: InputSymbol.MOVE_RIGHT,
    pygame.K_UP: InputSymbol.ROTATE_CW,
    pygame.K_z: InputSymbol.ROTATE_CCW,
    pygame.K_DOWN: InputSymbol.SOFT_DROP_START,
    pygame.K_SPACE: InputSymbol.HARD_DROP,
}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play the falling-block engine in a pygame window")
    p.add_argument("--difficulty", choices=[d.name.lower() for d in Difficulty], default="medium")
    p.add_argument("--mode", choices=[m.name.lower() for m in GameMode], default="classic")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--cell-size", type=int, default=28)
    return p


def run(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    pygame.init()
    engine = TetrisEngine(GameConfig(random_seed=args.seed), difficulty=args.difficulty, mode=args.mode)
    try:
        clock = pygame.time.Clock()
        controller = InputController(engine)
        renderer = Renderer(cell_size=args.cell_size)

        screen = pygame.display.set_mode(renderer.window_size(engine.grid.grid.shape))
        pygame.display.set_caption(f"Tetris - {engine.mode.display_name} ({engine.difficulty.display_name})")
        font = pygame.font.SysFont(None, 28)
        big_font = pygame.font.SysFont(None, 36)

        engine.start_new_game()
        banner = ""

        running = True
        while running:
            dt = clock.tick(60)

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_p:
                        if not engine.pause_game():
                            engine.resume_game()
                    elif event.key == pygame.K_r:
                        controller.reset()
                        engine.start_new_game()
                        banner = ""
                    else:
                        symbol = KEY_TO_INPUT.get(event.key)
                        if symbol is not None:
                            controller.process_input(symbol)
                elif event.type == pygame.KEYUP and event.key == pygame.K_DOWN:
                    controller.process_input(InputSymbol.SOFT_DROP_END)

            engine.update(dt)

            for game_event in engine.drain_events():
                if isinstance(game_event, GameOver):
                    banner = f"Game Over ({game_event.summary.reason.value}) - R to restart"
                    print(f"Final score {game_event.summary.final_score}, level {game_event.summary.final_level}, "
                          f"rows {game_event.summary.total_rows_cleared}, {game_event.summary.line_statistics}")
                elif isinstance(game_event, GameWon):
                    banner = "Challenge complete! - R to restart"
                    print(f"Won with score {game_event.summary.final_score}")

            renderer.draw(screen, engine, font)

            overlay = banner or ("Paused - P to resume" if engine.is_paused else "")
            if overlay:
                text = big_font.render(overlay, True, (255, 255, 255))
                rect = text.get_rect(center=(screen.get_width() // 2, 12))
                screen.blit(text, rect)
                pygame.display.flip()
    finally:
        engine.dispose()
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
