from __future__ import annotations

import argparse
import logging
import os
from typing import List, Optional, Sequence, Tuple

import pygame

from block_blast.game import (
    BlockBlastGame,
    BlockSetRegistry,
    CustomBlockSetStore,
    GameConfig,
    HighScoreStore,
    JsonFileStore,
    PieceInPlay,
)

logger = logging.getLogger(__name__)

EMPTY_COLOR = (40, 40, 48)
BACKGROUND = (15, 15, 20)
TRAY_SLOT_CELLS = 5


def draw_board(screen: pygame.Surface, game: BlockBlastGame, cell_size: int, margin: int) -> None:
    screen.fill(BACKGROUND)
    for cell in game.grid.cells:
        rect = pygame.Rect(margin + cell.col * cell_size, margin + cell.row * cell_size, cell_size - 1, cell_size - 1)
        color = pygame.Color(cell.color) if cell.occupied and cell.color else EMPTY_COLOR
        pygame.draw.rect(screen, color, rect)


def tray_origin(game: BlockBlastGame, slot: int, cell_size: int, margin: int) -> Tuple[int, int]:
    x0 = margin * 2 + game.grid.n * cell_size
    return x0, margin + slot * cell_size * TRAY_SLOT_CELLS


def draw_tray(screen: pygame.Surface, game: BlockBlastGame, cell_size: int, margin: int, selected_slot: int) -> None:
    """Draw the pieces in play on the right side, one slot per row."""
    for piece in game.pieces_in_play:
        x0, y0 = tray_origin(game, piece.slot, cell_size, margin)
        for p in piece.figure.points:
            rect = pygame.Rect(x0 + p.x * cell_size, y0 + p.y * cell_size, cell_size - 1, cell_size - 1)
            pygame.draw.rect(screen, pygame.Color(piece.color), rect)
        if piece.slot == selected_slot:
            outline = pygame.Rect(x0, y0, piece.figure.width * cell_size, piece.figure.height * cell_size)
            pygame.draw.rect(screen, (255, 255, 255), outline, 2)


def draw_ghost(
    screen: pygame.Surface,
    game: BlockBlastGame,
    piece: Optional[PieceInPlay],
    row: int,
    col: int,
    cell_size: int,
    margin: int,
) -> bool:
    """Outline where `piece` would land; returns whether it fits there."""
    if piece is None:
        return False
    fits = game.grid.find_figure_intersection(piece.figure, (row, col)) is not None
    color = (120, 220, 140) if fits else (220, 120, 120)
    for p in piece.figure.points:
        rect = pygame.Rect(margin + (col + p.x) * cell_size, margin + (row + p.y) * cell_size, cell_size - 1, cell_size - 1)
        pygame.draw.rect(screen, color, rect, 2)
    return fits


def info_lines(game: BlockBlastGame) -> List[str]:
    return [
        f"Set: {game.block_set_name}",
        f"Score: {game.score}",
        f"Best: {game.high_score}",
        f"Overall: {game.overall_high_score}",
        "Select: 1/2/3",
        "Place: Left click",
        "New game: N",
    ]


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Block Blast with pygame")
    p.add_argument("--block-set", default="classic")
    p.add_argument("--store", default=os.path.join(os.path.expanduser("~"), ".block_blast.json"))
    p.add_argument("--seed", type=int, default=None)
    return p


def run(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    store = JsonFileStore(args.store)
    registry = BlockSetRegistry(custom_store=CustomBlockSetStore(store))
    game = BlockBlastGame(
        registry=registry,
        high_scores=HighScoreStore(store, registry.default_block_set_id),
        config=GameConfig(block_set_id=args.block_set, random_seed=args.seed),
    )

    pygame.init()
    try:
        cell_size = 30
        margin = 20
        board_px = game.grid.n * cell_size
        width = margin * 3 + board_px + TRAY_SLOT_CELLS * cell_size
        height = max(margin * 2 + board_px, margin * 2 + game.config.pieces_per_set * TRAY_SLOT_CELLS * cell_size)
        screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption("Block Blast")
        font = pygame.font.SysFont(None, 24)

        selected_slot = 0
        key_to_slot = {pygame.K_1: 0, pygame.K_2: 1, pygame.K_3: 2}

        running = True
        clock = pygame.time.Clock()
        while running:
            mx, my = pygame.mouse.get_pos()
            row = (my - margin) // cell_size
            col = (mx - margin) // cell_size
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key in key_to_slot:
                        selected_slot = key_to_slot[event.key]
                    elif event.key == pygame.K_n:
                        game.new_game()
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1 and not game.game_over:
                    result = game.attempt_placement(selected_slot, (row, col))
                    if result.success and result.cleared_cells:
                        logger.info("Cleared %d lines", result.lines_cleared)
                    if game.piece_in_slot(selected_slot) is None and game.pieces_in_play:
                        selected_slot = game.pieces_in_play[0].slot

            draw_board(screen, game, cell_size, margin)
            draw_ghost(screen, game, game.piece_in_slot(selected_slot), row, col, cell_size, margin)
            draw_tray(screen, game, cell_size, margin, selected_slot)
            _, y_text = tray_origin(game, game.config.pieces_per_set, cell_size, margin)
            x_text = margin * 2 + board_px
            for i, txt in enumerate(info_lines(game)):
                screen.blit(font.render(txt, True, (230, 230, 230)), (x_text, min(y_text, height - 150) + i * 20))
            if game.game_over:
                over = font.render("Game Over - Press N to play again", True, (255, 100, 100))
                screen.blit(over, (margin, 2))

            pygame.display.flip()
            clock.tick(60)
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
