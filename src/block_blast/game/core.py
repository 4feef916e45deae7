from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from .block_sets import BlockSetRegistry
from .colors import random_color
from .figure import Figure
from .grid import Anchor, Cell, GameGrid
from .high_score import HighScoreSnapshot, HighScoreStore
from .rules import ScoringRules

logger = logging.getLogger(__name__)


class SessionState(Enum):
    IN_PLAY = "in_play"
    GAME_OVER = "game_over"


@dataclass
class GameConfig:
    grid_size: int = 10
    pieces_per_set: int = 3
    block_set_id: str = "classic"
    random_seed: Optional[int] = None


@dataclass(frozen=True)
class PieceInPlay:
    slot: int
    figure: Figure
    color: str


@dataclass
class PlacementResult:
    success: bool
    piece: Optional[PieceInPlay] = None
    placed_cells: List[Cell] = field(default_factory=list)
    cleared_cells: List[Cell] = field(default_factory=list)
    rows_cleared: List[int] = field(default_factory=list)
    columns_cleared: List[int] = field(default_factory=list)
    score_gained: int = 0
    game_over: bool = False

    @property
    def lines_cleared(self) -> int:
        return len(self.rows_cleared) + len(self.columns_cleared)


ClearListener = Callable[[List[Cell]], None]


class BlockBlastGame:
    """Game session: piece supply, placement, clears, scoring and game over.

    One call to `attempt_placement` runs a whole turn to completion.
    """

    def __init__(
        self,
        registry: Optional[BlockSetRegistry] = None,
        high_scores: Optional[HighScoreStore] = None,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.registry = registry or BlockSetRegistry()
        self.high_scores = high_scores or HighScoreStore(default_block_set_id=self.registry.default_block_set_id)
        self.rules = rules or ScoringRules()
        self.rng = random.Random(self.config.random_seed)
        self.grid = GameGrid(self.config.grid_size)
        self.block_set_id = self.registry.resolve(self.config.block_set_id).id
        self.block_set_name = self.registry.block_set_name(self.block_set_id)
        self.pieces_in_play: List[PieceInPlay] = []
        self.state = SessionState.IN_PLAY
        self.score = 0
        self.high_score = 0
        self.overall_high_score = 0
        self.total_pieces_placed = 0
        self.total_lines_cleared = 0
        self._clear_listeners: List[ClearListener] = []
        self._apply_snapshot(self.high_scores.get_snapshot())
        self.new_game()

    @property
    def game_over(self) -> bool:
        return self.state is SessionState.GAME_OVER

    def add_clear_listener(self, listener: ClearListener) -> None:
        """Register a callback that receives the cells cleared by each placement."""
        self._clear_listeners.append(listener)

    def remove_clear_listener(self, listener: ClearListener) -> None:
        self._clear_listeners.remove(listener)

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self.rng.seed(seed)
        self.new_game()

    def new_game(self) -> None:
        """Clear the board, zero the score and deal fresh pieces. High scores persist."""
        self.pieces_in_play = []
        self.grid.reset()
        self.score = 0
        self.total_pieces_placed = 0
        self.total_lines_cleared = 0
        self.state = SessionState.IN_PLAY
        self.offer_pieces()
        logger.info("New game with block set %s", self.block_set_id)

    def set_block_set(self, block_set_id: str) -> None:
        resolved = self.registry.resolve(block_set_id).id
        if resolved == self.block_set_id:
            return
        self.block_set_id = resolved
        self.block_set_name = self.registry.block_set_name(resolved)
        self._apply_snapshot(self.high_scores.get_snapshot())
        logger.info("Switched to block set %s", resolved)
        self.new_game()

    def offer_pieces(self) -> List[PieceInPlay]:
        """Refill every slot with a fresh random shape."""
        self.pieces_in_play = [
            PieceInPlay(
                slot=slot,
                figure=self.registry.random_shape_for(self.block_set_id, self.rng),
                color=random_color(self.rng),
            )
            for slot in range(self.config.pieces_per_set)
        ]
        logger.debug("Offered pieces: %s", [len(p.figure) for p in self.pieces_in_play])
        return list(self.pieces_in_play)

    def piece_in_slot(self, slot: int) -> Optional[PieceInPlay]:
        for piece in self.pieces_in_play:
            if piece.slot == slot:
                return piece
        return None

    def attempt_placement(self, slot: int, anchor: Tuple[int, int]) -> PlacementResult:
        """Place the piece in `slot` with its origin at (row, col).

        A rejected placement changes nothing; the piece stays in its slot.
        """
        piece = self.piece_in_slot(slot)
        if piece is None or self.game_over:
            return PlacementResult(success=False, piece=piece, game_over=self.game_over)
        cells = self.grid.find_figure_intersection(piece.figure, Anchor(*anchor))
        if cells is None:
            return PlacementResult(success=False, piece=piece)

        self.grid.occupy_cells(cells, piece.color)
        self.pieces_in_play = [p for p in self.pieces_in_play if p.slot != slot]

        rows = self.grid.complete_rows()
        columns = self.grid.complete_columns()
        cleared = self._union_cells(self.grid.get_complete_row_cells(), self.grid.get_complete_column_cells())
        gained = self.rules.score_for_placement(piece.figure, len(rows) + len(columns))
        self._increment_score(gained)
        self.grid.clear_cells(cleared)

        self.total_pieces_placed += 1
        self.total_lines_cleared += len(rows) + len(columns)
        if cleared:
            logger.debug("Cleared rows %s and columns %s (%d cells)", rows, columns, len(cleared))
            for listener in list(self._clear_listeners):
                listener(list(cleared))

        if not self.pieces_in_play:
            self.offer_pieces()
        self.check_game_over()
        return PlacementResult(
            success=True,
            piece=piece,
            placed_cells=cells,
            cleared_cells=cleared,
            rows_cleared=rows,
            columns_cleared=columns,
            score_gained=gained,
            game_over=self.game_over,
        )

    def fit_positions(self, piece: PieceInPlay) -> List[Anchor]:
        return self.grid.fit_positions(piece.figure)

    def can_place_any_piece(self) -> bool:
        return any(self.grid.fits_anywhere(piece.figure) for piece in self.pieces_in_play)

    def check_game_over(self) -> bool:
        """Move to GAME_OVER when no in-play piece fits anywhere."""
        if self.state is SessionState.IN_PLAY and not self.can_place_any_piece():
            self.state = SessionState.GAME_OVER
            logger.info("Game over with score %d (%s)", self.score, self.block_set_id)
        return self.game_over

    def get_state(self) -> Dict[str, object]:
        return {
            "grid": self.grid.occupancy().copy(),
            "pieces": {p.slot: p.figure for p in self.pieces_in_play},
            "pieces_remaining": len(self.pieces_in_play),
            "score": self.score,
            "high_score": self.high_score,
            "overall_high_score": self.overall_high_score,
            "block_set_id": self.block_set_id,
            "total_pieces_placed": self.total_pieces_placed,
            "total_lines_cleared": self.total_lines_cleared,
            "game_over": self.game_over,
            "filled_ratio": self.grid.get_filled_ratio(),
        }

    def _increment_score(self, amount: int) -> None:
        if amount <= 0:
            return
        self.score += amount
        self._apply_snapshot(self.high_scores.update_if_greater(self.block_set_id, self.score))

    def _apply_snapshot(self, snapshot: HighScoreSnapshot) -> None:
        self.high_score = snapshot.per_set.get(self.block_set_id, 0)
        self.overall_high_score = snapshot.overall

    @staticmethod
    def _union_cells(*groups: List[Cell]) -> List[Cell]:
        seen: Dict[Tuple[int, int], Cell] = {}
        for group in groups:
            for cell in group:
                seen.setdefault((cell.row, cell.col), cell)
        return list(seen.values())
