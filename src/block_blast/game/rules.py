from __future__ import annotations

from dataclasses import dataclass

from .figure import Figure


@dataclass
class ScoringRules:
    # Flat award per placement; piece size and lines cleared do not change it
    placement_score: int = 10

    def score_for_placement(self, figure: Figure, lines_cleared: int) -> int:
        return self.placement_score
