from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoringRules:
    cell_points: int = 10
    line_points: int = 100
    combo_points: int = 50

    def score_for(self, cell_count: int, lines: int) -> int:
        """Points for one placement: piece size, cleared lines, and a combo bonus past the first line."""
        score = cell_count * self.cell_points
        if lines <= 0:
            return score
        return score + lines * self.line_points + (lines - 1) * self.combo_points
