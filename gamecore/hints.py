"""
Hint orchestration for the 9x9 number-placement puzzle.

``get_hint`` tries each registered technique finder from simplest to most
complex and reports the first one that applies. To add a technique, append
it to ``HINT_TECHNIQUES`` at the position matching its difficulty.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .candidates import CandidateMap, Grid, build_candidate_map, count_candidates
from .techniques import (
    HIDDEN_PAIR,
    HIDDEN_SINGLE,
    NAKED_PAIR,
    NAKED_TRIPLE,
    SWORDFISH,
    X_WING,
    Y_WING,
    HintResult,
    find_hidden_pair,
    find_hidden_single,
    find_naked_pair,
    find_naked_triple,
    find_swordfish,
    find_x_wing,
    find_y_wing,
)

logger = logging.getLogger(__name__)

NO_TECHNIQUE_NAME = "None"
NO_TECHNIQUE_MESSAGE = (
    "I can't find a specific technique right now. Try looking for obvious placements!"
)

Finder = Callable[[Grid, CandidateMap], HintResult]


@dataclass(frozen=True)
class Technique:
    """A named finder in the hint registry."""
    name: str
    finder: Finder


HINT_TECHNIQUES: tuple[Technique, ...] = (
    Technique(HIDDEN_SINGLE, find_hidden_single),
    Technique(NAKED_PAIR, find_naked_pair),
    Technique(NAKED_TRIPLE, find_naked_triple),
    Technique(HIDDEN_PAIR, find_hidden_pair),
    Technique(X_WING, find_x_wing),
    Technique(Y_WING, find_y_wing),
    Technique(SWORDFISH, find_swordfish),
)


def hint_message(technique_name: str, cell_count: int) -> str:
    cell_or_cells = "cell" if cell_count == 1 else "cells"
    return f'I found a "{technique_name}" pattern. Check the highlighted {cell_or_cells}.'


def get_hint(grid: Grid, candidates: Optional[CandidateMap] = None) -> HintResult:
    """
    Suggest the next solving technique for the current grid.

    If no candidate map is supplied, or the supplied one records no candidates
    at all (the player has not been pencilling any in), a fresh map is derived
    from the grid. Otherwise the supplied map is trusted as-is.

    Args:
        grid: The current 9x9 grid (0 = empty).
        candidates: Optional player-tracked candidate map.

    Returns:
        The first applicable HintResult, or one with no cells and a
        generic message when no technique applies.
    """
    if count_candidates(candidates) == 0:
        effective = build_candidate_map(grid)
    else:
        effective = candidates

    for technique in HINT_TECHNIQUES:
        result = technique.finder(grid, effective)
        if result.found:
            logger.debug("Hint found: %s at %s", technique.name, result.cells)
            return HintResult(
                technique_name=technique.name,
                cells=result.cells,
                message=hint_message(technique.name, len(result.cells)),
            )

    return HintResult(technique_name=NO_TECHNIQUE_NAME, cells=[], message=NO_TECHNIQUE_MESSAGE)
