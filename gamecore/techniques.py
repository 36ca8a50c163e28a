"""
Solving-technique finders for the 9x9 number-placement puzzle.

Each finder inspects a grid and its candidate map for one deduction pattern
and returns a HintResult. An empty ``cells`` list means the pattern was not
found, or was found but would not eliminate or place anything.

Finders in increasing difficulty:
- Hidden Single
- Naked Pair
- Naked Triple
- Hidden Pair
- X-Wing
- Y-Wing
- Swordfish

Finders never mutate the candidate map. A solved cell's candidate set is
never consulted, even when a supplied map records candidates for it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import combinations
from typing import Optional

import numpy as np

from .candidates import (
    DIGITS,
    GRID_SIZE,
    CandidateMap,
    Cell,
    Grid,
    all_units,
    as_board,
    shares_unit,
)


HIDDEN_SINGLE = "Hidden Single"
NAKED_PAIR = "Naked Pair"
NAKED_TRIPLE = "Naked Triple"
HIDDEN_PAIR = "Hidden Pair"
X_WING = "X-Wing"
Y_WING = "Y-Wing"
SWORDFISH = "Swordfish"

_NO_CANDIDATES: frozenset[int] = frozenset()


# =============================================================================
# RESULT TYPES
# =============================================================================

@dataclass(frozen=True)
class HintCell:
    """
    A cell to highlight.

    Attributes:
        row: 0-based row index.
        col: 0-based column index.
        is_target: True if the cell is part of the pattern itself.
    """
    row: int
    col: int
    is_target: bool = True


@dataclass
class HintResult:
    """
    Outcome of a technique search.

    Attributes:
        technique_name: Name of the technique that produced the cells.
        cells: Ordered cells to highlight; empty if nothing was found.
        message: Human-readable hint text (set by the hint orchestrator).
    """
    technique_name: str
    cells: list[HintCell] = field(default_factory=list)
    message: str = ""

    @property
    def found(self) -> bool:
        return len(self.cells) > 0


def _result(name: str, cells: Optional[list[Cell]] = None) -> HintResult:
    return HintResult(
        technique_name=name,
        cells=[HintCell(row, col) for row, col in (cells or [])],
    )


# =============================================================================
# CANDIDATE ACCESS
# =============================================================================

class _Candidates:
    """Read-only view of a candidate map that hides solved cells."""

    def __init__(self, board: np.ndarray, candidates: CandidateMap) -> None:
        self.board = board
        self.candidates = candidates

    def is_empty(self, cell: Cell) -> bool:
        return self.board[cell] == 0

    def of(self, cell: Cell) -> frozenset[int] | set[int]:
        row, col = cell
        if self.board[row, col] != 0:
            return _NO_CANDIDATES
        return self.candidates[row][col]

    def has(self, cell: Cell, value: int) -> bool:
        return value in self.of(cell)

    def positions_in_row(self, row: int, value: int) -> list[int]:
        return [c for c in range(GRID_SIZE) if self.has((row, c), value)]

    def positions_in_col(self, col: int, value: int) -> list[int]:
        return [r for r in range(GRID_SIZE) if self.has((r, col), value)]


def _view(grid: Grid, candidates: CandidateMap) -> _Candidates:
    return _Candidates(as_board(grid), candidates)


# =============================================================================
# HIDDEN SINGLE
# =============================================================================

def find_hidden_single(grid: Grid, candidates: CandidateMap) -> HintResult:
    """
    Find a value that only one cell of some unit can hold.

    Args:
        grid: Current 9x9 grid.
        candidates: Candidate map for the grid.

    Returns:
        HintResult with the single cell, or no cells.
    """
    view = _view(grid, candidates)
    for unit in all_units():
        for value in DIGITS:
            holders = [cell for cell in unit if view.has(cell, value)]
            if len(holders) == 1:
                return _result(HIDDEN_SINGLE, holders)
    return _result(HIDDEN_SINGLE)


# =============================================================================
# NAKED PAIR / NAKED TRIPLE
# =============================================================================

def _eliminates_from_unit(
    view: _Candidates,
    unit: list[Cell],
    pattern: tuple[Cell, ...],
    values: set[int] | frozenset[int],
) -> bool:
    """True if some other unsolved cell of the unit carries one of the values."""
    for other in unit:
        if other in pattern or not view.is_empty(other):
            continue
        if view.of(other) & values:
            return True
    return False


def _naked_pair_in_unit(view: _Candidates, unit: list[Cell]) -> Optional[tuple[Cell, Cell]]:
    pair_cells = [cell for cell in unit if len(view.of(cell)) == 2]
    for first, second in combinations(pair_cells, 2):
        values = view.of(first)
        if values != view.of(second):
            continue
        if _eliminates_from_unit(view, unit, (first, second), values):
            return first, second
    return None


def find_naked_pair(grid: Grid, candidates: CandidateMap) -> HintResult:
    """Two cells of a unit restricted to the same two values."""
    view = _view(grid, candidates)
    for unit in all_units():
        pair = _naked_pair_in_unit(view, unit)
        if pair:
            return _result(NAKED_PAIR, list(pair))
    return _result(NAKED_PAIR)


def _naked_triple_in_unit(view: _Candidates, unit: list[Cell]) -> Optional[tuple[Cell, ...]]:
    triple_cells = [cell for cell in unit if len(view.of(cell)) in (2, 3)]
    for triple in combinations(triple_cells, 3):
        union = set().union(*(view.of(cell) for cell in triple))
        if len(union) != 3:
            continue
        if _eliminates_from_unit(view, unit, triple, union):
            return triple
    return None


def find_naked_triple(grid: Grid, candidates: CandidateMap) -> HintResult:
    """Three cells of a unit whose candidates together cover exactly three values."""
    view = _view(grid, candidates)
    for unit in all_units():
        triple = _naked_triple_in_unit(view, unit)
        if triple:
            return _result(NAKED_TRIPLE, list(triple))
    return _result(NAKED_TRIPLE)


# =============================================================================
# HIDDEN PAIR
# =============================================================================

def _hidden_pair_in_unit(view: _Candidates, unit: list[Cell]) -> Optional[list[Cell]]:
    # value -> the two cells that can hold it
    locations: dict[int, list[Cell]] = {}
    for value in DIGITS:
        holders = [cell for cell in unit if view.has(cell, value)]
        if len(holders) == 2:
            locations[value] = holders

    for first, second in combinations(locations, 2):
        cells = locations[first]
        if set(cells) != set(locations[second]):
            continue
        if any(len(view.of(cell)) > 2 for cell in cells):
            return cells
    return None


def find_hidden_pair(grid: Grid, candidates: CandidateMap) -> HintResult:
    """Two values that only the same two cells of a unit can hold."""
    view = _view(grid, candidates)
    for unit in all_units():
        cells = _hidden_pair_in_unit(view, unit)
        if cells:
            return _result(HIDDEN_PAIR, cells)
    return _result(HIDDEN_PAIR)


# =============================================================================
# X-WING
# =============================================================================

def _x_wing_rows(view: _Candidates, value: int) -> Optional[list[Cell]]:
    # column pair -> rows holding the value in exactly those columns
    rows_by_columns: dict[tuple[int, ...], list[int]] = {}
    for row in range(GRID_SIZE):
        cols = view.positions_in_row(row, value)
        if len(cols) == 2:
            rows_by_columns.setdefault(tuple(cols), []).append(row)

    for (c1, c2), rows in rows_by_columns.items():
        if len(rows) != 2:
            continue
        r1, r2 = rows
        for row in range(GRID_SIZE):
            if row in rows:
                continue
            if view.has((row, c1), value) or view.has((row, c2), value):
                return [(r1, c1), (r1, c2), (r2, c1), (r2, c2)]
    return None


def _x_wing_cols(view: _Candidates, value: int) -> Optional[list[Cell]]:
    cols_by_rows: dict[tuple[int, ...], list[int]] = {}
    for col in range(GRID_SIZE):
        rows = view.positions_in_col(col, value)
        if len(rows) == 2:
            cols_by_rows.setdefault(tuple(rows), []).append(col)

    for (r1, r2), cols in cols_by_rows.items():
        if len(cols) != 2:
            continue
        c1, c2 = cols
        for col in range(GRID_SIZE):
            if col in cols:
                continue
            if view.has((r1, col), value) or view.has((r2, col), value):
                return [(r1, c1), (r1, c2), (r2, c1), (r2, c2)]
    return None


def find_x_wing(grid: Grid, candidates: CandidateMap) -> HintResult:
    """
    Find an X-Wing on any value.

    A value restricted to the same two columns in two rows must occupy one
    diagonal of the resulting rectangle, so it can be removed from those
    columns everywhere else. The column form swaps rows and columns.

    Returns:
        HintResult with the four corner cells, row by row.
    """
    view = _view(grid, candidates)
    for value in DIGITS:
        corners = _x_wing_rows(view, value) or _x_wing_cols(view, value)
        if corners:
            return _result(X_WING, corners)
    return _result(X_WING)


# =============================================================================
# Y-WING
# =============================================================================

def _shared_pincer_value(
    pivot: frozenset[int] | set[int],
    first: frozenset[int] | set[int],
    second: frozenset[int] | set[int],
) -> Optional[int]:
    """Return Z if the pincers read {X,Z} and {Y,Z} (in either order) for pivot {X,Y}."""
    x, y = sorted(pivot)
    for a, b in ((x, y), (y, x)):
        if a not in first or b not in second:
            continue
        rest_first = set(first) - {a}
        rest_second = set(second) - {b}
        if rest_first == rest_second and len(rest_first) == 1:
            z = next(iter(rest_first))
            if z not in pivot:
                return z
    return None


def find_y_wing(grid: Grid, candidates: CandidateMap) -> HintResult:
    """
    Find a Y-Wing (XY-Wing).

    The pivot holds {X,Y}; one pincer holds {X,Z}, the other {Y,Z}, and both
    see the pivot. Whichever value the pivot takes, one pincer becomes Z, so
    any cell seeing both pincers cannot be Z. The hint is only reported when
    such a victim cell still carries Z.

    Returns:
        HintResult with pivot, first pincer and second pincer.
    """
    view = _view(grid, candidates)
    bivalue = [
        (row, col)
        for row in range(GRID_SIZE)
        for col in range(GRID_SIZE)
        if len(view.of((row, col))) == 2
    ]
    if len(bivalue) < 3:
        return _result(Y_WING)

    for pivot in bivalue:
        # Pincers must see the pivot; they need not see each other.
        pincers = [cell for cell in bivalue if cell != pivot and shares_unit(cell, pivot)]
        for first, second in combinations(pincers, 2):
            z = _shared_pincer_value(view.of(pivot), view.of(first), view.of(second))
            if z is None:
                continue
            pattern = (pivot, first, second)
            for row in range(GRID_SIZE):
                for col in range(GRID_SIZE):
                    victim = (row, col)
                    if victim in pattern or not view.has(victim, z):
                        continue
                    if shares_unit(victim, first) and shares_unit(victim, second):
                        return _result(Y_WING, list(pattern))
    return _result(Y_WING)


# =============================================================================
# SWORDFISH
# =============================================================================

def _swordfish(lines: list[tuple[int, list[int]]], occurs_outside) -> Optional[list[tuple[int, int]]]:
    """
    Search (line, positions) pairs for three lines covering exactly three positions.

    Args:
        lines: Lines holding the value in 2 or 3 positions, ascending.
        occurs_outside: Callable(position, defining_lines) -> bool telling
            whether the value occurs at that position on another line.

    Returns:
        (line, position) pairs of the pattern, or None.
    """
    for triple in combinations(lines, 3):
        positions = sorted(set().union(*(set(pos) for _, pos in triple)))
        if len(positions) != 3:
            continue
        defining = [line for line, _ in triple]
        if any(occurs_outside(pos, defining) for pos in positions):
            return [(line, pos) for line, line_positions in triple for pos in line_positions]
    return None


def find_swordfish(grid: Grid, candidates: CandidateMap) -> HintResult:
    """Three rows (or columns) confining a value to the same three columns (or rows)."""
    view = _view(grid, candidates)
    for value in DIGITS:
        rows = []
        for row in range(GRID_SIZE):
            cols = view.positions_in_row(row, value)
            if len(cols) in (2, 3):
                rows.append((row, cols))

        if len(rows) >= 3:
            def in_other_row(col: int, defining: list[int]) -> bool:
                return any(
                    view.has((r, col), value) for r in range(GRID_SIZE) if r not in defining
                )

            found = _swordfish(rows, in_other_row)
            if found:
                return _result(SWORDFISH, found)

        columns = []
        for col in range(GRID_SIZE):
            col_rows = view.positions_in_col(col, value)
            if len(col_rows) in (2, 3):
                columns.append((col, col_rows))

        if len(columns) >= 3:
            def in_other_col(row: int, defining: list[int]) -> bool:
                return any(
                    view.has((row, c), value) for c in range(GRID_SIZE) if c not in defining
                )

            found = _swordfish(columns, in_other_col)
            if found:
                # pairs come back as (col, row)
                return _result(SWORDFISH, [(row, col) for col, row in found])
    return _result(SWORDFISH)
