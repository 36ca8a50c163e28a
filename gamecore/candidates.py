"""
Candidate computation and unit geometry for the 9x9 number-placement puzzle.

A grid is a 9x9 matrix of integers 0-9 where 0 marks an empty cell. For every
empty cell the candidate map holds the values that do not already appear in
the cell's row, column or 3x3 box. Solved cells always map to an empty set.

Units are the 27 fixed cell groupings (9 rows, 9 columns, 9 boxes) shared by
every technique finder.
"""

from __future__ import annotations

from typing import Iterator, Sequence, Union

import numpy as np


GRID_SIZE = 9
BOX_SIZE = 3
DIGITS: tuple[int, ...] = tuple(range(1, 10))

Cell = tuple[int, int]  # (row, col), 0-based
Grid = Union[Sequence[Sequence[int]], np.ndarray]
CandidateMap = list[list[set[int]]]


# =============================================================================
# GRID HELPERS
# =============================================================================

def as_board(grid: Grid) -> np.ndarray:
    """
    Convert a grid into a 9x9 integer array.

    Args:
        grid: Nested sequence or array of ints 0-9.

    Returns:
        A 9x9 numpy integer array (a copy, never the caller's object).

    Raises:
        ValueError: If the grid is not 9x9.
    """
    board = np.array(grid, dtype=int)
    if board.shape != (GRID_SIZE, GRID_SIZE):
        raise ValueError(f"Grid must be 9x9, got shape {board.shape}")
    return board


def box_index(row: int, col: int) -> int:
    """Index 0-8 of the box containing (row, col), numbered left to right, top to bottom."""
    return (row // BOX_SIZE) * BOX_SIZE + col // BOX_SIZE


def row_cells(row: int) -> list[Cell]:
    return [(row, col) for col in range(GRID_SIZE)]


def col_cells(col: int) -> list[Cell]:
    return [(row, col) for row in range(GRID_SIZE)]


def box_cells(box: int) -> list[Cell]:
    start_row = (box // BOX_SIZE) * BOX_SIZE
    start_col = (box % BOX_SIZE) * BOX_SIZE
    return [
        (start_row + i, start_col + j)
        for i in range(BOX_SIZE)
        for j in range(BOX_SIZE)
    ]


def all_units() -> Iterator[list[Cell]]:
    """
    Yield the 27 units in scan order: row i, column i, box i for i = 0..8.

    Every finder that scans units uses this order so hints are reproducible.
    """
    for i in range(GRID_SIZE):
        yield row_cells(i)
        yield col_cells(i)
        yield box_cells(i)


def shares_unit(a: Cell, b: Cell) -> bool:
    """True if two cells lie in the same row, column or box."""
    if a[0] == b[0] or a[1] == b[1]:
        return True
    return box_index(*a) == box_index(*b)


# =============================================================================
# CANDIDATE MAP
# =============================================================================

def empty_candidate_map() -> CandidateMap:
    return [[set() for _ in range(GRID_SIZE)] for _ in range(GRID_SIZE)]


def build_candidate_map(grid: Grid) -> CandidateMap:
    """
    Derive the candidate set of every empty cell from row/column/box peers.

    Args:
        grid: The current 9x9 grid (0 = empty).

    Returns:
        9x9 matrix of candidate sets. Solved cells get an empty set.
    """
    board = as_board(grid)
    candidates = empty_candidate_map()

    for row in range(GRID_SIZE):
        for col in range(GRID_SIZE):
            if board[row, col] != 0:
                continue
            start_row = (row // BOX_SIZE) * BOX_SIZE
            start_col = (col // BOX_SIZE) * BOX_SIZE
            used = set(board[row, :].tolist())
            used.update(board[:, col].tolist())
            used.update(
                board[start_row:start_row + BOX_SIZE, start_col:start_col + BOX_SIZE]
                .ravel()
                .tolist()
            )
            candidates[row][col] = {n for n in DIGITS if n not in used}

    return candidates


def count_candidates(candidates: CandidateMap | None) -> int:
    """Total number of candidates recorded across the whole map."""
    if not candidates:
        return 0
    return sum(len(cell) for row in candidates for cell in row)
