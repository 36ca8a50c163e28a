#!/usr/bin/env python3
"""
Print the next solving hint for a 9x9 puzzle.

The grid is given as 81 characters read row by row; digits 1-9 are givens
and '0' or '.' mark empty cells.

Usage:
    python scripts/sudoku_hint.py 530070000600195000098000060800060003400803001700020006060000280000419005000080079
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from gamecore.candidates import GRID_SIZE
from gamecore.hints import get_hint


def parse_grid(text: str) -> list[list[int]]:
    """Parse an 81-character puzzle string into rows."""
    cells = [c for c in text if not c.isspace()]
    if len(cells) != GRID_SIZE * GRID_SIZE:
        raise ValueError(f"Expected 81 cells, got {len(cells)}")

    values = []
    for c in cells:
        if c == ".":
            values.append(0)
        elif c.isdigit():
            values.append(int(c))
        else:
            raise ValueError(f"Invalid cell character: {c!r}")
    return [values[r * GRID_SIZE:(r + 1) * GRID_SIZE] for r in range(GRID_SIZE)]


def render_grid(grid: list[list[int]], highlights: set[tuple[int, int]]) -> str:
    lines = []
    for r, row in enumerate(grid):
        if r and r % 3 == 0:
            lines.append("------+-------+------")
        parts = []
        for c, value in enumerate(row):
            if c and c % 3 == 0:
                parts.append("|")
            if (r, c) in highlights:
                parts.append("*")
            else:
                parts.append(str(value) if value else ".")
        lines.append(" ".join(parts))
    return "\n".join(lines)


def main():
    parser = argparse.ArgumentParser(description="Suggest the next solving technique")
    parser.add_argument("grid", help="81 characters, row by row (0 or . for empty)")
    args = parser.parse_args()

    try:
        grid = parse_grid(args.grid)
    except ValueError as e:
        parser.error(str(e))

    hint = get_hint(grid)
    print(f"Technique: {hint.technique_name}")
    print(hint.message)
    if hint.cells:
        print()
        print(render_grid(grid, {(cell.row, cell.col) for cell in hint.cells}))
        for cell in hint.cells:
            print(f"  r{cell.row + 1}c{cell.col + 1}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
