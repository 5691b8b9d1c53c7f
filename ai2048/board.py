"""
board.py

The 4x4 grid packed into a single 64-bit word, one 4-bit exponent per cell,
and the numba kernels that slide it and score its shape.
"""

from enum import Enum
from typing import Any, NamedTuple, Sequence, Tuple

import numba
import numpy as np

BoardType = np.ndarray[Any, np.dtype[np.int64]]

SIZE = 4
CELL_MASK = 0xF
ROW_BITS = 16
CELL_BITS = 4
MAX_EXPONENT = 15
FULL_MASK = 0xFFFFFFFFFFFFFFFF

# returned by Board.slide when nothing moved
INVALID_MOVE = -1


class Direction(Enum):
    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3

    @property
    def rows(self) -> Tuple[int, int, int]:
        """(start, end, step) over rows, nearest the destination wall first."""
        return _TRAVERSAL[self][0]

    @property
    def cols(self) -> Tuple[int, int, int]:
        return _TRAVERSAL[self][1]

    @property
    def vector(self) -> Tuple[int, int]:
        """(drow, dcol) pointing toward the wall the tiles slide against."""
        return _TRAVERSAL[self][2]

    @classmethod
    def from_name(cls, name: str) -> "Direction":
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown direction: {name}") from None


_FORWARD = (0, SIZE, 1)
_BACKWARD = (SIZE - 1, -1, -1)

_TRAVERSAL = {
    Direction.UP: (_FORWARD, _FORWARD, (-1, 0)),
    Direction.DOWN: (_BACKWARD, _FORWARD, (1, 0)),
    Direction.LEFT: (_FORWARD, _FORWARD, (0, -1)),
    Direction.RIGHT: (_FORWARD, _BACKWARD, (0, 1)),
}


class BoardStats(NamedTuple):
    empty: int
    largest: int
    smoothness: int
    monotonicity: int


@numba.njit(cache=True)
def _final_location(grid, values, merged, row, col, drow, dcol):
    r = row + drow
    c = col + dcol
    while 0 <= r < SIZE and 0 <= c < SIZE:
        v = grid[r, c]
        if not merged[r, c] and v == values[row, col]:
            return r, c
        if v != 0:
            return r - drow, c - dcol
        r += drow
        c += dcol
    # ran into the wall
    return r - drow, c - dcol


@numba.njit(cache=True)
def _slide_grid(grid, row_start, row_end, row_step, col_start, col_end, col_step, drow, dcol):
    values = grid.copy()
    merged = np.zeros((SIZE, SIZE), dtype=np.bool_)
    score = -1

    for row in range(row_start, row_end, row_step):
        for col in range(col_start, col_end, col_step):
            v = values[row, col]
            if v == 0:
                continue
            r, c = _final_location(grid, values, merged, row, col, drow, dcol)
            if r == row and c == col:
                continue

            gain = 0
            old = grid[r, c]
            if old != 0:
                grid[r, c] = old + 1
                merged[r, c] = True
                gain = 1 << (old + 1)
            else:
                grid[r, c] = v
            grid[row, col] = 0

            if score < 0:
                score = gain
            else:
                score += gain

    return score


@numba.njit(cache=True)
def _line_monotonicity(line):
    increase = 0
    decrease = 0
    prev = 0
    for v in line:
        if v == 0:
            continue
        if prev != 0:
            if v > prev:
                increase += v - prev
            else:
                decrease += prev - v
        prev = v
    return min(increase, decrease)


@numba.njit(cache=True)
def _grid_stats(grid):
    empty = 0
    largest = 0
    smooth = 0
    mono = 0

    for r in range(SIZE):
        for c in range(SIZE):
            v = grid[r, c]
            if v == 0:
                empty += 1
                continue
            if v > largest:
                largest = v

            # nearest occupied neighbour to the right, then below
            k = c + 1
            while k < SIZE and grid[r, k] == 0:
                k += 1
            if k < SIZE:
                smooth += abs(v - grid[r, k])
            k = r + 1
            while k < SIZE and grid[k, c] == 0:
                k += 1
            if k < SIZE:
                smooth += abs(v - grid[k, c])

    for i in range(SIZE):
        mono += _line_monotonicity(grid[i, :])
        mono += _line_monotonicity(grid[:, i])

    return empty, largest, smooth, mono


@numba.njit(cache=True)
def _check_if_any_moves_possible(grid):
    empty = 0
    for r in range(SIZE):
        for c in range(SIZE):
            if grid[r, c] == 0:
                empty += 1
    if 0 < empty < SIZE * SIZE:
        return True

    for r in range(SIZE):
        for c in range(SIZE - 1):
            if grid[r, c] != 0 and grid[r, c] == grid[r, c + 1]:
                return True
    for c in range(SIZE):
        for r in range(SIZE - 1):
            if grid[r, c] != 0 and grid[r, c] == grid[r + 1, c]:
                return True
    return False


@numba.njit(cache=True)
def _count_matching_pairs(grid):
    pairs = 0
    for r in range(SIZE):
        for c in range(SIZE):
            v = grid[r, c]
            if v == 0:
                continue
            if c + 1 < SIZE and grid[r, c + 1] == v:
                pairs += 1
            if r + 1 < SIZE and grid[r + 1, c] == v:
                pairs += 1
    return pairs


@numba.njit(cache=True)
def _is_open(grid, r, c, v):
    # off the board counts as a wall
    return 0 <= r < SIZE and 0 <= c < SIZE and grid[r, c] <= v


@numba.njit(cache=True)
def _count_enclosed_twos_fours(grid):
    enclosed = 0
    for r in range(SIZE):
        for c in range(SIZE):
            v = grid[r, c]
            if v != 1 and v != 2:
                continue
            if (_is_open(grid, r - 1, c, v) or _is_open(grid, r + 1, c, v)
                    or _is_open(grid, r, c - 1, v) or _is_open(grid, r, c + 1, v)):
                continue
            enclosed += 1
    return enclosed


class Board:
    """A 4x4 grid of exponents packed row-major into the low 64 bits of an int.

    Cell (row, col) lives in bits [row*16 + col*4, row*16 + col*4 + 4).
    """

    __slots__ = ("raw",)

    def __init__(self, raw: int = 0):
        assert 0 <= raw <= FULL_MASK, "Board must fit in 64 bits."
        self.raw: int = raw

    @classmethod
    def from_exponents(cls, grid: Sequence[Sequence[int]]) -> "Board":
        board = cls()
        for row in range(SIZE):
            for col in range(SIZE):
                board.write(row, col, int(grid[row][col]))
        return board

    @classmethod
    def from_values(cls, grid: Sequence[Sequence[int]]) -> "Board":
        """Build from a grid of tile values (0, 2, 4, 8, ...)."""
        board = cls()
        for row in range(SIZE):
            for col in range(SIZE):
                value = int(grid[row][col])
                assert value == 0 or (value > 1 and value & (value - 1) == 0), f"Not a tile value: {value}"
                board.write(row, col, value.bit_length() - 1 if value else 0)
        return board

    def copy(self) -> "Board":
        return Board(self.raw)

    @staticmethod
    def _shift(row: int, col: int) -> int:
        assert 0 <= row < SIZE and 0 <= col < SIZE, f"Cell out of range: ({row}, {col})"
        return row * ROW_BITS + col * CELL_BITS

    def exponent(self, row: int, col: int) -> int:
        return (self.raw >> self._shift(row, col)) & CELL_MASK

    def read(self, row: int, col: int) -> int:
        exponent = self.exponent(row, col)
        return 0 if exponent == 0 else 1 << exponent

    def write(self, row: int, col: int, exponent: int) -> None:
        assert 0 <= exponent <= MAX_EXPONENT, f"Exponent out of range: {exponent}"
        shift = self._shift(row, col)
        self.raw = (self.raw & ~(CELL_MASK << shift) & FULL_MASK) | (exponent << shift)

    def _nibbles(self):
        raw = self.raw
        for _ in range(SIZE * SIZE):
            yield raw & CELL_MASK
            raw >>= CELL_BITS

    def empty_spaces(self) -> int:
        return sum(1 for e in self._nibbles() if e == 0)

    def filled_spaces(self) -> int:
        return sum(1 for e in self._nibbles() if e != 0)

    def largest_exponent(self) -> int:
        return max(self._nibbles())

    def contains_exponent(self, exponent: int) -> bool:
        return any(e == exponent for e in self._nibbles())

    def fill_exponents(self, out) -> None:
        """Write the exponent grid into `out`, which must already be zeroed."""
        raw = self.raw
        for row in range(SIZE):
            for col in range(SIZE):
                e = raw & CELL_MASK
                if e:
                    out[row][col] = e
                raw >>= CELL_BITS

    def exponents(self) -> BoardType:
        grid = np.zeros((SIZE, SIZE), dtype=np.int64)
        self.fill_exponents(grid)
        return grid

    def values(self) -> BoardType:
        grid = self.exponents()
        return np.where(grid > 0, np.left_shift(1, grid), 0)

    def _store(self, grid: BoardType) -> None:
        raw = 0
        for k, e in enumerate(grid.ravel()):
            raw |= int(e) << (CELL_BITS * k)
        self.raw = raw

    def slide(self, direction: Direction) -> int:
        """
        Slide every tile toward one wall, merging equal neighbours once each.

        Returns the score gained (the sum of merged tile values, possibly 0),
        or INVALID_MOVE if no tile moved, in which case the board is untouched.
        """
        drow, dcol = direction.vector
        assert abs(drow) + abs(dcol) == 1, "Slide vector must be a unit step."
        grid = self.exponents()
        score = _slide_grid(grid, *direction.rows, *direction.cols, drow, dcol)
        if score < 0:
            return INVALID_MOVE
        self._store(grid)
        return int(score)

    def can_slide(self) -> bool:
        """True iff at least one direction would move a tile."""
        return bool(_check_if_any_moves_possible(self.exponents()))

    def stats(self) -> BoardStats:
        empty, largest, smooth, mono = _grid_stats(self.exponents())
        return BoardStats(int(empty), int(largest), int(smooth), int(mono))

    def smoothness(self) -> int:
        return self.stats().smoothness

    def monotonicity(self) -> int:
        return self.stats().monotonicity

    def matching_pairs(self) -> int:
        return int(_count_matching_pairs(self.exponents()))

    def enclosed_twos_fours(self) -> int:
        return int(_count_enclosed_twos_fours(self.exponents()))

    def __eq__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return self.raw == other.raw

    def __hash__(self):
        return hash(self.raw)

    def __repr__(self) -> str:
        return f"Board(0x{self.raw:016x})"
