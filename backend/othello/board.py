from enum import IntEnum
from typing import Iterator, List, NamedTuple, Tuple

from .errors import InvalidBoardError, OutOfRangeError

# Constants
SIZE = 8
EMPTY = 0


class Player(IntEnum):
    BLACK = 1
    WHITE = -1

    @property
    def opponent(self) -> 'Player':
        return Player(-self.value)

    def __str__(self) -> str:
        return self.name.capitalize()


BLACK = Player.BLACK
WHITE = Player.WHITE

CELL_CHARS = {EMPTY: ".", BLACK: "B", WHITE: "W"}
CHAR_CELLS = {char: cell for cell, char in CELL_CHARS.items()}

COLUMN_LETTERS = "abcdefgh"


class Position(NamedTuple):
    r: int
    c: int

    @classmethod
    def of(cls, r: int, c: int) -> 'Position':
        """Build a position, rejecting coordinates outside the board"""
        if not (0 <= r < SIZE and 0 <= c < SIZE):
            raise OutOfRangeError(f"the given coordinates are out of range : ({r}, {c})")
        return cls(r, c)

    @classmethod
    def from_notation(cls, notation: str) -> 'Position':
        """Parse algebraic notation: "d3" is column d, third row from the top."""
        text = notation.strip().lower()
        if len(text) != 2 or text[0] not in COLUMN_LETTERS or not text[1].isdigit():
            raise OutOfRangeError(f"not a board square: {notation!r}")
        return cls.of(int(text[1]) - 1, COLUMN_LETTERS.index(text[0]))

    @property
    def notation(self) -> str:
        return f"{COLUMN_LETTERS[self.c]}{self.r + 1}"


def all_positions() -> Iterator[Position]:
    """Every square, row by row"""
    for r in range(SIZE):
        for c in range(SIZE):
            yield Position(r, c)


class Board:
    def __init__(self):
        # Initialize 8x8 board
        self.grid = [[EMPTY for _ in range(SIZE)] for _ in range(SIZE)]

        # Set initial pieces (standard Othello starting position)
        # D4 (3,3) = White, E5 (4,4) = White
        # E4 (3,4) = Black, D5 (4,3) = Black
        self.grid[3][3] = WHITE  # D4
        self.grid[4][4] = WHITE  # E5
        self.grid[3][4] = BLACK  # E4
        self.grid[4][3] = BLACK  # D5

    @classmethod
    def initial(cls) -> 'Board':
        return cls()

    @classmethod
    def blank(cls) -> 'Board':
        """A board without any piece, for composing positions"""
        board = cls()
        board.grid = [[EMPTY for _ in range(SIZE)] for _ in range(SIZE)]
        return board

    def copy(self) -> 'Board':
        """Create a deep copy of the board"""
        new_board = Board.__new__(Board)
        new_board.grid = [row[:] for row in self.grid]
        return new_board

    def at(self, pos: Position) -> int:
        return self.grid[pos[0]][pos[1]]

    def place(self, pos: Position, player: Player):
        """Set a cell. Only the move application and flips go through here."""
        self.grid[pos[0]][pos[1]] = player

    def count(self) -> Tuple[int, int]:
        """Return (black_count, white_count)"""
        black_count = sum(1 for row in self.grid for cell in row if cell == BLACK)
        white_count = sum(1 for row in self.grid for cell in row if cell == WHITE)
        return black_count, white_count

    def score(self, player: Player) -> int:
        return sum(1 for row in self.grid for cell in row if cell == player)

    def occupied_count(self) -> int:
        return sum(1 for row in self.grid for cell in row if cell != EMPTY)

    def empty_count(self) -> int:
        return SIZE * SIZE - self.occupied_count()

    def as_tuple(self) -> Tuple[int, ...]:
        """Convert board to tuple for hashing"""
        result = []
        for row in self.grid:
            result.extend(row)
        return tuple(result)

    def to_string(self) -> str:
        """64 characters, row by row: B, W or '.'"""
        return "".join(CELL_CHARS[cell] for row in self.grid for cell in row)

    @classmethod
    def from_string(cls, text: str) -> 'Board':
        cells = "".join(text.split())
        if len(cells) != SIZE * SIZE:
            raise InvalidBoardError(f"expected {SIZE * SIZE} cells, got {len(cells)}")
        board = cls.blank()
        for i, char in enumerate(cells.upper()):
            if char not in CHAR_CELLS:
                raise InvalidBoardError(f"unknown cell {char!r} at index {i}")
            board.grid[i // SIZE][i % SIZE] = CHAR_CELLS[char]
        return board

    @classmethod
    def from_grid(cls, grid: List[List[int]]) -> 'Board':
        if len(grid) != SIZE or any(len(row) != SIZE for row in grid):
            raise InvalidBoardError("grid must be 8 rows of 8 cells")
        board = cls.blank()
        for r, row in enumerate(grid):
            for c, cell in enumerate(row):
                if cell not in CELL_CHARS:
                    raise InvalidBoardError(f"unknown cell value {cell!r} at ({r}, {c})")
                board.grid[r][c] = cell
        return board

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.grid == other.grid

    def __hash__(self) -> int:
        return hash(self.as_tuple())

    def __repr__(self) -> str:
        return f"Board({self.to_string()!r})"

    def __str__(self) -> str:
        separator = "  +---+---+---+---+---+---+---+---+\n"
        lines = ["    " + "   ".join(COLUMN_LETTERS.upper()) + "\n"]
        for r, row in enumerate(self.grid):
            lines.append(separator)
            cells = "".join(f"| {CELL_CHARS[cell] if cell != EMPTY else ' '} " for cell in row)
            lines.append(f"{r + 1} {cells}|\n")
        lines.append(separator)
        return "".join(lines)
