"""
Board module for Shieldsweeper.

Implements layout configuration, grid construction with fixed bombs and
disabled cells, adjacency counting, and the cascading reveal.
"""
import json
import logging
import numbers
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple, Union

from .cell import Cell

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


# ============================================================================
# Errors
# ============================================================================

class ConfigurationError(ValueError):
    """Raised when a board layout cannot be built."""


def _require_int(value: Any, name: str) -> int:
    """Return value as an int, rejecting floats, bools and strings."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    return int(value)


# ============================================================================
# Configuration
# ============================================================================

@dataclass(frozen=True)
class DisabledGroup:
    """
    A run of disabled cells within a single row.

    Attributes:
        row: Row index.
        cols: Column indices to disable in that row.
    """

    row: int
    cols: Tuple[int, ...] = ()

    @classmethod
    def coerce(cls, value: Any) -> "DisabledGroup":
        """Accept a DisabledGroup, a (row, cols) pair or a {"row", "cols"} dict."""
        if isinstance(value, DisabledGroup):
            return value
        if isinstance(value, dict):
            row, cols = value["row"], value["cols"]
        else:
            row, cols = value
        return cls(
            _require_int(row, "Disabled row"),
            tuple(_require_int(col, "Disabled column") for col in cols),
        )

    def positions(self) -> List[Position]:
        return [(self.row, col) for col in self.cols]


@dataclass
class BoardConfig:
    """
    Configuration for a Shieldsweeper board.

    Attributes:
        grid_size: Number of rows (and columns, unless width is given).
        bomb_positions: Fixed (row, col) bomb coordinates.
        disabled_groups: Rows with the columns that are out of play.
        width: Optional column count for rectangular boards.
    """

    grid_size: int = 14
    bomb_positions: Tuple[Position, ...] = ()
    disabled_groups: Tuple[DisabledGroup, ...] = ()
    width: Optional[int] = None

    def __post_init__(self) -> None:
        """Normalize and validate configuration after initialization."""
        self.grid_size = _require_int(self.grid_size, "grid_size")
        if self.width is None:
            self.width = self.grid_size
        self.width = _require_int(self.width, "width")
        self.bomb_positions = tuple(
            (_require_int(row, "Bomb row"), _require_int(col, "Bomb column"))
            for row, col in self.bomb_positions
        )
        self.disabled_groups = tuple(
            DisabledGroup.coerce(group) for group in self.disabled_groups
        )
        self._validate()

    def _validate(self) -> None:
        """Reject out-of-bounds, duplicated or conflicting coordinates."""
        if self.grid_size < 1 or self.width < 1:
            raise ConfigurationError("Board dimensions must be positive")

        for row, col in self.disabled_positions:
            if not self.in_bounds(row, col):
                raise ConfigurationError(
                    f"Disabled cell ({row}, {col}) is outside the "
                    f"{self.height}x{self.width} grid"
                )

        disabled = self.disabled_positions
        seen: Set[Position] = set()
        for row, col in self.bomb_positions:
            if not self.in_bounds(row, col):
                raise ConfigurationError(
                    f"Bomb ({row}, {col}) is outside the "
                    f"{self.height}x{self.width} grid"
                )
            if (row, col) in seen:
                raise ConfigurationError(f"Bomb ({row}, {col}) is listed twice")
            if (row, col) in disabled:
                raise ConfigurationError(
                    f"Bomb ({row}, {col}) sits on a disabled cell"
                )
            seen.add((row, col))

    def in_bounds(self, row: int, col: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= row < self.height and 0 <= col < self.width

    @property
    def height(self) -> int:
        return self.grid_size

    @property
    def total_bombs(self) -> int:
        return len(self.bomb_positions)

    @property
    def disabled_positions(self) -> Set[Position]:
        """All disabled coordinates, flattened from the row groups."""
        positions: Set[Position] = set()
        for group in self.disabled_groups:
            positions.update(group.positions())
        return positions

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BoardConfig":
        """
        Build a configuration from its plain-dict (JSON) form.

        Expected keys: ``grid_size``, ``bombs`` (list of [row, col]),
        ``disabled`` (list of {"row": r, "cols": [...]}) and optionally
        ``width``.
        """
        try:
            return cls(
                grid_size=data["grid_size"],
                bomb_positions=tuple(tuple(pos) for pos in data.get("bombs", [])),
                disabled_groups=tuple(data.get("disabled", [])),
                width=data.get("width"),
            )
        except ConfigurationError:
            raise
        except (KeyError, TypeError, ValueError) as exc:
            raise ConfigurationError(f"Malformed layout: {exc!r}") from exc

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: Dict[str, Any] = {
            "grid_size": self.grid_size,
            "bombs": [list(pos) for pos in self.bomb_positions],
            "disabled": [
                {"row": group.row, "cols": list(group.cols)}
                for group in self.disabled_groups
            ],
        }
        if self.width != self.grid_size:
            data["width"] = self.width
        return data


def load_config(path: Union[str, Path]) -> BoardConfig:
    """Read a JSON layout file into a validated BoardConfig."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ConfigurationError(f"{path}: not UTF-8 text ({exc})") from exc
    except OSError as exc:
        raise ConfigurationError(f"{path}: cannot read layout ({exc})") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"{path}: invalid JSON ({exc})") from exc
    logger.debug("Loaded layout from %s", path)
    return BoardConfig.from_dict(data)


# The fixed 14x14 shield board
SHIELD_LAYOUT = BoardConfig(
    grid_size=14,
    bomb_positions=(
        (0, 1), (2, 3), (2, 12), (3, 1), (4, 0), (5, 2), (4, 11), (6, 3),
        (6, 9), (7, 2), (7, 8), (9, 0), (9, 8), (10, 4), (11, 3), (12, 5),
    ),
    disabled_groups=(
        (0, (3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13)),
        (1, (4, 5, 6, 7, 8, 9, 10)),
        (2, (4, 5, 6, 7, 8, 9, 10)),
        (3, (4, 5, 6, 7, 8, 9, 10)),
        (4, (4, 5, 6, 7, 8, 9)),
        (5, (4, 5, 6, 7, 8, 13)),
        (6, (4, 5, 6, 7, 12, 13)),
        (7, (4, 12, 13)),
        (8, (10, 11, 12, 13)),
        (9, (9, 10, 11, 12, 13)),
        (10, (7, 8, 9, 10, 11, 12, 13)),
        (11, (7, 8, 9, 10, 11, 12, 13)),
        (12, (7, 8, 9, 10, 11, 12, 13)),
        (13, (0, 1, 5, 6, 7, 8, 9, 10, 11, 12, 13)),
    ),
)


# ============================================================================
# Grid Class
# ============================================================================

@dataclass
class Grid:
    """
    Rectangular collection of cells addressed by (row, col).

    The grid owns its cells exclusively. Adjacency is the 8-neighbour
    relation clipped at the edges.
    """

    height: int
    width: int
    _cells: List[List[Cell]] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if not self._cells:
            self._cells = [
                [Cell(row, col) for col in range(self.width)]
                for row in range(self.height)
            ]

    # ========================================================================
    # Construction (Low-level)
    # ========================================================================

    @classmethod
    def build(cls, config: BoardConfig) -> "Grid":
        """
        Build a grid from a validated configuration.

        Disabled cells are applied first, then bombs, then every cell's
        adjacent bomb count.
        """
        grid = cls(config.height, config.width)
        for row, col in config.disabled_positions:
            grid._cells[row][col].is_disabled = True
        for row, col in config.bomb_positions:
            grid._cells[row][col].is_bomb = True
        grid._calculate_adjacent_bombs()
        return grid

    def _calculate_adjacent_bombs(self) -> None:
        """Calculate adjacent bomb counts for all cells."""
        for cell in self:
            cell.adjacent_bombs = self._count_adjacent_bombs(cell.row, cell.col)

    def _count_adjacent_bombs(self, row: int, col: int) -> int:
        """Count bombs adjacent to a specific cell."""
        count = 0
        for neighbor in self.neighbors(row, col):
            if neighbor.is_bomb:
                count += 1
        return count

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def in_bounds(self, row: int, col: int) -> bool:
        """Check if position is within grid bounds."""
        return 0 <= row < self.height and 0 <= col < self.width

    def neighbor_positions(self, row: int, col: int) -> List[Position]:
        """
        Get valid neighbouring positions.

        Args:
            row: Row index of center cell.
            col: Column index of center cell.

        Returns:
            List of (row, col) tuples for in-bounds neighbours.
        """
        positions = []
        for delta_row in (-1, 0, 1):
            for delta_col in (-1, 0, 1):
                if delta_row == 0 and delta_col == 0:
                    continue
                new_row = row + delta_row
                new_col = col + delta_col
                if self.in_bounds(new_row, new_col):
                    positions.append((new_row, new_col))
        return positions

    def neighbors(self, row: int, col: int) -> List[Cell]:
        return [self._cells[r][c] for r, c in self.neighbor_positions(row, col)]

    # ========================================================================
    # Access
    # ========================================================================

    def cell(self, row: int, col: int) -> Cell:
        """Get cell at position. Raises IndexError when out of bounds."""
        if not self.in_bounds(row, col):
            raise IndexError(f"({row}, {col}) is outside the grid")
        return self._cells[row][col]

    def rows(self) -> List[List[Cell]]:
        return self._cells

    def __iter__(self) -> Iterator[Cell]:
        for row in self._cells:
            yield from row

    def count_bombs(self) -> int:
        return sum(1 for cell in self if cell.is_bomb)

    def count_flagged(self) -> int:
        return sum(1 for cell in self if cell.is_flagged)

    def count_revealed(self) -> int:
        return sum(1 for cell in self if cell.is_revealed)

    # ========================================================================
    # Reveal and Win (Mid-level)
    # ========================================================================

    def reveal_region(self, row: int, col: int) -> List[Cell]:
        """
        Reveal a cell and cascade through zero-count neighbours.

        Uses an explicit stack so large empty regions do not recurse.
        A bomb is revealed alone and never cascades.

        Args:
            row: Row index to start from.
            col: Column index to start from.

        Returns:
            Cells revealed by this call, in reveal order. Flagged cells
            swept up by the cascade lose their flag.
        """
        revealed: List[Cell] = []
        stack: List[Position] = [(row, col)]
        while stack:
            current_row, current_col = stack.pop()
            cell = self._cells[current_row][current_col]
            if not cell.reveal():
                continue
            revealed.append(cell)
            if cell.is_bomb or cell.adjacent_bombs != 0:
                continue
            for neighbor in self.neighbors(current_row, current_col):
                if not neighbor.is_revealed and not neighbor.is_disabled:
                    stack.append(neighbor.position)
        return revealed

    def check_win(self) -> bool:
        """Every cell is a bomb, revealed, or disabled."""
        return all(
            cell.is_bomb or cell.is_revealed or cell.is_disabled for cell in self
        )
