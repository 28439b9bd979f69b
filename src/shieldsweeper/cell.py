"""
Cell module for the Shieldsweeper board.

Represents individual grid positions with their state
(hidden/revealed/flagged) and content (bomb/number/disabled).
"""
from enum import Enum, auto
from dataclasses import dataclass
from typing import Tuple


# ============================================================================
# Constants
# ============================================================================

class CellState(Enum):
    """Possible visual states of a cell."""

    HIDDEN = auto()
    REVEALED = auto()
    FLAGGED = auto()


# Observation encoding shared with agents and the environment
OBS_HIDDEN = -1
OBS_FLAGGED = -2
OBS_DISABLED = -3
OBS_BOMB = 9


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    Represents a single position in the Shieldsweeper grid.

    Cells carry no reference to the grid that owns them; neighbour
    lookups go through the grid.

    Attributes:
        row: Row index, fixed at creation.
        col: Column index, fixed at creation.
        is_bomb: Whether this cell contains a bomb.
        is_disabled: Whether this cell is carved out of the playfield.
        adjacent_bombs: Count of bombs in neighbouring cells (0-8).
        state: Current visual state (hidden, revealed, or flagged).
    """

    row: int = 0
    col: int = 0
    is_bomb: bool = False
    is_disabled: bool = False
    adjacent_bombs: int = 0
    state: CellState = CellState.HIDDEN

    def reveal(self) -> bool:
        """
        Reveal this cell, clearing any flag on it.

        Returns:
            True if the cell changed, False if it was already revealed
            or is disabled.
        """
        if self.is_disabled or self.state == CellState.REVEALED:
            return False
        self.state = CellState.REVEALED
        return True

    def toggle_flag(self) -> bool:
        """
        Toggle flag on this cell.

        Returns:
            True if flag was toggled, False if cell is revealed or disabled.
        """
        if self.is_disabled or self.state == CellState.REVEALED:
            return False
        if self.state == CellState.HIDDEN:
            self.state = CellState.FLAGGED
        else:
            self.state = CellState.HIDDEN
        return True

    @property
    def position(self) -> Tuple[int, int]:
        """(row, col) of this cell."""
        return self.row, self.col

    @property
    def is_hidden(self) -> bool:
        """Check if cell is hidden."""
        return self.state == CellState.HIDDEN

    @property
    def is_revealed(self) -> bool:
        """Check if cell is revealed."""
        return self.state == CellState.REVEALED

    @property
    def is_flagged(self) -> bool:
        """Check if cell is flagged."""
        return self.state == CellState.FLAGGED

    def to_observation(self) -> int:
        """
        Convert cell to observation value for agents.

        Returns:
            -3: Disabled cell
            -1: Hidden cell
            -2: Flagged cell
            0-8: Revealed cell with adjacent bomb count
            9: Revealed bomb
        """
        if self.is_disabled:
            return OBS_DISABLED
        if self.state == CellState.HIDDEN:
            return OBS_HIDDEN
        if self.state == CellState.FLAGGED:
            return OBS_FLAGGED
        if self.is_bomb:
            return OBS_BOMB
        return self.adjacent_bombs
