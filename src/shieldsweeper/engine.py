"""
Game engine for Shieldsweeper.

Holds the single active game state and exposes the commands a host
(terminal UI, gymnasium environment, agent harness) drives it with:
new game, reveal, toggle flag, clock tick and read-only snapshots.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Tuple

import numpy as np

from .board import SHIELD_LAYOUT, BoardConfig, Grid, Position
from .cell import Cell

logger = logging.getLogger(__name__)


# ============================================================================
# Outcomes
# ============================================================================

class GameStatus(Enum):
    """Possible states of the game."""

    PLAYING = auto()
    WON = auto()
    LOST = auto()


class RevealOutcome(Enum):
    """Result of a reveal command."""

    NONE = auto()
    REVEALED = auto()
    BOMB_HIT = auto()
    WIN = auto()


class FlagOutcome(Enum):
    """Result of a flag toggle."""

    NONE = auto()
    FLAGGED = auto()
    UNFLAGGED = auto()


# ============================================================================
# Snapshots
# ============================================================================

@dataclass(frozen=True)
class CellSnapshot:
    """
    Read-only view of one cell.

    Bomb status and adjacent count are only exposed once the cell is
    revealed; both are None while it is hidden or flagged.
    """

    row: int
    col: int
    is_revealed: bool
    is_flagged: bool
    is_disabled: bool
    is_bomb: Optional[bool] = None
    adjacent_bombs: Optional[int] = None
    is_detonated: bool = False

    @classmethod
    def of(cls, cell: Cell, detonated: Optional[Position] = None) -> "CellSnapshot":
        revealed = cell.is_revealed
        return cls(
            row=cell.row,
            col=cell.col,
            is_revealed=revealed,
            is_flagged=cell.is_flagged,
            is_disabled=cell.is_disabled,
            is_bomb=cell.is_bomb if revealed else None,
            adjacent_bombs=cell.adjacent_bombs if revealed else None,
            is_detonated=detonated == cell.position,
        )


@dataclass(frozen=True)
class BoardSnapshot:
    """Read-only view of the whole game for rendering."""

    cells: Tuple[Tuple[CellSnapshot, ...], ...]
    remaining_flags: int
    has_hit_bomb: bool
    has_won: bool
    elapsed_seconds: int
    status: GameStatus

    @property
    def height(self) -> int:
        return len(self.cells)

    @property
    def width(self) -> int:
        return len(self.cells[0]) if self.cells else 0

    def cell(self, row: int, col: int) -> CellSnapshot:
        return self.cells[row][col]


@dataclass(frozen=True)
class RevealResult:
    outcome: RevealOutcome
    affected_cells: Tuple[CellSnapshot, ...] = ()

    @property
    def changed(self) -> bool:
        return self.outcome != RevealOutcome.NONE


@dataclass(frozen=True)
class FlagResult:
    outcome: FlagOutcome
    cell: Optional[CellSnapshot] = None

    @property
    def changed(self) -> bool:
        return self.outcome != FlagOutcome.NONE


# ============================================================================
# Game State
# ============================================================================

@dataclass
class GameState:
    """
    Everything that changes during one game.

    Replaced wholesale by BoardEngine.new_game rather than reset field
    by field.

    Attributes:
        config: Layout the grid was built from.
        grid: The cells.
        total_bombs: Bomb count, also the flag allowance.
        remaining_flags: Flags still available to place.
        has_hit_bomb: Terminal LOSS.
        has_won: Terminal WIN.
        elapsed_seconds: Seconds counted by the host clock.
        timing_started: Set by the first accepted command.
        detonated: Position of the bomb that ended the game.
    """

    config: BoardConfig
    grid: Grid
    total_bombs: int
    remaining_flags: int
    has_hit_bomb: bool = False
    has_won: bool = False
    elapsed_seconds: int = 0
    timing_started: bool = False
    detonated: Optional[Position] = None

    @classmethod
    def create(cls, config: BoardConfig) -> "GameState":
        """Build a fresh game from a layout. Raises ConfigurationError."""
        grid = Grid.build(config)
        total = grid.count_bombs()
        return cls(
            config=config,
            grid=grid,
            total_bombs=total,
            remaining_flags=total,
        )

    @property
    def status(self) -> GameStatus:
        if self.has_hit_bomb:
            return GameStatus.LOST
        if self.has_won:
            return GameStatus.WON
        return GameStatus.PLAYING

    @property
    def is_terminal(self) -> bool:
        return self.has_hit_bomb or self.has_won

    @property
    def is_timing_active(self) -> bool:
        """The host clock should tick: timing started, game not over."""
        return self.timing_started and not self.is_terminal


# ============================================================================
# Board Engine
# ============================================================================

@dataclass
class BoardEngine:
    """
    Shieldsweeper game engine.

    Applies reveal and flag commands to the active GameState, runs the
    cascading reveal, and derives win/loss. Illegal commands are inert:
    they return a NONE outcome and change nothing.
    """

    initial_config: Optional[BoardConfig] = None
    _state: Optional[GameState] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        """Start the first game."""
        self.new_game(self.initial_config)

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def new_game(self, config: Optional[BoardConfig] = None) -> GameState:
        """
        Replace the current game with a freshly built one.

        Args:
            config: Layout to build; defaults to the previous game's layout,
                or the shield layout for the first game.

        Returns:
            The new GameState.

        Raises:
            ConfigurationError: If the layout is invalid.
        """
        if config is None:
            config = self._state.config if self._state is not None else SHIELD_LAYOUT
        self._state = GameState.create(config)
        logger.debug(
            "New %dx%d game with %d bombs",
            config.height, config.width, self._state.total_bombs,
        )
        return self._state

    # ========================================================================
    # Commands
    # ========================================================================

    def reveal(self, row: int, col: int) -> RevealResult:
        """
        Reveal a cell, cascading through zero-count regions.

        Args:
            row: Row index to reveal.
            col: Column index to reveal.

        Returns:
            RevealResult with the outcome and snapshots of every cell
            revealed by this call.
        """
        cell = self._playable_cell(row, col, "reveal")
        if cell is None or cell.is_revealed or cell.is_flagged:
            if cell is not None:
                logger.debug("Ignored reveal of (%d, %d): %s", row, col, cell.state.name)
            return RevealResult(RevealOutcome.NONE)

        state = self._state
        state.timing_started = True
        revealed = state.grid.reveal_region(row, col)
        # Cascades clear flags on the cells they sweep up
        state.remaining_flags = state.total_bombs - state.grid.count_flagged()

        if cell.is_bomb:
            state.has_hit_bomb = True
            state.detonated = cell.position
            logger.info("Bomb hit at (%d, %d)", row, col)
            outcome = RevealOutcome.BOMB_HIT
        elif state.grid.check_win():
            state.has_won = True
            logger.info("Board cleared in %d seconds", state.elapsed_seconds)
            outcome = RevealOutcome.WIN
        else:
            outcome = RevealOutcome.REVEALED

        return RevealResult(
            outcome,
            tuple(CellSnapshot.of(c, state.detonated) for c in revealed),
        )

    def toggle_flag(self, row: int, col: int) -> FlagResult:
        """
        Place or remove a flag.

        Placing needs a flag in hand; removing is always allowed.

        Args:
            row: Row index.
            col: Column index.

        Returns:
            FlagResult with the outcome and the cell's new snapshot.
        """
        cell = self._playable_cell(row, col, "flag")
        if cell is None or cell.is_revealed:
            return FlagResult(FlagOutcome.NONE)

        state = self._state
        if cell.is_flagged:
            cell.toggle_flag()
            state.remaining_flags += 1
            outcome = FlagOutcome.UNFLAGGED
        elif state.remaining_flags > 0:
            cell.toggle_flag()
            state.remaining_flags -= 1
            outcome = FlagOutcome.FLAGGED
        else:
            logger.debug("Ignored flag at (%d, %d): no flags left", row, col)
            return FlagResult(FlagOutcome.NONE)

        state.timing_started = True
        return FlagResult(outcome, CellSnapshot.of(cell))

    def _playable_cell(self, row: int, col: int, action: str) -> Optional[Cell]:
        """Cell at (row, col) if the game accepts commands on it."""
        state = self._state
        if state.is_terminal:
            logger.debug("Ignored %s at (%d, %d): game is over", action, row, col)
            return None
        if not state.grid.in_bounds(row, col):
            logger.debug("Ignored %s at (%d, %d): out of bounds", action, row, col)
            return None
        cell = state.grid.cell(row, col)
        if cell.is_disabled:
            logger.debug("Ignored %s at (%d, %d): disabled", action, row, col)
            return None
        return cell

    def advance_time(self) -> bool:
        """
        Count one second of play.

        Called by the host clock once per second.

        Returns:
            True if the counter advanced.
        """
        if not self._state.is_timing_active:
            return False
        self._state.elapsed_seconds += 1
        return True

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    def check_win(self) -> bool:
        return self._state.grid.check_win()

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def config(self) -> BoardConfig:
        return self._state.config

    @property
    def status(self) -> GameStatus:
        return self._state.status

    @property
    def is_playing(self) -> bool:
        return self._state.status == GameStatus.PLAYING

    @property
    def is_timing_active(self) -> bool:
        return self._state.is_timing_active

    def get_cell(self, row: int, col: int) -> Optional[Cell]:
        """Get cell at position, or None if invalid."""
        if not self._state.grid.in_bounds(row, col):
            return None
        return self._state.grid.cell(row, col)

    def get_snapshot(self) -> BoardSnapshot:
        """Read-only view of every cell plus the counters."""
        state = self._state
        cells = tuple(
            tuple(CellSnapshot.of(cell, state.detonated) for cell in row)
            for row in state.grid.rows()
        )
        return BoardSnapshot(
            cells=cells,
            remaining_flags=state.remaining_flags,
            has_hit_bomb=state.has_hit_bomb,
            has_won=state.has_won,
            elapsed_seconds=state.elapsed_seconds,
            status=state.status,
        )

    def get_observation(self) -> np.ndarray:
        """
        Get board state as numpy array for agents.

        Returns:
            2D int8 array where:
                -3 = disabled
                -2 = flagged
                -1 = hidden
                0-8 = revealed with adjacent count
                9 = revealed bomb
        """
        grid = self._state.grid
        obs = np.zeros((grid.height, grid.width), dtype=np.int8)
        for cell in grid:
            obs[cell.row, cell.col] = cell.to_observation()
        return obs

    def get_valid_actions(self) -> List[Position]:
        """
        Get list of cells a reveal would act on.

        Returns:
            (row, col) positions that are hidden and not disabled; empty
            once the game is over.
        """
        if self._state.is_terminal:
            return []
        return [
            cell.position
            for cell in self._state.grid
            if cell.is_hidden and not cell.is_disabled
        ]
