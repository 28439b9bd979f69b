"""
Shieldsweeper game module.

Provides the board engine: layout configuration, cell state, the
cascading reveal, win/loss tracking and a gymnasium wrapper.
"""
from .cell import Cell, CellState
from .board import (
    BoardConfig,
    ConfigurationError,
    DisabledGroup,
    Grid,
    SHIELD_LAYOUT,
    load_config,
)
from .engine import (
    BoardEngine,
    BoardSnapshot,
    CellSnapshot,
    FlagOutcome,
    FlagResult,
    GameState,
    GameStatus,
    RevealOutcome,
    RevealResult,
)
from .environment import ShieldsweeperEnv, render_snapshot

__all__ = [
    "Cell",
    "CellState",
    "BoardConfig",
    "ConfigurationError",
    "DisabledGroup",
    "Grid",
    "SHIELD_LAYOUT",
    "load_config",
    "BoardEngine",
    "BoardSnapshot",
    "CellSnapshot",
    "FlagOutcome",
    "FlagResult",
    "GameState",
    "GameStatus",
    "RevealOutcome",
    "RevealResult",
    "ShieldsweeperEnv",
    "render_snapshot",
]
