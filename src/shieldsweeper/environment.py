"""
Gymnasium environment wrapper for Shieldsweeper.

Provides a standard RL interface so agents can play the engine, plus
the plain-text renderer shared with the terminal CLI.
"""
from typing import Any, Dict, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import SHIELD_LAYOUT, BoardConfig
from .cell import OBS_BOMB, OBS_DISABLED
from .engine import BoardEngine, BoardSnapshot, CellSnapshot, RevealOutcome


# ============================================================================
# Text Rendering
# ============================================================================

def render_cell(cell: CellSnapshot) -> str:
    """Single-character glyph for one cell."""
    if cell.is_disabled:
        return "#"
    if cell.is_flagged:
        return "F"
    if not cell.is_revealed:
        return "."
    if cell.is_bomb:
        return "X" if cell.is_detonated else "*"
    if cell.adjacent_bombs == 0:
        return " "
    return str(cell.adjacent_bombs)


def render_snapshot(snapshot: BoardSnapshot, coordinates: bool = False) -> str:
    """
    Render a board snapshot as text.

    Args:
        snapshot: View returned by BoardEngine.get_snapshot().
        coordinates: Prefix rows and columns with their indices.

    Returns:
        One line per row, cells separated by spaces.
    """
    lines = []
    if coordinates:
        header = "    " + " ".join(f"{col % 10}" for col in range(snapshot.width))
        lines.append(header)
    for row_index, row in enumerate(snapshot.cells):
        row_str = " ".join(render_cell(cell) for cell in row)
        if coordinates:
            row_str = f"{row_index:>2}  {row_str}"
        lines.append(row_str)
    return "\n".join(lines)


# ============================================================================
# Shieldsweeper Environment
# ============================================================================

class ShieldsweeperEnv(gym.Env):
    """
    Gymnasium environment for Shieldsweeper.

    Observation:
        2D array where:
        - -3 = disabled cell
        - -2 = flagged cell
        - -1 = hidden cell
        - 0-8 = revealed cell with adjacent bomb count
        - 9 = revealed bomb

    Actions:
        Discrete action space of size width * height.
        Action i reveals the cell at (i // width, i % width).

    Rewards:
        - +1 for revealing a safe cell
        - +10 for winning the game
        - -10 for hitting a bomb
        - -0.1 for a rejected action (disabled/revealed/flagged)
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        """
        Initialize the Shieldsweeper environment.

        Args:
            config: Board layout (default: the shield layout).
            render_mode: How to render the environment.
        """
        super().__init__()

        self.config = config or SHIELD_LAYOUT
        self.engine = BoardEngine(self.config)
        self.render_mode = render_mode

        self.observation_space = spaces.Box(
            low=OBS_DISABLED,
            high=OBS_BOMB,
            shape=(self.config.height, self.config.width),
            dtype=np.int8,
        )
        self.action_space = spaces.Discrete(
            self.config.height * self.config.width
        )

        self._steps = 0
        self._total_safe_cells = (
            self.config.height * self.config.width
            - len(self.config.disabled_positions)
            - self.config.total_bombs
        )

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Start a new game on the same layout.

        Args:
            seed: Random seed (the layout itself is fixed).
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        self.engine.new_game(self.config)
        self._steps = 0
        return self.engine.get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: Cell index to reveal (row * width + col).

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        row, col = self._action_to_position(action)
        self._steps += 1

        result = self.engine.reveal(row, col)
        reward = self._reward_for(result.outcome)

        observation = self.engine.get_observation()
        terminated = not self.engine.is_playing
        truncated = False
        info = self._get_info()
        info["affected"] = len(result.affected_cells)

        return observation, reward, terminated, truncated, info

    def _action_to_position(self, action: int) -> Tuple[int, int]:
        """Convert flat action index to (row, col) position."""
        action = int(action)
        return action // self.config.width, action % self.config.width

    @staticmethod
    def _reward_for(outcome: RevealOutcome) -> float:
        if outcome == RevealOutcome.WIN:
            return 10.0
        if outcome == RevealOutcome.BOMB_HIT:
            return -10.0
        if outcome == RevealOutcome.REVEALED:
            return 1.0
        return -0.1

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        state = self.engine.state
        return {
            "steps": self._steps,
            "revealed": state.grid.count_revealed(),
            "total_safe": self._total_safe_cells,
            "game_state": state.status.name,
            "remaining_flags": state.remaining_flags,
            "valid_actions": len(self.engine.get_valid_actions()),
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        text = render_snapshot(self.engine.get_snapshot())
        if self.render_mode == "ansi":
            return text
        if self.render_mode == "human":
            print(text)
        return None

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of valid actions.

        Returns:
            Boolean array where True = hidden, playable cell.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        for row, col in self.engine.get_valid_actions():
            mask[row * self.config.width + col] = True
        return mask
