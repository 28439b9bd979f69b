"""
Logic-based agent for Shieldsweeper.

Uses constraint propagation over revealed numbers to find cells that
are certainly safe, and guesses by estimated bomb probability otherwise.
Disabled cells carry their own observation code and never take part in
a constraint.
"""
from typing import Optional, Set, Tuple, Dict, List, FrozenSet
from dataclasses import dataclass
from collections import defaultdict

import numpy as np

from shieldsweeper.cell import OBS_FLAGGED, OBS_HIDDEN

from .base_agent import BaseAgent

Position = Tuple[int, int]


# ============================================================================
# Constraint Types
# ============================================================================

@dataclass(frozen=True)
class Constraint:
    """
    A constraint representing: sum of cells in 'cells' == bomb_count.

    For example, if a revealed "2" has 3 hidden neighbours and 0 flagged,
    the constraint is: cells={A, B, C}, bomb_count=2
    """

    cells: FrozenSet[Position]
    bomb_count: int


@dataclass
class CellInfo:
    """Information about a revealed cell for constraint analysis."""

    row: int
    col: int
    adjacent_bombs: int
    hidden_neighbors: Set[Position]
    flagged_neighbors: Set[Position]

    @property
    def remaining_bombs(self) -> int:
        """Bombs still to be found among hidden neighbours."""
        return self.adjacent_bombs - len(self.flagged_neighbors)


# ============================================================================
# Logic Agent
# ============================================================================

class LogicAgent(BaseAgent):
    """
    Agent that propagates constraints from revealed numbers.

    Strategy:
        1. Build constraints from all revealed numbered cells
        2. Propagate them to a fixpoint to find definite safe/bomb cells
        3. Apply subset reduction for advanced deductions
        4. If no certain moves, pick the hidden cell with the lowest
           estimated bomb probability
        5. Open with a corner when one is playable
    """

    max_iterations = 100

    def __init__(
        self,
        board_height: int = 14,
        board_width: int = 14,
        seed: Optional[int] = None,
    ) -> None:
        """
        Initialize the logic agent.

        Args:
            board_height: Number of rows in the board.
            board_width: Number of columns in the board.
            seed: Random seed for the opening move.
        """
        super().__init__(board_height, board_width)
        self.rng = np.random.default_rng(seed)
        self._first_move = True

    def select_action(
        self,
        observation: np.ndarray,
        valid_actions: Optional[np.ndarray] = None,
    ) -> int:
        """
        Select the best action from the current observation.

        Args:
            observation: 2D array of cell states.
            valid_actions: Optional mask of valid actions.

        Returns:
            Best action index based on analysis.
        """
        if valid_actions is None:
            valid_actions = self.get_valid_actions_from_obs(observation)

        valid_indices = np.where(valid_actions)[0]
        if len(valid_indices) == 0:
            return 0

        if self._first_move:
            self._first_move = False
            return self._select_first_move(valid_indices)

        safe_cells, bomb_cells = self.solve(observation)

        valid = set(int(i) for i in valid_indices)
        for row, col in sorted(safe_cells):
            action = self.position_to_action(row, col)
            if action in valid:
                return action

        return self._select_by_probability(observation, valid_indices, bomb_cells)

    def _select_first_move(self, valid_indices: np.ndarray) -> int:
        """Open on a random playable corner, else any valid cell."""
        corners = [
            self.position_to_action(0, 0),
            self.position_to_action(0, self.board_width - 1),
            self.position_to_action(self.board_height - 1, 0),
            self.position_to_action(self.board_height - 1, self.board_width - 1),
        ]
        self.rng.shuffle(corners)
        for corner in corners:
            if corner in valid_indices:
                return int(corner)
        return int(self.rng.choice(valid_indices))

    # ========================================================================
    # Constraint Solving
    # ========================================================================

    def _build_constraints(self, observation: np.ndarray) -> List[Constraint]:
        """
        Build constraints from revealed numbered cells.

        Each revealed number N with hidden neighbours creates a constraint:
        "exactly (N - flagged_count) of these hidden cells are bombs"
        """
        constraints = []

        for row in range(self.board_height):
            for col in range(self.board_width):
                value = observation[row, col]
                if value < 1 or value > 8:
                    continue

                info = self._get_cell_info(observation, row, col)
                if not info.hidden_neighbors:
                    continue
                # Wrong flags make a constraint unsatisfiable
                if not 0 <= info.remaining_bombs <= len(info.hidden_neighbors):
                    continue

                constraints.append(Constraint(
                    cells=frozenset(info.hidden_neighbors),
                    bomb_count=info.remaining_bombs,
                ))

        return constraints

    def solve(
        self, observation: np.ndarray
    ) -> Tuple[Set[Position], Set[Position]]:
        """
        Propagate constraints to find definite safe and bomb cells.

        Returns:
            Tuple of (safe_cells, bomb_cells) sets.
        """
        safe_cells: Set[Position] = set()
        bomb_cells: Set[Position] = set()
        constraints = self._build_constraints(observation)

        changed = True
        iterations = 0
        while changed and iterations < self.max_iterations:
            changed = False
            iterations += 1

            reduced = []
            for constraint in constraints:
                remaining_cells = constraint.cells - safe_cells - bomb_cells
                remaining_bombs = constraint.bomb_count - len(constraint.cells & bomb_cells)

                if not remaining_cells:
                    continue
                if remaining_bombs == 0:
                    safe_cells.update(remaining_cells)
                    changed = True
                    continue
                if remaining_bombs == len(remaining_cells):
                    bomb_cells.update(remaining_cells)
                    changed = True
                    continue

                reduced.append(Constraint(frozenset(remaining_cells), remaining_bombs))

            subset_safe, subset_bombs, constraints = self._subset_reduction(reduced)
            if subset_safe or subset_bombs:
                safe_cells.update(subset_safe)
                bomb_cells.update(subset_bombs)
                changed = True

        return safe_cells, bomb_cells

    def _subset_reduction(
        self, constraints: List[Constraint]
    ) -> Tuple[Set[Position], Set[Position], List[Constraint]]:
        """
        Apply subset reduction to find additional deductions.

        If constraint A's cells are a strict subset of constraint B's,
        the difference (B - A) holds (B.bombs - A.bombs) bombs.

        Example:
            A: {X, Y} has 1 bomb
            B: {X, Y, Z} has 1 bomb
            -> Z must be safe
        """
        safe_cells: Set[Position] = set()
        bomb_cells: Set[Position] = set()
        derived: List[Constraint] = []

        for i, first in enumerate(constraints):
            for second in constraints[i + 1:]:
                if first.cells < second.cells:
                    small, large = first, second
                elif second.cells < first.cells:
                    small, large = second, first
                else:
                    continue

                diff_cells = large.cells - small.cells
                diff_bombs = large.bomb_count - small.bomb_count
                if diff_bombs == 0:
                    safe_cells.update(diff_cells)
                elif diff_bombs == len(diff_cells):
                    bomb_cells.update(diff_cells)
                elif 0 < diff_bombs < len(diff_cells):
                    derived.append(Constraint(frozenset(diff_cells), diff_bombs))

        # dict.fromkeys keeps order while dropping duplicates
        unique = list(dict.fromkeys(constraints + derived))
        return safe_cells, bomb_cells, unique

    def _get_cell_info(
        self, observation: np.ndarray, row: int, col: int
    ) -> CellInfo:
        """Get analysis info for a revealed cell."""
        hidden_neighbors: Set[Position] = set()
        flagged_neighbors: Set[Position] = set()

        for dr in (-1, 0, 1):
            for dc in (-1, 0, 1):
                if dr == 0 and dc == 0:
                    continue
                nr, nc = row + dr, col + dc
                if 0 <= nr < self.board_height and 0 <= nc < self.board_width:
                    val = observation[nr, nc]
                    if val == OBS_HIDDEN:
                        hidden_neighbors.add((nr, nc))
                    elif val == OBS_FLAGGED:
                        flagged_neighbors.add((nr, nc))

        return CellInfo(
            row=row,
            col=col,
            adjacent_bombs=int(observation[row, col]),
            hidden_neighbors=hidden_neighbors,
            flagged_neighbors=flagged_neighbors,
        )

    # ========================================================================
    # Guessing
    # ========================================================================

    def _select_by_probability(
        self,
        observation: np.ndarray,
        valid_indices: np.ndarray,
        known_bombs: Set[Position],
    ) -> int:
        """Select the cell with the lowest estimated bomb probability."""
        probabilities = self._estimate_bomb_probabilities(observation, known_bombs)

        best_action = int(valid_indices[0])
        best_prob = 1.0

        for action in valid_indices:
            position = self.action_to_position(action)
            if position in known_bombs:
                continue
            prob = probabilities.get(position, 0.5)
            if prob < best_prob:
                best_prob = prob
                best_action = int(action)

        return best_action

    def _estimate_bomb_probabilities(
        self,
        observation: np.ndarray,
        known_bombs: Set[Position],
    ) -> Dict[Position, float]:
        """
        Estimate bomb probability for each hidden cell next to a number.

        Returns:
            Dict mapping (row, col) to the most pessimistic estimate
            across the constraints it appears in.
        """
        probabilities: Dict[Position, List[float]] = defaultdict(list)

        for row in range(self.board_height):
            for col in range(self.board_width):
                value = observation[row, col]
                if value < 1 or value > 8:
                    continue

                info = self._get_cell_info(observation, row, col)
                unknown = info.hidden_neighbors - known_bombs
                remaining = info.remaining_bombs - len(info.hidden_neighbors & known_bombs)
                if not unknown or remaining < 0:
                    continue

                prob = remaining / len(unknown)
                for neighbor in unknown:
                    probabilities[neighbor].append(prob)

        return {cell: max(probs) for cell, probs in probabilities.items()}

    def reset(self) -> None:
        """Reset for new game."""
        self._first_move = True
