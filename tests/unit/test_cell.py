"""
Unit tests for Cell class.

Tests cell state management, reveal/flag behavior, and observation conversion.
"""
import pytest
from shieldsweeper import Cell, CellState


# ============================================================================
# Cell Initialization Tests
# ============================================================================

class TestCellInitialization:
    """Test cell creation and default values."""

    def test_default_cell_is_not_bomb(self) -> None:
        """New cell should not be a bomb by default."""
        assert Cell().is_bomb is False

    def test_default_cell_is_hidden(self) -> None:
        """New cell should be hidden by default."""
        cell = Cell()
        assert cell.state == CellState.HIDDEN
        assert cell.is_hidden is True

    def test_default_cell_is_playable(self) -> None:
        assert Cell().is_disabled is False

    def test_position_reflects_coordinates(self) -> None:
        assert Cell(row=4, col=7).position == (4, 7)


# ============================================================================
# Cell Reveal Tests
# ============================================================================

class TestCellReveal:
    """Test cell reveal behavior."""

    def test_reveal_hidden_cell_returns_true(self, hidden_cell: Cell) -> None:
        assert hidden_cell.reveal() is True
        assert hidden_cell.is_revealed is True

    def test_reveal_already_revealed_returns_false(
        self, hidden_cell: Cell
    ) -> None:
        """Revealing an already revealed cell should fail."""
        hidden_cell.reveal()
        assert hidden_cell.reveal() is False
        assert hidden_cell.is_revealed is True

    def test_reveal_clears_flag(self, hidden_cell: Cell) -> None:
        """Flags and reveal are mutually exclusive."""
        hidden_cell.toggle_flag()
        assert hidden_cell.reveal() is True
        assert hidden_cell.is_flagged is False
        assert hidden_cell.is_revealed is True

    def test_disabled_cell_never_reveals(self, disabled_cell: Cell) -> None:
        assert disabled_cell.reveal() is False
        assert disabled_cell.is_hidden is True


# ============================================================================
# Cell Flag Tests
# ============================================================================

class TestCellFlag:
    """Test cell flagging behavior."""

    def test_flag_changes_state_to_flagged(self, hidden_cell: Cell) -> None:
        assert hidden_cell.toggle_flag() is True
        assert hidden_cell.state == CellState.FLAGGED
        assert hidden_cell.is_flagged is True

    def test_unflag_returns_to_hidden(self, hidden_cell: Cell) -> None:
        hidden_cell.toggle_flag()
        hidden_cell.toggle_flag()
        assert hidden_cell.is_hidden is True

    def test_flag_revealed_cell_returns_false(self, hidden_cell: Cell) -> None:
        """Cannot flag a revealed cell."""
        hidden_cell.reveal()
        assert hidden_cell.toggle_flag() is False
        assert hidden_cell.is_revealed is True

    def test_flag_disabled_cell_returns_false(self, disabled_cell: Cell) -> None:
        assert disabled_cell.toggle_flag() is False
        assert disabled_cell.is_flagged is False


# ============================================================================
# Cell Observation Tests
# ============================================================================

class TestCellObservation:
    """Test cell observation values for agents."""

    def test_hidden_cell_observation(self, hidden_cell: Cell) -> None:
        assert hidden_cell.to_observation() == -1

    def test_flagged_cell_observation(self, hidden_cell: Cell) -> None:
        hidden_cell.toggle_flag()
        assert hidden_cell.to_observation() == -2

    def test_disabled_cell_observation(self, disabled_cell: Cell) -> None:
        assert disabled_cell.to_observation() == -3

    @pytest.mark.parametrize("count", range(0, 9))
    def test_revealed_cell_observation_matches_adjacent_count(
        self, count: int
    ) -> None:
        cell = Cell(adjacent_bombs=count)
        cell.reveal()
        assert cell.to_observation() == count

    def test_revealed_bomb_observation_is_nine(self, bomb_cell: Cell) -> None:
        bomb_cell.reveal()
        assert bomb_cell.to_observation() == 9
