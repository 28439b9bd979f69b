"""
Pytest configuration and shared fixtures.
"""
import pytest
import sys
from pathlib import Path

# Add src (packages) and the repo root (main.py) to path for imports
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT / "src"))
sys.path.insert(0, str(ROOT))

from shieldsweeper import BoardConfig, BoardEngine, Cell


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def corner_bomb_config() -> BoardConfig:
    """3x3 board, no disabled cells, single bomb at (0, 0)."""
    return BoardConfig(grid_size=3, bomb_positions=((0, 0),))


@pytest.fixture
def two_bomb_config() -> BoardConfig:
    """3x3 board with bombs in opposite corners."""
    return BoardConfig(grid_size=3, bomb_positions=((0, 0), (2, 2)))


@pytest.fixture
def walled_config() -> BoardConfig:
    """
    3x5 board split by a disabled middle column, bomb at (0, 4).

        . . # . *
        . . # . .
        . . # . .
    """
    return BoardConfig(
        grid_size=3,
        width=5,
        bomb_positions=((0, 4),),
        disabled_groups=((0, (2,)), (1, (2,)), (2, (2,))),
    )


# ============================================================================
# Engine Fixtures
# ============================================================================

@pytest.fixture
def engine(corner_bomb_config: BoardConfig) -> BoardEngine:
    """Engine playing the corner-bomb board."""
    return BoardEngine(corner_bomb_config)


@pytest.fixture
def two_bomb_engine(two_bomb_config: BoardConfig) -> BoardEngine:
    return BoardEngine(two_bomb_config)


@pytest.fixture
def walled_engine(walled_config: BoardConfig) -> BoardEngine:
    return BoardEngine(walled_config)


@pytest.fixture
def shield_engine() -> BoardEngine:
    """Engine playing the default shield layout."""
    return BoardEngine()


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell()


@pytest.fixture
def bomb_cell() -> Cell:
    """Create a cell containing a bomb."""
    return Cell(is_bomb=True)


@pytest.fixture
def disabled_cell() -> Cell:
    """Create a cell that is out of play."""
    return Cell(is_disabled=True)
