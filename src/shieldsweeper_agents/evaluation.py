"""
Evaluation harness for Shieldsweeper agents.

Plays agents through the gymnasium environment and aggregates results.
"""
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from shieldsweeper.board import SHIELD_LAYOUT, BoardConfig
from shieldsweeper.environment import ShieldsweeperEnv

from .base_agent import BaseAgent

logger = logging.getLogger(__name__)


# ============================================================================
# Episode Statistics
# ============================================================================

@dataclass
class EpisodeStats:
    """Statistics for a single game."""

    total_reward: float = 0.0
    steps: int = 0
    won: bool = False
    revealed_cells: int = 0


@dataclass
class EvaluationStats:
    """Accumulated statistics over many games."""

    episodes: List[EpisodeStats] = field(default_factory=list)

    @property
    def win_rate(self) -> float:
        if not self.episodes:
            return 0.0
        return sum(e.won for e in self.episodes) / len(self.episodes)

    def _mean(self, attr: str) -> float:
        if not self.episodes:
            return 0.0
        return sum(getattr(e, attr) for e in self.episodes) / len(self.episodes)

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary for serialization."""
        return {
            "games": len(self.episodes),
            "win_rate": self.win_rate,
            "avg_reward": self._mean("total_reward"),
            "avg_steps": self._mean("steps"),
            "avg_revealed": self._mean("revealed_cells"),
        }


# ============================================================================
# Evaluator
# ============================================================================

class Evaluator:
    """
    Evaluate and compare agents on one board layout.
    """

    def __init__(
        self,
        board_config: Optional[BoardConfig] = None,
        num_episodes: int = 100,
        max_steps: Optional[int] = None,
    ) -> None:
        """
        Initialize the evaluator.

        Args:
            board_config: Layout to play (default: the shield layout).
            num_episodes: Number of games per agent.
            max_steps: Step cap per game; defaults to the number of cells,
                which is enough to reveal every one of them.
        """
        self.board_config = board_config or SHIELD_LAYOUT
        self.num_episodes = num_episodes
        self.max_steps = max_steps or (
            self.board_config.height * self.board_config.width
        )

    def play_episode(self, agent: BaseAgent, env: ShieldsweeperEnv) -> EpisodeStats:
        """Play one game to completion or the step cap."""
        observation, _ = env.reset()
        agent.reset()
        stats = EpisodeStats()

        for _ in range(self.max_steps):
            action = agent.select_action(observation, env.get_action_mask())
            observation, reward, terminated, truncated, info = env.step(action)

            stats.total_reward += float(reward)
            stats.steps += 1
            stats.revealed_cells = info["revealed"]

            if terminated or truncated:
                stats.won = info["game_state"] == "WON"
                break

        return stats

    def evaluate(self, agent: BaseAgent) -> Dict[str, float]:
        """
        Evaluate a single agent.

        Args:
            agent: Agent to evaluate.

        Returns:
            Dictionary with evaluation metrics.
        """
        env = ShieldsweeperEnv(config=self.board_config)
        stats = EvaluationStats()
        for _ in range(self.num_episodes):
            stats.episodes.append(self.play_episode(agent, env))
        return stats.to_dict()

    def compare(
        self, agents: Dict[str, BaseAgent]
    ) -> Dict[str, Dict[str, float]]:
        """
        Compare multiple agents.

        Args:
            agents: Dictionary of agent_name -> agent.

        Returns:
            Dictionary of agent_name -> evaluation metrics.
        """
        results = {}
        for name, agent in agents.items():
            logger.info("Evaluating %s...", name)
            results[name] = self.evaluate(agent)
        return results


def save_results(results: Dict[str, Any], path: Union[str, Path]) -> Path:
    """Write evaluation results as JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(results, f, indent=2)
    logger.info("Saved results to %s", path)
    return path
