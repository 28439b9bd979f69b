"""
Shieldsweeper agents module.

Provides automated players for the board engine:
- RandomAgent: Baseline random selection
- LogicAgent: Constraint propagation with probability fallback

and an Evaluator that plays them through the gymnasium environment.
"""
from .base_agent import BaseAgent
from .random_agent import RandomAgent
from .logic_agent import LogicAgent
from .evaluation import Evaluator, EvaluationStats, EpisodeStats, save_results

__all__ = [
    "BaseAgent",
    "RandomAgent",
    "LogicAgent",
    "Evaluator",
    "EvaluationStats",
    "EpisodeStats",
    "save_results",
]
