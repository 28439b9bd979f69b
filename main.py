#!/usr/bin/env python3
"""
Shieldsweeper - Main entry point.

Usage:
    python main.py play [--layout FILE]
    python main.py evaluate [--agent {random,logic}] [--games N]
    python main.py compare [--games N] [--output FILE]
"""
import argparse
import logging
import sys
import time
from typing import Callable, Optional, Tuple

from shieldsweeper import (
    SHIELD_LAYOUT,
    BoardConfig,
    BoardEngine,
    ConfigurationError,
    RevealOutcome,
    load_config,
    render_snapshot,
)
from shieldsweeper_agents import Evaluator, LogicAgent, RandomAgent, save_results

logger = logging.getLogger("shieldsweeper.cli")

HELP_TEXT = "Commands: r ROW COL (reveal), f ROW COL (flag), n (new game), q (quit)"


# ============================================================================
# Terminal Host
# ============================================================================

class HostClock:
    """
    Drives BoardEngine.advance_time() from the wall clock.

    Whole seconds elapsed since the last sync are forwarded one tick at
    a time while the engine reports timing as active.
    """

    def __init__(
        self,
        engine: BoardEngine,
        now: Callable[[], float] = time.monotonic,
    ) -> None:
        self.engine = engine
        self._now = now
        self._anchor: Optional[float] = None

    def sync(self) -> int:
        """Forward elapsed whole seconds; returns ticks applied."""
        if not self.engine.is_timing_active:
            self._anchor = None
            return 0
        now = self._now()
        if self._anchor is None:
            self._anchor = now
            return 0
        ticks = int(now - self._anchor)
        for _ in range(ticks):
            self.engine.advance_time()
        self._anchor += ticks
        return ticks


def parse_command(line: str) -> Tuple[str, Optional[int], Optional[int]]:
    """
    Parse one line of terminal input.

    Returns:
        (action, row, col); row and col are None for n/q/h.

    Raises:
        ValueError: If the line is not a known command.
    """
    parts = line.strip().lower().split()
    if not parts:
        raise ValueError("empty command")
    action = parts[0]
    if action in ("n", "q", "h"):
        return action, None, None
    if action in ("r", "f") and len(parts) == 3:
        return action, int(parts[1]), int(parts[2])
    raise ValueError(f"unknown command: {line.strip()!r}")


def print_board(engine: BoardEngine) -> None:
    """Print the board with the status line above it."""
    snapshot = engine.get_snapshot()
    if snapshot.has_hit_bomb:
        face = "x_x"
    elif snapshot.has_won:
        face = "B-)"
    else:
        face = ":-)"
    print(
        f"\nFlags {snapshot.remaining_flags:03d}   {face}   "
        f"Time {snapshot.elapsed_seconds:03d}"
    )
    print(render_snapshot(snapshot, coordinates=True))


def play(args: argparse.Namespace) -> None:
    """Play interactively in the terminal."""
    config = _load_layout(args)
    engine = BoardEngine(config)
    clock = HostClock(engine)
    print(HELP_TEXT)

    while True:
        clock.sync()
        print_board(engine)
        try:
            line = input("> ")
        except EOFError:
            break
        clock.sync()

        try:
            action, row, col = parse_command(line)
        except ValueError as exc:
            print(f"{exc}. {HELP_TEXT}")
            continue

        if action == "q":
            break
        if action == "h":
            print(HELP_TEXT)
        elif action == "n":
            engine.new_game(config)
            clock.sync()
        elif action == "r":
            result = engine.reveal(row, col)
            if not result.changed:
                logger.debug("Reveal at (%s, %s) had no effect", row, col)
            elif result.outcome == RevealOutcome.BOMB_HIT:
                print("\n*** BOOM! ***  (n for a new game)")
            elif result.outcome == RevealOutcome.WIN:
                print(f"\n*** CLEARED in {engine.state.elapsed_seconds}s! ***")
        elif action == "f":
            if not engine.toggle_flag(row, col).changed:
                logger.debug("Flag at (%s, %s) had no effect", row, col)
        clock.sync()


# ============================================================================
# Agent Evaluation
# ============================================================================

def evaluate(args: argparse.Namespace) -> None:
    """Evaluate a specific agent."""
    config = _load_layout(args)

    if args.agent == "random":
        agent = RandomAgent(config.height, config.width, seed=args.seed)
        name = "Random"
    else:
        agent = LogicAgent(config.height, config.width, seed=args.seed)
        name = "Logic"

    evaluator = Evaluator(config, num_episodes=args.games)

    print(f"\nEvaluating {name} over {args.games} games...")
    results = evaluator.evaluate(agent)

    print(f"Results for {name}:")
    print(f"  Win rate: {results['win_rate']:.1%}")
    print(f"  Avg reward: {results['avg_reward']:.2f}")
    print(f"  Avg steps: {results['avg_steps']:.1f}")
    print(f"  Avg revealed: {results['avg_revealed']:.1f} cells")


def compare(args: argparse.Namespace) -> None:
    """Compare all agents."""
    config = _load_layout(args)
    agents = {
        "Random": RandomAgent(config.height, config.width, seed=args.seed),
        "Logic": LogicAgent(config.height, config.width, seed=args.seed),
    }

    evaluator = Evaluator(config, num_episodes=args.games)
    results = evaluator.compare(agents)

    print("\n" + "=" * 50)
    print("Agent Comparison Results")
    print("=" * 50)
    print(f"{'Agent':<20} {'Win Rate':<12} {'Avg Reward':<12} {'Avg Steps':<10}")
    print("-" * 50)

    for name, metrics in results.items():
        print(
            f"{name:<20} {metrics['win_rate']:>10.1%} "
            f"{metrics['avg_reward']:>10.2f} "
            f"{metrics['avg_steps']:>10.1f}"
        )

    if args.output:
        save_results(results, args.output)


def _load_layout(args: argparse.Namespace) -> BoardConfig:
    if args.layout:
        return load_config(args.layout)
    return SHIELD_LAYOUT


def main() -> None:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(
        description="Shieldsweeper - Play the shield board or evaluate agents"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--layout", default=None, help="JSON layout file (default: shield board)"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("play", help="Play in the terminal")

    eval_parser = subparsers.add_parser("evaluate", help="Evaluate an agent")
    eval_parser.add_argument(
        "--agent",
        choices=["random", "logic"],
        default="logic",
        help="Agent to evaluate",
    )
    eval_parser.add_argument(
        "--games", type=int, default=100, help="Number of games to play"
    )
    eval_parser.add_argument("--seed", type=int, default=None, help="Random seed")

    compare_parser = subparsers.add_parser("compare", help="Compare all agents")
    compare_parser.add_argument(
        "--games", type=int, default=100, help="Number of games per agent"
    )
    compare_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    compare_parser.add_argument(
        "--output", default=None, help="Write results to this JSON file"
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    commands = {"play": play, "evaluate": evaluate, "compare": compare}
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        return

    try:
        command(args)
    except ConfigurationError as exc:
        logger.error("Cannot load layout: %s", exc)
        sys.exit(2)
    except OSError as exc:
        logger.error("Cannot write results: %s", exc)
        sys.exit(2)


if __name__ == "__main__":
    main()
