#!/usr/bin/env python3
"""Watch the Logic agent play the shield board."""
import time
import os

from shieldsweeper import SHIELD_LAYOUT, ShieldsweeperEnv, load_config
from shieldsweeper_agents import LogicAgent


def clear_screen():
    os.system('cls' if os.name == 'nt' else 'clear')


def demo(delay: float = 0.3, games: int = 3, config=None):
    """Run demo games with visualization."""
    config = config or SHIELD_LAYOUT
    env = ShieldsweeperEnv(config=config, render_mode="ansi")
    agent = LogicAgent(config.height, config.width)

    print(
        f"Board: {config.height}x{config.width}, {config.total_bombs} bombs, "
        f"{len(config.disabled_positions)} disabled cells"
    )
    print("Starting in 2 seconds...")
    time.sleep(2)

    wins = 0

    for game in range(games):
        obs, _ = env.reset()
        agent.reset()

        clear_screen()
        print(f"=== Game {game + 1}/{games} ===")
        print(f"Wins so far: {wins}\n")
        print(env.render())
        time.sleep(delay)

        done = False
        step = 0

        while not done:
            action = agent.select_action(obs, env.get_action_mask())
            row, col = agent.action_to_position(action)

            obs, reward, terminated, truncated, info = env.step(action)
            done = terminated or truncated
            step += 1

            clear_screen()
            print(f"=== Game {game + 1}/{games} | Step {step} ===")
            print(f"Wins so far: {wins}")
            print(f"Last move: ({row}, {col}) opened {info['affected']} cells\n")
            print(env.render())

            if done:
                if info.get("game_state") == "WON":
                    wins += 1
                    print("\n*** WIN! ***")
                else:
                    print("\n*** LOST (hit bomb) ***")

            time.sleep(delay)

        time.sleep(1.0)  # Pause between games

    print(f"\n=== Final: {wins}/{games} wins ({100*wins/games:.0f}%) ===")


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser()
    parser.add_argument("--delay", type=float, default=0.3, help="Delay between moves")
    parser.add_argument("--games", type=int, default=3, help="Number of games")
    parser.add_argument("--layout", default=None, help="JSON layout file")
    args = parser.parse_args()

    layout = load_config(args.layout) if args.layout else None
    demo(delay=args.delay, games=args.games, config=layout)
