#!/usr/bin/env python3
"""
Headless training script for the grid Q-Learning agent.
Trains without pacing or rendering and prints a summary of the run.
"""

import sys
import logging
from pathlib import Path
import argparse

# Add the project root to Python path
sys.path.append(str(Path(__file__).parent))

from gridlearn.domain.grid import Grid
from gridlearn.domain.learner import Learner
from gridlearn.domain.spawn import static_spawn, random_spawn
from gridlearn.domain.trainer import Trainer
from gridlearn.domain.types import ConfigurationError, Position, RLConfig, TrainingStats
from gridlearn.domain.value_table import ValueTable
from gridlearn.utils.rng import SeededRNG


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Headless grid Q-Learning training")
    parser.add_argument("--episodes", type=int, default=100, help="Number of episodes to train")
    parser.add_argument("--exploration-rate", type=float, default=0.2, help="Chance of a random action")
    parser.add_argument("--learning-rate", type=float, default=0.1, help="Step size of value updates")
    parser.add_argument("--discount-factor", type=float, default=0.9, help="Weight of future rewards")
    parser.add_argument("--rule", choices=["q_learning", "sarsa"], default="q_learning",
                        help="Learning rule")
    parser.add_argument("--width", type=int, default=11, help="Grid width")
    parser.add_argument("--height", type=int, default=11, help="Grid height")
    parser.add_argument("--goal", type=int, nargs=2, default=[5, 5], metavar=("X", "Y"),
                        help="Goal cell")
    parser.add_argument("--spawn", type=int, nargs=2, default=[0, 0], metavar=("X", "Y"),
                        help="Fixed spawn cell")
    parser.add_argument("--random-spawn", action="store_true", help="Spawn on a random cell each episode")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible runs")
    parser.add_argument("--verbose", action="store_true", help="Log every decision")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    print("Grid Q-Learning Headless Training")
    print("=" * 40)

    try:
        grid = Grid(width=args.width, height=args.height, goal=Position(*args.goal))
        config = RLConfig(
            episodes=args.episodes,
            decision_interval=0,
            exploration_rate=args.exploration_rate,
            learning_rate=args.learning_rate,
            discount_factor=args.discount_factor,
            learning_rule=args.rule,
            seed=args.seed,
        )
        config.validate()
    except ConfigurationError as e:
        print(f"Invalid configuration: {e}")
        return 1

    rng = SeededRNG(args.seed)
    learner = Learner.from_config(grid, ValueTable(), config, rng)
    trainer = Trainer(learner)

    if args.random_spawn:
        spawn_generator = random_spawn(grid, rng)
        spawn_text = "random"
    else:
        spawn_generator = static_spawn(Position(*args.spawn))
        spawn_text = str(Position(*args.spawn))

    print(f"Grid: {grid.width}x{grid.height}, goal {grid.goal}, spawn {spawn_text}")
    print(f"Rule: {config.learning_rule}, epsilon={config.exploration_rate}, "
          f"alpha={config.learning_rate}, gamma={config.discount_factor}")

    report_every = max(1, config.episodes // 10)

    def on_episode(episode):
        if episode.number % report_every == 0:
            print(f"Episode {episode.number}: {episode.steps} decisions")

    try:
        result = trainer.train(config, spawn_generator, on_episode=on_episode)
    except ConfigurationError as e:
        print(f"Invalid configuration: {e}")
        return 1
    except KeyboardInterrupt:
        print("\nTraining interrupted by user")
        return 1

    stats = TrainingStats.from_history(trainer.history)
    print(f"\nTraining completed in {result.elapsed_ms}ms")
    print(f"   Episodes: {stats.episodes}")
    print(f"   Total decisions: {stats.total_decisions}")
    print(f"   Average decisions: {stats.format_average()}")
    print(f"   Last decisions: {stats.format_last()}")
    print(f"   States learned: {len(trainer.table)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
