#!/usr/bin/env python3
"""
run.py - Main entry point for the boardai games
"""

import argparse
import os
import sys

# Add the project root to Python path to ensure imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from boardai.config import DIFFICULTY, STRATEGY_NAMES, VARIANTS  # noqa: E402
from boardai.debug import LEVEL_NAMES  # noqa: E402
from boardai.interfaces.cli import SimpleCLI  # noqa: E402


# --- Command Handlers ---

def common_flags(args) -> list:
    """Debug flags shared by every command, in CLI form."""
    argv = ['--debug_level', args.debug_level]
    if args.debug:
        argv.append('--debug')
    return argv


def handle_game_command(args):
    """Handle the 'game' component commands."""
    argv = common_flags(args) + [args.command, '--variant', args.variant]

    if args.command == 'play':
        argv.extend(['--difficulty', args.difficulty, '--first', args.first])
        if args.ai:
            argv.extend(['--ai', args.ai])
        if args.seed is not None:
            argv.extend(['--seed', str(args.seed)])
    elif args.command == 'test':
        argv.extend(['--difficulty', args.difficulty])
        if args.position:
            argv.extend(['--position', args.position])
    elif args.command == 'benchmark':
        argv.extend(['--iterations', str(args.iterations)])

    SimpleCLI().run(argv)


def handle_trio_command(args):
    """Handle the 'trio' component."""
    argv = common_flags(args) + ['trio', '--level', str(args.level), '--ai', args.ai,
                                 '--rounds', str(args.rounds)]
    if args.seed is not None:
        argv.extend(['--seed', str(args.seed)])
    SimpleCLI().run(argv)


# --- Main Entry Point ---

def main():
    """Main entry point for the boardai games."""
    parser = argparse.ArgumentParser(
        description='Connection games and number puzzles with an AI opponent',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
    Examples:

    GAMES:
    ------
    # Play Connect Four against the minimax AI
    python run.py game play

    # Play Gomoku against a hard Monte Carlo AI, AI moves first
    python run.py game play --variant gomoku --difficulty hard --first ai

    # Play Connect Four with two human players
    python run.py game play --ai none

    # Analyze a specific board position (row-major, 0 empty, 1 X, 2 O)
    python run.py game test --position 0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,0,1,1,1,0,2,2

    # Benchmark performance with 5000 iterations
    python run.py game benchmark --iterations 5000

    TRIO:
    -----
    # Play five rounds of Trio on easy boards
    python run.py trio --level 1

    # Play against the strongest Trio AI with detailed logging
    python run.py trio --ai hard --debug_level debug
    """
    )
    parser.add_argument('--debug',
        action='store_true',
        help='Enable debug mode (equivalent to --debug_level debug)')
    parser.add_argument('--debug_level',
        choices=list(LEVEL_NAMES),
        default='warning',
        help='Set debug level: none (silent), error, warning, info, debug, trace (most verbose)')

    subparsers = parser.add_subparsers(dest='component', help='Component to run')

    game_parser = subparsers.add_parser('game',
        help='Play Connect Four or Gomoku',
        description='Play a connection game or inspect the engine')
    game_parser.add_argument('command',
        choices=['play', 'test', 'benchmark'],
        help='Game command: play (interactive game), test (analyze a position), '
             'benchmark (performance testing)')
    game_parser.add_argument('--variant',
        choices=list(VARIANTS),
        default='connect4',
        help='Game variant')
    game_parser.add_argument('--ai',
        choices=list(STRATEGY_NAMES) + ['none'],
        default=None,
        help='AI strategy (default: the variant default), none (two human players)')
    game_parser.add_argument('--difficulty',
        choices=list(DIFFICULTY),
        default='medium',
        help='AI difficulty (search depth / rollout count)')
    game_parser.add_argument('--first',
        choices=['human', 'ai'],
        default='human',
        help='Who moves first in play mode')
    game_parser.add_argument('--seed',
        type=int,
        default=None,
        help='Random seed for reproducible AI play')
    game_parser.add_argument('--position',
        type=str,
        help='Board position to test (comma-separated values for test command)')
    game_parser.add_argument('--iterations',
        type=int,
        default=1000,
        help='Number of iterations for benchmarking')

    trio_parser = subparsers.add_parser('trio',
        help='Play the Trio number puzzle',
        description='Race the AI to find a x b + c or a x b - c on a 7x7 grid')
    trio_parser.add_argument('--level',
        type=int,
        choices=[1, 2, 3, 4],
        default=1,
        help='Board difficulty 1 (kinderfreundlich) to 4 (analytisch)')
    trio_parser.add_argument('--ai',
        choices=['easy', 'medium', 'hard'],
        default='medium',
        help='Trio AI strength')
    trio_parser.add_argument('--rounds',
        type=int,
        default=5,
        help='Number of rounds to play')
    trio_parser.add_argument('--seed',
        type=int,
        default=None,
        help='Random seed for boards and AI')

    args = parser.parse_args()
    if args.component == 'game':
        handle_game_command(args)
    elif args.component == 'trio':
        handle_trio_command(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
