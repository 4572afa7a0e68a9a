"""
cli.py - Command-line interface for playing and inspecting the games

This module provides a CLI for playing Connect Four or Gomoku against the AI,
analyzing board positions, benchmarking the engine and playing Trio.
"""

import argparse
import sys
from typing import List, Optional, Union

import numpy as np

from boardai import api
from boardai.ai.orchestrator import AIOrchestrator
from boardai.ai.trio_ai import TrioAI
from boardai.config import DIFFICULTY, STRATEGY_NAMES, VARIANTS, make_config
from boardai.debug import debug, DebugLevel, LEVEL_NAMES
from boardai.errors import BoardAIError
from boardai.game.session import GameSession
from boardai.game.trio import DIFFICULTY_NAMES, TrioGame
from boardai.utils import Action, Player, format_action

# Special commands typed instead of a move
QUIT, UNDO, RESTART = 'q', 'u', 'r'


class SimpleCLI:
    """Simple command-line interface for the games."""

    def __init__(self):
        """Initialize the CLI."""
        self.session: Optional[GameSession] = None
        self.args = None

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(description='boardai CLI')
        parser.add_argument('--debug', action='store_true', help='Enable debug mode')
        parser.add_argument('--debug_level', choices=list(LEVEL_NAMES), default='warning',
                            help='Logging verbosity')

        # Main commands
        subparsers = parser.add_subparsers(dest='command', help='Command to run')

        # Play command
        play_parser = subparsers.add_parser('play', help='Play a game interactively')
        play_parser.add_argument('--variant', choices=list(VARIANTS), default='connect4')
        play_parser.add_argument('--ai', choices=list(STRATEGY_NAMES) + ['none'], default=None,
                                 help='AI strategy (default: the variant default), none for two humans')
        play_parser.add_argument('--difficulty', choices=list(DIFFICULTY), default='medium')
        play_parser.add_argument('--first', choices=['human', 'ai'], default='human',
                                 help='Who moves first')
        play_parser.add_argument('--seed', type=int, default=None)

        # Test command
        test_parser = subparsers.add_parser('test', help='Analyze a board position')
        test_parser.add_argument('--variant', choices=list(VARIANTS), default='connect4')
        test_parser.add_argument('--position', type=str, help='Board position to test')
        test_parser.add_argument('--difficulty', choices=list(DIFFICULTY), default='medium')

        # Benchmark command
        benchmark_parser = subparsers.add_parser('benchmark', help='Benchmark performance')
        benchmark_parser.add_argument('--variant', choices=list(VARIANTS), default='connect4')
        benchmark_parser.add_argument('--iterations', type=int, default=1000,
                                      help='Number of iterations for benchmarking')

        # Trio command
        trio_parser = subparsers.add_parser('trio', help='Play Trio against the AI')
        trio_parser.add_argument('--level', type=int, choices=sorted(DIFFICULTY_NAMES), default=1,
                                 help='Board difficulty: ' + ', '.join(
                                     f"{k}={v}" for k, v in sorted(DIFFICULTY_NAMES.items())))
        trio_parser.add_argument('--ai', choices=['easy', 'medium', 'hard'], default='medium')
        trio_parser.add_argument('--rounds', type=int, default=5)
        trio_parser.add_argument('--seed', type=int, default=None)

        return parser

    def parse_args(self, argv: Optional[List[str]] = None) -> None:
        """Parse command-line arguments."""
        self.args = self.build_parser().parse_args(argv)

        # Set debug level
        if self.args.debug:
            debug.configure(level=DebugLevel.DEBUG)
        else:
            debug.set_from_string(self.args.debug_level)

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Run the CLI based on the parsed arguments."""
        if not self.args:
            self.parse_args(argv)

        if self.args.command == 'play':
            self.play_game()
        elif self.args.command == 'test':
            self.test_position()
        elif self.args.command == 'benchmark':
            self.benchmark()
        elif self.args.command == 'trio':
            self.play_trio()
        else:
            print("Please specify a command. Use --help for options.")
            sys.exit(1)

    # -- play -----------------------------------------------------------------

    def play_game(self) -> None:
        """Play a game interactively."""
        args = self.args
        overrides = {'difficulty': args.difficulty, 'seed': args.seed}
        if args.ai not in (None, 'none'):
            overrides['strategy'] = args.ai
        self.session = api.new_session(args.variant, **overrides)
        session = self.session
        ai_player = None if args.ai == 'none' else (Player.TWO if args.first == 'human' else Player.ONE)

        print(f"Starting a new {args.variant} game!")
        if session.config.gravity:
            print(f"Enter a column number (0-{session.config.cols - 1}) to make a move.")
        else:
            print("Enter a cell as 'row col' to make a move.")
        print("Other commands: 'q' to quit, 'u' to undo, 'r' to restart.")
        print(session.render())

        while not session.is_game_over():
            if session.current_player == ai_player:
                print("AI is thinking...")
                result = api.request_ai_move(session)
                note = " (double threat!)" if result.double_threat else ""
                print(f"AI plays {format_action(result.action)} [{result.stage.name}]{note}")
                print(session.render())
                continue

            move = self.get_human_move()
            if move is None:
                continue
            if move == QUIT:
                print("Quitting game.")
                return
            if move == UNDO:
                self.undo_turn(ai_player)
                continue
            if move == RESTART:
                api.reset(session)
                print("Game restarted.")
                print(session.render())
                continue

            result = api.apply_human_move(session, move)
            if result.accepted:
                print(session.render())
            else:
                print(f"Invalid move: {result.message}")

        # Game over
        print("Game over!")
        winner = session.winner()
        if winner is None:
            print("It's a draw!")
        elif winner == ai_player:
            print("AI wins! Better luck next time.")
        else:
            print(f"{winner} wins! Congratulations!")

    def undo_turn(self, ai_player: Optional[Player]) -> None:
        """Undo back to the human's previous turn (two moves against the AI)."""
        result = api.undo(self.session)
        if not result.accepted:
            print("No moves to undo.")
            return
        if ai_player is not None and self.session.current_player == ai_player:
            api.undo(self.session)
        print("Move undone.")
        print(self.session.render())

    def get_human_move(self) -> Optional[Union[Action, str]]:
        """
        Get a move from human player input.

        Returns:
            Column index or (row, col) cell, a special command, or None if
            the input could not be parsed
        """
        gravity = self.session.config.gravity
        prompt = "Your move (column, q/u/r): " if gravity else "Your move (row col, q/u/r): "
        user_input = input(prompt).strip().lower()

        if user_input in (QUIT, UNDO, RESTART):
            return user_input

        try:
            numbers = [int(part) for part in user_input.replace(',', ' ').split()]
        except ValueError:
            print("Invalid input. Please enter a move or a special command.")
            return None

        if gravity and len(numbers) == 1:
            return numbers[0]
        if not gravity and len(numbers) == 2:
            return numbers[0], numbers[1]
        print("Invalid input. Please enter a move or a special command.")
        return None

    # -- test -----------------------------------------------------------------

    def test_position(self) -> None:
        """Analyze a board position given as comma-separated cell values."""
        if not self.args.position:
            print("Please provide a position string with --position")
            return

        config = make_config(self.args.variant, difficulty=self.args.difficulty)
        session = GameSession(config)
        try:
            values = [int(c) for c in self.args.position.split(',')]
            if len(values) != config.rows * config.cols:
                raise ValueError(f"Position string must have {config.rows * config.cols} values")
            session.load_position(np.array(values).reshape(config.rows, config.cols))
        except ValueError as e:
            print(f"Error parsing position: {e}")
            return

        print("Loaded position:")
        print(session.render())
        print(f"\nResult: {session.result.name}")
        if session.is_game_over():
            line = session.winning_line()
            if line:
                print(f"Winning line: {line}")
            return

        empty_count = config.rows * config.cols - session.board.stone_count
        print(f"Empty spaces: {empty_count}")
        print(f"{session.current_player.name} to move, "
              f"{len(session.legal_moves())} legal moves")

        orchestrator = AIOrchestrator(config)
        for player in (Player.ONE, Player.TWO):
            wins = session.rules.winning_actions(session.board, player)
            if wins:
                print(f"Immediate wins for {player.name}: "
                      + ", ".join(format_action(a) for a in wins))

        decision = orchestrator.choose(session)
        print(f"AI would play {format_action(decision.action)} [{decision.stage.name}]"
              + (" (double threat)" if decision.double_threat else ""))
        if decision.stats is not None:
            stats = decision.stats
            print(f"Search: {stats.strategy}, {stats.nodes} nodes, {stats.rollouts} rollouts, "
                  f"depth {stats.depth_reached}, {stats.elapsed:.3f}s"
                  + (", budget exhausted" if stats.budget_exhausted else ""))

    # -- benchmark ------------------------------------------------------------

    def benchmark(self) -> None:
        """Benchmark the rules engine, the evaluator and the AI."""
        iterations = self.args.iterations
        config = make_config(self.args.variant, seed=0)
        rng = np.random.default_rng(0)
        print(f"Running {self.args.variant} benchmark with {iterations} iterations...")

        # Benchmark random games (move generation, apply, terminal detection)
        debug.start_timer("game_simulation")
        games_played = 0
        total_moves = 0
        session = GameSession(config)
        for _ in range(max(1, iterations // 10)):
            session.reset()
            while not session.is_game_over():
                moves = session.legal_moves()
                session.apply(moves[int(rng.integers(len(moves)))])
                total_moves += 1
            games_played += 1
        simulation_time = debug.end_timer("game_simulation", "cli")
        print(f"Played {games_played} games with {total_moves} total moves: "
              f"{simulation_time:.6f} seconds total, "
              f"{simulation_time / games_played * 1000:.6f} ms per game, "
              f"{simulation_time / total_moves * 1000:.6f} ms per move")

        # Benchmark evaluation on a mid-game position
        from boardai.ai.evaluator import MoveEvaluator

        session.reset()
        for _ in range(min(10, config.rows * config.cols // 2)):
            moves = session.legal_moves()
            session.apply(moves[int(rng.integers(len(moves)))])
            if session.is_game_over():
                session.undo()
                break
        evaluator = MoveEvaluator(session.rules)
        debug.start_timer("evaluation")
        for _ in range(iterations):
            evaluator.score(session.board, Player.ONE)
        evaluation_time = debug.end_timer("evaluation", "cli")
        print(f"Evaluating a position {iterations} times: {evaluation_time:.6f} seconds total, "
              f"{evaluation_time / iterations * 1000:.6f} ms per evaluation")

        # Benchmark one AI decision
        if not session.is_game_over():
            orchestrator = AIOrchestrator(config)
            debug.start_timer("ai_decision")
            decision = orchestrator.choose(session)
            decision_time = debug.end_timer("ai_decision", "cli")
            stats = decision.stats
            detail = "" if stats is None else f", {stats.nodes} nodes, {stats.rollouts} rollouts"
            print(f"AI decision ({decision.stage.name}{detail}): {decision_time:.6f} seconds")

        # Benchmark rendering
        debug.start_timer("rendering")
        for _ in range(iterations):
            session.render()
        rendering_time = debug.end_timer("rendering", "cli")
        print(f"Rendering board {iterations} times: {rendering_time:.6f} seconds total, "
              f"{rendering_time / iterations * 1000:.6f} ms per render")

    # -- trio -----------------------------------------------------------------

    def play_trio(self) -> None:
        """Play Trio rounds against the AI: the human is Player ONE."""
        args = self.args
        game = TrioGame(args.level, seed=args.seed)
        ai = TrioAI(args.ai, seed=args.seed)
        print(f"Trio ({DIFFICULTY_NAMES[game.difficulty]}): find a, b, c with a x b + c "
              f"or a x b - c equal to the target.")
        print("Enter three cells as 'r1 c1 r2 c2 r3 c3', 'h' for a hint, 'p' to pass, 'q' to quit.")

        for round_number in range(1, args.rounds + 1):
            print(f"\nRound {round_number}")
            print(game.render())

            if game.current_player == Player.ONE:
                user_input = input("Your trio: ").strip().lower()
                if user_input == 'q':
                    break
                if user_input == 'h':
                    solutions = game.find_solutions(limit=1)
                    print(f"Hint: {solutions[0].formula}" if solutions else "There is no solution.")
                    user_input = input("Your trio: ").strip().lower()
                if user_input == 'p':
                    game.current_player = Player.TWO
                else:
                    try:
                        numbers = [int(part) for part in user_input.replace(',', ' ').split()]
                        cells = [tuple(numbers[i:i + 2]) for i in range(0, 6, 2)]
                        if len(numbers) != 6:
                            raise ValueError("expected six numbers")
                        correct = game.claim(cells)
                    except (ValueError, BoardAIError) as e:
                        print(f"Invalid input: {e}")
                        game.current_player = Player.TWO
                        correct = False
                    print("Correct!" if correct else "Not a trio for this target.")

            if game.current_player == Player.TWO:
                solution = ai.make_move(game)
                if solution is None:
                    print("AI finds no trio on this board, dealing a new one.")
                    game.current_player = Player.ONE
                    game.new_board()
                else:
                    print(f"AI found {solution.formula} at {list(solution.positions)}")

            print(f"Score: you {game.scores[Player.ONE]} - AI {game.scores[Player.TWO]}")

        leader = game.leader()
        if leader is None:
            print("It's a tie!")
        else:
            print("You win!" if leader == Player.ONE else "AI wins!")


def main():
    """Main entry point for the CLI."""
    cli = SimpleCLI()
    cli.run()


if __name__ == "__main__":
    main()
