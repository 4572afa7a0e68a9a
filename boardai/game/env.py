"""
env.py - Gymnasium environment over a game session

BoardGameEnv exposes any configured variant through the Gymnasium interface
so agents can be trained or evaluated against the built-in AI:
- actions are Discrete: the column for gravity games, row * cols + col for
  free-placement games
- observations are the raw grid (0 empty, 1 player one, 2 player two)
- with an AI opponent, every agent move is answered by the AI before the
  step returns, and rewards are from the agent's point of view
"""

from typing import Dict, Optional, Tuple, Union

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from boardai.ai.orchestrator import AIOrchestrator
from boardai.config import GameConfig, make_config
from boardai.debug import debug
from boardai.errors import IllegalMove
from boardai.game.session import GameSession
from boardai.utils import Action, Player

CELL_PIXELS = 50
COLORS = {
    Player.EMPTY.value: (0, 0, 0),
    Player.ONE.value: (255, 0, 0),
    Player.TWO.value: (255, 255, 0),
}


class BoardGameEnv(gym.Env):
    """
    Connection game environment following the Gymnasium interface.

    The agent plays ``agent_player``. Without an AI opponent the agent makes
    the moves of both sides and each reward is for the side that just moved.
    """

    metadata = {'render_modes': ['ascii', 'human', 'rgb_array'], 'render_fps': 4}

    def __init__(self, variant: str = 'connect4', config: Optional[GameConfig] = None,
                 ai_opponent: bool = False, agent_player: Union[Player, int] = Player.ONE,
                 render_mode: Optional[str] = None):
        """
        Initialize the environment.

        Args:
            variant: Variant preset used when no config is given
            config: Full game configuration
            ai_opponent: Let the built-in AI answer every agent move
            agent_player: Side the agent plays when there is an AI opponent
            render_mode: 'ascii', 'human' or 'rgb_array'
        """
        debug.debug(f"Initializing BoardGameEnv ({variant})", "env")
        self.config = config if config is not None else make_config(variant)
        self.session = GameSession(self.config)
        self.agent_player = Player(agent_player)
        self.opponent = AIOrchestrator(self.config) if ai_opponent else None
        self.render_mode = render_mode

        rows, cols = self.config.rows, self.config.cols
        self.action_space = spaces.Discrete(cols if self.config.gravity else rows * cols)
        self.observation_space = spaces.Box(low=0, high=2, shape=(rows, cols), dtype=np.int8)

        # Reward settings
        self.reward_win = 1.0
        self.reward_lose = -1.0
        self.reward_draw = 0.1
        self.reward_invalid_move = -0.5
        self.reward_step = -0.01  # Small negative reward to encourage faster solutions

    def decode_action(self, action: int) -> Action:
        """Discrete action to a column or a (row, col) cell."""
        action = int(action)
        if self.config.gravity:
            return action
        return divmod(action, self.config.cols)

    def encode_action(self, action: Action) -> int:
        if self.config.gravity:
            return int(action)
        row, col = action
        return row * self.config.cols + col

    def action_mask(self) -> np.ndarray:
        """1 for every legal discrete action, 0 elsewhere."""
        mask = np.zeros(self.action_space.n, dtype=np.int8)
        for action in self.session.legal_moves():
            mask[self.encode_action(action)] = 1
        return mask

    def reset(self, seed: Optional[int] = None, options: Optional[Dict] = None) -> Tuple[np.ndarray, Dict]:
        """
        Reset the environment to initial state.

        Args:
            seed: Random seed for reproducibility
            options: Additional options for reset

        Returns:
            Initial observation and info dictionary
        """
        debug.debug("Resetting environment", "env")
        super().reset(seed=seed)
        self.session.reset()

        # the AI opens when the agent plays second
        if self.opponent is not None and self.session.current_player != self.agent_player:
            self._opponent_move()

        if self.render_mode == "human":
            self.render()

        return self._get_observation(), self._get_info()

    def step(self, action: int) -> Tuple[np.ndarray, float, bool, bool, Dict]:
        """
        Take a step in the environment by making a move.

        Args:
            action: Discrete action index

        Returns:
            Tuple of (observation, reward, terminated, truncated, info)
        """
        debug.debug(f"Environment step with action {action}", "env")
        mover = self.session.current_player

        try:
            self.session.apply(self.decode_action(action))
        except IllegalMove as exc:
            debug.warning(f"Invalid action {action}: {exc}", "env")
            info = self._get_info()
            info['invalid_move'] = True
            return self._get_observation(), self.reward_invalid_move, False, True, info

        if self.opponent is not None and not self.session.is_game_over():
            self._opponent_move()

        reward = self.reward_step
        terminated = self.session.is_game_over()
        if terminated:
            reward = self._final_reward(mover)
            debug.info(f"Game over: {self.session.result.name}", "env")

        if self.render_mode == "human":
            self.render()

        return self._get_observation(), reward, terminated, False, self._get_info()

    def _opponent_move(self):
        decision = self.opponent.choose(self.session)
        self.session.apply(decision.action)

    def _final_reward(self, player: Player) -> float:
        winner = self.session.winner()
        if winner is None:
            return self.reward_draw
        return self.reward_win if winner == player else self.reward_lose

    def render(self) -> Optional[Union[str, np.ndarray]]:
        """
        Render the current state of the environment.

        Returns:
            Rendered frame depending on render_mode
        """
        if self.render_mode is None:
            return None

        if self.render_mode == "ascii":
            return self.session.render()

        if self.render_mode == "human":
            print(self.session.render())
            return None

        # rgb_array: a disc per cell on a dark blue background
        rows, cols = self.config.rows, self.config.cols
        frame = np.zeros((rows * CELL_PIXELS, cols * CELL_PIXELS, 3), dtype=np.uint8)
        frame[:, :] = (0, 0, 128)

        offsets = np.arange(CELL_PIXELS) - CELL_PIXELS // 2
        disc = offsets[:, None] ** 2 + offsets[None, :] ** 2 <= (CELL_PIXELS * 2 // 5) ** 2
        grid = self.session.board.grid
        for row in range(rows):
            for col in range(cols):
                tile = frame[row * CELL_PIXELS:(row + 1) * CELL_PIXELS,
                             col * CELL_PIXELS:(col + 1) * CELL_PIXELS]
                tile[disc] = COLORS[int(grid[row, col])]
        return frame

    def _get_observation(self) -> np.ndarray:
        return self.session.board.get_state()

    def _get_info(self) -> Dict:
        """Additional information about the current state."""
        legal = self.session.legal_moves()
        last = self.session.last_move
        return {
            'valid_moves': legal,
            'num_valid_moves': len(legal),
            'action_mask': self.action_mask(),
            'current_player': self.session.current_player.value,
            'game_result': self.session.result.name,
            'moves_made': self.session.move_count,
            'winning_line': self.session.winning_line(),
            'last_move': None if last is None else last.action,
        }

    def close(self):
        """Clean up resources."""
        pass
