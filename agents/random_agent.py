"""Random agent for smoke testing the game implementation."""

import logging
import random
from typing import Optional

import pyspiel

logger = logging.getLogger(__name__)


class RandomAgent:
    """Uniformly random bids over the cards still in hand."""

    def __init__(self, player_id: int, seed: Optional[int] = None):
        self.player_id = player_id
        self._rng = random.Random(seed)

    def step(self, state: pyspiel.State) -> int:
        """Select a random card from this agent's hand.

        Only simultaneous nodes take bids; pyspiel answers legal_actions(p)
        with the chance outcomes at a chance node, so those are rejected here.
        """
        if not state.is_simultaneous_node():
            raise ValueError(
                f"Player {self.player_id} cannot bid at a non-simultaneous node"
            )
        return self._rng.choice(state.legal_actions(self.player_id))


def sample_chance_outcome(state: pyspiel.State, rng: random.Random) -> int:
    """Draw a chance outcome according to its probability."""
    outcomes = state.chance_outcomes()
    return rng.choices([a for a, _ in outcomes], weights=[p for _, p in outcomes])[0]


def play_random_game(
    game: pyspiel.Game, seed: Optional[int] = None
) -> pyspiel.State:
    """Play a full game with random agents, returning the terminal state."""
    rng = random.Random(seed)
    agents = [
        RandomAgent(player, seed=rng.randrange(2**31))
        for player in range(game.num_players())
    ]
    state = game.new_initial_state()

    while not state.is_terminal():
        if state.is_chance_node():
            state.apply_action(sample_chance_outcome(state, rng))
        else:
            state.apply_actions([agent.step(state) for agent in agents])

    logger.debug(f"Random game finished: returns {state.returns()}")
    return state
