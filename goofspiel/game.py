"""OpenSpiel game implementation for Goofspiel.

Each round one point card is revealed, then every player bids one card from
their hand at the same time. The unique highest bid takes the point card;
ties discard it. The simultaneous bids are modeled as a real simultaneous
node (pyspiel.PlayerId.SIMULTANEOUS), not as sequential hidden commitments.

Node flow:
    random order:        CHANCE -> SIMULTANEOUS -> CHANCE -> ... -> TERMINAL
    ascending/descending: SIMULTANEOUS -> SIMULTANEOUS -> ... -> TERMINAL

The last round has no choices left (one card per hand, one point card in the
deck), so the engine plays it itself as soon as the second to last round is
resolved. Those moves update the game records but not the pyspiel history.
"""

import logging
from typing import Optional, Sequence

import numpy as np
import pyspiel

from .config import GoofspielConfig, DEFAULT_PARAMS
from .constants import NodeKind, MAX_PLAYERS, MIN_PLAYERS, card_value
from .hands import PlayerHands
from .observation import (
    DEFAULT_OBS_TYPE,
    INFO_STATE_OBS_TYPE,
    PRIVATE_OBS_TYPE,
    PUBLIC_OBS_TYPE,
    GoofspielObserver,
    observation_string,
    tensor_pieces,
    tensor_size,
    write_tensor,
)
from .rules import first_point_card, next_point_card, point_card_outcomes, resolve_bids
from .scoring import compute_returns, find_winners, is_zero_sum, utility_bounds

logger = logging.getLogger(__name__)


def _game_type(
    utility=pyspiel.GameType.Utility.ZERO_SUM,
    information=pyspiel.GameType.Information.PERFECT_INFORMATION,
) -> pyspiel.GameType:
    """Goofspiel GameType; utility and information vary with the parameters."""
    return pyspiel.GameType(
        short_name="python_goofspiel",
        long_name="Python Goofspiel",
        dynamics=pyspiel.GameType.Dynamics.SIMULTANEOUS,
        chance_mode=pyspiel.GameType.ChanceMode.EXPLICIT_STOCHASTIC,
        information=information,
        utility=utility,
        reward_model=pyspiel.GameType.RewardModel.TERMINAL,
        max_num_players=MAX_PLAYERS,
        min_num_players=MIN_PLAYERS,
        provides_information_state_string=True,
        provides_information_state_tensor=True,
        provides_observation_string=True,
        provides_observation_tensor=True,
        provides_factored_observation_string=True,
        parameter_specification=DEFAULT_PARAMS,
    )


# Game type registration
_GAME_TYPE = _game_type()


class GoofspielGame(pyspiel.Game):
    """Goofspiel game for OpenSpiel."""

    def __init__(self, params: Optional[dict] = None):
        self.config = GoofspielConfig.from_params(params)
        config = self.config

        # Override the registered type for general-sum / imperfect info setups
        game_type = _game_type(
            utility=(
                pyspiel.GameType.Utility.ZERO_SUM
                if is_zero_sum(config.returns_type)
                else pyspiel.GameType.Utility.GENERAL_SUM
            ),
            information=(
                pyspiel.GameType.Information.IMPERFECT_INFORMATION
                if config.imp_info
                else pyspiel.GameType.Information.PERFECT_INFORMATION
            ),
        )
        min_utility, max_utility = utility_bounds(
            config.returns_type, config.num_cards, config.num_players
        )
        game_info = pyspiel.GameInfo(
            num_distinct_actions=config.num_cards,
            max_chance_outcomes=config.num_cards if config.is_random_order else 0,
            num_players=config.num_players,
            min_utility=min_utility,
            max_utility=max_utility,
            utility_sum=0.0 if is_zero_sum(config.returns_type) else None,
            max_game_length=config.num_rounds,
        )
        super().__init__(game_type, game_info, config.to_params())
        logger.debug(f"Created goofspiel game: {config}")

    def new_initial_state(self) -> "GoofspielState":
        return GoofspielState(self)

    def make_py_observer(self, iig_obs_type=None, params=None):
        return GoofspielObserver(self.config, iig_obs_type, params)

    def observation_tensor_shape(self) -> list[int]:
        return [tensor_size(self.config, DEFAULT_OBS_TYPE)]

    def observation_tensor_size(self) -> int:
        return tensor_size(self.config, DEFAULT_OBS_TYPE)

    def information_state_tensor_shape(self) -> list[int]:
        return [tensor_size(self.config, INFO_STATE_OBS_TYPE)]

    def information_state_tensor_size(self) -> int:
        return tensor_size(self.config, INFO_STATE_OBS_TYPE)

    def observation_tensor_layout(self, iig_obs_type=None) -> list[tuple[str, tuple]]:
        """Named pieces of the flat tensor for iig_obs_type (default observation)."""
        return tensor_pieces(self.config, iig_obs_type or DEFAULT_OBS_TYPE)


class GoofspielState(pyspiel.State):
    """Game state for Goofspiel."""

    def __init__(self, game: GoofspielGame):
        super().__init__(game)
        self._config = game.config
        config = self._config
        self._num_players = config.num_players

        self._hands = PlayerHands(config.num_players, config.num_cards)
        self._points = [0] * config.num_players

        # Point card currently face up, None while a chance draw is pending
        self._point_card: Optional[int] = None
        self._point_card_sequence: list[int] = []
        # Winner of each completed round, None for a tie
        self._win_sequence: list[Optional[int]] = []
        # Joint bids of each completed round
        self._actions_history: list[list[int]] = []
        self._turns = 0
        # Filled in once the last round is resolved
        self._winners: set[int] = set()

        first = first_point_card(config.points_order, config.num_cards)
        if first is None:
            self._node_kind = NodeKind.CHANCE
        else:
            self._deal_point_card(first)
            self._node_kind = NodeKind.SIMULTANEOUS

    # ─────────────────────────────────────────────────────────────────────────
    # OpenSpiel State Interface
    # ─────────────────────────────────────────────────────────────────────────

    def current_player(self) -> int:
        """Chance, simultaneous or terminal sentinel; never a single player."""
        if self._node_kind == NodeKind.TERMINAL:
            return pyspiel.PlayerId.TERMINAL
        if self._node_kind == NodeKind.CHANCE:
            return pyspiel.PlayerId.CHANCE
        return pyspiel.PlayerId.SIMULTANEOUS

    def is_terminal(self) -> bool:
        return self._node_kind == NodeKind.TERMINAL

    def returns(self) -> list[float]:
        """Utilities under the configured returns type, zeros until the end."""
        if not self.is_terminal():
            return [0.0] * self._num_players
        return compute_returns(self._config.returns_type, self._points)

    def rewards(self) -> list[float]:
        # Terminal reward model: the only non-zero reward is the final one.
        return self.returns()

    def _legal_actions(self, player: int) -> list[int]:
        """Cards player can bid, or the flat joint actions for all players."""
        if self._node_kind != NodeKind.SIMULTANEOUS:
            return []
        if player == pyspiel.PlayerId.SIMULTANEOUS:
            return list(range(self.num_joint_actions()))
        self._check_player(player)
        return self._hands.cards(player)

    def num_joint_actions(self) -> int:
        """Product of the hand sizes; 0 unless at a simultaneous node."""
        if self._node_kind != NodeKind.SIMULTANEOUS:
            return 0
        return int(
            np.prod([self._hands.count(p) for p in range(self._num_players)])
        )

    def chance_outcomes(self) -> list[tuple[int, float]]:
        """Uniform over point cards not dealt yet."""
        if self._node_kind != NodeKind.CHANCE:
            raise ValueError(
                f"chance_outcomes() called at a {self._node_kind.name} node"
            )
        return point_card_outcomes(self._config.num_cards, self._point_card_sequence)

    def _apply_action(self, action: int):
        """Apply a chance outcome, or a flattened joint action at a simultaneous node."""
        if self._node_kind == NodeKind.SIMULTANEOUS:
            self._apply_actions(self.flat_to_joint_action(action))
        elif self._node_kind == NodeKind.CHANCE:
            self._apply_chance(action)
        else:
            raise ValueError(f"Cannot apply action {action} at a terminal state")

    def _apply_actions(self, actions: Sequence[int]):
        """Resolve one round from the joint bids (one card per player)."""
        if self._node_kind != NodeKind.SIMULTANEOUS:
            raise ValueError(
                f"Joint actions applied at a {self._node_kind.name} node"
            )
        actions = [int(a) for a in actions]
        self._check_joint_action(actions)
        self._resolve_round(actions)

        if self._turns == self._config.num_rounds - 1:
            self._play_forced_last_round()
        elif self._turns == self._config.num_rounds:
            self._finish()

    def _action_to_string(self, player: int, action: int) -> str:
        if player == pyspiel.PlayerId.SIMULTANEOUS:
            joint = self.flat_to_joint_action(action)
            return "[" + ", ".join(
                self._action_to_string(p, a) for p, a in enumerate(joint)
            ) + "]"
        if not 0 <= action < self._config.num_cards:
            raise ValueError(f"Action {action} out of range")
        if player == pyspiel.PlayerId.CHANCE:
            return f"Deal {card_value(action)}"
        return f"[P{player}]Bid: {card_value(action)}"

    def flat_to_joint_action(self, flat_action: int) -> list[int]:
        """Decode a flattened joint action, player 0 being least significant."""
        if self._node_kind != NodeKind.SIMULTANEOUS:
            raise ValueError(
                f"Flat joint action decoded at a {self._node_kind.name} node"
            )
        remaining = int(flat_action)
        if remaining < 0:
            raise ValueError(f"Invalid flat joint action {flat_action}")
        actions = []
        for player in range(self._num_players):
            legal = self._hands.cards(player)
            actions.append(legal[remaining % len(legal)])
            remaining //= len(legal)
        if remaining:
            raise ValueError(f"Flat joint action {flat_action} out of range")
        return actions

    def joint_to_flat_action(self, actions: Sequence[int]) -> int:
        """Inverse of flat_to_joint_action."""
        self._check_joint_action(actions)
        flat = 0
        radix = 1
        for player, action in enumerate(actions):
            legal = self._hands.cards(player)
            flat += legal.index(action) * radix
            radix *= len(legal)
        return flat

    # ─────────────────────────────────────────────────────────────────────────
    # Transitions
    # ─────────────────────────────────────────────────────────────────────────

    def _apply_chance(self, card: int):
        card = int(card)
        if not 0 <= card < self._config.num_cards:
            raise ValueError(f"Chance outcome {card} out of range")
        if card in self._point_card_sequence:
            raise ValueError(f"Point card {card} was already dealt")
        self._deal_point_card(card)
        self._node_kind = NodeKind.SIMULTANEOUS

    def _deal_point_card(self, card: int):
        self._point_card = card
        self._point_card_sequence.append(card)

    def _check_player(self, player: int):
        if not 0 <= player < self._num_players:
            raise ValueError(
                f"Player {player} out of range for {self._num_players} players"
            )

    def _check_joint_action(self, actions: Sequence[int]):
        if len(actions) != self._num_players:
            raise ValueError(
                f"Expected {self._num_players} actions, got {len(actions)}"
            )
        for player, action in enumerate(actions):
            if not self._hands.holds(player, action):
                raise ValueError(
                    f"Player {player} cannot bid card {action}: "
                    f"legal cards are {self._hands.cards(player)}"
                )

    def _resolve_round(self, actions: list[int]):
        """Score the round, discard the bids and deal the next point card."""
        config = self._config
        winner = resolve_bids(actions)
        if winner is not None:
            self._points[winner] += card_value(self._point_card)
        self._win_sequence.append(winner)
        self._actions_history.append(actions)
        for player, action in enumerate(actions):
            self._hands.play(player, action)

        logger.debug(
            f"Round {self._turns}: point card {card_value(self._point_card)}, "
            f"bids {[card_value(a) for a in actions]}, winner {winner}, "
            f"points {self._points}"
        )
        self._turns += 1

        if config.is_random_order:
            self._point_card = None
            self._node_kind = (
                NodeKind.CHANCE if self._turns < config.num_rounds else NodeKind.TERMINAL
            )
        else:
            next_card = next_point_card(
                config.points_order, config.num_cards, self._point_card
            )
            if next_card is not None:
                self._deal_point_card(next_card)
            self._node_kind = (
                NodeKind.SIMULTANEOUS
                if self._turns < config.num_rounds
                else NodeKind.TERMINAL
            )

    def _play_forced_last_round(self):
        """Play the only remaining chance outcome and bids."""
        if self._node_kind == NodeKind.CHANCE:
            outcomes = self.chance_outcomes()
            assert len(outcomes) == 1, outcomes
            self._apply_chance(outcomes[0][0])

        actions = []
        for player in range(self._num_players):
            legal = self._hands.cards(player)
            assert len(legal) == 1, legal
            actions.append(legal[0])
        logger.debug(f"Forced last round: bids {[card_value(a) for a in actions]}")
        self._apply_actions(actions)

    def _finish(self):
        self._node_kind = NodeKind.TERMINAL
        self._winners = find_winners(self._points)
        logger.debug(
            f"Game over: points {self._points}, winners {sorted(self._winners)}"
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Read-only snapshot
    # ─────────────────────────────────────────────────────────────────────────

    def node_kind(self) -> NodeKind:
        return self._node_kind

    def rounds_played(self) -> int:
        return self._turns

    def points(self) -> list[int]:
        return list(self._points)

    def hand(self, player: int) -> list[int]:
        """Cards player still holds, ascending."""
        self._check_player(player)
        return self._hands.cards(player)

    def point_card(self) -> Optional[int]:
        return self._point_card

    def current_point_value(self) -> int:
        """Value of the face-up point card, 0 when none is revealed."""
        return 0 if self._point_card is None else card_value(self._point_card)

    def point_card_sequence(self) -> list[int]:
        return list(self._point_card_sequence)

    def win_sequence(self) -> list[Optional[int]]:
        return list(self._win_sequence)

    def actions_history(self) -> list[list[int]]:
        return [list(actions) for actions in self._actions_history]

    def winners(self) -> set[int]:
        """Players with the top final score; empty until the game is over."""
        return set(self._winners)

    # ─────────────────────────────────────────────────────────────────────────
    # Information State / Observation
    # ─────────────────────────────────────────────────────────────────────────

    def information_state_string(self, player: int) -> str:
        """Return information state string for a player."""
        return observation_string(self, player, INFO_STATE_OBS_TYPE)

    def information_state_tensor(self, player: int) -> list[float]:
        """Return information state tensor for a player."""
        return self._tensor(player, INFO_STATE_OBS_TYPE)

    def observation_string(self, player: int) -> str:
        """Return observation string for a player."""
        return observation_string(self, player, DEFAULT_OBS_TYPE)

    def observation_tensor(self, player: int) -> list[float]:
        """Return observation tensor for a player."""
        return self._tensor(player, DEFAULT_OBS_TYPE)

    def public_observation_string(self) -> str:
        """Public part of the factored observation (same for every player)."""
        return observation_string(self, 0, PUBLIC_OBS_TYPE)

    def private_observation_string(self, player: int) -> str:
        """Private part of the factored observation."""
        return observation_string(self, player, PRIVATE_OBS_TYPE)

    def _tensor(self, player: int, iig_obs_type) -> list[float]:
        out = np.zeros(tensor_size(self._config, iig_obs_type), dtype=np.float32)
        write_tensor(self, player, iig_obs_type, out)
        return out.tolist()

    def __str__(self) -> str:
        config = self._config
        lines = []
        for p in range(self._num_players):
            hand = " ".join(str(card_value(c)) for c in self._hands.cards(p))
            lines.append(f"P{p} hand: {hand}")

        # With hidden bids the full state also depends on every bid sequence
        if config.imp_info:
            for p in range(self._num_players):
                bids = " ".join(
                    str(card_value(actions[p])) for actions in self._actions_history
                )
                lines.append(f"P{p} actions: {bids}")

        sequence = " ".join(str(card_value(c)) for c in self._point_card_sequence)
        lines.append(f"Point card sequence: {sequence}")
        lines.append(f"Points: {' '.join(str(pts) for pts in self._points)}")
        return "".join(line + "\n" for line in lines)


# Register the game with OpenSpiel
pyspiel.register_game(_GAME_TYPE, GoofspielGame)
