"""Player-specific observation encoding for Goofspiel.

What a player may see depends on the game and on the requested
IIGObservationType:

- public_info: point totals, who won each round, the point card(s), and in
  the perfect information variant every player's hand.
- private_info == SINGLE_PLAYER (imperfect information variant only): the
  observing player's own hand, plus their own bids when perfect_recall.
- perfect_recall: full sequences (point cards, own bids) instead of only the
  current point card. Two different bid sequences can leave a player with the
  same hand and the same public outcomes, so without the history the
  information state would not be unique.

The string and the tensor are rendered from the same fields in the same
order. The tensor layout depends only on the config and the observation
type, so buffers can be sized before any state exists.
"""

from typing import Optional

import numpy as np
import pyspiel

from .config import GoofspielConfig
from .constants import card_value


# Observation types used by the state accessors
DEFAULT_OBS_TYPE = pyspiel.IIGObservationType(
    public_info=True,
    perfect_recall=False,
    private_info=pyspiel.PrivateInfoType.SINGLE_PLAYER,
)
INFO_STATE_OBS_TYPE = pyspiel.IIGObservationType(
    public_info=True,
    perfect_recall=True,
    private_info=pyspiel.PrivateInfoType.SINGLE_PLAYER,
)
# Factored observations: the public part and the private part on their own
PUBLIC_OBS_TYPE = pyspiel.IIGObservationType(
    public_info=True,
    perfect_recall=False,
    private_info=pyspiel.PrivateInfoType.NONE,
)
PRIVATE_OBS_TYPE = pyspiel.IIGObservationType(
    public_info=False,
    perfect_recall=False,
    private_info=pyspiel.PrivateInfoType.SINGLE_PLAYER,
)


def _reveals_private(config: GoofspielConfig, iig_obs_type) -> bool:
    # In the perfect information variant hands are part of the public info.
    return (
        config.imp_info
        and iig_obs_type.private_info == pyspiel.PrivateInfoType.SINGLE_PLAYER
    )


def tensor_pieces(
    config: GoofspielConfig, iig_obs_type
) -> list[tuple[str, tuple[int, ...]]]:
    """Named tensor pieces, in buffer order, with their shapes."""
    num_players = config.num_players
    num_cards = config.num_cards
    num_rounds = config.num_rounds
    pieces = []
    if iig_obs_type.public_info:
        pieces.append(("point_totals", (num_players, config.max_point_slots)))
        if not config.imp_info:
            pieces.append(("player_hands", (num_players, num_cards)))
        pieces.append(("win_sequence", (num_rounds, num_players)))
        if iig_obs_type.perfect_recall:
            pieces.append(("point_card_sequence", (num_rounds, num_cards)))
        else:
            pieces.append(("point_card", (num_cards,)))
    if _reveals_private(config, iig_obs_type):
        pieces.append(("player_hand", (num_cards,)))
        if iig_obs_type.perfect_recall:
            pieces.append(("player_action_sequence", (num_rounds, num_cards)))
    return pieces


def tensor_size(config: GoofspielConfig, iig_obs_type) -> int:
    """Flat tensor length for this config and observation type."""
    return sum(int(np.prod(shape)) for _, shape in tensor_pieces(config, iig_obs_type))


def _piece_views(
    buffer: np.ndarray, pieces: list[tuple[str, tuple[int, ...]]]
) -> dict[str, np.ndarray]:
    """Map each piece name to a reshaped view into buffer."""
    views = {}
    index = 0
    for name, shape in pieces:
        size = int(np.prod(shape))
        views[name] = buffer[index : index + size].reshape(shape)
        index += size
    return views


def _check_player(config: GoofspielConfig, player: int):
    if not 0 <= player < config.num_players:
        raise ValueError(
            f"Player {player} out of range for {config.num_players} players"
        )


def _rotation(player: int, num_players: int) -> list[tuple[int, int]]:
    """(row, player) pairs starting with the observing player."""
    return [(n, (player + n) % num_players) for n in range(num_players)]


def write_tensor(
    state, player: int, iig_obs_type, out: np.ndarray, offset: int = 0
) -> int:
    """Encode state for player into out[offset:], returning the end offset.

    out is a caller-allocated flat float buffer; it is written in place and
    never resized.
    """
    config = state._config
    _check_player(config, player)
    pieces = tensor_pieces(config, iig_obs_type)
    end = offset + sum(int(np.prod(shape)) for _, shape in pieces)
    if out.ndim != 1 or offset < 0 or end > out.shape[0]:
        raise ValueError(
            f"Buffer of shape {out.shape} cannot hold {end - offset} values "
            f"at offset {offset}"
        )
    region = out[offset:end]
    region.fill(0.0)
    views = _piece_views(region, pieces)

    if iig_obs_type.public_info:
        # Point totals: one-hot per player, observer first.
        totals = views["point_totals"]
        for row, p in _rotation(player, config.num_players):
            totals[row, state._points[p]] = 1.0

        if not config.imp_info:
            hands = views["player_hands"]
            for row, p in _rotation(player, config.num_players):
                hands[row] = state._hands.row(p)

        # Tied rounds stay all zero.
        wins = views["win_sequence"]
        for rnd, winner in enumerate(state._win_sequence):
            if winner is not None:
                wins[rnd, winner] = 1.0

        if iig_obs_type.perfect_recall:
            sequence = views["point_card_sequence"]
            for rnd, card in enumerate(state._point_card_sequence):
                sequence[rnd, card] = 1.0
        elif state._point_card is not None:
            views["point_card"][state._point_card] = 1.0

    if _reveals_private(config, iig_obs_type):
        views["player_hand"][:] = state._hands.row(player)
        if iig_obs_type.perfect_recall:
            bids = views["player_action_sequence"]
            for rnd, actions in enumerate(state._actions_history):
                bids[rnd, actions[player]] = 1.0

    return end


def _values(cards) -> str:
    return " ".join(str(card_value(c)) for c in cards)


def observation_string(state, player: int, iig_obs_type) -> str:
    """Human-readable rendering of exactly what write_tensor encodes."""
    config = state._config
    _check_player(config, player)
    lines = []

    if _reveals_private(config, iig_obs_type):
        lines.append(f"P{player} hand: {_values(state._hands.cards(player))}")
        if iig_obs_type.perfect_recall:
            own_bids = [actions[player] for actions in state._actions_history]
            lines.append(f"P{player} action sequence: {_values(own_bids)}")

    if iig_obs_type.public_info:
        if iig_obs_type.perfect_recall:
            lines.append(
                f"Point card sequence: {_values(state._point_card_sequence)}"
            )
        else:
            lines.append(f"Current point card: {state.current_point_value()}")

        if not config.imp_info:
            for p in range(config.num_players):
                lines.append(f"P{p} hand: {_values(state._hands.cards(p))}")

        winners = " ".join(
            str(-1 if w is None else w) for w in state._win_sequence
        )
        lines.append(f"Win sequence: {winners}")
        lines.append(f"Points: {' '.join(str(pts) for pts in state._points)}")

    return "".join(line + "\n" for line in lines)


class GoofspielObserver:
    """Observer conforming to the OpenSpiel PyObserver interface.

    Holds a preallocated tensor with named views in `dict`; set_from rewrites
    it in place for the requested state and player.
    """

    def __init__(
        self,
        config: GoofspielConfig,
        iig_obs_type=None,
        params: Optional[dict] = None,
    ):
        if params:
            raise ValueError(f"Observation parameters not supported; passed {params}")
        self._config = config
        self.iig_obs_type = iig_obs_type or DEFAULT_OBS_TYPE
        pieces = tensor_pieces(config, self.iig_obs_type)
        self.tensor = np.zeros(tensor_size(config, self.iig_obs_type), np.float32)
        self.dict = _piece_views(self.tensor, pieces)

    def set_from(self, state, player: int):
        write_tensor(state, player, self.iig_obs_type, self.tensor)

    def string_from(self, state, player: int) -> str:
        return observation_string(state, player, self.iig_obs_type)
