"""Goofspiel OpenSpiel game implementation."""

from .constants import (
    PointsOrder,
    ReturnsType,
    NodeKind,
    MAX_PLAYERS,
    MIN_PLAYERS,
    card_value,
    max_point_slots,
    parse_points_order,
    parse_returns_type,
)
from .config import GoofspielConfig, DEFAULT_PARAMS
from .hands import PlayerHands
from .rules import first_point_card, next_point_card, point_card_outcomes, resolve_bids
from .scoring import compute_returns, find_winners, is_zero_sum, utility_bounds
from .observation import (
    DEFAULT_OBS_TYPE,
    INFO_STATE_OBS_TYPE,
    PUBLIC_OBS_TYPE,
    PRIVATE_OBS_TYPE,
    GoofspielObserver,
    observation_string,
    tensor_pieces,
    tensor_size,
    write_tensor,
)
from .game import GoofspielGame, GoofspielState

__all__ = [
    # Constants
    "PointsOrder",
    "ReturnsType",
    "NodeKind",
    "MAX_PLAYERS",
    "MIN_PLAYERS",
    "DEFAULT_PARAMS",
    # Helpers
    "card_value",
    "max_point_slots",
    "parse_points_order",
    "parse_returns_type",
    # Config
    "GoofspielConfig",
    # Rules and scoring
    "PlayerHands",
    "first_point_card",
    "next_point_card",
    "point_card_outcomes",
    "resolve_bids",
    "compute_returns",
    "find_winners",
    "is_zero_sum",
    "utility_bounds",
    # Observation
    "DEFAULT_OBS_TYPE",
    "INFO_STATE_OBS_TYPE",
    "PUBLIC_OBS_TYPE",
    "PRIVATE_OBS_TYPE",
    "GoofspielObserver",
    "observation_string",
    "tensor_pieces",
    "tensor_size",
    "write_tensor",
    # Game
    "GoofspielGame",
    "GoofspielState",
]
