"""Shared constants for Goofspiel - enums, parameter defaults and card helpers.

GAME OVERVIEW
=============

Every player starts with the same hand of N bid cards (values 1..N). A deck of
N point cards is revealed one card per round. Each round all players bid one
card from their hand simultaneously:

- The unique highest bid wins the point card and scores its value.
- If two or more players tie for the highest bid, the point card is discarded
  and nobody scores for that round.
- Played bid cards are gone for the rest of the game.

The game ends after N rounds.

CONFIGURATION AXES:
-------------------
1. points_order - how the point deck is revealed
   - random: a chance node draws uniformly among undealt cards
   - ascending / descending: fixed order, no chance nodes at all

2. returns_type - how final points become utilities
   - win_loss: +1/|winners| vs -1/|losers| (zero-sum)
   - point_difference: points minus the table average (zero-sum)
   - total_points: raw points (general-sum)

3. imp_info - whether players see each other's hands
   - False: hands are public (everyone can deduce them anyway from bids)
   - True: only the winner of each round is announced, bids stay hidden

INDEXING:
---------
Cards are indexed 0..N-1 everywhere (actions, chance outcomes, tensors).
Card index c is worth c + 1 points. Strings always show the value, not the
index.
"""

from enum import IntEnum
from typing import Final


class PointsOrder(IntEnum):
    """Order in which point cards are revealed."""

    RANDOM = 0  # Chance node before every round
    ASCENDING = 1  # 1, 2, ..., N
    DESCENDING = 2  # N, N-1, ..., 1


class ReturnsType(IntEnum):
    """How final point totals are turned into per-player utilities."""

    WIN_LOSS = 0
    POINT_DIFFERENCE = 1
    TOTAL_POINTS = 2  # Not zero-sum


class NodeKind(IntEnum):
    """Kind of decision node a state currently sits on.

    A single state class carries this tag instead of one subclass per node
    kind, so cloning during search never has to change the object type.
    """

    CHANCE = 0  # Awaiting a point card draw
    SIMULTANEOUS = 1  # Awaiting one bid from every player
    TERMINAL = 2  # All rounds played


# Parameter names as they appear in the pyspiel parameter dict
POINTS_ORDER_NAMES: Final[dict[str, PointsOrder]] = {
    "random": PointsOrder.RANDOM,
    "ascending": PointsOrder.ASCENDING,
    "descending": PointsOrder.DESCENDING,
}

RETURNS_TYPE_NAMES: Final[dict[str, ReturnsType]] = {
    "win_loss": ReturnsType.WIN_LOSS,
    "point_difference": ReturnsType.POINT_DIFFERENCE,
    "total_points": ReturnsType.TOTAL_POINTS,
}

DEFAULT_NUM_CARDS: Final[int] = 13
DEFAULT_NUM_PLAYERS: Final[int] = 2
DEFAULT_POINTS_ORDER: Final[str] = "random"
DEFAULT_RETURNS_TYPE: Final[str] = "win_loss"
DEFAULT_IMP_INFO: Final[bool] = False

MIN_PLAYERS: Final[int] = 2
MAX_PLAYERS: Final[int] = 10


def card_value(card: int) -> int:
    """Point (or bid) value of a card index."""
    return card + 1


def total_points(num_cards: int) -> int:
    """Sum of all point card values: 1 + 2 + ... + N."""
    return num_cards * (num_cards + 1) // 2


def max_point_slots(num_cards: int) -> int:
    """Number of distinct point totals a single player can hold (0..sum)."""
    return total_points(num_cards) + 1


def parse_points_order(name: str) -> PointsOrder:
    """Convert a points_order parameter string to the enum."""
    try:
        return POINTS_ORDER_NAMES[name]
    except KeyError:
        raise ValueError(f"Unrecognized points_order parameter: {name!r}") from None


def parse_returns_type(name: str) -> ReturnsType:
    """Convert a returns_type parameter string to the enum."""
    try:
        return RETURNS_TYPE_NAMES[name]
    except KeyError:
        raise ValueError(f"Unrecognized returns_type parameter: {name!r}") from None
