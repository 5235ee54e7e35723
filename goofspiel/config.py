"""Immutable game configuration shared by every state of one game."""

from dataclasses import dataclass
from typing import Optional

from .constants import (
    PointsOrder,
    ReturnsType,
    DEFAULT_IMP_INFO,
    DEFAULT_NUM_CARDS,
    DEFAULT_NUM_PLAYERS,
    DEFAULT_POINTS_ORDER,
    DEFAULT_RETURNS_TYPE,
    MAX_PLAYERS,
    MIN_PLAYERS,
    max_point_slots,
    parse_points_order,
    parse_returns_type,
)

# Game parameters (also the pyspiel parameter specification)
DEFAULT_PARAMS = {
    "num_cards": DEFAULT_NUM_CARDS,
    "players": DEFAULT_NUM_PLAYERS,
    "points_order": DEFAULT_POINTS_ORDER,
    "returns_type": DEFAULT_RETURNS_TYPE,
    "imp_info": DEFAULT_IMP_INFO,
}


@dataclass(frozen=True)
class GoofspielConfig:
    """Validated Goofspiel parameters.

    States keep a reference to the config of the game that created them and
    never modify it, so clones share one instance.
    """

    num_cards: int = DEFAULT_NUM_CARDS
    num_players: int = DEFAULT_NUM_PLAYERS
    points_order: PointsOrder = PointsOrder.RANDOM
    returns_type: ReturnsType = ReturnsType.WIN_LOSS
    imp_info: bool = DEFAULT_IMP_INFO

    def __post_init__(self):
        if isinstance(self.num_cards, bool) or not isinstance(self.num_cards, int):
            raise ValueError(f"num_cards must be an int, got {self.num_cards!r}")
        if self.num_cards < 1:
            raise ValueError(f"num_cards must be >= 1, got {self.num_cards}")
        if isinstance(self.num_players, bool) or not isinstance(
            self.num_players, int
        ):
            raise ValueError(f"players must be an int, got {self.num_players!r}")
        if not MIN_PLAYERS <= self.num_players <= MAX_PLAYERS:
            raise ValueError(
                f"players must be in [{MIN_PLAYERS}, {MAX_PLAYERS}], "
                f"got {self.num_players}"
            )
        if not isinstance(self.imp_info, bool):
            raise ValueError(f"imp_info must be a bool, got {self.imp_info!r}")
        # Normalize plain ints to the enums
        object.__setattr__(self, "points_order", PointsOrder(self.points_order))
        object.__setattr__(self, "returns_type", ReturnsType(self.returns_type))

    def __deepcopy__(self, memo):
        # Frozen: clones of a state keep pointing at the same config.
        return self

    @classmethod
    def from_params(cls, params: Optional[dict] = None) -> "GoofspielConfig":
        """Build a config from a pyspiel-style parameter dict.

        Missing keys fall back to the defaults; unknown keys are rejected.
        """
        params = params or {}
        unknown = set(params) - set(DEFAULT_PARAMS)
        if unknown:
            raise ValueError(f"Unknown goofspiel parameters: {sorted(unknown)}")
        merged = {**DEFAULT_PARAMS, **params}
        return cls(
            num_cards=merged["num_cards"],
            num_players=merged["players"],
            points_order=parse_points_order(merged["points_order"]),
            returns_type=parse_returns_type(merged["returns_type"]),
            imp_info=merged["imp_info"],
        )

    def to_params(self) -> dict:
        """Inverse of from_params, with enum values back to their strings."""
        return {
            "num_cards": self.num_cards,
            "players": self.num_players,
            "points_order": self.points_order.name.lower(),
            "returns_type": self.returns_type.name.lower(),
            "imp_info": self.imp_info,
        }

    @property
    def num_rounds(self) -> int:
        return self.num_cards

    @property
    def max_point_slots(self) -> int:
        return max_point_slots(self.num_cards)

    @property
    def is_random_order(self) -> bool:
        return self.points_order == PointsOrder.RANDOM
