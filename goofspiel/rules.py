"""Round rules: point card dealing and bid resolution."""

from typing import Iterable, Optional, Sequence

from .constants import PointsOrder


def first_point_card(points_order: PointsOrder, num_cards: int) -> Optional[int]:
    """Point card revealed before the first round, or None if chance decides."""
    if points_order == PointsOrder.ASCENDING:
        return 0
    if points_order == PointsOrder.DESCENDING:
        return num_cards - 1
    return None


def next_point_card(
    points_order: PointsOrder, num_cards: int, current: Optional[int]
) -> Optional[int]:
    """Point card following current under a deterministic order.

    Returns None for the random order (the next card comes from a chance
    node) and when the fixed sequence is exhausted.
    """
    if current is None or points_order == PointsOrder.RANDOM:
        return None
    if points_order == PointsOrder.ASCENDING:
        return current + 1 if current < num_cards - 1 else None
    return current - 1 if current > 0 else None


def point_card_outcomes(
    num_cards: int, dealt: Iterable[int]
) -> list[tuple[int, float]]:
    """Uniform distribution over the point cards not dealt yet."""
    dealt = set(dealt)
    remaining = [card for card in range(num_cards) if card not in dealt]
    if not remaining:
        raise ValueError("No point cards left to deal")
    prob = 1.0 / len(remaining)
    return [(card, prob) for card in remaining]


def resolve_bids(bids: Sequence[int]) -> Optional[int]:
    """Index of the unique highest bidder, or None when the top bid is tied.

    A tied round discards the point card; it is never split.
    """
    max_bid = -1
    num_max_bids = 0
    max_bidder = None
    for player, bid in enumerate(bids):
        if bid > max_bid:
            max_bid = bid
            num_max_bids = 1
            max_bidder = player
        elif bid == max_bid:
            num_max_bids += 1
    return max_bidder if num_max_bids == 1 else None
