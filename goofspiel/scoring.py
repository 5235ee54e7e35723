"""Final utilities from point totals, one function per returns type."""

from typing import Callable, Sequence

from .constants import ReturnsType, total_points


def find_winners(points: Sequence[int]) -> set[int]:
    """Players holding the maximum point total."""
    best = max(points)
    return {p for p, pts in enumerate(points) if pts == best}


def win_loss_returns(points: Sequence[int]) -> list[float]:
    """+1/|winners| to each winner, -1/|losers| to each loser.

    If every player shares the top score the game is a draw and everyone
    gets 0.
    """
    num_players = len(points)
    winners = find_winners(points)
    if len(winners) == num_players:
        return [0.0] * num_players
    num_losers = num_players - len(winners)
    return [
        1.0 / len(winners) if p in winners else -1.0 / num_losers
        for p in range(num_players)
    ]


def point_difference_returns(points: Sequence[int]) -> list[float]:
    """Points relative to the table average."""
    mean = sum(points) / len(points)
    return [float(pts) - mean for pts in points]


def total_points_returns(points: Sequence[int]) -> list[float]:
    return [float(pts) for pts in points]


RETURNS_FUNCTIONS: dict[ReturnsType, Callable[[Sequence[int]], list[float]]] = {
    ReturnsType.WIN_LOSS: win_loss_returns,
    ReturnsType.POINT_DIFFERENCE: point_difference_returns,
    ReturnsType.TOTAL_POINTS: total_points_returns,
}


def compute_returns(returns_type: ReturnsType, points: Sequence[int]) -> list[float]:
    """Apply the scoring rule selected by returns_type."""
    try:
        fn = RETURNS_FUNCTIONS[returns_type]
    except KeyError:
        raise ValueError(f"Unrecognized returns type: {returns_type!r}") from None
    return fn(points)


def is_zero_sum(returns_type: ReturnsType) -> bool:
    return returns_type != ReturnsType.TOTAL_POINTS


def utility_bounds(
    returns_type: ReturnsType, num_cards: int, num_players: int
) -> tuple[float, float]:
    """(min, max) utility a player can receive, derived without playing.

    With S = 1 + 2 + ... + N:
    - win_loss: a lone loser among P-1 winners still gets -1, a lone winner +1
    - point_difference: 0 - S/P when shut out, S - S/P when taking everything
    - total_points: 0 .. S
    """
    deck_sum = total_points(num_cards)
    if returns_type == ReturnsType.WIN_LOSS:
        return -1.0, 1.0
    if returns_type == ReturnsType.POINT_DIFFERENCE:
        return -deck_sum / num_players, (num_players - 1) * deck_sum / num_players
    if returns_type == ReturnsType.TOTAL_POINTS:
        return 0.0, float(deck_sum)
    raise ValueError(f"Unrecognized returns type: {returns_type!r}")
