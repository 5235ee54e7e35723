"""Unit tests for Goofspiel rules, scoring, hands and configuration."""

import copy
import dataclasses
import sys
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from goofspiel import (
    DEFAULT_PARAMS,
    GoofspielConfig,
    PlayerHands,
    PointsOrder,
    ReturnsType,
    NodeKind,
    card_value,
    compute_returns,
    find_winners,
    first_point_card,
    is_zero_sum,
    max_point_slots,
    next_point_card,
    parse_points_order,
    parse_returns_type,
    point_card_outcomes,
    resolve_bids,
    utility_bounds,
)


class TestConstants:
    """Test enum values and helpers."""

    def test_points_order_values(self):
        assert PointsOrder.RANDOM == 0
        assert PointsOrder.ASCENDING == 1
        assert PointsOrder.DESCENDING == 2

    def test_returns_type_values(self):
        assert ReturnsType.WIN_LOSS == 0
        assert ReturnsType.POINT_DIFFERENCE == 1
        assert ReturnsType.TOTAL_POINTS == 2

    def test_node_kinds(self):
        assert {k.name for k in NodeKind} == {"CHANCE", "SIMULTANEOUS", "TERMINAL"}

    def test_card_value(self):
        assert card_value(0) == 1
        assert card_value(12) == 13

    def test_max_point_slots(self):
        # Totals 0..6 for three cards
        assert max_point_slots(3) == 7
        assert max_point_slots(13) == 92

    def test_parse_names(self):
        assert parse_points_order("descending") == PointsOrder.DESCENDING
        assert parse_returns_type("total_points") == ReturnsType.TOTAL_POINTS
        with pytest.raises(ValueError):
            parse_points_order("Descending")
        with pytest.raises(ValueError):
            parse_returns_type("")


class TestConfig:
    """Test GoofspielConfig validation."""

    def test_from_empty_params(self):
        config = GoofspielConfig.from_params()
        assert config == GoofspielConfig()
        assert config.to_params() == DEFAULT_PARAMS

    def test_from_params_roundtrip(self):
        params = {
            "num_cards": 6,
            "players": 4,
            "points_order": "descending",
            "returns_type": "point_difference",
            "imp_info": True,
        }
        config = GoofspielConfig.from_params(params)
        assert config.num_players == 4
        assert config.points_order == PointsOrder.DESCENDING
        assert config.to_params() == params

    def test_derived_values(self):
        config = GoofspielConfig(num_cards=4)
        assert config.num_rounds == 4
        assert config.max_point_slots == 11
        assert config.is_random_order
        assert not GoofspielConfig(points_order=PointsOrder.ASCENDING).is_random_order

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"num_cards": 0},
            {"num_cards": 2.5},
            {"num_cards": True},
            {"num_players": 1},
            {"num_players": 11},
            {"imp_info": 1},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            GoofspielConfig(**kwargs)

    def test_unknown_param(self):
        with pytest.raises(ValueError):
            GoofspielConfig.from_params({"num_card": 3})

    def test_frozen(self):
        config = GoofspielConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.num_cards = 5

    def test_deepcopy_shares_instance(self):
        config = GoofspielConfig(num_cards=4)
        assert copy.deepcopy(config) is config


class TestDealer:
    """Test point card dealing."""

    def test_first_card(self):
        assert first_point_card(PointsOrder.ASCENDING, 5) == 0
        assert first_point_card(PointsOrder.DESCENDING, 5) == 4
        assert first_point_card(PointsOrder.RANDOM, 5) is None

    def test_next_card(self):
        assert next_point_card(PointsOrder.ASCENDING, 5, 2) == 3
        assert next_point_card(PointsOrder.ASCENDING, 5, 4) is None
        assert next_point_card(PointsOrder.DESCENDING, 5, 2) == 1
        assert next_point_card(PointsOrder.DESCENDING, 5, 0) is None
        assert next_point_card(PointsOrder.RANDOM, 5, 2) is None

    def test_outcomes_skip_dealt_cards(self):
        outcomes = point_card_outcomes(4, [1, 3])
        assert outcomes == [(0, 0.5), (2, 0.5)]

    def test_outcomes_sum_to_one(self):
        outcomes = point_card_outcomes(7, [2])
        assert sum(p for _, p in outcomes) == pytest.approx(1.0)
        assert len(outcomes) == 6

    def test_no_cards_left(self):
        with pytest.raises(ValueError):
            point_card_outcomes(2, [0, 1])


class TestResolver:
    """Test bid resolution."""

    def test_unique_highest_bid_wins(self):
        assert resolve_bids([2, 1]) == 0
        assert resolve_bids([0, 2, 1]) == 1

    def test_tied_highest_bid_has_no_winner(self):
        assert resolve_bids([1, 1]) is None
        assert resolve_bids([0, 2, 2]) is None

    def test_ties_below_the_top_do_not_matter(self):
        assert resolve_bids([3, 1, 1]) == 0


class TestScoring:
    """Test the returns policies."""

    def test_find_winners(self):
        assert find_winners([4, 2]) == {0}
        assert find_winners([3, 3, 0]) == {0, 1}

    def test_win_loss(self):
        assert compute_returns(ReturnsType.WIN_LOSS, [4, 2]) == [1.0, -1.0]
        assert compute_returns(ReturnsType.WIN_LOSS, [3, 3, 0]) == [0.5, 0.5, -1.0]
        assert compute_returns(ReturnsType.WIN_LOSS, [1, 2, 3]) == [-0.5, -0.5, 1.0]

    def test_win_loss_draw(self):
        assert compute_returns(ReturnsType.WIN_LOSS, [2, 2, 2]) == [0.0, 0.0, 0.0]

    def test_point_difference(self):
        returns = compute_returns(ReturnsType.POINT_DIFFERENCE, [1, 2, 4])
        assert returns == pytest.approx([-4 / 3, -1 / 3, 5 / 3])
        assert sum(returns) == pytest.approx(0.0)

    def test_total_points(self):
        assert compute_returns(ReturnsType.TOTAL_POINTS, [4, 2]) == [4.0, 2.0]

    def test_zero_sum_flags(self):
        assert is_zero_sum(ReturnsType.WIN_LOSS)
        assert is_zero_sum(ReturnsType.POINT_DIFFERENCE)
        assert not is_zero_sum(ReturnsType.TOTAL_POINTS)

    def test_utility_bounds(self):
        assert utility_bounds(ReturnsType.WIN_LOSS, 13, 2) == (-1.0, 1.0)
        assert utility_bounds(ReturnsType.TOTAL_POINTS, 4, 3) == (0.0, 10.0)
        low, high = utility_bounds(ReturnsType.POINT_DIFFERENCE, 4, 3)
        assert low == pytest.approx(-10 / 3)
        assert high == pytest.approx(20 / 3)


class TestPlayerHands:
    """Test the per-player card bit matrix."""

    def test_initial_hands_are_full(self):
        hands = PlayerHands(3, 4)
        assert hands.num_players == 3
        assert hands.num_cards == 4
        assert hands.total() == 12
        for player in range(3):
            assert hands.cards(player) == [0, 1, 2, 3]

    def test_play_clears_card(self):
        hands = PlayerHands(2, 4)
        hands.play(1, 2)
        assert not hands.holds(1, 2)
        assert hands.holds(0, 2)
        assert hands.cards(1) == [0, 1, 3]
        assert hands.count(1) == 3
        assert hands.total() == 7

    def test_play_twice_raises(self):
        hands = PlayerHands(2, 4)
        hands.play(0, 3)
        with pytest.raises(ValueError):
            hands.play(0, 3)

    def test_out_of_range_card_not_held(self):
        hands = PlayerHands(2, 4)
        assert not hands.holds(0, 4)
        assert not hands.holds(0, -1)

    def test_row_is_read_only(self):
        hands = PlayerHands(2, 3)
        row = hands.row(0)
        assert row.tolist() == [True, True, True]
        with pytest.raises(ValueError):
            row[0] = False
        hands.play(0, 0)
        assert hands.row(0).tolist() == [False, True, True]

    def test_deepcopy_is_independent(self):
        hands = PlayerHands(2, 3)
        clone = copy.deepcopy(hands)
        clone.play(0, 1)
        assert hands.holds(0, 1)
        assert hands != clone
