"""Per-player bid card tracking."""

import numpy as np


class PlayerHands:
    """Bit matrix of the cards each player still holds.

    Row p, column c is True while player p still holds card c. Cards are only
    ever cleared; a fresh game gets a fresh PlayerHands.
    """

    def __init__(self, num_players: int, num_cards: int):
        self._held = np.ones((num_players, num_cards), dtype=bool)

    @property
    def num_players(self) -> int:
        return self._held.shape[0]

    @property
    def num_cards(self) -> int:
        return self._held.shape[1]

    def holds(self, player: int, card: int) -> bool:
        """Whether player can still bid card."""
        if not 0 <= card < self.num_cards:
            return False
        return bool(self._held[player, card])

    def cards(self, player: int) -> list[int]:
        """Cards still held by player, ascending."""
        return [int(c) for c in np.flatnonzero(self._held[player])]

    def count(self, player: int) -> int:
        return int(self._held[player].sum())

    def total(self) -> int:
        """Number of cards held across all players."""
        return int(self._held.sum())

    def play(self, player: int, card: int):
        """Remove card from player's hand."""
        if not self.holds(player, card):
            raise ValueError(f"Player {player} does not hold card {card}")
        self._held[player, card] = False

    def row(self, player: int) -> np.ndarray:
        """Read-only view of one player's bits."""
        view = self._held[player]
        view.flags.writeable = False
        return view

    def __eq__(self, other) -> bool:
        if not isinstance(other, PlayerHands):
            return NotImplemented
        return np.array_equal(self._held, other._held)

    def __repr__(self) -> str:
        hands = [self.cards(p) for p in range(self.num_players)]
        return f"PlayerHands({hands})"
