"""Agent implementations for driving Goofspiel games."""

from .random_agent import RandomAgent, play_random_game, sample_chance_outcome

__all__ = [
    "RandomAgent",
    "play_random_game",
    "sample_chance_outcome",
]
