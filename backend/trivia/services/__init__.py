"""Trivia domain services: rooms, players, game flow, scoring, leaderboard.

This package contains the game rules and is imported by the HTTP routes and
CLI commands, keeping transport concerns separated from core game mechanics.
"""

from .game import GameStateMachine
from .leaderboard import LeaderboardAssembler
from .players import PlayerRegistry
from .rooms import RoomRegistry
from .scoring import ScoringEngine, points_for


class TriviaService:
    """Wires the services around one store and one question bank."""

    def __init__(self, store, bank, code_length=6, nickname_max_length=20):
        self.store = store
        self.bank = bank
        self.rooms = RoomRegistry(store, code_length=code_length, nickname_max_length=nickname_max_length)
        self.players = PlayerRegistry(store, self.rooms, nickname_max_length=nickname_max_length)
        self.game = GameStateMachine(self.rooms, bank)
        self.scoring = ScoringEngine(store, self.rooms, self.players, bank)
        self.leaderboard = LeaderboardAssembler(self.players)


__all__ = [
    'GameStateMachine',
    'LeaderboardAssembler',
    'PlayerRegistry',
    'RoomRegistry',
    'ScoringEngine',
    'TriviaService',
    'points_for',
]
