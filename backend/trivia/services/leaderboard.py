from typing import List

from trivia.models import Player


def rank_players(players: List[Player]) -> List[Player]:
    """Highest score first; ties go to whoever joined earlier, then by id."""
    return sorted(players, key=lambda p: (-p.score, p.joined_at, p.id))


class LeaderboardAssembler:
    def __init__(self, players):
        self.players = players

    def get_leaderboard(self, room_code) -> List[Player]:
        return rank_players(self.players.list_players(room_code))
