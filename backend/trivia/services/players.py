import logging
from typing import List, Tuple

from trivia.errors import InvalidStateError, NotFoundError, ValidationError
from trivia.models import (
    Player,
    Room,
    STATUS_WAITING,
    generate_player_id,
    normalize_room_code,
    player_key,
    player_prefix,
)

logger = logging.getLogger(__name__)


def clean_nickname(raw, max_length: int = 20) -> str:
    nickname = raw.strip() if isinstance(raw, str) else ''
    if not nickname:
        raise ValidationError('Nickname is required')
    if len(nickname) > max_length:
        raise ValidationError(f'Nickname must be at most {max_length} characters')
    return nickname


class PlayerRegistry:
    """Players are stored under their room: ``room:{CODE}:player:{id}``."""

    def __init__(self, store, rooms, nickname_max_length: int = 20):
        self.store = store
        self.rooms = rooms
        self.nickname_max_length = nickname_max_length

    def join_room(self, room_code, nickname) -> Tuple[str, Player, Room]:
        nickname = clean_nickname(nickname, self.nickname_max_length)
        room = self.rooms.get_room(room_code)
        if room.status != STATUS_WAITING:
            raise InvalidStateError('Game already started or finished')

        player = Player(id=generate_player_id(), nickname=nickname, is_host=False, score=0)
        self.save_player(room.code, player)
        logger.info(f"[join] room={room.code} player={player.id} nickname={player.nickname!r}")
        return player.id, player, room

    def get_player(self, room_code, player_id) -> Player:
        code = normalize_room_code(room_code)
        data = self.store.get(player_key(code, player_id)) if player_id else None
        if not data:
            raise NotFoundError('Player not found')
        return Player.from_dict(data)

    def save_player(self, room_code, player: Player) -> None:
        self.store.set(player_key(normalize_room_code(room_code), player.id), player.to_dict())

    def list_players(self, room_code) -> List[Player]:
        code = normalize_room_code(room_code)
        return [Player.from_dict(d) for d in self.store.get_by_prefix(player_prefix(code))]
