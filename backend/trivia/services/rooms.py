import logging
from typing import Tuple

from trivia.errors import NotFoundError
from trivia.models import (
    Player,
    Room,
    generate_player_id,
    generate_room_code,
    normalize_room_code,
    player_key,
    room_key,
)
from .players import clean_nickname

logger = logging.getLogger(__name__)


class RoomRegistry:
    def __init__(self, store, code_length: int = 6, nickname_max_length: int = 20):
        self.store = store
        self.code_length = code_length
        self.nickname_max_length = nickname_max_length

    def create_room(self, host_nickname) -> Tuple[str, str, Room, Player]:
        """Create a waiting room and its host player.

        Both records are written in one store transaction, so a failure
        leaves neither behind.
        """
        nickname = clean_nickname(host_nickname, self.nickname_max_length)
        code = generate_room_code(self.code_length)
        host_id = generate_player_id()
        room = Room(code=code, host_id=host_id)
        host = Player(id=host_id, nickname=nickname, is_host=True, score=0)
        self.store.set_many({
            room_key(code): room.to_dict(),
            player_key(code, host_id): host.to_dict(),
        })
        logger.info(f"[create] room={code} host={host_id} nickname={nickname!r}")
        return code, host_id, room, host

    def get_room(self, room_code) -> Room:
        code = normalize_room_code(room_code)
        data = self.store.get(room_key(code)) if code else None
        if not data:
            raise NotFoundError('Room not found')
        return Room.from_dict(data)

    def save_room(self, room: Room) -> None:
        self.store.set(room_key(room.code), room.to_dict())
