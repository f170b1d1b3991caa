"""Room lifecycle: waiting -> playing -> finished.

Only the host may start the game or advance the cursor. Non-host clients
learn about transitions by polling the room.
"""

import logging
from typing import Tuple

from trivia.errors import AuthorizationError, ExhaustedError, InvalidStateError
from trivia.models import (
    Room,
    STATUS_FINISHED,
    STATUS_PLAYING,
    STATUS_WAITING,
    utcnow_iso,
)

logger = logging.getLogger(__name__)


class GameStateMachine:
    def __init__(self, rooms, bank):
        self.rooms = rooms
        self.bank = bank

    def _require_host(self, room: Room, caller_id, action: str) -> None:
        if not caller_id or caller_id != room.host_id:
            logger.warning(f"[{action}] room={room.code} rejected caller={caller_id}")
            raise AuthorizationError(f'Only the host can {action}')

    def start_game(self, room_code, caller_id) -> Room:
        room = self.rooms.get_room(room_code)
        self._require_host(room, caller_id, 'start the game')
        if room.status != STATUS_WAITING:
            raise InvalidStateError('Game already started or finished')

        room.status = STATUS_PLAYING
        room.current_question = 0
        room.started_at = utcnow_iso()
        self.rooms.save_room(room)
        logger.info(f"[start] room={room.code} questions={len(self.bank)}")
        return room

    def get_current_question(self, room_code) -> Tuple[dict, int]:
        """Return the redacted current question and the bank size."""
        room = self.rooms.get_room(room_code)
        if room.status == STATUS_FINISHED:
            raise InvalidStateError('Game is finished')
        if room.status != STATUS_PLAYING:
            raise InvalidStateError('Game not started')
        if not self.bank.has_index(room.current_question):
            raise ExhaustedError('No more questions')

        payload = self.bank[room.current_question].public_dict()
        payload['index'] = room.current_question
        return payload, len(self.bank)

    def advance_question(self, room_code, caller_id) -> Room:
        room = self.rooms.get_room(room_code)
        self._require_host(room, caller_id, 'advance questions')
        if room.status != STATUS_PLAYING:
            raise InvalidStateError('Game is not in progress')

        prev = room.current_question
        if prev + 1 >= len(self.bank):
            # Cursor stays on the last question
            room.status = STATUS_FINISHED
            room.finished_at = utcnow_iso()
            logger.info(f"[finish] room={room.code} finished at question={prev}")
        else:
            room.current_question = prev + 1
            logger.info(f"[advance] room={room.code} question {prev} -> {room.current_question}")
        self.rooms.save_room(room)
        return room
