from dataclasses import dataclass
import logging
import math
from typing import List, Optional

from trivia.errors import ExhaustedError, ValidationError
from trivia.models import AnswerRecord, answer_key, answer_prefix, player_key

logger = logging.getLogger(__name__)

BASE_POINTS = 500
MAX_SPEED_BONUS = 500
BONUS_DECAY_PER_SECOND = 25
NO_ANSWER = -1


def points_for(is_correct: bool, elapsed_seconds) -> int:
    """Points for one answer.

    Wrong (or missing) answers score 0. A correct answer is worth 500 plus a
    speed bonus that starts at 500 and loses 25 per elapsed second, so the
    award runs from 1000 at 0s down to 500 from 20s on.
    """
    if not is_correct:
        return 0
    elapsed = max(0.0, float(elapsed_seconds))
    speed_bonus = max(0.0, MAX_SPEED_BONUS - elapsed * BONUS_DECAY_PER_SECOND)
    # Half rounds up, not to even
    return int(math.floor(BASE_POINTS + speed_bonus + 0.5))


@dataclass
class AnswerResult:
    is_correct: bool
    points: int
    updated_score: int
    correct_answer: int

    def to_dict(self):
        return {
            'isCorrect': self.is_correct,
            'points': self.points,
            'updatedScore': self.updated_score,
            'correctAnswer': self.correct_answer,
        }


def _validate_submission(option_index, elapsed_seconds):
    if isinstance(option_index, bool) or not isinstance(option_index, int):
        raise ValidationError('answer must be an integer option index (-1 for no answer)')
    if isinstance(elapsed_seconds, bool) or not isinstance(elapsed_seconds, (int, float)):
        raise ValidationError('timeSpent must be a number of seconds')
    if not math.isfinite(elapsed_seconds) or elapsed_seconds < 0:
        raise ValidationError('timeSpent must be a finite, non-negative number of seconds')


class ScoringEngine:
    def __init__(self, store, rooms, players, bank):
        self.store = store
        self.rooms = rooms
        self.players = players
        self.bank = bank

    def submit_answer(self, room_code, player_id, option_index, elapsed_seconds) -> AnswerResult:
        """Score an answer against the room's current question.

        The question comes from the stored cursor, not from the client.
        Every submission adds to the score; a resubmission for the same
        question scores again and replaces the stored answer record.
        """
        room = self.rooms.get_room(room_code)
        player = self.players.get_player(room.code, player_id)
        _validate_submission(option_index, elapsed_seconds)

        if not self.bank.has_index(room.current_question):
            raise ExhaustedError('No more questions')
        question = self.bank[room.current_question]

        is_correct = option_index != NO_ANSWER and option_index == question.correct_option_index
        points = points_for(is_correct, elapsed_seconds)
        player.score += points
        record = AnswerRecord(
            player_id=player.id,
            question_index=room.current_question,
            answer=option_index,
            is_correct=is_correct,
            points=points,
            time_spent=elapsed_seconds,
        )
        # Score and audit record commit together or not at all
        self.store.set_many({
            player_key(room.code, player.id): player.to_dict(),
            answer_key(room.code, room.current_question, player.id): record.to_dict(),
        })
        logger.info(
            f"[answer] room={room.code} player={player.id} question={room.current_question} "
            f"correct={is_correct} points={points} score={player.score}"
        )
        return AnswerResult(
            is_correct=is_correct,
            points=points,
            updated_score=player.score,
            correct_answer=question.correct_option_index,
        )

    def list_answers(self, room_code, question_index: Optional[int] = None) -> List[AnswerRecord]:
        room = self.rooms.get_room(room_code)
        prefix = answer_prefix(room.code)
        if question_index is not None:
            prefix = f"{prefix}{question_index}:"
        records = [AnswerRecord.from_dict(d) for d in self.store.get_by_prefix(prefix)]
        records.sort(key=lambda r: (r.question_index, r.submitted_at))
        return records
