from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
import random
import string
import uuid

from trivia import db

ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits

STATUS_WAITING = 'waiting'
STATUS_PLAYING = 'playing'
STATUS_FINISHED = 'finished'


class KvEntry(db.Model):
    __tablename__ = 'kv_store'
    key = db.Column(db.String(255), primary_key=True)
    value = db.Column(db.JSON, nullable=False)


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def generate_room_code(length=6):
    """Generate a short room code. Collisions are not checked."""
    return ''.join(random.choices(ROOM_CODE_ALPHABET, k=length))


def generate_player_id() -> str:
    return str(uuid.uuid4())


def normalize_room_code(code) -> str:
    return (code or '').strip().upper()


def room_key(code: str) -> str:
    return f"room:{code}"


def player_prefix(code: str) -> str:
    return f"room:{code}:player:"


def player_key(code: str, player_id: str) -> str:
    return f"{player_prefix(code)}{player_id}"


def answer_prefix(code: str) -> str:
    return f"room:{code}:answer:"


def answer_key(code: str, question_index: int, player_id: str) -> str:
    return f"{answer_prefix(code)}{question_index}:{player_id}"


@dataclass
class Room:
    code: str
    host_id: str
    status: str = STATUS_WAITING
    current_question: int = 0
    created_at: str = field(default_factory=utcnow_iso)
    started_at: Optional[str] = None
    finished_at: Optional[str] = None

    def to_dict(self):
        data = {
            'code': self.code,
            'hostId': self.host_id,
            'status': self.status,
            'currentQuestion': self.current_question,
            'createdAt': self.created_at,
        }
        if self.started_at:
            data['startedAt'] = self.started_at
        if self.finished_at:
            data['finishedAt'] = self.finished_at
        return data

    @classmethod
    def from_dict(cls, data):
        return cls(
            code=data['code'],
            host_id=data['hostId'],
            status=data.get('status', STATUS_WAITING),
            current_question=int(data.get('currentQuestion') or 0),
            created_at=data.get('createdAt') or utcnow_iso(),
            started_at=data.get('startedAt'),
            finished_at=data.get('finishedAt'),
        )


@dataclass
class Player:
    id: str
    nickname: str
    is_host: bool = False
    score: int = 0
    joined_at: str = field(default_factory=utcnow_iso)

    def to_dict(self):
        return {
            'id': self.id,
            'nickname': self.nickname,
            'isHost': self.is_host,
            'score': self.score,
            'joinedAt': self.joined_at,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data['id'],
            nickname=data['nickname'],
            is_host=bool(data.get('isHost')),
            score=int(data.get('score') or 0),
            joined_at=data.get('joinedAt') or utcnow_iso(),
        )


@dataclass
class AnswerRecord:
    """Audit entry for one player's answer to one question."""
    player_id: str
    question_index: int
    answer: int
    is_correct: bool
    points: int
    time_spent: float
    submitted_at: str = field(default_factory=utcnow_iso)

    def to_dict(self):
        return {
            'playerId': self.player_id,
            'questionIndex': self.question_index,
            'answer': self.answer,
            'isCorrect': self.is_correct,
            'points': self.points,
            'timeSpent': self.time_spent,
            'submittedAt': self.submitted_at,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            player_id=data['playerId'],
            question_index=int(data['questionIndex']),
            answer=int(data['answer']),
            is_correct=bool(data['isCorrect']),
            points=int(data['points']),
            time_spent=data.get('timeSpent', 0),
            submitted_at=data.get('submittedAt') or utcnow_iso(),
        )
