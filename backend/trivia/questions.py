"""Question bank shared by every room.

The bank is built once by the app factory and handed to the services; rooms
only hold a cursor into it.
"""

from dataclasses import dataclass
import json
from typing import Iterable, List, Tuple

from trivia.errors import ValidationError


@dataclass(frozen=True)
class Question:
    id: int
    text: str
    options: Tuple[str, ...]
    correct_option_index: int

    def public_dict(self) -> dict:
        # Never include the correct option index here
        return {
            'id': self.id,
            'question': self.text,
            'options': list(self.options),
        }


SAMPLE_QUESTIONS = (
    Question(1, "What is the capital of France?", ("London", "Berlin", "Paris", "Madrid"), 2),
    Question(2, "Which planet is known as the Red Planet?", ("Venus", "Mars", "Jupiter", "Saturn"), 1),
    Question(3, "What is 7 × 8?", ("54", "56", "58", "64"), 1),
    Question(4, "Who painted the Mona Lisa?", ("Vincent van Gogh", "Pablo Picasso", "Leonardo da Vinci", "Michelangelo"), 2),
    Question(5, "What is the largest ocean on Earth?", ("Atlantic Ocean", "Indian Ocean", "Arctic Ocean", "Pacific Ocean"), 3),
)


class QuestionBank:
    """Immutable ordered sequence of questions."""

    def __init__(self, questions: Iterable[Question]):
        self._questions: Tuple[Question, ...] = tuple(questions)
        if not self._questions:
            raise ValidationError('Question bank must contain at least one question')

    def __len__(self) -> int:
        return len(self._questions)

    def __getitem__(self, index: int) -> Question:
        return self._questions[index]

    def __iter__(self):
        return iter(self._questions)

    def has_index(self, index: int) -> bool:
        return 0 <= index < len(self._questions)

    @classmethod
    def sample(cls) -> 'QuestionBank':
        return cls(SAMPLE_QUESTIONS)

    @classmethod
    def from_records(cls, records: List[dict]) -> 'QuestionBank':
        if not isinstance(records, list):
            raise ValidationError('Question bank must be a JSON list')
        questions = []
        for pos, rec in enumerate(records):
            if not isinstance(rec, dict):
                raise ValidationError(f'Question #{pos} is not an object')
            text = str(rec.get('question') or '').strip()
            options = rec.get('options')
            correct = rec.get('correctAnswer')
            if not text:
                raise ValidationError(f'Question #{pos} has no text')
            if not isinstance(options, list) or len(options) < 2:
                raise ValidationError(f'Question #{pos} needs at least two options')
            if isinstance(correct, bool) or not isinstance(correct, int) or not 0 <= correct < len(options):
                raise ValidationError(f'Question #{pos} has an out-of-range correctAnswer')
            questions.append(Question(
                id=rec.get('id', pos + 1),
                text=text,
                options=tuple(str(o) for o in options),
                correct_option_index=correct,
            ))
        return cls(questions)

    @classmethod
    def from_file(cls, path: str) -> 'QuestionBank':
        with open(path, encoding='utf-8') as fh:
            try:
                records = json.load(fh)
            except json.JSONDecodeError as exc:
                raise ValidationError(f'Question bank {path} is not valid JSON: {exc}') from exc
        return cls.from_records(records)


def load_question_bank(config) -> QuestionBank:
    path = config.get('QUESTION_BANK_PATH')
    if path:
        return QuestionBank.from_file(path)
    return QuestionBank.sample()
