import os
import sys
import pytest

# Ensure the backend root (containing the `trivia` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from trivia import create_app, db
from trivia.kv_store import KeyValueStore
from trivia.questions import Question, QuestionBank
from trivia.services import TriviaService


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOBBY_POLL_MS = 2000
    QUESTION_POLL_MS = 1500
    LEADERBOARD_POLL_MS = 3000


ONE_QUESTION = Question(1, "What is the capital of France?", ("London", "Berlin", "Paris", "Madrid"), 2)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import trivia.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def store(flask_app):
    return KeyValueStore(db)


@pytest.fixture()
def service(flask_app):
    return flask_app.extensions['trivia']


@pytest.fixture()
def one_question_service(store):
    return TriviaService(store, QuestionBank([ONE_QUESTION]))
