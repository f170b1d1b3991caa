import json
import logging
import sys
from logging import StreamHandler

import click
from flask import Flask, current_app
from flask_cors import CORS
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

from config import Config

db = SQLAlchemy()
migrate = Migrate()


def _allowed_origins(raw):
    if not raw or raw.strip() == '*':
        return '*'
    return [o.strip() for o in raw.split(',') if o.strip()]


def get_service():
    """Return the TriviaService bound to the current app."""
    return current_app.extensions['trivia']


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=_allowed_origins(flask_app.config.get('CORS_ORIGINS')))

    if not flask_app.debug and not flask_app.testing:
        stream_handler = StreamHandler(sys.stdout)
        stream_handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s: %(message)s'))
        flask_app.logger.addHandler(stream_handler)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    from trivia.errors import register_error_handlers
    register_error_handlers(flask_app)

    # The bank is built once and injected; rooms only keep a cursor into it
    from trivia.kv_store import KeyValueStore
    from trivia.questions import load_question_bank
    from trivia.services import TriviaService
    bank = load_question_bank(flask_app.config)
    flask_app.extensions['trivia'] = TriviaService(
        KeyValueStore(db, logger=flask_app.logger),
        bank,
        code_length=int(flask_app.config.get('ROOM_CODE_LENGTH', 6)),
        nickname_max_length=int(flask_app.config.get('NICKNAME_MAX_LENGTH', 20)),
    )

    from trivia.main import main
    flask_app.register_blueprint(main)

    from trivia.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api/rooms')

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the key-value table."""
        import trivia.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    @click.command('show-room')
    @click.argument('code')
    def show_room_command(code):
        """Prints a room, its players and the leaderboard as JSON."""
        from trivia.errors import GameError
        with flask_app.app_context():
            service = get_service()
            try:
                room = service.rooms.get_room(code)
            except GameError as exc:
                raise click.ClickException(exc.message) from exc
            players = service.players.list_players(room.code)
            board = service.leaderboard.get_leaderboard(room.code)
            print(json.dumps({
                'room': room.to_dict(),
                'players': [p.to_dict() for p in players],
                'leaderboard': [p.to_dict() for p in board],
            }, indent=2))

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(show_room_command)

    flask_app.logger.info(f"Trivia app created with {len(bank)} questions")
    return flask_app
