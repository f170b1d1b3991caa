from flask import Blueprint, jsonify, request, current_app

from trivia import get_service
from trivia.errors import ValidationError

rooms = Blueprint('rooms', __name__)


def _polling_hints() -> dict:
    cfg = current_app.config
    return {
        'lobbyMs': int(cfg.get('LOBBY_POLL_MS', 2000)),
        'questionMs': int(cfg.get('QUESTION_POLL_MS', 1500)),
        'leaderboardMs': int(cfg.get('LEADERBOARD_POLL_MS', 3000)),
        'answerWindowSec': int(cfg.get('ANSWER_WINDOW_SEC', 15)),
        'minPlayers': int(cfg.get('MIN_PLAYERS', 1)),
    }


@rooms.route('/create', methods=['POST'])
def create_room():
    data = request.get_json(silent=True) or {}
    code, player_id, room, player = get_service().rooms.create_room(data.get('hostNickname'))
    return jsonify({
        'roomCode': code,
        'playerId': player_id,
        'player': player.to_dict(),
        'room': room.to_dict(),
    }), 201


@rooms.route('/join', methods=['POST'])
def join_room():
    data = request.get_json(silent=True) or {}
    room_code = data.get('roomCode')
    if not isinstance(room_code, str) or not room_code.strip():
        raise ValidationError('Room code is required')
    player_id, player, room = get_service().players.join_room(room_code, data.get('nickname'))
    return jsonify({
        'roomCode': room.code,
        'playerId': player_id,
        'player': player.to_dict(),
        'room': room.to_dict(),
    }), 201


@rooms.route('/<string:code>', methods=['GET'])
def get_room(code):
    room = get_service().rooms.get_room(code)
    return jsonify({'room': room.to_dict(), 'polling': _polling_hints()})


@rooms.route('/<string:code>/players', methods=['GET'])
def list_players(code):
    players = get_service().players.list_players(code)
    return jsonify({'players': [p.to_dict() for p in players]})


@rooms.route('/<string:code>/start', methods=['POST'])
def start_game(code):
    data = request.get_json(silent=True) or {}
    room = get_service().game.start_game(code, data.get('playerId'))
    return jsonify({'room': room.to_dict()})


@rooms.route('/<string:code>/question', methods=['GET'])
def get_question(code):
    question, total = get_service().game.get_current_question(code)
    return jsonify({'question': question, 'totalQuestions': total})


@rooms.route('/<string:code>/answer', methods=['POST'])
def submit_answer(code):
    data = request.get_json(silent=True) or {}
    player_id = data.get('playerId')
    if not player_id:
        raise ValidationError('playerId is required')
    if 'answer' not in data:
        raise ValidationError('answer is required')
    result = get_service().scoring.submit_answer(code, player_id, data.get('answer'), data.get('timeSpent', 0))
    return jsonify(result.to_dict())


@rooms.route('/<string:code>/next-question', methods=['POST'])
def next_question(code):
    data = request.get_json(silent=True) or {}
    room = get_service().game.advance_question(code, data.get('playerId'))
    return jsonify({'room': room.to_dict()})


@rooms.route('/<string:code>/leaderboard', methods=['GET'])
def leaderboard(code):
    board = get_service().leaderboard.get_leaderboard(code)
    return jsonify({'leaderboard': [p.to_dict() for p in board]})


@rooms.route('/<string:code>/answers', methods=['GET'])
def list_answers(code):
    raw = request.args.get('question')
    question_index = None
    if raw is not None:
        try:
            question_index = int(raw)
        except ValueError:
            raise ValidationError('question must be an integer index') from None
    answers = get_service().scoring.list_answers(code, question_index)
    return jsonify({'answers': [a.to_dict() for a in answers]})
