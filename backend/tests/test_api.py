import json

import pytest

from trivia import create_app, db
from conftest import TestConfig


def _create(client, nickname='Alice'):
    res = client.post('/api/rooms/create', json={'hostNickname': nickname})
    assert res.status_code == 201
    return res.get_json()


def _join(client, code, nickname):
    res = client.post('/api/rooms/join', json={'roomCode': code, 'nickname': nickname})
    assert res.status_code == 201
    return res.get_json()


@pytest.fixture()
def single_question_client(tmp_path):
    bank = tmp_path / 'bank.json'
    bank.write_text(json.dumps([
        {'id': 1, 'question': 'What is the capital of France?',
         'options': ['London', 'Berlin', 'Paris', 'Madrid'], 'correctAnswer': 2},
    ]), encoding='utf-8')

    class SingleQuestionConfig(TestConfig):
        QUESTION_BANK_PATH = str(bank)

    application = create_app(SingleQuestionConfig)
    with application.app_context():
        import trivia.models  # noqa: F401
        db.create_all()
        yield application.test_client()
        db.session.remove()
        db.drop_all()


def test_health(client):
    res = client.get('/health')
    assert res.status_code == 200
    assert res.get_json() == {'status': 'ok', 'questions': 5}


def test_create_room(client):
    data = _create(client, '  Alice ')
    assert len(data['roomCode']) == 6
    assert data['room']['status'] == 'waiting'
    assert data['room']['currentQuestion'] == 0
    assert data['room']['hostId'] == data['playerId']
    assert data['player']['isHost'] is True
    assert data['player']['nickname'] == 'Alice'
    assert 'startedAt' not in data['room']


def test_create_room_requires_nickname(client):
    res = client.post('/api/rooms/create', json={'hostNickname': '   '})
    assert res.status_code == 400
    assert res.get_json()['kind'] == 'validation'
    res = client.post('/api/rooms/create', data='not json', content_type='application/json')
    assert res.status_code == 400


def test_join_and_state(client):
    code = _create(client)['roomCode']
    joined = _join(client, code.lower(), 'Bob')
    assert joined['roomCode'] == code
    assert joined['player']['isHost'] is False
    # fetch room
    res = client.get(f'/api/rooms/{code.lower()}')
    assert res.status_code == 200
    payload = res.get_json()
    assert payload['room']['code'] == code
    assert payload['polling'] == {
        'lobbyMs': 2000,
        'questionMs': 1500,
        'leaderboardMs': 3000,
        'answerWindowSec': 15,
        'minPlayers': 1,
    }
    players = client.get(f'/api/rooms/{code}/players').get_json()['players']
    assert sorted(p['nickname'] for p in players) == ['Alice', 'Bob']


def test_join_errors(client):
    res = client.post('/api/rooms/join', json={'roomCode': 'NOPE00', 'nickname': 'Bob'})
    assert res.status_code == 404
    assert res.get_json() == {'error': 'Room not found', 'kind': 'not_found'}
    res = client.post('/api/rooms/join', json={'nickname': 'Bob'})
    assert res.status_code == 400

    host = _create(client)
    code = host['roomCode']
    client.post(f'/api/rooms/{code}/start', json={'playerId': host['playerId']})
    res = client.post('/api/rooms/join', json={'roomCode': code, 'nickname': 'Late'})
    assert res.status_code == 409
    assert res.get_json()['kind'] == 'invalid_state'


def test_unknown_room(client):
    res = client.get('/api/rooms/ZZZZZZ')
    assert res.status_code == 404
    assert res.get_json()['kind'] == 'not_found'


def test_start_requires_host(client):
    host = _create(client)
    code = host['roomCode']
    guest = _join(client, code, 'Bob')
    res = client.post(f'/api/rooms/{code}/start', json={'playerId': guest['playerId']})
    assert res.status_code == 403
    assert res.get_json()['kind'] == 'authorization'
    res = client.post(f'/api/rooms/{code}/start', json={'playerId': host['playerId']})
    assert res.status_code == 200
    room = res.get_json()['room']
    assert room['status'] == 'playing'
    assert room['currentQuestion'] == 0
    assert 'startedAt' in room
    # second start is rejected
    res = client.post(f'/api/rooms/{code}/start', json={'playerId': host['playerId']})
    assert res.status_code == 409


def test_question_before_start(client):
    code = _create(client)['roomCode']
    res = client.get(f'/api/rooms/{code}/question')
    assert res.status_code == 409
    assert res.get_json() == {'error': 'Game not started', 'kind': 'invalid_state'}


def test_full_game_flow(client):
    host = _create(client)
    code = host['roomCode']
    host_id = host['playerId']
    guest = _join(client, code, 'Bob')
    client.post(f'/api/rooms/{code}/start', json={'playerId': host_id})

    correct_answers = [2, 1, 1, 2, 3]
    for idx, correct in enumerate(correct_answers):
        q = client.get(f'/api/rooms/{code}/question').get_json()
        assert q['totalQuestions'] == 5
        assert q['question']['index'] == idx
        assert 'correctAnswer' not in q['question']
        res = client.post(f'/api/rooms/{code}/answer', json={'playerId': host_id, 'answer': correct, 'timeSpent': 0})
        assert res.get_json()['points'] == 1000
        res = client.post(f'/api/rooms/{code}/answer', json={'playerId': guest['playerId'], 'answer': -1, 'timeSpent': 15})
        assert res.get_json() == {'isCorrect': False, 'points': 0, 'updatedScore': 0, 'correctAnswer': correct}
        # guests cannot advance
        assert client.post(f'/api/rooms/{code}/next-question', json={'playerId': guest['playerId']}).status_code == 403
        room = client.post(f'/api/rooms/{code}/next-question', json={'playerId': host_id}).get_json()['room']

    assert room['status'] == 'finished'
    assert room['currentQuestion'] == 4
    assert 'finishedAt' in room
    assert client.get(f'/api/rooms/{code}/question').status_code == 409

    board = client.get(f'/api/rooms/{code}/leaderboard').get_json()['leaderboard']
    assert [p['score'] for p in board] == [5000, 0]
    assert board[0]['id'] == host_id

    answers = client.get(f'/api/rooms/{code}/answers').get_json()['answers']
    assert len(answers) == 10
    only_last = client.get(f'/api/rooms/{code}/answers?question=4').get_json()['answers']
    assert {a['questionIndex'] for a in only_last} == {4}
    assert len(only_last) == 2


def test_single_question_scenario(single_question_client):
    client = single_question_client
    host = _create(client)
    code = host['roomCode']
    host_id = host['playerId']
    assert client.post(f'/api/rooms/{code}/start', json={'playerId': host_id}).status_code == 200

    q = client.get(f'/api/rooms/{code}/question').get_json()
    assert q['question'] == {
        'id': 1,
        'question': 'What is the capital of France?',
        'options': ['London', 'Berlin', 'Paris', 'Madrid'],
        'index': 0,
    }
    assert q['totalQuestions'] == 1

    res = client.post(f'/api/rooms/{code}/answer', json={'playerId': host_id, 'answer': 2, 'timeSpent': 2})
    assert res.status_code == 200
    assert res.get_json() == {'isCorrect': True, 'points': 950, 'updatedScore': 950, 'correctAnswer': 2}

    room = client.post(f'/api/rooms/{code}/next-question', json={'playerId': host_id}).get_json()['room']
    assert room['status'] == 'finished'
    assert room['currentQuestion'] == 0


def test_duplicate_submission_adds_again(client):
    host = _create(client)
    code = host['roomCode']
    client.post(f'/api/rooms/{code}/start', json={'playerId': host['playerId']})
    body = {'playerId': host['playerId'], 'answer': 2, 'timeSpent': 2}
    assert client.post(f'/api/rooms/{code}/answer', json=body).get_json()['updatedScore'] == 950
    assert client.post(f'/api/rooms/{code}/answer', json=body).get_json()['updatedScore'] == 1900


def test_answer_validation(client):
    host = _create(client)
    code = host['roomCode']
    client.post(f'/api/rooms/{code}/start', json={'playerId': host['playerId']})
    res = client.post(f'/api/rooms/{code}/answer', json={'answer': 2, 'timeSpent': 1})
    assert res.status_code == 400
    res = client.post(f'/api/rooms/{code}/answer', json={'playerId': host['playerId'], 'timeSpent': 1})
    assert res.status_code == 400
    res = client.post(f'/api/rooms/{code}/answer', json={'playerId': 'ghost', 'answer': 2, 'timeSpent': 1})
    assert res.status_code == 404
    assert res.get_json() == {'error': 'Player not found', 'kind': 'not_found'}


def test_leaderboard_two_players(client):
    host = _create(client)
    code = host['roomCode']
    guest = _join(client, code, 'Bob')
    client.post(f'/api/rooms/{code}/start', json={'playerId': host['playerId']})
    client.post(f'/api/rooms/{code}/answer', json={'playerId': guest['playerId'], 'answer': 0, 'timeSpent': 3})
    client.post(f'/api/rooms/{code}/answer', json={'playerId': host['playerId'], 'answer': 2, 'timeSpent': 2})
    board = client.get(f'/api/rooms/{code}/leaderboard').get_json()['leaderboard']
    assert [(p['nickname'], p['score']) for p in board] == [('Alice', 950), ('Bob', 0)]


def test_answer_rejects_infinite_time(client):
    host = _create(client)
    code = host['roomCode']
    client.post(f'/api/rooms/{code}/start', json={'playerId': host['playerId']})
    body = '{"playerId": "%s", "answer": 2, "timeSpent": Infinity}' % host['playerId']
    res = client.post(f'/api/rooms/{code}/answer', data=body, content_type='application/json')
    assert res.status_code == 400
    assert res.get_json()['kind'] == 'validation'
    assert client.get(f'/api/rooms/{code}/answers').get_json() == {'answers': []}
    board = client.get(f'/api/rooms/{code}/leaderboard').get_json()['leaderboard']
    assert board[0]['score'] == 0


def test_answers_question_filter_must_be_integer(client):
    code = _create(client)['roomCode']
    res = client.get(f'/api/rooms/{code}/answers?question=abc')
    assert res.status_code == 400
    assert res.get_json()['kind'] == 'validation'
    assert client.get(f'/api/rooms/{code}/answers?question=0').status_code == 200


def test_show_room_command(flask_app, client):
    host = _create(client)
    code = host['roomCode']
    _join(client, code, 'Bob')
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['show-room', code.lower()])
    assert result.exit_code == 0
    printed = json.loads(result.stdout)
    assert printed['room']['code'] == code
    assert sorted(p['nickname'] for p in printed['players']) == ['Alice', 'Bob']
    assert [p['score'] for p in printed['leaderboard']] == [0, 0]

    result = runner.invoke(args=['show-room', 'NOPE00'])
    assert result.exit_code != 0
    assert 'Room not found' in result.output


def test_db_reset_command(flask_app, client):
    code = _create(client)['roomCode']
    result = flask_app.test_cli_runner().invoke(args=['db-reset'])
    assert result.exit_code == 0
    assert 'Database has been reset!' in result.output
    assert client.get(f'/api/rooms/{code}').status_code == 404
