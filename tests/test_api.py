def create_session(client):
    res = client.post('/api/session')
    assert res.status_code == 201
    return res.get_json()['session_id']


def type_word(client, session_id, word):
    for ch in word:
        res = client.post(f'/api/session/{session_id}/input', json={'char': ch})
        assert res.status_code == 200
    return res.get_json()['state']


def test_create_session(client):
    res = client.post('/api/session')
    assert res.status_code == 201
    data = res.get_json()
    assert data['success'] is True
    assert 'session_id' in data
    assert data['state']['current_row'] == 0
    assert data['state']['max_rounds'] == 6
    assert data['state']['word_length'] == 5
    assert data['state']['answer'] is None


def test_input_and_delete(client):
    session_id = create_session(client)
    state = type_word(client, session_id, 'tra')
    assert state['grid'][0] == ['T', 'R', 'A', '', '']

    res = client.post(f'/api/session/{session_id}/delete')
    assert res.get_json()['state']['current_col'] == 2


def test_input_requires_char(client):
    session_id = create_session(client)
    res = client.post(f'/api/session/{session_id}/input', json={})
    assert res.status_code == 400
    assert res.get_json()['success'] is False


def test_incomplete_submit_is_rejected(client):
    session_id = create_session(client)
    type_word(client, session_id, 'CRA')
    res = client.post(f'/api/session/{session_id}/submit')
    assert res.status_code == 400
    data = res.get_json()
    assert data['error_code'] == 'INCOMPLETE_GUESS'
    assert data['error'] == 'Your guess must be a 5-letter word.'
    assert data['state']['current_col'] == 3


def test_invalid_word_is_rejected(client):
    session_id = create_session(client)
    type_word(client, session_id, 'ZZZZZ')
    res = client.post(f'/api/session/{session_id}/submit')
    assert res.status_code == 400
    assert res.get_json()['error_code'] == 'INVALID_WORD'


def test_winning_round(client, store):
    session_id = create_session(client)
    type_word(client, session_id, 'TRACE')
    res = client.post(f'/api/session/{session_id}/submit')
    state = res.get_json()['state']
    assert state['keyboard']['C'] == 'PRESENT'
    assert state['results'] == [['ABSENT', 'CORRECT', 'CORRECT', 'PRESENT', 'CORRECT']]

    type_word(client, session_id, 'CRANE')
    res = client.post(f'/api/session/{session_id}/submit')
    assert res.status_code == 200
    state = res.get_json()['state']
    assert state['game_over'] is True
    assert state['won'] is True
    assert state['score'] == 90
    assert state['status'] == 'You win!'
    assert store.load().guesses == [0, 0, 1, 0, 0, 0, 0]


def test_losing_round_reveals_answer(client, store):
    session_id = create_session(client)
    for word in ['SLATE', 'MOUNT', 'PLUMB', 'FIGHT', 'DWARF', 'GHOST']:
        type_word(client, session_id, word)
        client.post(f'/api/session/{session_id}/submit')

    state = client.get(f'/api/session/{session_id}/state').get_json()['state']
    assert state['game_over'] is True
    assert state['won'] is False
    assert state['answer'] == 'CRANE'
    assert store.load().guesses == [1, 0, 0, 0, 0, 0, 0]


def test_reset(client):
    session_id = create_session(client)
    type_word(client, session_id, 'CRANE')
    client.post(f'/api/session/{session_id}/submit')

    res = client.post(f'/api/session/{session_id}/reset')
    state = res.get_json()['state']
    assert state['game_over'] is False
    assert state['status'] == 'Score: 100'


def test_unknown_session(client):
    for res in [
        client.get('/api/session/nope/state'),
        client.post('/api/session/nope/input', json={'char': 'A'}),
        client.post('/api/session/nope/delete'),
        client.post('/api/session/nope/submit'),
        client.post('/api/session/nope/reset'),
    ]:
        assert res.status_code == 404
        assert res.get_json() == {'success': False, 'error': 'Session not found'}


def test_delete_session(client):
    session_id = create_session(client)
    assert client.delete(f'/api/session/{session_id}').status_code == 200
    assert client.delete(f'/api/session/{session_id}').status_code == 404


def test_health(client):
    create_session(client)
    res = client.get('/api/health')
    assert res.status_code == 200
    data = res.get_json()
    assert data['status'] == 'healthy'
    assert data['active_sessions'] == 1
