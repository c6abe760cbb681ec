def _register(client, username='alice', password='secret123'):
    return client.post('/register', json={'username': username, 'password': password})


def test_index(client):
    res = client.get('/')
    assert res.status_code == 200


def test_register_sets_session_cookie(client):
    res = _register(client)
    assert res.status_code == 201
    data = res.get_json()
    assert data['success'] is True
    assert data['user']['username'] == 'alice'
    assert data['token']
    assert 'token=' in res.headers.get('Set-Cookie', '')


def test_register_validates_input(client):
    assert client.post('/register', json={}).status_code == 400
    assert _register(client, username='ab').status_code == 400
    assert _register(client, username='bad name!').status_code == 400
    assert _register(client, password='123').status_code == 400


def test_register_rejects_duplicate_username(client):
    assert _register(client).status_code == 201
    res = _register(client)
    assert res.status_code == 400
    assert res.get_json()['success'] is False


def test_password_is_stored_hashed(flask_app, client):
    from arena.models import User
    _register(client)
    with flask_app.app_context():
        user = User.query.filter_by(username='alice').first()
        assert user.password_hash != 'secret123'
        assert user.check_password('secret123')
        assert not user.check_password('wrong')


def test_login_and_check_login(flask_app):
    _register(flask_app.test_client())
    client = flask_app.test_client()
    assert client.get('/check_login').status_code == 401

    res = client.post('/login', json={'username': 'alice', 'password': 'wrong-pass'})
    assert res.status_code == 401

    res = client.post('/login', json={'username': 'alice', 'password': 'secret123'})
    assert res.status_code == 200
    assert res.get_json()['user']['username'] == 'alice'

    res = client.get('/check_login')
    assert res.status_code == 200
    assert res.get_json()['user']['username'] == 'alice'


def test_login_requires_fields(client):
    assert client.post('/login', json={'username': 'alice'}).status_code == 400


def test_login_rejects_non_string_credentials(client):
    _register(client)
    res = client.post('/login', json={'username': 'alice', 'password': 12345678})
    assert res.status_code == 400
    res = client.post('/login', json={'username': {'$ne': None}, 'password': 'secret123'})
    assert res.status_code == 400
    assert client.post('/login', json=['alice', 'secret123']).status_code == 400
    assert client.post('/register', json=['alice', 'secret123']).status_code == 400


def test_bearer_header_is_accepted(flask_app):
    token = _register(flask_app.test_client()).get_json()['token']
    client = flask_app.test_client()
    res = client.get('/check_login', headers={'Authorization': f'Bearer {token}'})
    assert res.status_code == 200
    res = client.get('/check_login', headers={'Authorization': 'Bearer nope'})
    assert res.status_code == 401


def test_logout_clears_cookie(client):
    _register(client)
    assert client.get('/check_login').status_code == 200
    client.post('/logout')
    assert client.get('/check_login').status_code == 401


def test_report_results_and_profile(client):
    _register(client)
    assert client.post('/api/results', json={'score': 12, 'won': False}).status_code == 201
    res = client.post('/api/results', json={'score': 30, 'won': True})
    assert res.status_code == 201
    assert res.get_json()['score'] == 30

    profile = client.get('/api/profile').get_json()
    assert profile['username'] == 'alice'
    assert profile['games_played'] == 2
    assert profile['wins'] == 1
    assert profile['best_score'] == 30
    assert len(profile['recent_results']) == 2

    rows = client.get('/api/results').get_json()
    assert sorted(r['score'] for r in rows) == [12, 30]


def test_report_result_validates_payload(client):
    _register(client)
    assert client.post('/api/results', json={'score': -1}).status_code == 400
    assert client.post('/api/results', json={'score': 'ten'}).status_code == 400
    assert client.post('/api/results', json={'score': 10 ** 40}).status_code == 400
    assert client.post('/api/results', json={'score': 5, 'won': 'yes'}).status_code == 400


def test_results_require_login(client):
    assert client.get('/api/profile').status_code == 401
    assert client.post('/api/results', json={'score': 1}).status_code == 401


def test_session_config(client):
    data = client.get('/api/session/config').get_json()
    assert data['playfield'] == {'width': 800, 'height': 600}
    assert data['spawn'] == {'x': 400, 'y': 300}
    assert data['max_hp'] == 100
    assert data['namespace'] == '/ws'


def test_online_players_lists_registry(client, connect_player):
    _register(client)
    assert client.get('/api/session/players').get_json() == {'players': [], 'count': 0}
    connect_player(5, 'dave')
    data = client.get('/api/session/players').get_json()
    assert data['count'] == 1
    assert data['players'][0]['username'] == 'dave'
