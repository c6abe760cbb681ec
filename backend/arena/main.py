import re

from flask import Blueprint, request, jsonify, current_app
from flask_login import login_required, current_user
from .models import db, User
from .services.session import current_tokens

main = Blueprint('main', __name__)

_USERNAME_RE = re.compile(r'^[A-Za-z0-9_-]+$')


def _validate_registration(username, password):
    cfg = current_app.config
    if not isinstance(username, str) or not isinstance(password, str):
        return 'Username and password required'
    min_len = int(cfg.get('USERNAME_MIN_LENGTH', 3))
    max_len = int(cfg.get('USERNAME_MAX_LENGTH', 32))
    if not (min_len <= len(username) <= max_len):
        return f'Username must be {min_len}-{max_len} characters'
    if not _USERNAME_RE.match(username):
        return 'Username may only contain letters, digits, _ and -'
    if len(password) < int(cfg.get('PASSWORD_MIN_LENGTH', 6)):
        return f"Password must be at least {cfg.get('PASSWORD_MIN_LENGTH', 6)} characters"
    return None


def _logged_in_response(user, status=200):
    """JSON body plus the signed session cookie used by the socket handshake."""
    token = current_tokens().issue(user.id, user.username)
    resp = jsonify({"success": True, "user": user.to_dict(), "token": token})
    resp.status_code = status
    resp.set_cookie(
        current_app.config.get('TOKEN_COOKIE_NAME', 'token'),
        token,
        max_age=int(current_app.config.get('TOKEN_TTL_MINUTES', 60)) * 60,
        httponly=True,
        samesite='Lax',
    )
    return resp


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the arena server!'})


@main.route('/register', methods=['POST', 'OPTIONS'])
def register():
    if request.method == 'OPTIONS':
        return jsonify({'status': 'ok'}), 200
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    username = data.get('username')
    password = data.get('password')
    error = _validate_registration(username, password)
    if error:
        return jsonify({"success": False, "error": error}), 400
    if User.query.filter_by(username=username).first():
        return jsonify({"success": False, "error": "Username already exists"}), 400

    new_user = User(username=username)
    new_user.set_password(password)
    db.session.add(new_user)
    db.session.commit()
    current_app.logger.info(f"[register] user={new_user.id} username={new_user.username}")
    return _logged_in_response(new_user, status=201)


@main.route('/login', methods=['POST', 'OPTIONS'])
def login():
    if request.method == 'OPTIONS':
        return jsonify({'status': 'ok'}), 200
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    username = data.get('username')
    password = data.get('password')
    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        return jsonify({"success": False, "error": "Username and password required"}), 400
    user = User.query.filter_by(username=username).first()
    if user and user.check_password(password):
        current_app.logger.info(f"[login] user={user.id} username={user.username}")
        return _logged_in_response(user)
    current_app.logger.info(f"[login] failed username={username}")
    return jsonify({"success": False, "error": "Invalid username or password"}), 401


@main.route('/check_login', methods=['GET'])
@login_required
def check_login():
    return jsonify({"success": True, "user": current_user.to_dict()})


@main.route('/logout', methods=['POST'])
def logout():
    resp = jsonify({"success": True})
    resp.delete_cookie(current_app.config.get('TOKEN_COOKIE_NAME', 'token'))
    return resp
