from flask import Blueprint, jsonify, current_app
from flask_login import login_required
from arena.services.session import current_session


session_api = Blueprint('session', __name__)


@session_api.route('/players', methods=['GET'])
@login_required
def list_online_players():
    players = current_session().players()
    return jsonify({'players': [p.to_dict() for p in players], 'count': len(players)})


@session_api.route('/config', methods=['GET'])
def get_session_config():
    # Static settings a client needs before opening the socket
    session = current_session()
    spawn_x, spawn_y = session.spawn
    return jsonify({
        'namespace': current_app.config.get('SOCKETIO_NAMESPACE', '/ws'),
        'playfield': {'width': session.playfield.width, 'height': session.playfield.height},
        'spawn': {'x': spawn_x, 'y': spawn_y},
        'max_hp': session.max_hp,
    })
