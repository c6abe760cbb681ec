from flask import current_app, request
from flask_socketio import ConnectionRefusedError
from arena import socketio
from arena.errors import Unauthorized
from arena.services.session import current_session
from arena.services.session.protocol import STATE_UPDATE


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _handshake_credential(auth):
    """Credential from the connect auth payload, else from the session cookie."""
    if isinstance(auth, dict) and auth.get('token'):
        return auth['token']
    return request.cookies.get(current_app.config.get('TOKEN_COOKIE_NAME', 'token'))


def handle_connect(auth=None):
    try:
        current_session().connect(_get_sid(), _handshake_credential(auth))
    except Unauthorized:
        # Refuse before any handler attaches to this connection
        raise ConnectionRefusedError('unauthorized')


def handle_disconnect(reason=None):
    # Abrupt and graceful closes take the same path
    current_session().disconnect(_get_sid())


def handle_state_update(data):
    current_session().update(_get_sid(), data)


def register_socketio_handlers(namespace: str = '/ws') -> None:
    """Register the realtime session handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event(STATE_UPDATE, handle_state_update, namespace=namespace)
