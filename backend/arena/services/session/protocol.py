"""Event names, payload parsing and fan-out for the realtime channel."""

import math
from dataclasses import dataclass
from numbers import Real
from typing import Optional, Tuple

from arena.errors import MalformedMessage

# Server -> client
ROSTER_SNAPSHOT = 'roster_snapshot'
PLAYER_JOINED = 'player_joined'
PLAYER_STATE_UPDATED = 'player_state_updated'
PLAYER_LEFT = 'player_left'

# Client -> server
STATE_UPDATE = 'state_update'


@dataclass(frozen=True)
class Playfield:
    width: float
    height: float

    def clamp(self, x: float, y: float) -> Tuple[float, float]:
        return float(min(max(x, 0), self.width)), float(min(max(y, 0), self.height))


@dataclass(frozen=True)
class StateUpdate:
    x: float
    y: float
    hp: Optional[int] = None


def _coordinate(payload, key):
    value = payload.get(key)
    # bool is an int subclass; True is not a coordinate
    if isinstance(value, bool) or not isinstance(value, Real):
        raise MalformedMessage(f'{key} must be a number')
    try:
        finite = math.isfinite(value)
    except OverflowError:
        raise MalformedMessage(f'{key} is out of range')
    if not finite:
        raise MalformedMessage(f'{key} must be finite')
    return value


def parse_state_update(payload) -> StateUpdate:
    """Validate an inbound state_update payload.

    Raises MalformedMessage on anything other than a mapping with finite
    numeric ``x`` and ``y`` and an optional integer ``hp``.
    """
    if not isinstance(payload, dict):
        raise MalformedMessage('payload must be an object')
    x = _coordinate(payload, 'x')
    y = _coordinate(payload, 'y')
    hp = payload.get('hp')
    if hp is not None and (isinstance(hp, bool) or not isinstance(hp, int)):
        raise MalformedMessage('hp must be an integer')
    return StateUpdate(x=x, y=y, hp=hp)


def roster_payload(players):
    return {'players': [p.to_dict() for p in players]}


def left_payload(connection_id: str):
    return {'connection_id': connection_id}


class SocketIOBroadcaster:
    """Fan-out over a Flask-SocketIO server on one namespace."""

    def __init__(self, socketio, namespace: str = '/ws'):
        self.socketio = socketio
        self.namespace = namespace

    def to_connection(self, connection_id: str, event: str, payload) -> None:
        self.socketio.emit(event, payload, to=connection_id, namespace=self.namespace)

    def to_others(self, connection_id: str, event: str, payload) -> None:
        self.socketio.emit(event, payload, namespace=self.namespace, skip_sid=connection_id)

    def to_all(self, event: str, payload) -> None:
        self.socketio.emit(event, payload, namespace=self.namespace)
