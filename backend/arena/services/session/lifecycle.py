import enum
import logging
import threading
from dataclasses import replace
from typing import Dict, List, Optional, Tuple

from arena.errors import MalformedMessage, Unauthorized
from .protocol import (
    PLAYER_JOINED,
    PLAYER_LEFT,
    PLAYER_STATE_UPDATED,
    ROSTER_SNAPSHOT,
    Playfield,
    left_payload,
    parse_state_update,
    roster_payload,
)
from .registry import Player, PlayerRegistry


class ConnectionState(enum.Enum):
    CONNECTING = 'connecting'
    VERIFIED = 'verified'
    ACTIVE = 'active'
    CLOSED = 'closed'


class SessionLifecycle:
    """Drives each connection through connect -> update* -> disconnect.

    This is the only writer of the player registry. Each transition holds
    ``_lock`` across its read-modify-write and the broadcasts it triggers,
    because Flask-SocketIO may deliver events for different connections on
    different threads. Nothing inside the lock blocks on I/O.
    """

    def __init__(
        self,
        registry: PlayerRegistry,
        broadcaster,
        verifier,
        playfield: Playfield,
        spawn: Tuple[float, float] = (400, 300),
        max_hp: int = 100,
        logger: Optional[logging.Logger] = None,
    ):
        self.registry = registry
        self.broadcaster = broadcaster
        self.verifier = verifier
        self.playfield = playfield
        self.spawn = playfield.clamp(*spawn)
        self.max_hp = max_hp
        self.logger = logger or logging.getLogger(__name__)
        self._states: Dict[str, ConnectionState] = {}
        self._lock = threading.RLock()

    def state_of(self, connection_id: str) -> ConnectionState:
        return self._states.get(connection_id, ConnectionState.CLOSED)

    def players(self) -> List[Player]:
        with self._lock:
            return self.registry.list_all()

    # ---- transitions ----

    def connect(self, connection_id: str, credential) -> Player:
        """Verify the credential and activate the connection.

        Raises Unauthorized, in which case nothing has been registered.
        """
        with self._lock:
            if connection_id in self._states:
                self.logger.warning(f"[connect-dup] sid={connection_id} state={self._states[connection_id].value}")
                return self.registry.get(connection_id)

            self._states[connection_id] = ConnectionState.CONNECTING
            try:
                claim = self.verifier.verify(credential)
            except Unauthorized as exc:
                self._states.pop(connection_id, None)
                self.logger.info(f"[reject] sid={connection_id} reason={exc}")
                raise
            self._states[connection_id] = ConnectionState.VERIFIED

            # Snapshot before insertion so the newcomer never sees itself
            roster = self.registry.list_all()
            spawn_x, spawn_y = self.spawn
            player = Player(
                connection_id=connection_id,
                user_id=claim.user_id,
                username=claim.username,
                x=spawn_x,
                y=spawn_y,
                hp=self.max_hp,
            )
            self.registry.put(connection_id, player)
            self._states[connection_id] = ConnectionState.ACTIVE

            self.broadcaster.to_connection(connection_id, ROSTER_SNAPSHOT, roster_payload(roster))
            self.broadcaster.to_others(connection_id, PLAYER_JOINED, player.to_dict())
            self.logger.info(
                f"[connect] sid={connection_id} user={claim.user_id} username={claim.username} online={len(self.registry)}"
            )
            return player

    def update(self, connection_id: str, payload) -> Optional[Player]:
        """Apply a state_update from an active connection and echo it to all.

        Returns the stored player, or None when the message was dropped.
        """
        with self._lock:
            if self._states.get(connection_id) is not ConnectionState.ACTIVE:
                self.logger.debug(f"[update-drop] sid={connection_id} reason=not-active")
                return None
            try:
                update = parse_state_update(payload)
            except MalformedMessage as exc:
                self.logger.debug(f"[update-drop] sid={connection_id} reason={exc}")
                return None
            current = self.registry.get(connection_id)
            if current is None:
                return None

            x, y = self.playfield.clamp(update.x, update.y)
            hp = current.hp if update.hp is None else min(max(update.hp, 0), self.max_hp)
            moved = replace(current, x=x, y=y, hp=hp)
            self.registry.put(connection_id, moved)
            self.broadcaster.to_all(PLAYER_STATE_UPDATED, moved.to_dict())
            return moved

    def disconnect(self, connection_id: str) -> bool:
        """Close the connection; returns False if it was already gone."""
        with self._lock:
            self._states.pop(connection_id, None)
            player = self.registry.remove(connection_id)
            if player is None:
                return False
            self.broadcaster.to_others(connection_id, PLAYER_LEFT, left_payload(connection_id))
            self.logger.info(
                f"[disconnect] sid={connection_id} user={player.user_id} online={len(self.registry)}"
            )
            return True
