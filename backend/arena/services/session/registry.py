from dataclasses import dataclass, asdict
from typing import Dict, List, Optional


@dataclass(frozen=True)
class Player:
    connection_id: str
    user_id: int
    username: str
    x: float
    y: float
    hp: int

    def to_dict(self):
        return asdict(self)


class PlayerRegistry:
    """In-memory map of connection id -> Player.

    Only the session lifecycle writes to it. Players are immutable, so
    callers replace entries instead of mutating them and every read hands
    out a value that later writes cannot change.
    """

    def __init__(self):
        self._players: Dict[str, Player] = {}

    def put(self, connection_id: str, player: Player) -> None:
        self._players[connection_id] = player

    def get(self, connection_id: str) -> Optional[Player]:
        return self._players.get(connection_id)

    def remove(self, connection_id: str) -> Optional[Player]:
        return self._players.pop(connection_id, None)

    def list_all(self) -> List[Player]:
        return list(self._players.values())

    def __contains__(self, connection_id) -> bool:
        return connection_id in self._players

    def __len__(self) -> int:
        return len(self._players)
