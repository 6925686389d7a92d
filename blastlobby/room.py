"""Game rooms and the players waiting in them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

ROOM_MAX_PLAYERS = 8


class RoomFullError(Exception):
    """Raised when a room has no seat left."""


@dataclass
class RoomPlayer:
    """A player seated in a room, with the connection that reaches them."""

    name: str
    connection: Any
    player_id: int
    skin: int = 0


@dataclass
class Room:
    """A named room holding up to ``max_players`` players."""

    name: str
    max_players: int
    seed: int = 0
    room_id: int = 0
    players: list[RoomPlayer] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not 1 <= self.max_players <= ROOM_MAX_PLAYERS:
            raise ValueError(
                f"a room holds between 1 and {ROOM_MAX_PLAYERS} players, not {self.max_players}"
            )

    def has_player_name(self, name: str) -> bool:
        """Tell whether a player with this name is already in the room."""
        return any(player.name == name for player in self.players)

    def is_full(self) -> bool:
        return len(self.players) >= self.max_players

    def unused_id(self) -> int:
        """Return the lowest player id not yet taken."""
        if self.is_full():
            raise RoomFullError(f"room {self.name!r} is full")
        used = {player.player_id for player in self.players}
        return next(pid for pid in range(self.max_players) if pid not in used)

    def insert_player(self, player_id: int, name: str, connection: Any) -> RoomPlayer:
        """Seat a player under the given id, after those already present."""
        if self.is_full():
            raise RoomFullError(f"room {self.name!r} is full")
        if not 0 <= player_id < self.max_players:
            raise ValueError(f"player id {player_id} is out of range")
        if any(player.player_id == player_id for player in self.players):
            raise ValueError(f"player id {player_id} is already used")
        player = RoomPlayer(name, connection, player_id)
        self.players.append(player)
        return player

    def broadcast(self, data: bytes) -> None:
        """Send the same bytes to every player, in seating order."""
        for player in self.players:
            player.connection.sendall(data)

    def find_player(self, player_id: int) -> RoomPlayer:
        """Return the player with this id, or raise KeyError."""
        for player in self.players:
            if player.player_id == player_id:
                return player
        raise KeyError(player_id)