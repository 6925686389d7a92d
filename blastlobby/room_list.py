"""A bounded collection of rooms indexed by room id."""

from __future__ import annotations

from typing import Iterator, Optional

from blastlobby.room import Room


class RoomList:
    """Rooms in creation order; a room's id is its position."""

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._rooms: list[Room] = []

    def is_full(self) -> bool:
        return len(self._rooms) >= self.capacity

    def push(self, room: Room) -> int:
        """Add a room, assign it the next id and return that id."""
        if self.is_full():
            raise OverflowError(f"no more than {self.capacity} rooms allowed")
        room.room_id = len(self._rooms)
        self._rooms.append(room)
        return room.room_id

    def find_by_name(self, name: str) -> Optional[Room]:
        return next((room for room in self._rooms if room.name == name), None)

    def __len__(self) -> int:
        return len(self._rooms)

    def __iter__(self) -> Iterator[Room]:
        return iter(self._rooms)

    def __getitem__(self, room_id: int) -> Room:
        if not 0 <= room_id < len(self._rooms):
            raise IndexError(f"no room with id {room_id}")
        return self._rooms[room_id]