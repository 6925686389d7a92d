import pytest

from blastlobby.room import Room
from blastlobby.room_list import RoomList


def test_push_assigns_sequential_ids():
    rooms = RoomList(4)
    first = Room("a", 2)
    second = Room("b", 2)
    assert rooms.push(first) == 0
    assert rooms.push(second) == 1
    assert second.room_id == 1


def test_full_list_rejects_push():
    rooms = RoomList(1)
    rooms.push(Room("a", 2))
    assert rooms.is_full()
    with pytest.raises(OverflowError):
        rooms.push(Room("b", 2))
    assert len(rooms) == 1


def test_find_by_name():
    rooms = RoomList(4)
    room = Room("arena", 4)
    rooms.push(Room("other", 4))
    rooms.push(room)
    assert rooms.find_by_name("arena") is room
    assert rooms.find_by_name("missing") is None


def test_getitem_and_iteration_order():
    rooms = RoomList(3)
    created = [Room(name, 2) for name in ("x", "y", "z")]
    for room in created:
        rooms.push(room)
    assert list(rooms) == created
    assert rooms[2] is created[2]


@pytest.mark.parametrize("room_id", [-1, 1])
def test_getitem_out_of_range(room_id):
    rooms = RoomList(3)
    only = Room("x", 2)
    rooms.push(only)
    with pytest.raises(IndexError):
        rooms[room_id]
    assert rooms[0] is only
    assert len(rooms) == 1


def test_zero_capacity():
    with pytest.raises(ValueError):
        RoomList(0)