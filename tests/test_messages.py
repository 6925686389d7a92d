import struct

import pytest

from blastlobby.messages import (
    AddPlayerInRoom,
    ClientGoodbye,
    ClientMessageType,
    CreateRoomRequest,
    CreateRoomResponse,
    CreateRoomStatus,
    GetAgent,
    GetRoomsRequest,
    JoinRoomRequest,
    JoinRoomResponse,
    JoinRoomStatus,
    MessageError,
    RoomInfo,
    SendAgentToPlayer,
    SendAgentToServer,
    SendRooms,
    ServerHello,
    ServerMessageType,
    decode_client_message,
    decode_server_message,
    encode_client_message,
    encode_server_message,
)

CLIENT_SAMPLES = [
    ClientGoodbye(),
    CreateRoomRequest("arena", "alice", seed=12345, max_players=4),
    GetRoomsRequest(),
    JoinRoomRequest("arena", "bob"),
    SendAgentToServer(1, 0, 2, "v=0 candidate data"),
]

SERVER_SAMPLES = [
    ServerHello(),
    CreateRoomResponse(CreateRoomStatus.OK, 3),
    CreateRoomResponse(CreateRoomStatus.NAME_ALREADY_USED),
    SendRooms((RoomInfo("arena", 2, 4), RoomInfo("pit", 1, 8))),
    SendRooms(),
    JoinRoomResponse(
        JoinRoomStatus.OK,
        "arena",
        room_id=1,
        player_id=2,
        players=((0, "alice", 1), (1, "bob", 0)),
        game_seed=77,
    ),
    JoinRoomResponse(JoinRoomStatus.ROOM_IS_FULL, "arena", room_id=1),
    AddPlayerInRoom(2, "carol"),
    GetAgent(2, "carol", 3),
    SendAgentToPlayer(2, 0, "v=0 answer"),
]


@pytest.mark.parametrize("message", CLIENT_SAMPLES)
def test_client_round_trip(message):
    assert decode_client_message(encode_client_message(message)) == message


@pytest.mark.parametrize("message", SERVER_SAMPLES)
def test_server_round_trip(message):
    assert decode_server_message(encode_server_message(message)) == message


@pytest.mark.parametrize("message", CLIENT_SAMPLES)
def test_client_type_tag_leads(message):
    (tag,) = struct.unpack_from("<i", encode_client_message(message))
    assert tag == message.TYPE


def test_goodbye_is_only_its_tag():
    assert encode_client_message(ClientGoodbye()) == struct.pack(
        "<i", ClientMessageType.CLIENT_GOODBYE
    )


def test_hello_decodes_from_its_tag():
    data = struct.pack("<i", ServerMessageType.SERVER_HELLO)
    assert decode_server_message(data) == ServerHello()


def test_rejected_join_is_shorter_than_accepted():
    rejected = encode_server_message(JoinRoomResponse(JoinRoomStatus.INVALID_ROOM, "x"))
    accepted = encode_server_message(JoinRoomResponse(JoinRoomStatus.OK, "x"))
    assert len(rejected) < len(accepted)


def test_accepted_join_needs_player_list():
    rejected = encode_server_message(JoinRoomResponse(JoinRoomStatus.INVALID_ROOM, "x"))
    data = struct.pack("<i", ServerMessageType.JOIN_ROOM_RESPONSE) + struct.pack(
        "<i", JoinRoomStatus.OK
    ) + rejected[8:]
    with pytest.raises(MessageError):
        decode_server_message(data)


def test_room_list_grows_with_room_count():
    one = encode_server_message(SendRooms((RoomInfo("a", 1, 2),)))
    two = encode_server_message(SendRooms((RoomInfo("a", 1, 2), RoomInfo("b", 1, 2))))
    none = encode_server_message(SendRooms())
    assert len(two) - len(one) == len(one) - len(none)


def test_name_of_31_bytes_fits():
    name = "n" * 31
    message = JoinRoomRequest(name, name)
    assert decode_client_message(encode_client_message(message)).room_name == name


def test_name_of_32_bytes_rejected():
    with pytest.raises(MessageError):
        encode_client_message(JoinRoomRequest("n" * 32, "bob"))


def test_unicode_names_round_trip():
    message = AddPlayerInRoom(1, "Zoë")
    assert decode_server_message(encode_server_message(message)).player_name == "Zoë"


def test_too_many_rooms():
    rooms = tuple(RoomInfo(f"r{n}", 0, 4) for n in range(21))
    with pytest.raises(MessageError):
        encode_server_message(SendRooms(rooms))


def test_too_many_players():
    players = tuple((n, f"p{n}", 0) for n in range(11))
    with pytest.raises(MessageError):
        encode_server_message(JoinRoomResponse(JoinRoomStatus.OK, "a", players=players))


def test_room_info_counter_out_of_byte_range():
    with pytest.raises(MessageError):
        encode_server_message(SendRooms((RoomInfo("a", 300, 4),)))


def test_negative_seed_rejected():
    with pytest.raises(MessageError):
        encode_client_message(CreateRoomRequest("a", "b", seed=-1))


def test_unknown_client_type():
    with pytest.raises(MessageError):
        decode_client_message(struct.pack("<i", 99))


def test_unknown_status():
    data = struct.pack("<iii", ServerMessageType.CREATE_ROOM_RESPONSE, 42, 0)
    with pytest.raises(MessageError):
        decode_server_message(data)


def test_truncated_tag():
    with pytest.raises(MessageError):
        decode_server_message(b"\x00")


def test_trailing_bytes_rejected():
    data = encode_client_message(JoinRoomRequest("a", "b")) + b"\x00"
    with pytest.raises(MessageError):
        decode_client_message(data)


def test_bodiless_with_body_rejected():
    with pytest.raises(MessageError):
        decode_client_message(encode_client_message(GetRoomsRequest()) + b"\x01")


def test_wrong_direction_encode():
    with pytest.raises(TypeError):
        encode_client_message(ServerHello())
    with pytest.raises(TypeError):
        encode_server_message(GetRoomsRequest())