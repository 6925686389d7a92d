"""Binary messages exchanged between game clients and the matchmaking server.

Every message starts with a little-endian 32-bit type tag followed by a body
whose layout depends on the type. Text fields are fixed-size, NUL-padded
UTF-8 and always keep room for a terminating NUL.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar, Iterable, Union

ROOM_NAME_LENGTH = 32
PLAYER_NAME_LENGTH = 32
ICE_MESSAGE_SIZE = 4096
MAX_ROOMS_LISTED = 20
MAX_PLAYERS_LISTED = 10


class ClientMessageType(IntEnum):
    CLIENT_GOODBYE = 0
    CREATE_ROOM = 1
    GET_ROOMS = 2
    JOIN_ROOM = 3
    SEND_AGENT_TO_SERVER = 4


class ServerMessageType(IntEnum):
    SERVER_HELLO = 0
    CREATE_ROOM_RESPONSE = 1
    JOIN_ROOM_RESPONSE = 2
    SEND_ROOMS = 3
    GET_AGENT = 4
    ADD_PLAYER_IN_ROOM = 5
    SEND_AGENT_TO_PLAYER = 6


class CreateRoomStatus(IntEnum):
    OK = 0
    TOO_MANY_ROOMS = 1
    NAME_ALREADY_USED = 2


class JoinRoomStatus(IntEnum):
    OK = 0
    NAME_ALREADY_USED = 1
    INVALID_ROOM = 2
    ROOM_IS_FULL = 3


class MessageError(ValueError):
    """Raised when a message cannot be encoded or decoded."""


_TYPE = struct.Struct("<i")


def _pack_text(text: str, size: int, what: str) -> bytes:
    raw = text.encode("utf-8")
    if b"\0" in raw:
        raise MessageError(f"{what} must not contain NUL characters")
    if len(raw) >= size:
        raise MessageError(f"{what} is {len(raw)} bytes long, at most {size - 1} allowed")
    return raw.ljust(size, b"\0")


def _unpack_text(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def _pack(layout: struct.Struct, *values) -> bytes:
    try:
        return layout.pack(*values)
    except struct.error as exc:
        raise MessageError(str(exc)) from exc


def _unpack(layout: struct.Struct, body: bytes, what: str) -> tuple:
    if len(body) != layout.size:
        raise MessageError(f"{what} body must be {layout.size} bytes, got {len(body)}")
    return layout.unpack(body)


def _enum(kind, value):
    try:
        return kind(value)
    except ValueError as exc:
        raise MessageError(f"invalid {kind.__name__} value {value}") from exc


@dataclass(frozen=True)
class RoomInfo:
    """Public information about a game room."""

    name: str
    player_count: int
    size: int

    _LAYOUT: ClassVar[struct.Struct] = struct.Struct(f"<{ROOM_NAME_LENGTH}sBB")

    def _encode(self) -> bytes:
        return _pack(
            self._LAYOUT,
            _pack_text(self.name, ROOM_NAME_LENGTH, "room name"),
            self.player_count,
            self.size,
        )

    @classmethod
    def _decode(cls, raw: bytes) -> "RoomInfo":
        name, count, size = _unpack(cls._LAYOUT, raw, "room info")
        return cls(_unpack_text(name), count, size)


class _Bodiless:
    def _encode_body(self) -> bytes:
        return b""

    @classmethod
    def _decode_body(cls, body: bytes):
        if body:
            raise MessageError(f"{cls.__name__} carries no body, got {len(body)} bytes")
        return cls()


# Client to server


@dataclass(frozen=True)
class ClientGoodbye(_Bodiless):
    """Sent by a client that closes its connection."""

    TYPE: ClassVar[ClientMessageType] = ClientMessageType.CLIENT_GOODBYE


@dataclass(frozen=True)
class CreateRoomRequest:
    """Sent by a host to create a room."""

    TYPE: ClassVar[ClientMessageType] = ClientMessageType.CREATE_ROOM
    _LAYOUT: ClassVar[struct.Struct] = struct.Struct(
        f"<{ROOM_NAME_LENGTH}s{PLAYER_NAME_LENGTH}sII"
    )

    room_name: str
    player_name: str
    seed: int = 0
    max_players: int = 4

    def _encode_body(self) -> bytes:
        return _pack(
            self._LAYOUT,
            _pack_text(self.room_name, ROOM_NAME_LENGTH, "room name"),
            _pack_text(self.player_name, PLAYER_NAME_LENGTH, "player name"),
            self.seed,
            self.max_players,
        )

    @classmethod
    def _decode_body(cls, body: bytes) -> "CreateRoomRequest":
        room, player, seed, max_players = _unpack(cls._LAYOUT, body, "CreateRoomRequest")
        return cls(_unpack_text(room), _unpack_text(player), seed, max_players)


@dataclass(frozen=True)
class GetRoomsRequest(_Bodiless):
    """Asks the server for the list of existing rooms."""

    TYPE: ClassVar[ClientMessageType] = ClientMessageType.GET_ROOMS


@dataclass(frozen=True)
class JoinRoomRequest:
    """Sent by a player who wants to join a room."""

    TYPE: ClassVar[ClientMessageType] = ClientMessageType.JOIN_ROOM
    _LAYOUT: ClassVar[struct.Struct] = struct.Struct(
        f"<{ROOM_NAME_LENGTH}s{PLAYER_NAME_LENGTH}s"
    )

    room_name: str
    player_name: str

    def _encode_body(self) -> bytes:
        return _pack(
            self._LAYOUT,
            _pack_text(self.room_name, ROOM_NAME_LENGTH, "room name"),
            _pack_text(self.player_name, PLAYER_NAME_LENGTH, "player name"),
        )

    @classmethod
    def _decode_body(cls, body: bytes) -> "JoinRoomRequest":
        room, player = _unpack(cls._LAYOUT, body, "JoinRoomRequest")
        return cls(_unpack_text(room), _unpack_text(player))


@dataclass(frozen=True)
class SendAgentToServer:
    """Connection details a player wants relayed to another room member."""

    TYPE: ClassVar[ClientMessageType] = ClientMessageType.SEND_AGENT_TO_SERVER
    _LAYOUT: ClassVar[struct.Struct] = struct.Struct(f"<iii{ICE_MESSAGE_SIZE}s")

    from_player: int
    to_player: int
    room_id: int
    ice_sdp: str

    def _encode_body(self) -> bytes:
        return _pack(
            self._LAYOUT,
            self.from_player,
            self.to_player,
            self.room_id,
            _pack_text(self.ice_sdp, ICE_MESSAGE_SIZE, "ICE description"),
        )

    @classmethod
    def _decode_body(cls, body: bytes) -> "SendAgentToServer":
        src, dst, room_id, sdp = _unpack(cls._LAYOUT, body, "SendAgentToServer")
        return cls(src, dst, room_id, _unpack_text(sdp))


# Server to client


@dataclass(frozen=True)
class ServerHello(_Bodiless):
    """Greeting sent to every new connection."""

    TYPE: ClassVar[ServerMessageType] = ServerMessageType.SERVER_HELLO


@dataclass(frozen=True)
class CreateRoomResponse:
    """Answer to a room creation request; ``room_id`` matters only when OK."""

    TYPE: ClassVar[ServerMessageType] = ServerMessageType.CREATE_ROOM_RESPONSE
    _LAYOUT: ClassVar[struct.Struct] = struct.Struct("<ii")

    status: CreateRoomStatus
    room_id: int = 0

    def _encode_body(self) -> bytes:
        return _pack(self._LAYOUT, int(self.status), self.room_id)

    @classmethod
    def _decode_body(cls, body: bytes) -> "CreateRoomResponse":
        status, room_id = _unpack(cls._LAYOUT, body, "CreateRoomResponse")
        return cls(_enum(CreateRoomStatus, status), room_id)


@dataclass(frozen=True)
class SendRooms:
    """The list of public rooms."""

    TYPE: ClassVar[ServerMessageType] = ServerMessageType.SEND_ROOMS
    _COUNT: ClassVar[struct.Struct] = struct.Struct("<I")

    rooms: tuple[RoomInfo, ...] = ()

    def _encode_body(self) -> bytes:
        if len(self.rooms) > MAX_ROOMS_LISTED:
            raise MessageError(f"at most {MAX_ROOMS_LISTED} rooms can be listed")
        return self._COUNT.pack(len(self.rooms)) + b"".join(
            room._encode() for room in self.rooms
        )

    @classmethod
    def _decode_body(cls, body: bytes) -> "SendRooms":
        if len(body) < cls._COUNT.size:
            raise MessageError("SendRooms body is truncated")
        (count,) = cls._COUNT.unpack_from(body)
        if count > MAX_ROOMS_LISTED:
            raise MessageError(f"room count {count} exceeds {MAX_ROOMS_LISTED}")
        entries = body[cls._COUNT.size :]
        step = RoomInfo._LAYOUT.size
        if len(entries) != count * step:
            raise MessageError("SendRooms body does not match its room count")
        return cls(
            tuple(RoomInfo._decode(entries[o : o + step]) for o in range(0, len(entries), step))
        )


@dataclass(frozen=True)
class JoinRoomResponse:
    """Answer to a join request.

    ``players`` holds ``(player_id, name, skin)`` for those already in the
    room. Only the status, room name and room id travel when the status is
    not OK.
    """

    TYPE: ClassVar[ServerMessageType] = ServerMessageType.JOIN_ROOM_RESPONSE
    _HEAD: ClassVar[struct.Struct] = struct.Struct(f"<i{ROOM_NAME_LENGTH}si")
    _TAIL: ClassVar[struct.Struct] = struct.Struct(
        f"<ii{MAX_PLAYERS_LISTED}i{MAX_PLAYERS_LISTED * PLAYER_NAME_LENGTH}s"
        f"{MAX_PLAYERS_LISTED}ii"
    )

    status: JoinRoomStatus
    room_name: str
    room_id: int = 0
    player_id: int = 0
    players: tuple[tuple[int, str, int], ...] = ()
    game_seed: int = 0

    def _encode_body(self) -> bytes:
        head = _pack(
            self._HEAD,
            int(self.status),
            _pack_text(self.room_name, ROOM_NAME_LENGTH, "room name"),
            self.room_id,
        )
        if self.status != JoinRoomStatus.OK:
            return head
        if len(self.players) > MAX_PLAYERS_LISTED:
            raise MessageError(f"at most {MAX_PLAYERS_LISTED} players can be listed")
        padding = MAX_PLAYERS_LISTED - len(self.players)
        ids = [pid for pid, _, _ in self.players] + [0] * padding
        skins = [skin for _, _, skin in self.players] + [0] * padding
        names = b"".join(
            _pack_text(name, PLAYER_NAME_LENGTH, "player name") for _, name, _ in self.players
        ).ljust(MAX_PLAYERS_LISTED * PLAYER_NAME_LENGTH, b"\0")
        tail = _pack(
            self._TAIL, self.player_id, len(self.players), *ids, names, *skins, self.game_seed
        )
        return head + tail

    @classmethod
    def _decode_body(cls, body: bytes) -> "JoinRoomResponse":
        if len(body) < cls._HEAD.size:
            raise MessageError("JoinRoomResponse body is truncated")
        status, room_name, room_id = cls._HEAD.unpack_from(body)
        status = _enum(JoinRoomStatus, status)
        room_name = _unpack_text(room_name)
        rest = body[cls._HEAD.size :]
        if not rest:
            if status == JoinRoomStatus.OK:
                raise MessageError("an accepted JoinRoomResponse needs the player list")
            return cls(status, room_name, room_id)
        values = _unpack(cls._TAIL, rest, "JoinRoomResponse")
        player_id, count = values[0], values[1]
        if not 0 <= count <= MAX_PLAYERS_LISTED:
            raise MessageError(f"player count {count} is out of range")
        ids = values[2 : 2 + MAX_PLAYERS_LISTED]
        names_raw = values[2 + MAX_PLAYERS_LISTED]
        skins = values[3 + MAX_PLAYERS_LISTED : 3 + 2 * MAX_PLAYERS_LISTED]
        game_seed = values[-1]
        names = (
            _unpack_text(names_raw[o : o + PLAYER_NAME_LENGTH])
            for o in range(0, count * PLAYER_NAME_LENGTH, PLAYER_NAME_LENGTH)
        )
        players = tuple(zip(ids[:count], names, skins[:count]))
        return cls(status, room_name, room_id, player_id, players, game_seed)


@dataclass(frozen=True)
class AddPlayerInRoom:
    """Tells room members that a new player has joined."""

    TYPE: ClassVar[ServerMessageType] = ServerMessageType.ADD_PLAYER_IN_ROOM
    _LAYOUT: ClassVar[struct.Struct] = struct.Struct(f"<i{PLAYER_NAME_LENGTH}s")

    player_id: int
    player_name: str

    def _encode_body(self) -> bytes:
        return _pack(
            self._LAYOUT,
            self.player_id,
            _pack_text(self.player_name, PLAYER_NAME_LENGTH, "player name"),
        )

    @classmethod
    def _decode_body(cls, body: bytes) -> "AddPlayerInRoom":
        player_id, name = _unpack(cls._LAYOUT, body, "AddPlayerInRoom")
        return cls(player_id, _unpack_text(name))


@dataclass(frozen=True)
class GetAgent:
    """Asks a room member for connection details for the given player."""

    TYPE: ClassVar[ServerMessageType] = ServerMessageType.GET_AGENT
    _LAYOUT: ClassVar[struct.Struct] = struct.Struct(f"<i{PLAYER_NAME_LENGTH}si")

    player_id: int
    player_name: str
    player_skin: int = 0

    def _encode_body(self) -> bytes:
        return _pack(
            self._LAYOUT,
            self.player_id,
            _pack_text(self.player_name, PLAYER_NAME_LENGTH, "player name"),
            self.player_skin,
        )

    @classmethod
    def _decode_body(cls, body: bytes) -> "GetAgent":
        player_id, name, skin = _unpack(cls._LAYOUT, body, "GetAgent")
        return cls(player_id, _unpack_text(name), skin)


@dataclass(frozen=True)
class SendAgentToPlayer:
    """Relays a player's connection details to another player."""

    TYPE: ClassVar[ServerMessageType] = ServerMessageType.SEND_AGENT_TO_PLAYER
    _LAYOUT: ClassVar[struct.Struct] = struct.Struct(f"<ii{ICE_MESSAGE_SIZE}s")

    from_player: int
    to_player: int
    ice_sdp: str

    def _encode_body(self) -> bytes:
        return _pack(
            self._LAYOUT,
            self.from_player,
            self.to_player,
            _pack_text(self.ice_sdp, ICE_MESSAGE_SIZE, "ICE description"),
        )

    @classmethod
    def _decode_body(cls, body: bytes) -> "SendAgentToPlayer":
        src, dst, sdp = _unpack(cls._LAYOUT, body, "SendAgentToPlayer")
        return cls(src, dst, _unpack_text(sdp))


ClientMessage = Union[
    ClientGoodbye, CreateRoomRequest, GetRoomsRequest, JoinRoomRequest, SendAgentToServer
]
ServerMessage = Union[
    ServerHello,
    CreateRoomResponse,
    SendRooms,
    JoinRoomResponse,
    AddPlayerInRoom,
    GetAgent,
    SendAgentToPlayer,
]


def _registry(classes: Iterable[type]) -> dict:
    return {cls.TYPE: cls for cls in classes}


_CLIENT_CLASSES = _registry(
    (ClientGoodbye, CreateRoomRequest, GetRoomsRequest, JoinRoomRequest, SendAgentToServer)
)
_SERVER_CLASSES = _registry(
    (
        ServerHello,
        CreateRoomResponse,
        SendRooms,
        JoinRoomResponse,
        AddPlayerInRoom,
        GetAgent,
        SendAgentToPlayer,
    )
)


def _encode(message, classes: dict, side: str) -> bytes:
    if classes.get(getattr(type(message), "TYPE", None)) is not type(message):
        raise TypeError(f"{type(message).__name__} is not a {side} message")
    return _TYPE.pack(message.TYPE) + message._encode_body()


def _decode(data: bytes, classes: dict, side: str):
    data = bytes(data)
    if len(data) < _TYPE.size:
        raise MessageError("message is shorter than its type tag")
    (tag,) = _TYPE.unpack_from(data)
    cls = classes.get(tag)
    if cls is None:
        raise MessageError(f"unknown {side} message type {tag}")
    return cls._decode_body(data[_TYPE.size :])


def encode_client_message(message: ClientMessage) -> bytes:
    """Serialise a message sent by a client."""
    return _encode(message, _CLIENT_CLASSES, "client")


def decode_client_message(data: bytes) -> ClientMessage:
    """Parse a message sent by a client."""
    return _decode(data, _CLIENT_CLASSES, "client")


def encode_server_message(message: ServerMessage) -> bytes:
    """Serialise a message sent by the server."""
    return _encode(message, _SERVER_CLASSES, "server")


def decode_server_message(data: bytes) -> ServerMessage:
    """Parse a message sent by the server."""
    return _decode(data, _SERVER_CLASSES, "server")