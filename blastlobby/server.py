"""Matchmaking server: room creation, room listing, joining and agent relay."""

from __future__ import annotations

import argparse
import logging
import select
import socket
import sys
import time
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from blastlobby.addresses import format_address
from blastlobby.client_list import Client, ClientList
from blastlobby.messages import (
    AddPlayerInRoom,
    ClientGoodbye,
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
    decode_client_message,
    encode_server_message,
)
from blastlobby.room import Room, RoomFullError
from blastlobby.room_list import RoomList

DEFAULT_PORT = 8888
RECV_SIZE = 8192
POLL_INTERVAL = 0.01

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServerOptions:
    """Tuning of the server: listen backlog and the number of rooms allowed."""

    max_sockets: int = 16
    max_rooms: int = 4


def _describe_peer(connection: Any) -> str:
    try:
        peer = connection.getpeername()
    except (OSError, AttributeError):
        return "unknown peer"
    if isinstance(peer, tuple) and len(peer) >= 2:
        try:
            return format_address(socket.inet_aton(peer[0]), peer[1])
        except (OSError, ValueError, TypeError):
            return f"{peer[0]}:{peer[1]}"
    return str(peer) or "local peer"


def _send(connection: Any, message) -> None:
    connection.sendall(encode_server_message(message))


class MatchmakingServer:
    """Accepts game clients, keeps rooms and relays connection details."""

    def __init__(self, options: Optional[ServerOptions] = None) -> None:
        self.options = options or ServerOptions()
        self.clients = ClientList()
        self.rooms = RoomList(self.options.max_rooms)
        self._listener: Optional[socket.socket] = None
        self._running = False

    def __enter__(self) -> "MatchmakingServer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # Networking

    def bind(self, host: str = "", port: int = DEFAULT_PORT) -> int:
        """Start listening and return the port actually bound."""
        if self._listener is not None:
            raise RuntimeError("server is already listening")
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            listener.bind((host, port))
            listener.listen(self.options.max_sockets)
            listener.setblocking(False)
        except OSError:
            listener.close()
            raise
        self._listener = listener
        return listener.getsockname()[1]

    def accept_pending(self) -> list[Client]:
        """Accept every waiting connection and greet it."""
        if self._listener is None:
            raise RuntimeError("server is not listening")
        accepted = []
        while True:
            try:
                connection, _ = self._listener.accept()
            except (BlockingIOError, InterruptedError):
                break
            connection.setblocking(True)
            log.info("New connection from %s", _describe_peer(connection))
            client = Client(connection)
            self.clients.push(client)
            try:
                _send(connection, ServerHello())
            except OSError as exc:
                log.warning("Could not greet new client: %s", exc)
                self.clients.remove_by_connection(connection)
                continue
            accepted.append(client)
        return accepted

    def poll_clients(self) -> int:
        """Read one message from each client that has data; return how many were handled."""
        connections = [client.connection for client in self.clients]
        if not connections:
            return 0
        readable, _, _ = select.select(connections, [], [], 0)
        handled = 0
        for connection in readable:
            try:
                data = connection.recv(RECV_SIZE)
            except OSError:
                data = b""
            if not data:
                log.info("Connection lost from %s", _describe_peer(connection))
                self.clients.remove_by_connection(connection)
                continue
            try:
                message = decode_client_message(data)
            except MessageError as exc:
                log.warning("Dropping malformed message: %s", exc)
                continue
            try:
                self.handle_message(message, connection)
            except (ValueError, LookupError, RoomFullError, OSError) as exc:
                log.warning("Could not handle %s: %s", type(message).__name__, exc)
                continue
            handled += 1
        return handled

    def serve_forever(self) -> None:
        """Accept and serve clients until the server is closed."""
        self._running = True
        while self._running and self._listener is not None:
            self.accept_pending()
            self.poll_clients()
            time.sleep(POLL_INTERVAL)

    def close(self) -> None:
        """Stop serving, drop every client and release the listening socket."""
        self._running = False
        for client in self.clients:
            self.clients.remove_by_connection(client.connection)
        if self._listener is not None:
            self._listener.close()
            self._listener = None

    # Message handling

    def handle_message(self, message, connection: Any):
        """Dispatch a decoded client message; return the reply it produced, if any."""
        if isinstance(message, ClientGoodbye):
            log.info("Closed connection from %s", _describe_peer(connection))
            self.clients.remove_by_connection(connection)
            return None
        if isinstance(message, CreateRoomRequest):
            return self.handle_create_room(message, connection)
        if isinstance(message, GetRoomsRequest):
            return self.handle_get_rooms(connection)
        if isinstance(message, JoinRoomRequest):
            return self.handle_join_room(message, connection)
        if isinstance(message, SendAgentToServer):
            return self.handle_send_agent(message)
        log.warning("Received a message of wrong type %s", type(message).__name__)
        return None

    def handle_create_room(
        self, request: CreateRoomRequest, connection: Any
    ) -> CreateRoomResponse:
        """Create a room with the requester seated as player 0."""
        if self.rooms.is_full():
            response = CreateRoomResponse(CreateRoomStatus.TOO_MANY_ROOMS)
            _send(connection, response)
            log.warning("Rejecting CreateRoom request because there are too many rooms")
            return response

        if self.rooms.find_by_name(request.room_name) is not None:
            response = CreateRoomResponse(CreateRoomStatus.NAME_ALREADY_USED)
            _send(connection, response)
            log.info("Rejecting CreateRoom request because a room with the same name exists")
            return response

        room = Room(request.room_name, request.max_players, seed=request.seed)
        room.insert_player(0, request.player_name, connection)
        room_id = self.rooms.push(room)

        response = CreateRoomResponse(CreateRoomStatus.OK, room_id)
        _send(connection, response)
        log.info("Created room [%s] with player {%s}", room.name, request.player_name)
        return response

    def handle_get_rooms(self, connection: Any) -> SendRooms:
        """Send the list of rooms to the requester."""
        response = SendRooms(
            tuple(RoomInfo(room.name, len(room.players), room.max_players) for room in self.rooms)
        )
        _send(connection, response)
        log.info("Sent rooms (%d)", len(self.rooms))
        return response

    def handle_join_room(self, request: JoinRoomRequest, connection: Any) -> JoinRoomResponse:
        """Seat the requester in an existing room and start the agent exchange."""
        room = self.rooms.find_by_name(request.room_name)

        if room is None:
            response = JoinRoomResponse(JoinRoomStatus.INVALID_ROOM, request.room_name)
            _send(connection, response)
            log.info("JoinRoom rejected: invalid room [%s]", request.room_name)
            return response

        if room.is_full():
            response = JoinRoomResponse(JoinRoomStatus.ROOM_IS_FULL, request.room_name)
            _send(connection, response)
            log.info("JoinRoom rejected: room is full")
            return response

        if room.has_player_name(request.player_name):
            response = JoinRoomResponse(JoinRoomStatus.NAME_ALREADY_USED, request.room_name)
            _send(connection, response)
            log.info("JoinRoom rejected: name {%s} already used", request.player_name)
            return response

        player_id = room.unused_id()

        room.broadcast(encode_server_message(AddPlayerInRoom(player_id, request.player_name)))

        response = JoinRoomResponse(
            JoinRoomStatus.OK,
            request.room_name,
            room_id=room.room_id,
            player_id=player_id,
            players=tuple((p.player_id, p.name, p.skin) for p in room.players),
            game_seed=room.seed,
        )
        _send(connection, response)

        room.insert_player(player_id, request.player_name, connection)
        log.info(
            "Player {%s} joined room [%s] with ID %d", request.player_name, room.name, player_id
        )

        room.broadcast(encode_server_message(GetAgent(player_id, request.player_name)))
        return response

    def handle_send_agent(self, message: SendAgentToServer) -> SendAgentToPlayer:
        """Relay a player's connection details to the addressed room member."""
        log.info(
            "Received agent from player %d, sending to player %d",
            message.from_player,
            message.to_player,
        )
        room = self.rooms[message.room_id]
        target = room.find_player(message.to_player)
        relay = SendAgentToPlayer(message.from_player, message.to_player, message.ice_sdp)
        _send(target.connection, relay)
        return relay


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the matchmaking server until interrupted."""
    parser = argparse.ArgumentParser(
        prog="blastlobby-server", description="Matchmaking server for game rooms."
    )
    parser.add_argument("--host", default="", help="address to listen on (default: all)")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="TCP port to listen on")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    server = MatchmakingServer(ServerOptions())
    try:
        port = server.bind(args.host, args.port)
    except OSError as exc:
        print(f"cannot listen on port {args.port}: {exc}", file=sys.stderr)
        return 1

    print(f"Listening on port {port}")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.close()
    return 0