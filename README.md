# blastlobby

A matchmaking lobby for a multiplayer bomb-dropping arena game, together with the small pygame widgets its menus are built from.

The package has four parts:

- **Matchmaking server** (`blastlobby.server`). It accepts TCP connections and lets players create named rooms, list them and join them. It also relays peer-to-peer connection descriptions between the players of a room.
- **Wire messages** (`blastlobby.messages`). Every client and server message has a fixed-layout, little-endian binary encoding.
- **Room bookkeeping**:
  - `blastlobby.room` provides `Room` and `RoomPlayer`.
  - `blastlobby.room_list` provides `RoomList`.
  - `blastlobby.client_list` provides `Client` and `ClientList`.
- **Menu widgets** built on pygame:
  - `blastlobby.button` provides `Button`.
  - `blastlobby.text_input` provides `TextInput`.
  - `blastlobby.gui` provides `Gui`.

## Installation

```
pip install .
```

To install pytest for running the tests as well:

```
pip install .[test]
```

## Running the server

```
blastlobby-server [--host HOST] [--port PORT]
```

By default the server listens on all addresses, on port 8888. It logs connections and requests at INFO level and runs until you interrupt it.

It runs with the default `ServerOptions`:

- `max_sockets=16` is the listen backlog.
- `max_rooms=4` is the number of rooms that may exist.

## Using the server from code

```python
from blastlobby.server import MatchmakingServer, ServerOptions

with MatchmakingServer(ServerOptions(max_sockets=16, max_rooms=4)) as server:
    port = server.bind("0.0.0.0", 8888)
    server.serve_forever()
```

`serve_forever` calls `accept_pending()` and `poll_clients()` in a loop, pausing briefly between rounds. You can also call these two yourself, for example from your own event loop.

You can use the handlers without any sockets. Pass them any object that has `sendall`:

- `handle_message`
- `handle_create_room`
- `handle_get_rooms`
- `handle_join_room`
- `handle_send_agent`

Each handler returns the reply it sent.

This is what the server does with each request:

- **New connection.** It sends a `ServerHello`.
- **`CreateRoomRequest`.** It creates the room and seats the requester as player 0. It answers with a `CreateRoomResponse`. If the room limit is reached, the status is `TOO_MANY_ROOMS`. If the name is taken, the status is `NAME_ALREADY_USED`.
- **`GetRoomsRequest`.** It answers with a `SendRooms` that lists each room's name, player count and size.
- **`JoinRoomRequest`.**
  - If the join fails, it answers with `INVALID_ROOM`, `ROOM_IS_FULL` or `NAME_ALREADY_USED`.
  - Otherwise it first tells the room's current members about the newcomer with `AddPlayerInRoom`.
  - It then sends the newcomer an OK `JoinRoomResponse`. This response carries the assigned player id, the players already present and the room's seed.
  - Finally it seats the newcomer and sends `GetAgent` to every member of the room.
- **`SendAgentToServer`.** It forwards the description as `SendAgentToPlayer` to the addressed player of the given room.
- **`ClientGoodbye`.** It closes and forgets the connection.

## Talking to the server

```python
from blastlobby.messages import (
    CreateRoomRequest,
    decode_server_message,
    encode_client_message,
)

payload = encode_client_message(
    CreateRoomRequest(room_name="arena", player_name="alice", seed=42, max_players=4)
)
# send payload over the socket, then:
# reply = decode_server_message(received_bytes)
```

Every message starts with a 32-bit type tag (`ClientMessageType` / `ServerMessageType`).

Text fields are NUL-padded UTF-8:

- room and player names hold at most 31 bytes;
- ICE descriptions hold at most 4095 bytes.

Encoding a text that is too long, or decoding malformed bytes, raises `MessageError`.

`encode_client_message` and `encode_server_message` raise `TypeError` if you pass a message of the wrong side.

## Menu widgets

`Gui` owns the buttons and text inputs of one screen and keeps track of which text input has keyboard focus. At most four text inputs can exist at once. Creating a fifth raises `GuiError`.

```python
import pygame
from blastlobby.gui import Gui

gui = Gui()
name_box = gui.create_text_input("", (20, 20, 300, 50), (40, 40, 40), (255, 255, 255), font, 24)
gui.create_button((20, 90, 300, 50), on_click=lambda: print(name_box.text), text="Join", font=font)

# each frame:
gui.update(pygame.mouse.get_pos(), pygame.mouse.get_pressed()[0])
gui.draw(screen)
```

Pass pygame events to the `Gui` as follows:

- **`TEXTINPUT`**: call `gui.handle_text_input(event.text)`. Text is added only while the field stays under 32 bytes.
- **`KEYDOWN`**: call `gui.handle_key(event.key)`. Backspace deletes a character. Return runs the field's `on_return` callback and drops the focus.
- **`MOUSEBUTTONUP`**: call `gui.handle_mouse_up(event.button)`. A left release clicks every hovered button.

To move the keyboard focus yourself, call `gui.focus(text_input)`. To remove every widget, call `gui.clear()`.

## What this package does not do

- It contains no game. There is no arena, no game client and no menu screens, only the widgets and messages such screens would use.
- It does not set up peer-to-peer connections itself. The server only passes the players' connection descriptions along, as opaque text.
- Rooms are never removed, and players are not taken out of rooms. When a client says goodbye or disconnects, the server only closes its connection.
- Messages are not framed on the stream. The server reads up to 8192 bytes per ready client and decodes each read as one message.