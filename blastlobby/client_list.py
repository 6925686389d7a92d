"""Connected clients of the matchmaking server."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Optional


@dataclass
class Client:
    """A connected client."""

    connection: Any
    name: str = ""


class ClientList:
    """An unordered collection of clients; removal moves the last one into the gap."""

    def __init__(self) -> None:
        self._clients: list[Client] = []

    def push(self, client: Client) -> None:
        self._clients.append(client)

    def remove_by_connection(self, connection: Any) -> Optional[Client]:
        """Close and drop the client using this connection; return it, or None."""
        for index, client in enumerate(self._clients):
            if client.connection is connection:
                connection.close()
                last = self._clients.pop()
                if index < len(self._clients):
                    self._clients[index] = last
                return client
        return None

    def __len__(self) -> int:
        return len(self._clients)

    def __iter__(self) -> Iterator[Client]:
        return iter(list(self._clients))