"""Human-readable formatting of IPv4 endpoints."""

from __future__ import annotations

from typing import Union

HostAddress = Union[int, bytes, bytearray]


def _host_octets(host: HostAddress) -> bytes:
    if isinstance(host, (bytes, bytearray)):
        if len(host) != 4:
            raise ValueError(f"an IPv4 address has 4 bytes, got {len(host)}")
        return bytes(host)
    if isinstance(host, bool) or not isinstance(host, int):
        raise TypeError(f"host must be an int or 4 bytes, not {type(host).__name__}")
    if not 0 <= host <= 0xFFFFFFFF:
        raise ValueError(f"host {host} does not fit in 32 bits")
    return host.to_bytes(4, "big")


def format_address(host: HostAddress, port: int = 0) -> str:
    """Format an IPv4 host and port as ``a.b.c.d[:port]``.

    ``host`` is a 32-bit integer, most significant octet first, or four
    raw bytes. When ``port`` is zero no suffix is added.
    """
    if not 0 <= port <= 0xFFFF:
        raise ValueError(f"port {port} is out of range")
    text = ".".join(str(octet) for octet in _host_octets(host))
    if port:
        text += f":{port}"
    return text