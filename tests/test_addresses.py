import ipaddress

import pytest

from blastlobby.addresses import format_address


def test_loopback_with_server_port():
    assert format_address(0x7F000001, 8888) == "127.0.0.1:8888"


def test_zero_port_is_omitted():
    assert format_address(0x7F000001, 0) == "127.0.0.1"


def test_default_port_is_omitted():
    assert format_address(0x7F000001) == format_address(0x7F000001, 0)


@pytest.mark.parametrize("value", [0, 1, 0x0A000001, 0xC0A80114, 0xFFFFFFFF])
def test_matches_standard_dotted_form(value):
    assert format_address(value) == str(ipaddress.IPv4Address(value))


def test_bytes_are_network_order():
    packed = ipaddress.IPv4Address("192.168.1.20").packed
    assert format_address(packed, 80) == format_address(0xC0A80114, 80)


def test_port_follows_colon():
    assert format_address(0x0A000001, 1234).endswith(":1234")


@pytest.mark.parametrize("value", [-1, 1 << 32])
def test_host_out_of_range(value):
    with pytest.raises(ValueError):
        format_address(value, 0)


def test_wrong_byte_count():
    with pytest.raises(ValueError):
        format_address(b"\x01\x02\x03", 0)


@pytest.mark.parametrize("port", [-1, 65536])
def test_port_out_of_range(port):
    with pytest.raises(ValueError):
        format_address(0x7F000001, port)


def test_host_of_wrong_type():
    with pytest.raises(TypeError):
        format_address("127.0.0.1", 0)