import socket

import pytest

from ftpserver.entities.data_connection import (
    ActiveDataConnection,
    PassiveDataConnection,
    encode_host_port,
    get_pasv_ip,
    parse_port_argument,
)
from ftpserver.entities.errors import ProtocolError, TransferError


def recv_all(sock):
    chunks = []
    while True:
        data = sock.recv(4096)
        if not data:
            return b"".join(chunks)
        chunks.append(data)


# ---------------------------------------------------------------------------
# Sexteto h1,h2,h3,h4,p1,p2
# ---------------------------------------------------------------------------

def test_parse_port_argument():
    assert parse_port_argument("PORT 127,0,0,1,17,136\r\n") == ("127.0.0.1", 4488)


def test_parse_port_argument_finds_sextet_anywhere():
    assert parse_port_argument("PORT (192,168,1,20,0,21)") == ("192.168.1.20", 21)


@pytest.mark.parametrize("text", [
    "PORT 127,0,0,1,17",
    "PORT 127.0.0.1:4488",
    "PORT a,b,c,d,e,f",
    "PORT 256,0,0,1,17,136",
    "PORT 127,0,0,1,300,1",
])
def test_parse_port_argument_rejects_malformed(text):
    with pytest.raises(ProtocolError):
        parse_port_argument(text)


def test_encode_host_port():
    assert encode_host_port("10.0.0.5", 4488) == "10,0,0,5,17,136"
    assert encode_host_port("127.0.0.1", 255) == "127,0,0,1,0,255"


# ---------------------------------------------------------------------------
# Modo pasivo
# ---------------------------------------------------------------------------

def test_pasv_encoded_port_matches_listener():
    data_conn = PassiveDataConnection(bind_host="127.0.0.1", advertised_ip="127.0.0.1")
    try:
        octets = [int(part) for part in data_conn.encode_address().split(",")]
        assert octets[:4] == [127, 0, 0, 1]
        assert octets[4] * 256 + octets[5] == data_conn.listener.getsockname()[1]
        assert not data_conn.is_connected()
    finally:
        data_conn.close()


def test_pasv_accept_send_close():
    data_conn = PassiveDataConnection(bind_host="127.0.0.1", advertised_ip="127.0.0.1")
    client = socket.create_connection(("127.0.0.1", data_conn.port), timeout=5)
    try:
        assert data_conn.accept(timeout=5)
        assert data_conn.is_connected()

        data_conn.send(b"hello ")
        data_conn.send(b"world")
        data_conn.close()

        assert recv_all(client) == b"hello world"
        assert data_conn.bytes_sent == 11
        assert not data_conn.is_connected()
        assert data_conn.listener is None
    finally:
        client.close()


def test_pasv_accept_timeout_closes_listener():
    data_conn = PassiveDataConnection(bind_host="127.0.0.1", advertised_ip="127.0.0.1")
    assert not data_conn.accept(timeout=0.1)
    assert data_conn.listener is None
    assert not data_conn.is_connected()
    # close() es idempotente
    data_conn.close()


def test_send_after_close_fails():
    data_conn = PassiveDataConnection(bind_host="127.0.0.1")
    data_conn.close()
    with pytest.raises(TransferError):
        data_conn.send(b"x")


# ---------------------------------------------------------------------------
# Modo activo
# ---------------------------------------------------------------------------

def test_active_connect_and_send():
    listener = socket.create_server(("127.0.0.1", 0))
    listener.settimeout(5)
    try:
        ip, port = listener.getsockname()
        data_conn = ActiveDataConnection(ip, port).connect(timeout=5)
        peer, _ = listener.accept()
        try:
            data_conn.send(b"\x00\x01\x02")
            data_conn.close()
            assert recv_all(peer) == b"\x00\x01\x02"
        finally:
            peer.close()
    finally:
        listener.close()


def test_active_connect_refused():
    closed = socket.create_server(("127.0.0.1", 0))
    port = closed.getsockname()[1]
    closed.close()
    with pytest.raises(TransferError):
        ActiveDataConnection("127.0.0.1", port).connect(timeout=5)


# ---------------------------------------------------------------------------
# Direccion anunciada en 227
# ---------------------------------------------------------------------------

def test_get_pasv_ip_prefers_configured_address():
    assert get_pasv_ip(None, configured="203.0.113.7") == "203.0.113.7"


def test_get_pasv_ip_uses_control_connection_address():
    listener = socket.create_server(("127.0.0.1", 0))
    client = socket.create_connection(listener.getsockname(), timeout=5)
    server_side, _ = listener.accept()
    try:
        assert get_pasv_ip(server_side) == "127.0.0.1"
    finally:
        server_side.close()
        client.close()
        listener.close()


def test_get_pasv_ip_unresolvable_hostname(monkeypatch):
    def fail(hostname):
        raise socket.gaierror("Name or service not known")

    monkeypatch.setattr(socket, "gethostbyname", fail)
    with pytest.raises(TransferError):
        get_pasv_ip(None)
