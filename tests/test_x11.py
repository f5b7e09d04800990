import socket
import struct
import threading

import pytest

from deskkit.blocks.x11 import X11Connection, X11Error, build_change_property, parse_display

ROOT = 0x1EF


def recv_exact(conn, size):
    data = bytearray()
    while len(data) < size:
        chunk = conn.recv(size - len(data))
        if not chunk:
            break
        data += chunk
    return bytes(data)


def setup_reply(root):
    vendor = b"test"
    fixed = struct.pack(
        "<IIIIHHBBBBBBBB4x", 0, 0, 0x1FFFFF, 0, len(vendor), 0xFFFF, 1, 1, 0, 0, 32, 32, 8, 255
    )
    fmt = struct.pack("<BBB5x", 24, 32, 32)
    screen = struct.pack("<I", root) + b"\0" * 36
    body = fixed + vendor + fmt + screen
    return struct.pack("<BBHHH", 1, 0, 11, 0, len(body) // 4) + body


def refused_reply(reason):
    padded = reason + b"\0" * (-len(reason) % 4)
    return struct.pack("<BBHHH", 0, len(reason), 11, 0, len(padded) // 4) + padded


def start_server(path, greeting, exchanges):
    srv = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    srv.bind(path)
    srv.listen(1)
    received = []

    def serve():
        conn, _ = srv.accept()
        with conn:
            recv_exact(conn, 12)
            conn.sendall(greeting)
            for size, reply in exchanges:
                received.append(recv_exact(conn, size))
                conn.sendall(reply)
        srv.close()

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    return thread, received


@pytest.fixture
def sock_path(tmp_path, monkeypatch):
    monkeypatch.setenv("XAUTHORITY", str(tmp_path / "missing"))
    return str(tmp_path / "x")


def test_parse_display_forms():
    assert parse_display(":0") == ("", 0, 0)
    assert parse_display("unix:1.2") == ("unix", 1, 2)
    assert parse_display("host:3") == ("host", 3, 0)


@pytest.mark.parametrize("bad", [None, "", "nocolon", ":x", ":1.y"])
def test_parse_display_rejects_bad_names(bad):
    with pytest.raises(X11Error):
        parse_display(bad)


def test_change_property_layout():
    name = "status"
    request = build_change_property(ROOT, name)
    assert len(request) % 4 == 0
    fields = struct.unpack_from("<BBHIIIB3xI", request)
    assert fields == (18, 0, len(request) // 4, ROOT, 39, 31, 8, len(name))
    assert request[24:24 + len(name)] == name.encode()


def test_change_property_encodes_utf8():
    name = "\u00e9"
    request = build_change_property(ROOT, name)
    count = struct.unpack_from("<I", request, 20)[0]
    assert count == len(name.encode("utf-8"))


def test_open_and_set_root_name(sock_path):
    name = "a | b"
    change = build_change_property(ROOT, name)
    reply = b"\x01" + b"\0" * 31
    thread, received = start_server(sock_path, setup_reply(ROOT), [(len(change) + 4, reply)])
    with X11Connection.open(f"{sock_path}:0") as connection:
        assert connection.root == ROOT
        connection.set_root_name(name)
    thread.join(5)
    assert received[0][:len(change)] == change


def test_server_error_raises(sock_path):
    name = "x"
    change = build_change_property(ROOT, name)
    error = b"\x00\x02" + b"\0" * 30
    thread, _ = start_server(sock_path, setup_reply(ROOT), [(len(change) + 4, error)])
    with X11Connection.open(f"{sock_path}:0") as connection:
        with pytest.raises(X11Error):
            connection.set_root_name(name)
    thread.join(5)


def test_refused_setup_raises(sock_path):
    thread, _ = start_server(sock_path, refused_reply(b"no way"), [])
    with pytest.raises(X11Error, match="no way"):
        X11Connection.open(f"{sock_path}:0")
    thread.join(5)


def test_missing_server_raises(sock_path):
    with pytest.raises(X11Error):
        X11Connection.open(f"{sock_path}:0")