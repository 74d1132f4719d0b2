import asyncio
import socket

from services.connectivity import ConnectivityGate
from tests.conftest import run


def test_reachable_endpoint_is_connected():
    async def scenario():
        server = await asyncio.start_server(lambda r, w: w.close(), "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        async with server:
            return await ConnectivityGate("127.0.0.1", port, timeout=1.0).check_connected()

    assert run(scenario()) is True


def test_refused_connection_is_offline():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    # nothing listens on the port any more

    assert run(ConnectivityGate("127.0.0.1", port, timeout=1.0).check_connected()) is False


def test_unanswered_connect_times_out_as_offline(monkeypatch):
    async def never_answers(host, port):
        await asyncio.sleep(10)

    monkeypatch.setattr(asyncio, "open_connection", never_answers)
    gate = ConnectivityGate("192.0.2.1", 53, timeout=0.05)
    assert run(gate.check_connected()) is False
