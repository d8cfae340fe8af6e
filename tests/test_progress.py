"""
Tests for the progress channel and the websocket broadcast.
"""

import threading
import time

import pytest
from fastapi import WebSocketDisconnect
from fastapi.testclient import TestClient

from kmerscan.streaming import (
    ProgressChannel,
    ProgressServer,
    ProgressSinkError,
    ProgressSnapshot,
    create_app,
)


class TestProgressSnapshot:
    """Test the wire representation."""

    def test_frame(self) -> None:
        assert ProgressSnapshot(10_000, 1234).to_frame() == "10000 1234"

    def test_frozen(self) -> None:
        snapshot = ProgressSnapshot(1, 2)
        with pytest.raises(AttributeError):
            snapshot.reads = 5

    def test_u32_bounds_accepted(self) -> None:
        snapshot = ProgressSnapshot(0, 2**32 - 1)
        assert snapshot.to_frame() == "0 4294967295"

    @pytest.mark.parametrize("reads, solid", [(-1, 0), (2**32, 0), (0, -5), (1, 2**32)])
    def test_out_of_u32_range(self, reads, solid) -> None:
        with pytest.raises(ValueError, match="must be in 0..4294967295"):
            ProgressSnapshot(reads, solid)


class TestProgressChannel:
    """Test channel ordering, backpressure and lifecycle."""

    def test_fifo(self) -> None:
        channel = ProgressChannel()
        for i in range(5):
            channel.send(ProgressSnapshot(i, i * 10))
        assert channel.qsize() == 5
        assert [channel.receive(timeout=0).reads for _ in range(5)] == [0, 1, 2, 3, 4]

    def test_receive_timeout(self) -> None:
        channel = ProgressChannel()
        start = time.monotonic()
        assert channel.receive(timeout=0.05) is None
        assert time.monotonic() - start < 1.0

    def test_close_drains_then_ends(self) -> None:
        """Buffered snapshots survive close; then receive returns None."""
        channel = ProgressChannel()
        channel.send(ProgressSnapshot(1, 1))
        channel.close()
        assert channel.closed
        assert channel.receive() == ProgressSnapshot(1, 1)
        assert channel.receive() is None

    def test_send_after_close(self) -> None:
        channel = ProgressChannel()
        channel.close()
        with pytest.raises(ProgressSinkError, match="closed"):
            channel.send(ProgressSnapshot(1, 1))

    def test_context_manager_closes(self) -> None:
        with ProgressChannel() as channel:
            assert not channel.closed
        assert channel.closed

    def test_full_timeout(self) -> None:
        channel = ProgressChannel(capacity=2, send_timeout=0.05)
        channel.send(ProgressSnapshot(1, 1))
        channel.send(ProgressSnapshot(2, 2))
        with pytest.raises(ProgressSinkError, match="full"):
            channel.send(ProgressSnapshot(3, 3))
        assert channel.qsize() == 2

    def test_backpressure_resumes(self) -> None:
        """A blocked producer resumes once a consumer makes room."""
        channel = ProgressChannel(capacity=1, send_timeout=5.0)
        channel.send(ProgressSnapshot(1, 1))

        def consume() -> None:
            time.sleep(0.1)
            channel.receive(timeout=1.0)

        consumer = threading.Thread(target=consume)
        consumer.start()
        channel.send(ProgressSnapshot(2, 2))
        consumer.join()

        assert channel.receive(timeout=0) == ProgressSnapshot(2, 2)

    def test_close_unblocks_producer(self) -> None:
        channel = ProgressChannel(capacity=1, send_timeout=None)
        channel.send(ProgressSnapshot(1, 1))
        threading.Timer(0.1, channel.close).start()
        with pytest.raises(ProgressSinkError, match="closed"):
            channel.send(ProgressSnapshot(2, 2))

    def test_close_unblocks_consumer(self) -> None:
        channel = ProgressChannel()
        threading.Timer(0.1, channel.close).start()
        assert channel.receive() is None

    def test_invalid_capacity(self) -> None:
        with pytest.raises(ValueError):
            ProgressChannel(capacity=0)


class TestBroadcastApp:
    """Test the websocket route."""

    def test_frames(self) -> None:
        channel = ProgressChannel()
        channel.send(ProgressSnapshot(10_000, 512))
        channel.send(ProgressSnapshot(20_000, 900))
        channel.close()

        client = TestClient(create_app(channel))
        with client.websocket_connect("/ws") as ws:
            assert ws.receive_text() == "10000 512"
            assert ws.receive_text() == "20000 900"

    def test_live_frames(self) -> None:
        """Snapshots sent while a client is connected are delivered."""
        channel = ProgressChannel()
        client = TestClient(create_app(channel))

        def produce() -> None:
            for i in range(1, 4):
                channel.send(ProgressSnapshot(i, i * 2))
                time.sleep(0.02)
            channel.close()

        producer = threading.Thread(target=produce)
        with client.websocket_connect("/ws") as ws:
            producer.start()
            frames = [ws.receive_text() for _ in range(3)]
        producer.join()

        assert frames == ["1 2", "2 4", "3 6"]

    def test_second_client_waits_for_first(self) -> None:
        """The connected client receives every snapshot; later clients queue."""
        channel = ProgressChannel()

        with TestClient(create_app(channel)) as client:
            with client.websocket_connect("/ws") as first:
                channel.send(ProgressSnapshot(1, 1))
                # first now owns the channel
                assert first.receive_text() == "1 1"

                with client.websocket_connect("/ws") as second:
                    for i in range(2, 7):
                        channel.send(ProgressSnapshot(i, i))
                    frames = [first.receive_text() for _ in range(5)]
                    assert frames == ["2 2", "3 3", "4 4", "5 5", "6 6"]
                    assert channel.qsize() == 0

                    channel.close()
                    with pytest.raises(WebSocketDisconnect):
                        first.receive_text()
                    # second only gets the channel after first is done
                    with pytest.raises(WebSocketDisconnect):
                        second.receive_text()


class TestProgressServer:
    """Test the background server lifecycle."""

    def test_start_stop(self) -> None:
        channel = ProgressChannel()
        server = ProgressServer(channel, port=0)
        assert server.url == "ws://127.0.0.1:0/ws"
        server.start()
        try:
            assert server.running
            with pytest.raises(RuntimeError, match="already running"):
                server.start()
        finally:
            server.stop()
        assert not server.running
        assert channel.closed
