"""
Websocket broadcast of scan progress.

Serves the snapshots of a ProgressChannel on a websocket route. Each message
is a UTF-8 text frame carrying two space-separated integers:

    "<reads> <solid_kmers>"

The server runs uvicorn in a background daemon thread so the scan itself
stays synchronous. One connection at a time owns the channel and receives
every snapshot in order; further clients are accepted but wait until the
current owner disconnects.

Usage:
    >>> with ProgressChannel() as channel, ProgressServer(channel):
    ...     scan_file(Path("reads.fa"), k=31, sink=channel)
"""

import asyncio
import threading
import time
from typing import Optional

import uvicorn
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.concurrency import run_in_threadpool

from kmerscan.constants import DEFAULT_HOST, DEFAULT_PORT, WEBSOCKET_PATH
from kmerscan.streaming.progress import ProgressChannel

# Seconds a consumer waits on the channel before re-checking for close
_RECEIVE_TIMEOUT = 1.0


def create_app(channel: ProgressChannel) -> FastAPI:
    """
    Build the FastAPI app serving progress frames from a channel.
    
    Args:
        channel: Progress channel to drain
    
    Returns:
        FastAPI app with a websocket route at WEBSOCKET_PATH
    """
    app = FastAPI(title="kmerscan progress")
    receiver_lock = asyncio.Lock()
    
    @app.websocket(WEBSOCKET_PATH)
    async def progress_socket(websocket: WebSocket) -> None:
        await websocket.accept()
        try:
            async with receiver_lock:
                while True:
                    snapshot = await run_in_threadpool(channel.receive, _RECEIVE_TIMEOUT)
                    if snapshot is None:
                        if channel.closed:
                            break
                        continue
                    await websocket.send_text(snapshot.to_frame())
        except WebSocketDisconnect:
            return
        await websocket.close()
    
    return app


class ProgressServer:
    """
    Background uvicorn server for a progress channel.
    
    Attributes:
        channel: Progress channel served to clients
        host: Bind address
        port: Bind port
    """
    
    def __init__(
        self,
        channel: ProgressChannel,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
    ) -> None:
        self.channel = channel
        self.host = host
        self.port = port
        self.app = create_app(channel)
        self._server: Optional[uvicorn.Server] = None
        self._thread: Optional[threading.Thread] = None
    
    @property
    def url(self) -> str:
        return f"ws://{self.host}:{self.port}{WEBSOCKET_PATH}"
    
    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
    
    def start(self, startup_timeout: float = 10.0) -> None:
        """
        Start serving in a daemon thread and wait until it accepts connections.
        
        Raises:
            RuntimeError: If the server is already running or fails to start
        """
        if self.running:
            raise RuntimeError("Progress server already running")
        
        config = uvicorn.Config(
            self.app, host=self.host, port=self.port, log_level="warning",
        )
        self._server = uvicorn.Server(config)
        self._thread = threading.Thread(
            target=self._server.run, name="kmerscan-progress", daemon=True,
        )
        self._thread.start()
        
        deadline = time.monotonic() + startup_timeout
        while not self._server.started:
            if not self._thread.is_alive() or time.monotonic() > deadline:
                raise RuntimeError(f"Progress server failed to start on {self.url}")
            time.sleep(0.05)
    
    def stop(self, timeout: float = 5.0) -> None:
        """Close the channel and shut the server down."""
        self.channel.close()
        if self._server is not None:
            self._server.should_exit = True
        if self._thread is not None:
            self._thread.join(timeout)
        self._server = None
        self._thread = None
    
    def __enter__(self) -> "ProgressServer":
        self.start()
        return self
    
    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
