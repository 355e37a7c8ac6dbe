# src/tasktrack/connectors/echo_server.py

"""
Line-echo demo listener.

Each client is greeted, then every line it sends comes back prefixed with
"Server received: ". One coroutine per connection; no task data involved.
Runs on its own event loop in a daemon thread so the blocking console REPL
can keep the main thread.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

GREETING = "Connected to the Task Server!"
REPLY_PREFIX = "Server received: "


async def handle_client(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
    peer = writer.get_extra_info("peername")
    logger.info("Echo client connected peer=%s", peer)
    try:
        writer.write((GREETING + "\n").encode("utf-8"))
        await writer.drain()
        while True:
            raw = await reader.readline()
            if not raw:
                break
            line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
            logger.debug("Echo client %s: %s", peer, line)
            writer.write(f"{REPLY_PREFIX}{line}\n".encode("utf-8"))
            await writer.drain()
    except (ConnectionError, asyncio.IncompleteReadError):
        logger.info("Echo client %s dropped.", peer)
    finally:
        writer.close()
        with contextlib.suppress(ConnectionError):
            await writer.wait_closed()
        logger.info("Echo client disconnected peer=%s", peer)


async def run_echo_server(host: str, port: int, stop_event: asyncio.Event) -> None:
    server = await asyncio.start_server(handle_client, host, port)
    addrs = ", ".join(str(s.getsockname()) for s in server.sockets or [])
    logger.info("Echo server listening on %s", addrs)
    async with server:
        await stop_event.wait()
    logger.info("Echo server stopped.")


async def send_lines(host: str, port: int, lines: Iterable[str]) -> list[str]:
    """Client side: connect, read the greeting, send each line and collect replies."""
    reader, writer = await asyncio.open_connection(host, port)
    try:
        replies = [(await reader.readline()).decode("utf-8").rstrip("\r\n")]
        for line in lines:
            writer.write((line + "\n").encode("utf-8"))
            await writer.drain()
            replies.append((await reader.readline()).decode("utf-8").rstrip("\r\n"))
        return replies
    finally:
        writer.close()
        with contextlib.suppress(ConnectionError):
            await writer.wait_closed()


@dataclass(slots=True)
class EchoBackgroundRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except RuntimeError:
            logger.debug("Echo loop already closed.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_echo_in_background(settings) -> EchoBackgroundRunner | None:
    """Start the echo listener in a daemon thread with its own event loop."""
    if not getattr(settings, "echo_enabled", False):
        logger.info("Echo listener disabled, not starting.")
        return None

    host = str(getattr(settings, "echo_host", "127.0.0.1"))
    port = int(getattr(settings, "echo_port", 5000))
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(run_echo_server(host, port, stop_event))
        except OSError:
            logger.exception("Echo server failed to start on %s:%s", host, port)
        finally:
            loop.close()

    t = threading.Thread(target=runner, name="echo-server", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Echo thread did not initialize properly.")
        return None

    logger.info("Echo background thread started.")
    return EchoBackgroundRunner(thread=t, loop=loop, stop_event=stop_event)
