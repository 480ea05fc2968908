from __future__ import annotations

import asyncio
import logging
import threading
from http import HTTPStatus
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import urlsplit

from websockets.asyncio.server import ServerConnection, broadcast, serve
from websockets.datastructures import Headers
from websockets.exceptions import ConnectionClosed
from websockets.http11 import Request, Response

from contracts.ui_protocol import EVENT_HELLO

from .config import HEALTHZ_PATH, INDEX_PATH, ROOT_PATH, UIServerConfig
from .events import StickyEventStore, UICommand, make_event, parse_command

CommandSink = Callable[[UICommand], None]

_HTML = "text/html; charset=utf-8"
_TEXT = "text/plain; charset=utf-8"


class UIServer:
    """Threaded asyncio server for the timer page and its websocket channel.

    Outbound events are broadcast to every client; the latest sticky events
    are replayed on connect. Inbound commands are decoded and handed to the
    command sink on the server thread, so the sink must be thread-safe.
    """

    def __init__(
        self,
        config: UIServerConfig,
        *,
        on_command: Optional[CommandSink] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._on_command = on_command
        self._logger = logger or logging.getLogger("ui_server")

        index_html = Path(config.index_file).read_bytes()
        self._routes: dict[str, tuple[bytes, str]] = {
            ROOT_PATH: (index_html, _HTML),
            INDEX_PATH: (index_html, _HTML),
            HEALTHZ_PATH: (b"ok\n", _TEXT),
        }

        self._sticky_events = StickyEventStore()
        self._clients: set[ServerConnection] = set()
        self._thread: Optional[threading.Thread] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._shutdown: Optional[asyncio.Event] = None
        self._ready = threading.Event()
        self._startup_error: Optional[Exception] = None

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def port(self) -> int:
        return self._config.port

    @property
    def is_running(self) -> bool:
        return (
            self._thread is not None
            and self._thread.is_alive()
            and self._startup_error is None
        )

    def start(self, timeout_seconds: float = 5.0) -> None:
        """Serve on a daemon thread; blocks until the socket is bound."""
        if self.is_running:
            self._logger.warning("UI server is already running")
            return

        self._startup_error = None
        self._ready.clear()
        self._thread = threading.Thread(target=self._run, daemon=True, name="ui-server")
        self._thread.start()

        if not self._ready.wait(timeout_seconds):
            raise RuntimeError(f"UI server did not start within {timeout_seconds:.1f}s")
        if self._startup_error is not None:
            raise RuntimeError(f"UI server startup failed: {self._startup_error}")

    def stop(self, timeout_seconds: float = 5.0) -> None:
        thread = self._thread
        if thread is None:
            return

        self._call_on_loop(self._request_shutdown)
        thread.join(timeout=timeout_seconds)
        if thread.is_alive():
            self._logger.error("UI server thread did not stop within %.1fs", timeout_seconds)
        self._thread = None

    def publish(self, event_type: str, **payload) -> None:
        """Broadcast an event; sticky types are kept for clients that join later."""
        message = make_event(event_type, **payload)
        self._sticky_events.remember(event_type, message)
        if self.is_running:
            self._call_on_loop(self._broadcast, message)

    def _call_on_loop(self, callback: Callable[..., None], *args) -> None:
        loop = self._loop
        if loop is None:
            return
        try:
            loop.call_soon_threadsafe(callback, *args)
        except RuntimeError:
            self._logger.debug("UI server loop already closed")

    def _request_shutdown(self) -> None:
        if self._shutdown is not None:
            self._shutdown.set()

    def _broadcast(self, message: str) -> None:
        broadcast(self._clients, message)

    def _run(self) -> None:
        try:
            asyncio.run(self._serve())
        except Exception as error:  # pragma: no cover - needs a bound socket
            self._startup_error = error
            self._logger.error("UI server failed: %s", error, exc_info=True)
        finally:
            self._loop = None
            self._shutdown = None
            self._ready.set()

    async def _serve(self) -> None:
        self._loop = asyncio.get_running_loop()
        self._shutdown = asyncio.Event()
        async with serve(
            self._handle_client,
            host=self._config.host,
            port=self._config.port,
            process_request=self._route_request,
            logger=self._logger,
        ):
            self._logger.info(
                "UI server running at %s (websocket: %s)",
                self._config.http_url,
                self._config.websocket_path,
            )
            self._ready.set()
            await self._shutdown.wait()

    async def _handle_client(self, websocket: ServerConnection) -> None:
        self._clients.add(websocket)
        self._logger.info("Client connected: %s", websocket.remote_address)
        try:
            await websocket.send(make_event(EVENT_HELLO, message="UI websocket connected"))
            for message in self._sticky_events.snapshot():
                await websocket.send(message)
            async for message in websocket:
                self._dispatch(message)
        except ConnectionClosed:
            self._logger.info("Client disconnected: %s", websocket.remote_address)
        finally:
            self._clients.discard(websocket)

    def _dispatch(self, message: str | bytes) -> None:
        command = parse_command(message)
        if command is None:
            self._logger.warning("Ignoring malformed UI message: %.120r", message)
            return
        self._logger.debug("UI command: %s", command.action)
        if self._on_command is not None:
            self._on_command(command)

    def _route_request(
        self,
        connection: ServerConnection,
        request: Request,
    ) -> Optional[Response]:
        del connection
        path = urlsplit(request.path).path
        if path == self._config.websocket_path:
            return None

        route = self._routes.get(path)
        if route is None:
            return _http_response(HTTPStatus.NOT_FOUND, b"not found\n", _TEXT)
        body, content_type = route
        return _http_response(HTTPStatus.OK, body, content_type)


def _http_response(status: HTTPStatus, body: bytes, content_type: str) -> Response:
    headers = Headers()
    headers["Content-Type"] = content_type
    headers["Content-Length"] = str(len(body))
    headers["Cache-Control"] = "no-store"
    return Response(status.value, status.phrase, headers, body)
