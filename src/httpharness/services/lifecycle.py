"""Server-under-test lifecycle: port resolution and the uvicorn runner."""

import logging
import threading
import time
from typing import Any, Optional, Sequence

import uvicorn
from fastapi import APIRouter, FastAPI

from httpharness.config import HarnessSettings
from httpharness.errors import ServerStartError
from httpharness.models.options import PortOption, RequestOption, SchemeOption
from httpharness.models.request import DEFAULT_PORTS

logger = logging.getLogger("httpharness.lifecycle")

FALLBACK_PORT = 80


def resolve_port(options: Sequence[RequestOption]) -> int:
    """Pick the port the server under test should listen on.

    The whole option list is scanned. An explicit PortOption wins wherever it
    appears (the last one, if several). Otherwise the first SchemeOption with
    a known default port decides (https → 443, http → 80). With neither, 80.
    """
    explicit_port: Optional[int] = None
    scheme_port: Optional[int] = None
    for option in options:
        if isinstance(option, PortOption):
            explicit_port = option.value
        elif isinstance(option, SchemeOption) and scheme_port is None:
            scheme_port = DEFAULT_PORTS.get(option.value)

    if explicit_port is not None:
        return explicit_port
    if scheme_port is not None:
        return scheme_port
    return FALLBACK_PORT


def build_app(router: Any) -> Any:
    """Turn the configured router into something uvicorn can serve.

    A FastAPI APIRouter is mounted on a fresh FastAPI app; anything else is
    assumed to be an ASGI application already.
    """
    if isinstance(router, APIRouter):
        app = FastAPI()
        app.include_router(router)
        return app
    return router


class ServerHandle:
    """A running server under test. Stop it exactly once, or as often as you like."""

    def __init__(
        self,
        server: uvicorn.Server,
        thread: threading.Thread,
        port: int,
        shutdown_timeout: float = 5.0,
    ):
        self.server = server
        self.thread = thread
        self.port = port
        self.shutdown_timeout = shutdown_timeout
        self._stopped = False

    @property
    def running(self) -> bool:
        return not self._stopped and self.thread.is_alive()

    def stop(self) -> None:
        """Ask uvicorn to exit and wait for its thread. Safe to call twice."""
        if self._stopped:
            logger.debug(f"Server on port {self.port} already stopped")
            return
        self._stopped = True
        self.server.should_exit = True
        self.thread.join(timeout=self.shutdown_timeout)
        if self.thread.is_alive():
            logger.warning(
                f"Server on port {self.port} did not exit within "
                f"{self.shutdown_timeout}s, forcing exit"
            )
            self.server.force_exit = True
            self.thread.join(timeout=self.shutdown_timeout)
        else:
            logger.info(f"Server on port {self.port} stopped")


class UvicornServerRunner:
    """Starts the server under test with uvicorn on a background thread."""

    def __init__(self, settings: Optional[HarnessSettings] = None):
        self.settings = settings or HarnessSettings()
        self.poll_interval = 0.01

    def start(self, port: int, router: Any) -> ServerHandle:
        """Serve router on port and block until uvicorn reports it is started.

        Raises:
            ServerStartError: If the server thread dies or the startup timeout passes
        """
        config = uvicorn.Config(
            build_app(router),
            host=self.settings.bind_host,
            port=port,
            log_level=self.settings.server_log_level,
            lifespan="auto",
        )
        server = uvicorn.Server(config)
        thread = threading.Thread(
            target=server.run,
            name=f"server-under-test-{port}",
            daemon=True,
        )
        handle = ServerHandle(server, thread, port, self.settings.shutdown_timeout)

        logger.info(f"Starting server on {self.settings.bind_host}:{port}")
        thread.start()

        deadline = time.monotonic() + self.settings.startup_timeout
        while not server.started:
            if not thread.is_alive():
                handle.stop()
                raise ServerStartError(
                    f"Server on {self.settings.bind_host}:{port} exited during startup"
                )
            if time.monotonic() > deadline:
                handle.stop()
                raise ServerStartError(
                    f"Server on {self.settings.bind_host}:{port} did not start within "
                    f"{self.settings.startup_timeout}s"
                )
            time.sleep(self.poll_interval)

        logger.info(f"Server on {self.settings.bind_host}:{port} started")
        return handle


def stop_server(handle: Optional[ServerHandle]) -> None:
    """Stop a server handle; None is a no-op."""
    if handle is not None:
        handle.stop()
