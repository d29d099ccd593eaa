"""
In-process stand-in for the reCAPTCHA siteverify service.

RecaptchaStubServer serves the stub FastAPI app with uvicorn on an ephemeral
local port in a background thread, so production verification code can be
exercised end to end in tests:

    with RecaptchaStubServer() as server:
        site = server.register_site()
        provider = RecaptchaProvider(site.private_key, verify_url=server.verify_url)
        token = site.issue_token()
        assert await provider.verify(token)
"""

from __future__ import annotations

import socket
import threading
import time
from typing import Any, Optional

import uvicorn

from app import create_app
from config import StubServerSettings
from errors import ServerNotRunningError
from schemas.models.site import Site
from services.siteverify_service import SiteverifyService
from shared.logging import get_logger

log = get_logger(__name__)


class RecaptchaStubServer:
    def __init__(self, settings: Optional[StubServerSettings] = None) -> None:
        if settings is None:
            settings = StubServerSettings()
        self._settings = settings
        self._service = SiteverifyService(token_ttl_seconds=settings.token_ttl_seconds)
        self._app = create_app(self._service, settings)
        self._server: Optional[uvicorn.Server] = None
        self._thread: Optional[threading.Thread] = None
        self._socket: Optional[socket.socket] = None
        self._port: Optional[int] = None

    # ── Lifecycle ────────────────────────────────────────────────────────────

    @property
    def is_running(self) -> bool:
        return self._server is not None

    def start(self) -> "RecaptchaStubServer":
        """Bind an ephemeral port and serve until stop(). No-op if running."""
        if self._server is not None:
            return self

        host = self._settings.host
        family = socket.AF_INET6 if ":" in host else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((host, 0))
        except OSError:
            sock.close()
            raise

        config = uvicorn.Config(
            self._app,
            lifespan="off",
            # leave the host's logging configuration alone
            log_config=None,
            log_level=self._settings.log_level,
            access_log=False,
        )
        server = uvicorn.Server(config)
        thread = threading.Thread(
            target=server.run,
            kwargs={"sockets": [sock]},
            name="recaptcha-stub-server",
            daemon=True,
        )
        thread.start()

        deadline = time.monotonic() + self._settings.startup_timeout_seconds
        while not server.started:
            if not thread.is_alive() or time.monotonic() > deadline:
                server.should_exit = True
                thread.join(timeout=1.0)
                sock.close()
                raise ServerNotRunningError(
                    "stub verification server failed to start",
                    details={"host": host},
                )
            time.sleep(0.01)

        self._server = server
        self._thread = thread
        self._socket = sock
        self._port = sock.getsockname()[1]
        log.info("stub_server_started", url=self.verify_url)
        return self

    def stop(self) -> None:
        """Shut the listener down. Safe to call more than once."""
        if self._server is None:
            return
        server, thread, sock = self._server, self._thread, self._socket
        self._server = self._thread = self._socket = None
        self._port = None

        server.should_exit = True
        if thread is not None:
            thread.join(timeout=self._settings.startup_timeout_seconds)
        if sock is not None:
            sock.close()
        log.info("stub_server_stopped")

    def __enter__(self) -> "RecaptchaStubServer":
        return self.start()

    def __exit__(self, *args: Any) -> None:
        self.stop()

    # ── Endpoint ─────────────────────────────────────────────────────────────

    @property
    def url(self) -> str:
        """Base URL of the running server, e.g. ``http://127.0.0.1:54321``."""
        if self._port is None:
            raise ServerNotRunningError("stub verification server is not running")
        host = self._settings.host
        if ":" in host:
            host = f"[{host}]"
        return f"http://{host}:{self._port}"

    @property
    def verify_url(self) -> str:
        """Full siteverify URL that verification clients should target."""
        return self.url + self._settings.verify_path

    # ── Sites ────────────────────────────────────────────────────────────────

    def register_site(self, hostname: str = "localhost") -> Site:
        return self._service.register_site(hostname=hostname)

    def discard_site(self, site: Site) -> bool:
        return self._service.discard_site(site)

    def find_site(self, public_key: str) -> Optional[Site]:
        return self._service.get_site_by_public_key(public_key)

    @property
    def sites(self) -> tuple[Site, ...]:
        return self._service.sites
