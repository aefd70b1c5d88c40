"""
Static file server for the built frontend.

Serves one directory over HTTP from a background thread for the duration
of a run.  "/" and directory paths resolve to their index.html.  If the
preferred port is taken, the next ports are tried in turn.

    handle = start_static_server("dist", "127.0.0.1", 4317)
    try:
        ...  # browse handle.base_url
    finally:
        handle.close()
"""
from __future__ import annotations

import errno
import functools
import threading
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path


DEFAULT_HOST      = "127.0.0.1"
DEFAULT_PORT      = 4317
MAX_PORT_ATTEMPTS = 50


class _QuietHandler(SimpleHTTPRequestHandler):
    """SimpleHTTPRequestHandler without per-request access logging."""

    def log_message(self, format, *args):
        pass


class StaticServerHandle:
    def __init__(self, server: ThreadingHTTPServer, thread: threading.Thread, host: str, port: int):
        self._server = server
        self._thread = thread
        self.host    = host
        self.port    = port

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def close(self) -> None:
        self._server.shutdown()
        self._server.server_close()
        self._thread.join()


def start_static_server(
    root: "str | Path",
    host: str = DEFAULT_HOST,
    preferred_port: int = DEFAULT_PORT,
    max_attempts: int = MAX_PORT_ATTEMPTS,
) -> StaticServerHandle:
    """
    Bind the first free port in [preferred_port, preferred_port + max_attempts).

    Raises FileNotFoundError if root is not a directory, OSError for bind
    errors other than "address in use", and RuntimeError when every port in
    the window is taken.
    """
    root = Path(root)
    if not root.is_dir():
        raise FileNotFoundError(f"Static root not found: {root}")

    handler = functools.partial(_QuietHandler, directory=str(root))

    for attempt in range(max_attempts):
        port = preferred_port + attempt
        try:
            server = ThreadingHTTPServer((host, port), handler)
        except OSError as exc:
            if exc.errno == errno.EADDRINUSE:
                continue
            raise
        server.daemon_threads = True
        thread = threading.Thread(target=server.serve_forever, name=f"uilint-static-{port}", daemon=True)
        thread.start()
        return StaticServerHandle(server, thread, host, port)

    raise RuntimeError(f"Unable to bind an available port near {preferred_port}.")
