"""HTTP server exposing the sources and jobs API."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import urlsplit

from pubdatahub.api.jobs import (
    JobManager,
    handle_list_jobs,
    handle_pause_job,
    handle_resume_job,
    handle_start_download,
)
from pubdatahub.api.responses import Response, text_response
from pubdatahub.api.sources import handle_get_data, handle_list_sources

_log = logging.getLogger(__name__)


def _split_address(address: str) -> tuple[str, int]:
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"invalid address {address!r}: expected host:port")
    return host, int(port)


def _health() -> Response:
    timestamp = datetime.now().astimezone().isoformat(timespec="seconds")
    body = f'{{"status": "ok", "timestamp": "{timestamp}"}}'.encode("utf-8")
    return Response(status=200, headers={"Content-Type": "application/json"}, body=body)


def _root() -> Response:
    return text_response("PubDataHub API Server\n")


def _make_handler(api: ApiServer) -> type[BaseHTTPRequestHandler]:
    class _RequestHandler(BaseHTTPRequestHandler):
        def _serve(self) -> None:
            try:
                length = int(self.headers.get("Content-Length") or 0)
            except ValueError:
                self.send_error(400, "Invalid Content-Length")
                return
            body = self.rfile.read(length) if length > 0 else b""
            response = api.dispatch(self.command, self.path, body)
            self.send_response(response.status)
            for name, value in response.headers.items():
                self.send_header(name, value)
            self.send_header("Content-Length", str(len(response.body)))
            self.end_headers()
            if self.command != "HEAD":
                self.wfile.write(response.body)

        do_GET = do_POST = do_PUT = do_DELETE = do_PATCH = do_HEAD = do_OPTIONS = _serve

        def log_message(self, format: str, *args) -> None:
            _log.debug("%s - %s", self.address_string(), format % args)

    return _RequestHandler


class ApiServer:
    """API-only server: health, sources and jobs endpoints."""

    def __init__(self, address: str, job_manager: JobManager) -> None:
        self._host, self._port = _split_address(address)
        self._job_manager = job_manager
        self._httpd: ThreadingHTTPServer | None = None
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    @property
    def address(self) -> str:
        """``host:port``; while running, the port is the one actually bound."""
        port = self._httpd.server_address[1] if self._httpd is not None else self._port
        return f"{self._host}:{port}"

    def dispatch(self, method: str, path: str, body: bytes | str = b"") -> Response:
        """Route one request to its handler; unmatched requests get the root page."""
        parts = urlsplit(path)
        route = parts.path or "/"
        method = method.upper()
        reading = method in ("GET", "HEAD")
        segments = route.split("/")

        if route == "/health":
            return _health()
        if reading:
            if route == "/api/sources":
                return handle_list_sources()
            if (
                len(segments) == 5
                and segments[1:3] == ["api", "sources"]
                and segments[3]
                and segments[4] == "data"
            ):
                return handle_get_data(route, parts.query)
            if route == "/api/jobs":
                return handle_list_jobs(self._job_manager)
        if method == "POST":
            if route == "/api/jobs/download":
                return handle_start_download(body)
            if len(segments) == 5 and segments[1:3] == ["api", "jobs"] and segments[3]:
                if segments[4] == "pause":
                    return handle_pause_job(self._job_manager, route)
                if segments[4] == "resume":
                    return handle_resume_job(self._job_manager, route)
        return _root()

    def start(self) -> None:
        """Bind the address and serve requests on a background thread."""
        with self._lock:
            if self._httpd is not None:
                raise RuntimeError("server already started")
            _log.info("Starting API server on %s", self.address)
            try:
                httpd = ThreadingHTTPServer((self._host, self._port), _make_handler(self))
            except OSError as exc:
                raise OSError(f"failed to start API server: {exc}") from exc
            httpd.daemon_threads = True
            thread = threading.Thread(
                target=httpd.serve_forever, name="pubdatahub-api", daemon=True
            )
            self._httpd = httpd
            self._thread = thread
            thread.start()

    def stop(self) -> None:
        """Stop serving and release the socket."""
        with self._lock:
            httpd, thread = self._httpd, self._thread
            self._httpd = None
            self._thread = None
        if httpd is None:
            return
        _log.info("Shutting down API server")
        httpd.shutdown()
        httpd.server_close()
        if thread is not None:
            thread.join()