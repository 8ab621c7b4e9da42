"""Shared fixtures: a local HTTP server that answers with a chosen status."""

import json
import threading
from http.server import HTTPServer, BaseHTTPRequestHandler
from urllib.parse import parse_qs, urlparse

import pytest


class StatusHandler(BaseHTTPRequestHandler):
    """Reply with the status code given in the ?status= query (default 500)."""

    def _reply(self):
        self.server.calls += 1
        self.server.last_headers = dict(self.headers)

        query = parse_qs(urlparse(self.path).query)
        status = int(query.get("status", ["500"])[0])
        length = int(self.headers.get("Content-Length") or 0)
        if length:
            self.rfile.read(length)

        body = json.dumps({"data": f"mock data for status {status}"}).encode()
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if self.command != "HEAD" and status not in (204, 304):
            self.wfile.write(body)

    do_GET = do_HEAD = do_OPTIONS = do_DELETE = do_TRACE = _reply
    do_POST = do_PUT = do_PATCH = _reply

    def log_message(self, format, *args):
        """Suppress default HTTP server logs."""
        pass


@pytest.fixture
def server():
    httpd = HTTPServer(("127.0.0.1", 0), StatusHandler)
    httpd.calls = 0
    httpd.last_headers = {}
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    yield httpd
    httpd.shutdown()
    httpd.server_close()
    thread.join()


@pytest.fixture
def base_url(server):
    host, port = server.server_address[:2]
    return f"http://{host}:{port}"
