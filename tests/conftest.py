import io
import json
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest


class FakeExchange:
    """In-memory exchange with separate success and error channels."""

    def __init__(self, status_code, body=b'', error_body=b'', headers=None, reason=''):
        self.status_code = status_code
        self.reason = reason
        self.headers = headers or {}
        self.input_stream = io.BytesIO(body)
        self.error_stream = io.BytesIO(error_body)
        self.closed = False

    def close(self):
        self.closed = True


@pytest.fixture
def fake_exchange():
    return FakeExchange


class _Handler(BaseHTTPRequestHandler):

    def log_message(self, format, *args):
        pass

    def _reply(self, status, payload, content_type='application/json'):
        data = payload if isinstance(payload, bytes) else json.dumps(payload).encode('utf-8')
        self.send_response(status)
        self.send_header('Content-Type', content_type)
        self.send_header('Content-Length', str(len(data)))
        self.send_header('X-Multi', 'one')
        self.send_header('X-Multi', 'two')
        self.end_headers()
        self.wfile.write(data)

    def _handle(self):
        length = int(self.headers.get('Content-Length') or 0)
        body = self.rfile.read(length) if length else b''

        if self.path.startswith('/ok'):
            self._reply(200, {"ok": True})
        elif self.path.startswith('/missing'):
            self._reply(404, {"error": "not found"})
        elif self.path.startswith('/text'):
            self._reply(200, b'plain words', content_type='text/plain')
        elif self.path.startswith('/empty'):
            self.send_response(204)
            self.end_headers()
        elif self.path.startswith('/partial'):
            # announce 20 bytes, deliver 5, then stall or hang up
            self.send_response(200)
            self.send_header('Content-Type', 'application/json')
            self.send_header('Content-Length', '20')
            self.end_headers()
            self.wfile.write(b'{"ok"')
            self.wfile.flush()
            if self.path.startswith('/partial-stall'):
                time.sleep(0.5)
            self.close_connection = True
        elif self.path.startswith('/slow'):
            time.sleep(0.5)
            self._reply(200, {"slow": True})
        else:
            self._reply(200, {
                "method": self.command,
                "path": self.path,
                "body": body.decode('utf-8'),
                "content_type": self.headers.get('Content-Type'),
                "content_length": self.headers.get('Content-Length'),
                "authorization": self.headers.get('Authorization'),
                "user_agent": self.headers.get('User-Agent'),
            })

    do_GET = _handle
    do_POST = _handle
    do_PUT = _handle
    do_DELETE = _handle


@pytest.fixture
def http_server():
    server = ThreadingHTTPServer(('127.0.0.1', 0), _Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address
    yield f"http://{host}:{port}"
    server.shutdown()
    server.server_close()
