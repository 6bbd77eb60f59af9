import http.client, logging, socket, ssl, time
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Tuple
from urllib.parse import urlsplit

from .classifier import read_response
from .config import TransportConfig
from .exceptions import NetworkError, RequestTimeoutError
from .middlewares import BaseMiddleware, LoggingMiddleware, UserAgentMiddleware
from .models import RequestDescriptor, ResponseEnvelope

logger = logging.getLogger(__name__)


def _to_seconds(value_ms: Optional[int]) -> Optional[float]:
    # 0 and None both mean block forever
    if not value_ms:
        return None
    return value_ms / 1000.0


def _group_headers(pairs: List[Tuple[str, str]]) -> Dict[str, List[str]]:
    headers: Dict[str, List[str]] = {}
    for name, value in pairs:
        headers.setdefault(name, []).append(value)
    return headers


@contextmanager
def _transport_errors(request: RequestDescriptor) -> Iterator[None]:
    """Map socket and http.client failures onto the NetworkError taxonomy."""
    try:
        yield
    except socket.timeout as e:
        raise RequestTimeoutError(f"Request to {request.full_url} timed out: {e}") from e
    except (OSError, http.client.HTTPException) as e:
        raise NetworkError(f"Connection error for {request.full_url}: {e}") from e


# Exchange
class Exchange:
    """A completed request/response. Owns its connection and closes it once."""

    def __init__(self, connection: http.client.HTTPConnection,
                 response: http.client.HTTPResponse):
        self._connection = connection
        self._response = response
        self.status_code = response.status
        self.reason = response.reason
        self.headers = _group_headers(response.getheaders())
        self._closed = False

    @property
    def input_stream(self) -> Optional[http.client.HTTPResponse]:
        """The success channel, None for status codes above 299."""
        return self._response if self.status_code <= 299 else None

    @property
    def error_stream(self) -> Optional[http.client.HTTPResponse]:
        """The error channel, None for status codes up to 299."""
        return self._response if self.status_code > 299 else None

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self):
        if self._closed:
            return
        self._closed = True
        try:
            self._response.close()
        finally:
            self._connection.close()
            logger.debug(f"Connection to {self._connection.host}:{self._connection.port} closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


# Transport
class HTTPTransport:
    """Blocking HTTP/1.1 transport: one connection per call, no pooling, no retries."""

    def __init__(self, config: Optional[TransportConfig] = None,
                 middleware: Optional[List[BaseMiddleware]] = None):
        self.config = config or TransportConfig()
        if middleware is None:
            middleware = [UserAgentMiddleware(self.config.user_agent)]
            if self.config.middleware_logging:
                middleware.append(LoggingMiddleware())
        self.middleware = middleware

    def _create_connection(self, parsed_url, timeout: Optional[float]) -> http.client.HTTPConnection:
        """Create a new connection for the given URL."""
        if parsed_url.scheme == 'https':
            conn = http.client.HTTPSConnection(
                parsed_url.hostname,
                parsed_url.port,
                timeout=timeout,
                context=ssl.create_default_context()
            )
        else:
            conn = http.client.HTTPConnection(
                parsed_url.hostname,
                parsed_url.port,
                timeout=timeout
            )
        return conn

    def _timeouts(self, request: RequestDescriptor) -> Tuple[Optional[float], Optional[float]]:
        connect_ms = request.connect_timeout_ms
        if connect_ms is None:
            connect_ms = self.config.default_connect_timeout_ms
        read_ms = request.read_timeout_ms
        if read_ms is None:
            read_ms = self.config.default_read_timeout_ms
        return _to_seconds(connect_ms), _to_seconds(read_ms)

    def _dispatch(self, request: RequestDescriptor) -> Exchange:
        """Connect, write the request and wait for the response headers."""
        parsed_url = urlsplit(request.full_url)
        path = parsed_url.path or '/'
        if parsed_url.query:
            path += '?' + parsed_url.query

        connect_timeout, read_timeout = self._timeouts(request)
        conn = self._create_connection(parsed_url, connect_timeout)
        try:
            with _transport_errors(request):
                conn.connect()
                logger.debug(f"Connected to {conn.host}:{conn.port}")
                # the connect timeout only covers the handshake
                conn.sock.settimeout(read_timeout)

                conn.putrequest(request.method.value, path,
                                skip_host='Host' in request.headers)
                for header_name, header_value in request.headers.items():
                    conn.putheader(header_name, header_value)
                if request.body is not None and 'Content-Length' not in request.headers:
                    conn.putheader('Content-Length', str(len(request.body)))
                conn.endheaders(request.body)

                response = conn.getresponse()
        except BaseException:
            conn.close()
            raise

        return Exchange(conn, response)

    def _process_request(self, request: RequestDescriptor) -> RequestDescriptor:
        for middleware in self.middleware:
            request = middleware.process_request(request)
        return request

    def _process_error(self, error: Exception, request: RequestDescriptor) -> Exception:
        for middleware in self.middleware:
            error = middleware.process_error(error, request)
        return error

    @contextmanager
    def open(self, request: RequestDescriptor) -> Iterator[Exchange]:
        """Send the request and yield the exchange, closing it on every exit path."""
        request = self._process_request(request)
        try:
            exchange = self._dispatch(request)
        except Exception as error:
            raise self._process_error(error, request)

        with exchange:
            yield exchange

    def send(self, request: RequestDescriptor) -> ResponseEnvelope:
        """Send the request and classify its response."""
        request = self._process_request(request)
        start_time = time.time()
        try:
            with self._dispatch(request) as exchange, _transport_errors(request):
                response = read_response(exchange)
        except Exception as error:
            raise self._process_error(error, request)

        elapsed = time.time() - start_time
        for middleware in reversed(self.middleware):
            response = middleware.process_response(response, elapsed)
        return response


_default_transport: Optional[HTTPTransport] = None


def default_transport() -> HTTPTransport:
    global _default_transport
    if _default_transport is None:
        _default_transport = HTTPTransport()
    return _default_transport


def open_exchange(request: RequestDescriptor, transport: Optional[HTTPTransport] = None):
    """Context manager yielding the raw exchange for `request`."""
    return (transport or default_transport()).open(request)


def send(request: RequestDescriptor, transport: Optional[HTTPTransport] = None) -> ResponseEnvelope:
    return (transport or default_transport()).send(request)
