"""callfactory - Build HTTP calls, encode their bodies and classify their responses."""

__version__ = "0.1.0"

# Import key classes for easier access
from .models import Method, TimeoutType, ContentType, Headers, RequestDescriptor, ResponseEnvelope
from .exceptions import (
    CallFactoryError,
    MalformedURLError,
    ContentTypeNotSupportedError,
    InvalidJsonError,
    NotSerializableError,
    BodyAlreadySetError,
    NetworkError,
    RequestTimeoutError
)
from .builder import (
    build,
    with_params,
    with_header,
    with_content_type,
    with_authentication,
    with_timeout
)
from .encoders import encode
from .classifier import read_response, read_content_type, format_full_response
from .config import TransportConfig, load_transport_config
from .middlewares import BaseMiddleware, LoggingMiddleware, UserAgentMiddleware
from .transport import Exchange, HTTPTransport, open_exchange, send
from .factories import CallFactory, GET, POST, PUT, DELETE, factory_for
