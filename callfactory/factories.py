""" Verb factories: one parameterized CallFactory per HTTP method """

from typing import Any, Mapping, Optional, Union

from . import builder, classifier, encoders, transport
from .models import Method, RequestDescriptor, ResponseEnvelope, TimeoutType


class CallFactory:
    """Builds calls for a fixed HTTP method and delegates everything else."""

    def __init__(self, method: Method):
        self.method = Method(method)

    def call(self, url: str) -> RequestDescriptor:
        """A basic call against `url`."""
        return builder.build(url, self.method)

    def with_params(self, url: str, params: Mapping[str, str]) -> RequestDescriptor:
        """A call against `url` with query parameters appended in order."""
        return builder.with_params(builder.build(url, self.method), params)

    # Delegated operations, shared by every verb
    @staticmethod
    def with_content_type(descriptor: RequestDescriptor, content_type: str) -> RequestDescriptor:
        return builder.with_content_type(descriptor, content_type)

    @staticmethod
    def with_authentication(descriptor: RequestDescriptor, username: str, password: str) -> RequestDescriptor:
        return builder.with_authentication(descriptor, username, password)

    @staticmethod
    def with_timeout(descriptor: RequestDescriptor, value_ms: int, kind: TimeoutType) -> RequestDescriptor:
        return builder.with_timeout(descriptor, value_ms, kind)

    @staticmethod
    def with_header(descriptor: RequestDescriptor, name: str, value: str) -> RequestDescriptor:
        return builder.with_header(descriptor, name, value)

    @staticmethod
    def encode(descriptor: RequestDescriptor, payload: Any) -> RequestDescriptor:
        return encoders.encode(descriptor, payload)

    @staticmethod
    def read_response(exchange) -> ResponseEnvelope:
        return classifier.read_response(exchange)

    @staticmethod
    def send(descriptor: RequestDescriptor,
             http_transport: Optional[transport.HTTPTransport] = None) -> ResponseEnvelope:
        return transport.send(descriptor, http_transport)

    def __repr__(self):
        return f"CallFactory({self.method.value})"


GET = CallFactory(Method.GET)
POST = CallFactory(Method.POST)
PUT = CallFactory(Method.PUT)
DELETE = CallFactory(Method.DELETE)

FACTORIES = {factory.method: factory for factory in (GET, POST, PUT, DELETE)}


def factory_for(method: Union[Method, str]) -> CallFactory:
    """Resolve a Method or a verb name such as 'post' to its factory."""
    if isinstance(method, str):
        try:
            method = Method(method.upper())
        except ValueError:
            raise ValueError(f"Unsupported HTTP method: {method!r}") from None
    return FACTORIES[method]
