"""
Request building: every operation takes a descriptor and returns a new one,
so calls chain and a failed step never leaves a half-built request behind.
"""

import base64
from dataclasses import replace
from typing import Mapping, Union

from .models import Headers, Method, RequestDescriptor, TimeoutType
from .utils import compose_url, validate_url


def build(base_url: str, method: Union[Method, str]) -> RequestDescriptor:
    """Create a descriptor for `method` against `base_url`."""
    validate_url(base_url)
    return RequestDescriptor(method=Method(method), url=base_url)


def with_params(descriptor: RequestDescriptor, params: Mapping[str, str]) -> RequestDescriptor:
    """Append query parameters, keeping the iteration order of `params`."""
    query_params = dict(descriptor.query_params)
    for key, value in params.items():
        query_params[key] = value
    validate_url(compose_url(descriptor.url, query_params))
    return replace(descriptor, query_params=query_params)


def with_header(descriptor: RequestDescriptor, name: str, value: str) -> RequestDescriptor:
    headers = Headers(descriptor.headers)
    headers[name] = value
    return replace(descriptor, headers=headers)


def with_content_type(descriptor: RequestDescriptor, content_type: str) -> RequestDescriptor:
    """Set the Content-Type header verbatim. Supported values are checked by `encode`."""
    return with_header(descriptor, 'Content-Type', content_type)


def with_authentication(descriptor: RequestDescriptor, username: str, password: str) -> RequestDescriptor:
    """Set a Basic Authorization header. A ':' in either field is not escaped."""
    credentials = f"{username}:{password}".encode('utf-8')
    token = base64.b64encode(credentials).decode('ascii')
    return with_header(descriptor, 'Authorization', f"Basic {token}")


def with_timeout(descriptor: RequestDescriptor, value_ms: int, kind: TimeoutType) -> RequestDescriptor:
    """
    Set the connect or read timeout in milliseconds. 0 disables the timeout.
    Negative values are accepted here and rejected by the socket layer on send.
    """
    kind = TimeoutType(kind)
    if kind is TimeoutType.CONNECT:
        return replace(descriptor, connect_timeout_ms=value_ms)
    return replace(descriptor, read_timeout_ms=value_ms)
