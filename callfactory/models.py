from collections.abc import MutableMapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from .exceptions import ContentTypeNotSupportedError
from .utils import compose_url


class Method(Enum):
    """HTTP verbs a call can be built for."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class TimeoutType(Enum):
    """Kind of timeout set through `with_timeout`."""
    CONNECT = "connect"
    READ = "read"


class ContentType(Enum):
    """Content types a request body can be encoded as."""
    TEXT = "text/plain"
    JSON = "application/json"
    FORM = "application/x-www-form-urlencoded"

    @classmethod
    def from_header(cls, value: Optional[str]) -> "ContentType":
        """Resolve a Content-Type header value, ignoring parameters and case."""
        if not value:
            raise ContentTypeNotSupportedError(
                "A Content-Type must be set before a body can be encoded",
                content_type=value
            )
        media_type = value.split(';', 1)[0].strip().lower()
        if media_type == "application/text":
            return cls.TEXT
        try:
            return cls(media_type)
        except ValueError:
            raise ContentTypeNotSupportedError(
                f"Content-Type '{value}' is not supported for request bodies",
                content_type=value
            ) from None


class Headers(MutableMapping):
    """Header mapping with case-insensitive keys. The last write wins."""

    def __init__(self, data=None, **kwargs):
        self._store: Dict[str, Tuple[str, str]] = {}
        self._read_only = False
        self.update(data or {}, **kwargs)

    @classmethod
    def read_only(cls, data=None) -> "Headers":
        """A copy of `data` that rejects writes."""
        headers = cls(data)
        headers._read_only = True
        return headers

    def _check_writable(self):
        if self._read_only:
            raise TypeError("Headers of a built request are read-only, use with_header")

    def __setitem__(self, key: str, value: str):
        self._check_writable()
        self._store[key.lower()] = (key, value)

    def __getitem__(self, key: str) -> str:
        return self._store[key.lower()][1]

    def __delitem__(self, key: str):
        self._check_writable()
        del self._store[key.lower()]

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._store.values())

    def __len__(self) -> int:
        return len(self._store)

    def __eq__(self, other):
        if not isinstance(other, (Headers, dict)):
            return NotImplemented
        if isinstance(other, dict):
            other = Headers(other)
        return self._lowered() == other._lowered()

    def _lowered(self) -> Dict[str, str]:
        return {key: value for key, (_, value) in self._store.items()}

    def copy(self) -> "Headers":
        return Headers(self)

    def __repr__(self):
        return f"Headers({dict(self.items())!r})"


# Request/Response Models
@dataclass(frozen=True)
class RequestDescriptor:
    """An outgoing request. Builder operations return new descriptors."""
    method: Method
    url: str
    query_params: Mapping[str, str] = field(default_factory=dict)
    headers: Headers = field(default_factory=Headers)
    body: Optional[bytes] = None
    connect_timeout_ms: Optional[int] = None
    read_timeout_ms: Optional[int] = None

    def __post_init__(self):
        # builder functions return new descriptors, the stored mappings stay read-only
        object.__setattr__(self, "query_params", MappingProxyType(dict(self.query_params)))
        object.__setattr__(self, "headers", Headers.read_only(self.headers))

    @property
    def full_url(self) -> str:
        return compose_url(self.url, self.query_params)

    @property
    def sealed(self) -> bool:
        return self.body is not None

    @property
    def content_type(self) -> Optional[str]:
        return self.headers.get('Content-Type')


@dataclass(frozen=True)
class ResponseEnvelope:
    """The classified result of one completed exchange."""
    status_code: int
    headers: Dict[str, List[str]]
    body: Any = None
    reason: str = ""

    def header(self, name: str) -> Optional[str]:
        """First value of a header, looked up case-insensitively."""
        name = name.lower()
        for key, values in self.headers.items():
            if key.lower() == name and values:
                return values[0]
        return None

    @property
    def is_error(self) -> bool:
        return self.status_code > 299
