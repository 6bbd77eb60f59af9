from typing import Optional

# Exceptions
class CallFactoryError(Exception):
    """Base exception for errors raised while building, encoding or reading a call."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

class MalformedURLError(CallFactoryError, ValueError):
    """Raised when a URL cannot be parsed as an absolute http(s) URL."""
    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url

class ContentTypeNotSupportedError(CallFactoryError):
    """Raised when a body is encoded under a missing or unsupported Content-Type."""
    def __init__(self, message: str, content_type: Optional[str] = None):
        super().__init__(message)
        self.content_type = content_type

class InvalidJsonError(CallFactoryError, ValueError):
    """Raised when a payload or a response channel is not valid JSON."""
    def __init__(self, message: str, status_code: Optional[int] = None,
                 body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

class NotSerializableError(CallFactoryError, TypeError):
    """Raised when a payload cannot be serialized for the declared Content-Type."""
    def __init__(self, message: str, payload_type: Optional[type] = None):
        super().__init__(message)
        self.payload_type = payload_type

class BodyAlreadySetError(CallFactoryError):
    """Raised when encoding a body into a descriptor that already carries one."""
    pass

class NetworkError(CallFactoryError):
    """Raised when the transport fails to complete an exchange."""
    pass

class RequestTimeoutError(NetworkError):
    """Raised when connecting or reading times out."""
    pass
