import logging
from typing import Optional

from .builder import with_header
from .models import RequestDescriptor, ResponseEnvelope


# Middleware System
class BaseMiddleware:
    """Base class for transport middleware."""

    def process_request(self, request: RequestDescriptor) -> RequestDescriptor:
        """Process the request before it's sent."""
        return request

    def process_response(self, response: ResponseEnvelope, elapsed: float) -> ResponseEnvelope:
        """Process the response after it's been classified."""
        return response

    def process_error(self, error: Exception, request: RequestDescriptor) -> Exception:
        """Process an error that occurred during the request."""
        return error

class LoggingMiddleware(BaseMiddleware):
    """Middleware for logging requests and responses."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def process_request(self, request: RequestDescriptor) -> RequestDescriptor:
        self.logger.debug(f"Request: {request.method.value} {request.full_url}")
        return request

    def process_response(self, response: ResponseEnvelope, elapsed: float) -> ResponseEnvelope:
        self.logger.debug(f"Response: {response.status_code} ({elapsed:.3f}s)")
        return response

    def process_error(self, error: Exception, request: RequestDescriptor) -> Exception:
        self.logger.error(f"Request failed: {request.method.value} {request.full_url} - {error}")
        return error

class UserAgentMiddleware(BaseMiddleware):
    """Middleware for adding User-Agent header."""

    def __init__(self, user_agent: str):
        self.user_agent = user_agent

    def process_request(self, request: RequestDescriptor) -> RequestDescriptor:
        if 'User-Agent' not in request.headers:
            request = with_header(request, 'User-Agent', self.user_agent)
        return request
