"""
Response classification.

An exchange is anything exposing `status_code`, `reason`, `headers` (a mapping
of header name to a list of values), `input_stream`, `error_stream` and
`close()`; `transport.Exchange` is the one used over the network. The status
code picks exactly one of the two streams and its content is decoded as JSON.
"""

import json
from contextlib import closing
from typing import Optional

from .exceptions import InvalidJsonError
from .models import ResponseEnvelope


def read_response(exchange) -> ResponseEnvelope:
    """Read, decode and close the exchange. Error channel for status > 299."""
    with closing(exchange):
        status_code = exchange.status_code
        stream = exchange.error_stream if status_code > 299 else exchange.input_stream
        raw = stream.read() if stream is not None else b''

        try:
            text = raw.decode('utf-8')
        except UnicodeDecodeError as e:
            raise InvalidJsonError(
                f"Response body for status {status_code} is not UTF-8: {e}",
                status_code=status_code
            ) from e

        body = None
        if text.strip():
            try:
                body = json.loads(text)
            except json.JSONDecodeError as e:
                raise InvalidJsonError(
                    f"Response body for status {status_code} is not valid JSON: {e}",
                    status_code=status_code,
                    body=text
                ) from e

        return ResponseEnvelope(
            status_code=status_code,
            headers={name: list(values) for name, values in exchange.headers.items()},
            body=body,
            reason=getattr(exchange, 'reason', '') or ''
        )


def read_content_type(envelope: ResponseEnvelope) -> Optional[str]:
    return envelope.header('Content-Type')


def format_full_response(envelope: ResponseEnvelope) -> str:
    """Render the status line and headers, one `Name: v1, v2` line per header."""
    lines = [f"{envelope.status_code} {envelope.reason}".rstrip()]
    for name, values in envelope.headers.items():
        if name:
            lines.append(f"{name}: {', '.join(values)}")
    return "\n".join(lines) + "\n"
