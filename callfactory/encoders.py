"""
Body encoding. The Content-Type header of a descriptor selects one of the
encoders below; the result is a new, sealed descriptor carrying the bytes and a
matching Content-Length.
"""

import dataclasses
import json
from collections.abc import Mapping
from dataclasses import replace
from typing import Any, Callable, Dict
from urllib.parse import urlencode

from .exceptions import BodyAlreadySetError, InvalidJsonError, NotSerializableError
from .models import ContentType, Headers, RequestDescriptor


def encode_json(payload: Any) -> bytes:
    if isinstance(payload, str):
        try:
            value = json.loads(payload)
        except json.JSONDecodeError as e:
            raise InvalidJsonError(f"The request body is not valid JSON: {e}") from e
        if not isinstance(value, dict):
            raise InvalidJsonError("The request body must be a JSON object")
    elif isinstance(payload, Mapping):
        value = dict(payload)
    elif dataclasses.is_dataclass(payload) and not isinstance(payload, type):
        value = dataclasses.asdict(payload)
    else:
        raise InvalidJsonError(
            f"The request body you provided is not in a valid JSON format: {type(payload).__name__}"
        )

    try:
        text = json.dumps(value, separators=(',', ':'), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise InvalidJsonError(f"The request body could not be serialized as JSON: {e}") from e
    return text.encode('utf-8')


def encode_text(payload: Any) -> bytes:
    if not isinstance(payload, str):
        raise NotSerializableError(
            f"A text body must be a string, got {type(payload).__name__}",
            payload_type=type(payload)
        )
    return payload.encode('utf-8')


def encode_form(payload: Any) -> bytes:
    if isinstance(payload, (bytes, bytearray)):
        return bytes(payload)
    if isinstance(payload, str):
        return payload.encode('utf-8')
    if isinstance(payload, Mapping):
        return urlencode(list(payload.items()), doseq=True).encode('ascii')
    if isinstance(payload, (list, tuple)):
        try:
            return urlencode(payload, doseq=True).encode('ascii')
        except (TypeError, ValueError) as e:
            raise NotSerializableError(
                f"Form payload must be key/value pairs: {e}", payload_type=type(payload)
            ) from e
    raise NotSerializableError(
        f"Cannot serialize {type(payload).__name__} as a form body",
        payload_type=type(payload)
    )


ENCODERS: Dict[ContentType, Callable[[Any], bytes]] = {
    ContentType.JSON: encode_json,
    ContentType.TEXT: encode_text,
    ContentType.FORM: encode_form,
}


def encode(descriptor: RequestDescriptor, payload: Any) -> RequestDescriptor:
    """
    Serialize `payload` according to the descriptor's Content-Type.

    Raises:
        ContentTypeNotSupportedError: no Content-Type, or one outside ContentType.
        InvalidJsonError: a JSON body that is neither JSON text, a mapping nor a dataclass.
        NotSerializableError: a text or form body of the wrong type.
        BodyAlreadySetError: the descriptor is already sealed.
    """
    if descriptor.sealed:
        raise BodyAlreadySetError("The request body has already been encoded")

    content_type = ContentType.from_header(descriptor.content_type)
    data = ENCODERS[content_type](payload)

    headers = Headers(descriptor.headers)
    headers['Content-Length'] = str(len(data))
    return replace(descriptor, headers=headers, body=data)
