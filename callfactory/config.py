""" Transport configuration with defaults and a JSON loader """

import json
from dataclasses import dataclass, fields
from typing import Optional

from . import __version__


@dataclass
class TransportConfig:
    """Defaults applied by the transport to every call it sends."""
    user_agent: str = f"callfactory/{__version__}"
    default_connect_timeout_ms: Optional[int] = None
    default_read_timeout_ms: Optional[int] = None
    middleware_logging: bool = True

    def __post_init__(self):
        """Validate the default timeouts."""
        for name in ('default_connect_timeout_ms', 'default_read_timeout_ms'):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must be >= 0, got {value}")


def load_transport_config(path: str) -> TransportConfig:
    """Load a TransportConfig from a JSON file. Unknown keys are ignored."""
    try:
        with open(path, 'r', encoding='utf-8') as f: raw_config = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Transport configuration file not found at {path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in transport configuration file: {e}")

    if not isinstance(raw_config, dict):
        raise ValueError(f"Transport configuration in {path} must be a JSON object")

    known = {f.name for f in fields(TransportConfig)}
    return TransportConfig(**{k: v for k, v in raw_config.items() if k in known})
