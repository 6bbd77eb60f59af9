from typing import Mapping
from urllib.parse import quote, urlencode, urlsplit, urlunsplit

from .exceptions import MalformedURLError

SUPPORTED_SCHEMES = ('http', 'https')


def validate_url(url):
  # Validate that the url is an absolute http(s) url with a host
  if not isinstance(url, str) or not url:
      raise MalformedURLError("URL must be a non-empty string", url=url)

  if any(ch.isspace() or ord(ch) < 0x20 or ord(ch) == 0x7f for ch in url):
      raise MalformedURLError(f"URL '{url}' contains whitespace or control characters", url=url)

  try:
      parsed = urlsplit(url)
      # port is parsed lazily, out of range or non numeric ports only fail here
      parsed.port
  except ValueError as e:
      raise MalformedURLError(f"URL '{url}' could not be parsed: {e}", url=url) from e

  if parsed.scheme.lower() not in SUPPORTED_SCHEMES:
      raise MalformedURLError(f"URL '{url}' must use one of {', '.join(SUPPORTED_SCHEMES)}", url=url)

  if not parsed.hostname:
      raise MalformedURLError(f"URL '{url}' has no host", url=url)

  return url


def compose_url(url: str, params: Mapping[str, str]) -> str:
  # Append params in iteration order after any existing query, keeping a #fragment last
  if not params:
      return url
  parts = urlsplit(url)
  query = urlencode([(str(k), str(v)) for k, v in params.items()], quote_via=quote)
  existing = parts.query.rstrip('&')
  if existing:
      query = f"{existing}&{query}"
  return urlunsplit(parts._replace(query=query))
