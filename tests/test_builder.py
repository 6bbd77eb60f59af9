from urllib.parse import urlsplit

import pytest

from callfactory.builder import (
    build,
    with_authentication,
    with_content_type,
    with_header,
    with_params,
    with_timeout,
)
from callfactory.exceptions import MalformedURLError
from callfactory.models import Method, TimeoutType


class TestBuild:
    def test_build_sets_method_and_url(self):
        descriptor = build("http://example.com/api", Method.POST)
        assert descriptor.method is Method.POST
        assert descriptor.url == "http://example.com/api"
        assert descriptor.full_url == "http://example.com/api"
        assert descriptor.body is None
        assert len(descriptor.headers) == 0

    def test_build_accepts_verb_string(self):
        assert build("https://example.com", "DELETE").method is Method.DELETE

    @pytest.mark.parametrize("url", [
        "not a url",
        "example.com/path",
        "ftp://example.com/file",
        "http://",
        "http://example.com:99999/",
        "http://exa mple.com",
        "",
    ])
    def test_malformed_urls(self, url):
        with pytest.raises(MalformedURLError) as exc_info:
            build(url, Method.GET)
        assert exc_info.value.url == url


class TestWithParams:
    def test_preserves_insertion_order(self):
        descriptor = with_params(build("http://example.com/api", Method.GET), {"b": "2", "a": "1", "c": "3"})
        assert descriptor.full_url == "http://example.com/api?b=2&a=1&c=3"
        assert list(descriptor.query_params) == ["b", "a", "c"]

    def test_one_pair_per_key_no_trailing_separator(self):
        params = {"k%d" % i: str(i) for i in range(5)}
        url = with_params(build("http://example.com", Method.GET), params).full_url
        query = url.split("?", 1)[1]
        assert not query.endswith("&")
        pairs = query.split("&")
        assert [p.split("=") for p in pairs] == [[k, v] for k, v in params.items()]

    def test_empty_params_leave_url_untouched(self):
        descriptor = with_params(build("http://example.com/api", Method.GET), {})
        assert descriptor.full_url == "http://example.com/api"

    def test_values_are_percent_encoded(self):
        descriptor = with_params(build("http://example.com", Method.GET), {"q": "hello world", "x": "a&b=c"})
        assert descriptor.full_url == "http://example.com?q=hello%20world&x=a%26b%3Dc"

    def test_existing_query_is_extended(self):
        descriptor = with_params(build("http://example.com/api?x=1", Method.GET), {"y": "2"})
        assert descriptor.full_url == "http://example.com/api?x=1&y=2"

    def test_fragment_stays_after_query(self):
        descriptor = with_params(build("http://example.com/p#frag", Method.GET), {"a": "1"})
        assert descriptor.full_url == "http://example.com/p?a=1#frag"
        assert urlsplit(descriptor.full_url).query == "a=1"

    def test_fragment_with_existing_query(self):
        descriptor = with_params(build("http://example.com/p?x=1#frag", Method.GET), {"y": "2"})
        assert descriptor.full_url == "http://example.com/p?x=1&y=2#frag"

    def test_repeated_calls_accumulate_and_overwrite(self):
        descriptor = build("http://example.com", Method.GET)
        descriptor = with_params(descriptor, {"a": "1", "b": "2"})
        descriptor = with_params(descriptor, {"a": "9", "c": "3"})
        assert descriptor.full_url == "http://example.com?a=9&b=2&c=3"

    def test_input_descriptor_is_not_mutated(self):
        original = build("http://example.com", Method.GET)
        with_params(original, {"a": "1"})
        assert original.query_params == {}


class TestHeaders:
    def test_basic_authentication(self):
        descriptor = with_authentication(build("http://example.com", Method.GET), "alice", "secret")
        assert descriptor.headers["Authorization"] == "Basic YWxpY2U6c2VjcmV0"

    def test_colon_in_credentials_is_not_escaped(self):
        descriptor = with_authentication(build("http://example.com", Method.GET), "a:b", "c")
        # base64("a:b:c")
        assert descriptor.headers["Authorization"] == "Basic YTpiOmM="

    def test_content_type_last_write_wins(self):
        descriptor = build("http://example.com", Method.POST)
        descriptor = with_content_type(descriptor, "application/json")
        descriptor = with_content_type(descriptor, "text/plain")
        assert descriptor.headers["Content-Type"] == "text/plain"
        assert len(descriptor.headers) == 1

    def test_content_type_is_not_validated(self):
        descriptor = with_content_type(build("http://example.com", Method.GET), "application/xml")
        assert descriptor.content_type == "application/xml"

    def test_header_keys_are_case_insensitive(self):
        descriptor = with_header(build("http://example.com", Method.GET), "x-token", "one")
        descriptor = with_header(descriptor, "X-Token", "two")
        assert descriptor.headers["X-TOKEN"] == "two"
        assert list(descriptor.headers) == ["X-Token"]

    def test_original_headers_untouched(self):
        original = build("http://example.com", Method.GET)
        with_header(original, "X-Token", "one")
        assert "X-Token" not in original.headers


class TestDescriptorIsReadOnly:
    def test_headers_reject_writes(self):
        descriptor = with_header(build("http://example.com", Method.GET), "X-Token", "one")
        with pytest.raises(TypeError):
            descriptor.headers["X-Token"] = "two"
        with pytest.raises(TypeError):
            del descriptor.headers["X-Token"]
        assert descriptor.headers["X-Token"] == "one"

    def test_query_params_reject_writes(self):
        descriptor = with_params(build("http://example.com", Method.GET), {"a": "1"})
        with pytest.raises(TypeError):
            descriptor.query_params["a"] = "2"
        assert descriptor.full_url == "http://example.com?a=1"

    def test_source_mappings_are_copied(self):
        params = {"a": "1"}
        descriptor = with_params(build("http://example.com", Method.GET), params)
        params["b"] = "2"
        assert dict(descriptor.query_params) == {"a": "1"}

    def test_header_copies_are_writable(self):
        descriptor = with_header(build("http://example.com", Method.GET), "X-Token", "one")
        headers = descriptor.headers.copy()
        headers["X-Token"] = "two"
        assert headers["X-Token"] == "two"
        assert descriptor.headers["X-Token"] == "one"


class TestWithTimeout:
    def test_connect_and_read_are_independent(self):
        descriptor = build("http://example.com", Method.GET)
        descriptor = with_timeout(descriptor, 1500, TimeoutType.CONNECT)
        descriptor = with_timeout(descriptor, 3000, TimeoutType.READ)
        assert descriptor.connect_timeout_ms == 1500
        assert descriptor.read_timeout_ms == 3000

    def test_negative_values_are_not_validated(self):
        descriptor = with_timeout(build("http://example.com", Method.GET), -1, TimeoutType.READ)
        assert descriptor.read_timeout_ms == -1
