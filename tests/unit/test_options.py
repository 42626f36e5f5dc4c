"""Unit tests for request options, the request descriptor and option merging."""

import pytest
from pydantic import ValidationError

from httpharness.models.options import (
    BasicAuthOption,
    DisableSSLVerificationOption,
    HeadersOption,
    HostOption,
    MaxRedirectsOption,
    MethodOption,
    PathOption,
    PortOption,
    SchemeOption,
    TimeoutOption,
)
from httpharness.models.request import PostRequestSpec, RequestDescriptor, RequestSpec
from httpharness.models.encoding import FormEncodingType
from httpharness.services.options import append_to_base_options


@pytest.mark.unit
class TestRequestOptions:
    """Test option models."""

    @pytest.mark.parametrize("raw", ["https://", "HTTPS://", "https", " Https:// "])
    def test_scheme_is_normalized(self, raw):
        assert SchemeOption(raw).value == "https"

    def test_empty_scheme_rejected(self):
        with pytest.raises(ValidationError):
            SchemeOption("://")

    def test_positional_and_keyword_are_equivalent(self):
        assert PortOption(8080) == PortOption(value=8080)

    def test_too_many_positional_values(self):
        with pytest.raises(TypeError):
            PortOption(1, 2)

    @pytest.mark.parametrize("port", [0, 65536, -1])
    def test_port_out_of_range(self, port):
        with pytest.raises(ValidationError):
            PortOption(port)

    def test_options_are_immutable(self):
        option = PathOption("/a")
        with pytest.raises(ValidationError):
            option.value = "/b"

    def test_basic_auth_positional(self):
        option = BasicAuthOption("user", "secret")

        assert option.username == "user"
        assert option.password == "secret"


@pytest.mark.unit
class TestRequestDescriptor:
    """Test resolving option lists into a descriptor."""

    def test_defaults(self):
        descriptor = RequestDescriptor.from_options([PathOption("/"), MethodOption("get")])

        assert descriptor.scheme == "http"
        assert descriptor.host == "localhost"
        assert descriptor.port is None
        assert descriptor.effective_port == 80
        assert descriptor.url == "http://localhost:80/"
        assert descriptor.verify is True

    def test_https_default_port(self):
        descriptor = RequestDescriptor.from_options(
            [SchemeOption("https://"), PathOption("/x"), MethodOption("get")]
        )

        assert descriptor.url == "https://localhost:443/x"

    def test_later_options_win(self):
        descriptor = RequestDescriptor.from_options([
            HostOption("first"),
            PortOption(1000),
            PathOption("/old"),
            MethodOption("get"),
            HostOption("second"),
            PortOption(2000),
            PathOption("/new"),
            MethodOption("post"),
        ])

        assert descriptor.host == "second"
        assert descriptor.port == 2000
        assert descriptor.path == "/new"
        assert descriptor.method == "post"

    def test_headers_are_merged(self):
        descriptor = RequestDescriptor.from_options([
            HeadersOption({"Accept": "text/plain", "X-A": "1"}),
            PathOption("/"),
            MethodOption("get"),
            HeadersOption({"X-A": "2", "X-B": "3"}),
        ])

        assert descriptor.headers == {"Accept": "text/plain", "X-A": "2", "X-B": "3"}

    def test_transport_extras(self):
        descriptor = RequestDescriptor.from_options([
            BasicAuthOption("u", "p"),
            MaxRedirectsOption(3),
            DisableSSLVerificationOption(),
            TimeoutOption(2.5),
            PathOption("/"),
            MethodOption("get"),
        ])

        assert descriptor.auth == ("u", "p")
        assert descriptor.max_redirects == 3
        assert descriptor.verify is False
        assert descriptor.timeout == 2.5

    def test_path_without_leading_slash(self):
        descriptor = RequestDescriptor.from_options([PathOption("items?q=1"), MethodOption("get")])

        assert descriptor.url == "http://localhost:80/items?q=1"

    def test_missing_path_raises(self):
        with pytest.raises(ValueError, match="no path"):
            RequestDescriptor.from_options([MethodOption("get")])

    def test_missing_method_raises(self):
        with pytest.raises(ValueError, match="no method"):
            RequestDescriptor.from_options([PathOption("/")])


@pytest.mark.unit
class TestAppendToBaseOptions:
    """Test merging base options with per-call overrides."""

    def test_appends_path_method_headers_in_order(self):
        base = [SchemeOption("http"), PortOption(8080)]

        options = append_to_base_options(base, "/p", "put", {"X-A": "1"})

        assert options[:2] == base
        assert options[2:] == [PathOption("/p"), MethodOption("put"), HeadersOption({"X-A": "1"})]

    def test_no_headers_when_none(self):
        options = append_to_base_options([], "/p", "get", None)

        assert options == [PathOption("/p"), MethodOption("get")]

    def test_empty_headers_still_appended(self):
        options = append_to_base_options([], "/p", "get", {})

        assert options[-1] == HeadersOption({})

    def test_base_is_not_mutated(self):
        base = [HostOption("example")]

        first = append_to_base_options(base, "/a", "get")
        second = append_to_base_options(base, "/b", "post")

        assert base == [HostOption("example")]
        assert first is not second
        assert RequestDescriptor.from_options(first).path == "/a"
        assert RequestDescriptor.from_options(second).path == "/b"

    def test_overrides_beat_base(self):
        base = [PathOption("/base"), MethodOption("delete")]

        descriptor = RequestDescriptor.from_options(append_to_base_options(base, "/call", "get"))

        assert descriptor.path == "/call"
        assert descriptor.method == "get"


@pytest.mark.unit
class TestCallSpecs:
    """Test the request call structs and their defaults."""

    def test_request_spec_defaults(self):
        spec = RequestSpec(path="/")

        assert spec.method == "get"
        assert spec.headers == {}
        assert spec.body is None
        assert spec.body_bytes() is None

    def test_string_body_sent_as_utf8(self):
        assert RequestSpec(path="/", body="héllo").body_bytes() == "héllo".encode("utf-8")

    def test_bytes_body_untouched(self):
        assert RequestSpec(path="/", body=b"\x00\xff").body_bytes() == b"\x00\xff"

    def test_post_spec_defaults(self):
        spec = PostRequestSpec(path="/form")

        assert spec.fields == {}
        assert spec.encoding == FormEncodingType.URL_ENCODED
        assert spec.headers == {}
