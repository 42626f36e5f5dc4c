"""unittest base class that runs a server per test and checks its responses."""

import logging
import unittest
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from httpharness.config import HarnessSettings
from httpharness.errors import HarnessConfigurationError
from httpharness.models.encoding import FormEncodingType
from httpharness.models.options import RequestOption
from httpharness.models.request import PostRequestSpec, RequestDescriptor, RequestSpec
from httpharness.models.response import ResponseSnapshot
from httpharness.services import checkers as response_checkers
from httpharness.services.checkers import ResponseChecker
from httpharness.services.encoder import (
    generate_boundary,
    multipart_content_type,
    multipart_encode,
    url_encode,
)
from httpharness.services.lifecycle import UvicornServerRunner, resolve_port, stop_server
from httpharness.services.options import append_to_base_options
from httpharness.services.pipeline import ResponsePipeline
from httpharness.services.transport import HttpxTransport
from httpharness.utils.logging import setup_logger


class ServerTestCase(unittest.TestCase):
    """Starts ``router`` before each test and stops it afterwards.

    Subclasses set ``router`` (an ASGI app or a FastAPI APIRouter) and
    usually ``request_options``; the port to listen on is derived from the
    options (explicit PortOption, else the scheme's default, else 80).

    Example:
        class HelloTest(ServerTestCase):
            router = hello_router
            request_options = [SchemeOption("http://"), HostOption("127.0.0.1"), PortOption(8123)]

            def test_root(self):
                self.issue_request("/", self.check_status(200), self.check_body_contains("Hello"))
    """

    router: Any = None
    request_options: Sequence[RequestOption] = ()
    settings: HarnessSettings = HarnessSettings()
    server_runner_class = UvicornServerRunner
    transport_class = HttpxTransport

    check_body_contains = staticmethod(response_checkers.check_body_contains)
    check_status = staticmethod(response_checkers.check_status)

    @classmethod
    def setUpClass(cls):
        super().setUpClass()
        setup_logger("httpharness", log_file=cls.settings.log_file, level=cls.settings.log_level)

    def setUp(self):
        super().setUp()
        self.logger = logging.getLogger("httpharness.testcase")
        self._server = None
        if self.router is None:
            raise HarnessConfigurationError(
                f"{type(self).__name__}.router is not set; nothing to serve"
            )
        port = resolve_port(self.request_options)
        runner = self.server_runner_class(self.settings)
        self._server = runner.start(port, self.router)

    def tearDown(self):
        stop_server(getattr(self, "_server", None))
        self._server = None
        super().tearDown()

    @property
    def multipart_boundary(self) -> str:
        """Boundary for multipart bodies, generated on first use and then reused."""
        boundary = getattr(self, "_multipart_boundary", None)
        if boundary is None:
            boundary = generate_boundary()
            self._multipart_boundary = boundary
        return boundary

    def issue_request_with_options(
        self,
        options: Sequence[RequestOption],
        body: Optional[bytes] = None,
        checkers: Sequence[ResponseChecker] = (),
    ) -> ResponseSnapshot:
        """Send a request built from a full option list and run checkers on the response.

        Raises:
            TransportFailure: If no response could be fetched; no checker runs
            ResponseCheckFailure: If any checker failed, after all of them ran
        """
        descriptor = RequestDescriptor.from_options(options)
        self.logger.debug(f"{descriptor.method.upper()} {descriptor.url}")
        pipeline = ResponsePipeline(self.transport_class(self.settings))
        return pipeline.execute(descriptor, body, checkers)

    def issue(self, spec: RequestSpec, *checkers: ResponseChecker) -> ResponseSnapshot:
        options = append_to_base_options(self.request_options, spec.path, spec.method, spec.headers)
        return self.issue_request_with_options(options, spec.body_bytes(), checkers)

    def issue_request(
        self,
        path: str,
        *checkers: ResponseChecker,
        method: str = "get",
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[Union[bytes, str]] = None,
    ) -> ResponseSnapshot:
        """Request path and run checkers against the response.

        Args:
            path: Path to request
            *checkers: Checkers to run, in order
            method: HTTP method
            headers: Extra request headers
            body: Request body; str is sent as UTF-8

        Returns:
            The buffered response, for further inspection
        """
        spec = RequestSpec(path=path, method=method, headers=dict(headers or {}), body=body)
        return self.issue(spec, *checkers)

    def issue_post(self, spec: PostRequestSpec, *checkers: ResponseChecker) -> ResponseSnapshot:
        """POST spec.fields encoded as spec.encoding.

        Raises:
            UrlEncodingError: If a field cannot be URL-encoded
        """
        headers = dict(spec.headers)
        if spec.encoding == FormEncodingType.URL_ENCODED:
            body = url_encode(spec.fields)
            if _find_header(headers, "Content-Type") is None:
                headers["Content-Type"] = "application/x-www-form-urlencoded"
        else:
            body = multipart_encode(spec.fields, self.multipart_boundary)
            existing = _find_header(headers, "Content-Type")
            if existing is not None:
                del headers[existing]
            headers["Content-Type"] = multipart_content_type(self.multipart_boundary)

        options = append_to_base_options(self.request_options, spec.path, "post", headers)
        return self.issue_request_with_options(options, body.encode("utf-8"), checkers)

    def issue_post_request(
        self,
        path: str,
        fields: Mapping[str, Optional[List[str]]],
        *checkers: ResponseChecker,
        encoding: FormEncodingType = FormEncodingType.URL_ENCODED,
        headers: Optional[Mapping[str, str]] = None,
    ) -> ResponseSnapshot:
        """POST form fields to path and run checkers against the response."""
        spec = PostRequestSpec(
            path=path,
            fields=dict(fields),
            encoding=encoding,
            headers=dict(headers or {}),
        )
        return self.issue_post(spec, *checkers)


def _find_header(headers: Dict[str, str], name: str) -> Optional[str]:
    """Return the key in headers matching name case-insensitively."""
    wanted = name.lower()
    for key in headers:
        if key.lower() == wanted:
            return key
    return None
