"""Dispatch a request, buffer the response once, run every checker."""

import logging
from typing import Iterable, Optional

import httpx

from httpharness.errors import ResponseCheckFailure, TransportFailure
from httpharness.models.request import RequestDescriptor
from httpharness.models.response import ResponseSnapshot
from httpharness.services.checkers import ResponseChecker


class ResponsePipeline:
    """Fetches one response through a transport and checks it.

    The transport only needs ``dispatch(descriptor, body)`` returning an
    object with ``metadata`` and ``read()``, or None when nothing came back.
    """

    def __init__(self, transport):
        self.logger = logging.getLogger("httpharness.pipeline")
        self.transport = transport

    def fetch(self, descriptor: RequestDescriptor, body: Optional[bytes] = None) -> ResponseSnapshot:
        """Send the request and drain the response body into a snapshot.

        Raises:
            TransportFailure: If no response arrives or its body cannot be read
        """
        response = self.transport.dispatch(descriptor, body)
        if response is None:
            raise TransportFailure("Could not fetch response.")

        try:
            response_body = response.read()
        except (httpx.HTTPError, OSError) as e:
            self.logger.warning(f"Reading response body failed: {e}")
            raise TransportFailure("Could not read response data.") from e

        return ResponseSnapshot(body=response_body, metadata=response.metadata)

    def run_checkers(self, snapshot: ResponseSnapshot, checkers: Iterable[ResponseChecker]) -> None:
        """Run each checker in order against the same snapshot.

        A failing checker does not stop the others. Failures are
        AssertionError and test-runner outcome exceptions that derive from
        BaseException directly (pytest.fail raises one). Other errors and
        interrupts propagate. Once all checkers have run, the collected
        failures are raised together.

        Raises:
            ResponseCheckFailure: If any checker failed
        """
        failures = []
        for checker in checkers:
            try:
                checker(snapshot.body, snapshot.metadata)
            except AssertionError as e:
                failures.append(_failure_message(checker, e))
            except (Exception, KeyboardInterrupt, SystemExit, GeneratorExit):
                raise
            except BaseException as e:
                failures.append(_failure_message(checker, e))

        if failures:
            self.logger.info(f"{len(failures)} response check(s) failed")
            raise ResponseCheckFailure(failures)

    def execute(
        self,
        descriptor: RequestDescriptor,
        body: Optional[bytes] = None,
        checkers: Iterable[ResponseChecker] = (),
    ) -> ResponseSnapshot:
        """fetch() then run_checkers(); returns the snapshot when every check passes."""
        snapshot = self.fetch(descriptor, body)
        self.run_checkers(snapshot, checkers)
        return snapshot


def _failure_message(checker: ResponseChecker, error: BaseException) -> str:
    return str(error) or f"{getattr(checker, '__name__', 'checker')} failed"
