"""Exception types raised by the test harness."""

from typing import List


class HarnessError(Exception):
    """Base class for harness errors that are not assertion failures."""


class HarnessConfigurationError(HarnessError):
    """The test case is missing something it needs before setUp can run."""


class ServerStartError(HarnessError):
    """The server under test did not come up."""


class UrlEncodingError(HarnessError, ValueError):
    """A form field name or value cannot be percent-encoded."""


class TransportFailure(AssertionError):
    """No usable response came back from the transport."""


class ResponseCheckFailure(AssertionError):
    """One or more response checkers failed.

    Every checker runs before this is raised, so ``failures`` holds one
    message per failed checker, in the order the checkers were supplied.
    """

    def __init__(self, failures: List[str]):
        self.failures = list(failures)
        count = len(self.failures)
        summary = f"{count} response check{'s' if count != 1 else ''} failed"
        super().__init__(summary + ":\n" + "\n".join(f"  - {f}" for f in self.failures))
