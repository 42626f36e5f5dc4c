"""Response checkers and the factories that build the common ones.

A checker takes the buffered body and the response metadata and raises
AssertionError when the response is not what it expects.
"""

from typing import Callable

from httpharness.models.response import ResponseMetadata

ResponseChecker = Callable[[bytes, ResponseMetadata], None]


def check_body_contains(text: str) -> ResponseChecker:
    """Checker that fails unless the UTF-8 body contains text."""

    def checker(body: bytes, response: ResponseMetadata) -> None:
        try:
            body_text = body.decode("utf-8")
        except UnicodeDecodeError:
            raise AssertionError("Could not read response body as string.") from None
        if text not in body_text:
            raise AssertionError(f'Could not find "{text}" in response body.')

    return checker


def check_status(code: int) -> ResponseChecker:
    """Checker that fails unless the response status code equals code."""

    def checker(body: bytes, response: ResponseMetadata) -> None:
        if response.status_code != code:
            raise AssertionError(
                f"Unexpected response status code "
                f"(expecting {int(code)}, found {response.status_code})."
            )

    return checker
