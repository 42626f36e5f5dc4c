"""HTTP transport built on httpx."""

import logging
from typing import Optional

import httpx

from httpharness.config import HarnessSettings
from httpharness.models.request import RequestDescriptor
from httpharness.models.response import ResponseMetadata


class TransportResponse:
    """A live response: metadata now, body on read()."""

    def __init__(self, response: httpx.Response, client: Optional[httpx.Client] = None):
        self._response = response
        self._client = client
        self.metadata = ResponseMetadata(
            status_code=response.status_code,
            reason=response.reason_phrase,
            http_version=response.http_version,
            headers=dict(response.headers),
        )

    def read(self) -> bytes:
        """Drain the body. The stream and client are closed afterwards, even on error.

        Raises:
            httpx.HTTPError: If the body cannot be read
        """
        try:
            return self._response.read()
        finally:
            self._response.close()
            if self._client is not None:
                self._client.close()


class HttpxTransport:
    """Sends one request per dispatch() with a short-lived httpx.Client."""

    def __init__(self, settings: Optional[HarnessSettings] = None):
        self.logger = logging.getLogger("httpharness.transport")
        self.settings = settings or HarnessSettings()

    def dispatch(
        self, descriptor: RequestDescriptor, body: Optional[bytes] = None
    ) -> Optional[TransportResponse]:
        """Send the request described by descriptor.

        Args:
            descriptor: Fully merged request descriptor
            body: Request body, if any

        Returns:
            TransportResponse, or None if no response was received
        """
        follow_redirects = descriptor.max_redirects is not None
        client_kwargs = {
            "timeout": descriptor.timeout or self.settings.request_timeout,
            "verify": descriptor.verify,
            "follow_redirects": follow_redirects,
        }
        if follow_redirects:
            client_kwargs["max_redirects"] = descriptor.max_redirects
        if descriptor.auth is not None:
            client_kwargs["auth"] = httpx.BasicAuth(*descriptor.auth)

        method = descriptor.method.upper()
        self.logger.debug(f"Dispatching {method} {descriptor.url}")

        client = httpx.Client(**client_kwargs)
        try:
            request = client.build_request(
                method,
                descriptor.url,
                headers=descriptor.headers,
                content=body,
            )
            response = client.send(request, stream=True)
        except httpx.HTTPError as e:
            client.close()
            self.logger.warning(f"No response for {method} {descriptor.url}: {e}")
            return None

        self.logger.debug(f"{method} {descriptor.url} -> {response.status_code}")
        return TransportResponse(response, client)
