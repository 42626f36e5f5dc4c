"""Response metadata and the buffered response snapshot."""

from functools import cached_property
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ResponseMetadata(BaseModel):
    """Status line and headers of a response."""

    model_config = ConfigDict(frozen=True)

    status_code: int = Field(..., description="HTTP status code")
    reason: str = Field(default="", description="Reason phrase")
    http_version: str = Field(default="HTTP/1.1", description="Protocol version")
    headers: Dict[str, str] = Field(default_factory=dict, description="Response headers")

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None


class ResponseSnapshot(BaseModel):
    """A response whose body has been drained from the transport exactly once.

    Checkers only ever see this snapshot, never the live response.
    """

    model_config = ConfigDict(frozen=True)

    body: bytes = Field(default=b"", description="Full response body")
    metadata: ResponseMetadata

    @cached_property
    def text(self) -> Optional[str]:
        """Body decoded as UTF-8, or None if it is not valid UTF-8."""
        try:
            return self.body.decode("utf-8")
        except UnicodeDecodeError:
            return None
