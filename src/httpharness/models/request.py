"""Request call structs and the merged request descriptor."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from httpharness.models.encoding import FormEncodingType
from httpharness.models.options import (
    BasicAuthOption,
    DisableSSLVerificationOption,
    HeadersOption,
    HostOption,
    MaxRedirectsOption,
    MethodOption,
    PathOption,
    PortOption,
    RequestOption,
    SchemeOption,
    TimeoutOption,
)

DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(frozen=True)
class RequestSpec:
    """Arguments of a plain request call.

    Example:
        RequestSpec(path="/users", method="put", body='{"name": "x"}')
    """

    path: str
    method: str = "get"
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[Union[bytes, str]] = None  # str bodies are sent as UTF-8

    def body_bytes(self) -> Optional[bytes]:
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body


@dataclass(frozen=True)
class PostRequestSpec:
    """Arguments of a form POST call.

    ``fields`` maps each field name to its values. ``None`` means the field
    is sent as a bare name (URL-encoded) or skipped (multipart).
    """

    path: str
    fields: Dict[str, Optional[List[str]]] = field(default_factory=dict)
    encoding: FormEncodingType = FormEncodingType.URL_ENCODED
    headers: Dict[str, str] = field(default_factory=dict)


class RequestDescriptor(BaseModel):
    """Everything the transport needs for one HTTP call."""

    model_config = ConfigDict(frozen=True)

    scheme: str = "http"
    host: str = "localhost"
    port: Optional[int] = None
    path: str
    method: str
    headers: Dict[str, str] = Field(default_factory=dict)
    auth: Optional[Tuple[str, str]] = None
    max_redirects: Optional[int] = None
    verify: bool = True
    timeout: Optional[float] = None

    @classmethod
    def from_options(cls, options: Sequence[RequestOption]) -> "RequestDescriptor":
        """Resolve a merged option list into a descriptor.

        Later options win for scalar values; header sets are merged key by
        key, later keys replacing earlier ones. Without a PortOption the
        port comes from the first scheme with a known default, the same
        port the server under test is started on.

        Raises:
            ValueError: If the options name no path or no method
        """
        values: Dict[str, object] = {}
        headers: Dict[str, str] = {}
        scheme_port: Optional[int] = None
        for option in options:
            if isinstance(option, SchemeOption):
                values["scheme"] = option.value
                if scheme_port is None:
                    scheme_port = DEFAULT_PORTS.get(option.value)
            elif isinstance(option, HostOption):
                values["host"] = option.value
            elif isinstance(option, PortOption):
                values["port"] = option.value
            elif isinstance(option, PathOption):
                values["path"] = option.value
            elif isinstance(option, MethodOption):
                values["method"] = option.value
            elif isinstance(option, HeadersOption):
                headers.update(option.value)
            elif isinstance(option, BasicAuthOption):
                values["auth"] = (option.username, option.password)
            elif isinstance(option, MaxRedirectsOption):
                values["max_redirects"] = option.value
            elif isinstance(option, DisableSSLVerificationOption):
                values["verify"] = False
            elif isinstance(option, TimeoutOption):
                values["timeout"] = option.value

        if "path" not in values:
            raise ValueError("Request options resolve to no path")
        if "method" not in values:
            raise ValueError("Request options resolve to no method")
        if "port" not in values and scheme_port is not None:
            values["port"] = scheme_port
        return cls(headers=headers, **values)

    @property
    def effective_port(self) -> int:
        if self.port is not None:
            return self.port
        return DEFAULT_PORTS.get(self.scheme, 80)

    @property
    def url(self) -> str:
        path = self.path if self.path.startswith("/") else "/" + self.path
        return f"{self.scheme}://{self.host}:{self.effective_port}{path}"
