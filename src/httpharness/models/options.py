"""Typed request options.

A test case keeps a base list of these (scheme, host, port, ...) and each
call appends its own path, method and headers. Options are immutable; the
list order is what gives later options precedence.
"""

from typing import Dict, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RequestOption(BaseModel):
    """Base class for all request options.

    Single-valued options accept their value positionally, so
    ``PortOption(8080)`` and ``PortOption(value=8080)`` are equivalent.
    """

    model_config = ConfigDict(frozen=True)

    def __init__(self, *args, **data):
        if args:
            if len(args) > 1 or "value" in data:
                raise TypeError(f"{type(self).__name__} takes a single value")
            data["value"] = args[0]
        super().__init__(**data)


class SchemeOption(RequestOption):
    """URL scheme. ``"https://"``, ``"HTTPS"`` and ``"https"`` are all accepted."""

    kind: Literal["scheme"] = "scheme"
    value: str = Field(..., description="Scheme, normalized to lower case without '://'")

    @field_validator("value")
    @classmethod
    def normalize_scheme(cls, v: str) -> str:
        v = v.strip().lower()
        if v.endswith("://"):
            v = v[:-3]
        if not v:
            raise ValueError("scheme must not be empty")
        return v


class HostOption(RequestOption):
    kind: Literal["host"] = "host"
    value: str = Field(..., min_length=1, description="Host name or IP address")


class PortOption(RequestOption):
    kind: Literal["port"] = "port"
    value: int = Field(..., ge=1, le=65535, description="TCP port")


class PathOption(RequestOption):
    kind: Literal["path"] = "path"
    value: str = Field(..., description="Request path, optionally with a query string")


class MethodOption(RequestOption):
    kind: Literal["method"] = "method"
    value: str = Field(..., min_length=1, description="HTTP method, any case")


class HeadersOption(RequestOption):
    kind: Literal["headers"] = "headers"
    value: Dict[str, str] = Field(default_factory=dict, description="Request headers")


class BasicAuthOption(RequestOption):
    """HTTP basic credentials handed to the transport."""

    kind: Literal["basic_auth"] = "basic_auth"
    username: str
    password: str = ""

    def __init__(self, *args, **data):
        if args:
            names = ("username", "password")
            if len(args) > len(names):
                raise TypeError("BasicAuthOption takes username and password")
            data.update(zip(names, args))
        BaseModel.__init__(self, **data)


class MaxRedirectsOption(RequestOption):
    """Follow up to ``value`` redirects. Redirects are not followed by default."""

    kind: Literal["max_redirects"] = "max_redirects"
    value: int = Field(..., ge=0)


class DisableSSLVerificationOption(RequestOption):
    kind: Literal["disable_ssl_verification"] = "disable_ssl_verification"


class TimeoutOption(RequestOption):
    """Transport timeout in seconds."""

    kind: Literal["timeout"] = "timeout"
    value: float = Field(..., gt=0)


AnyRequestOption = Union[
    SchemeOption,
    HostOption,
    PortOption,
    PathOption,
    MethodOption,
    HeadersOption,
    BasicAuthOption,
    MaxRedirectsOption,
    DisableSSLVerificationOption,
    TimeoutOption,
]
