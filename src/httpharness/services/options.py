"""Merge a test case's base request options with per-call overrides."""

from typing import List, Mapping, Optional, Sequence

from httpharness.models.options import HeadersOption, MethodOption, PathOption, RequestOption


def append_to_base_options(
    base_options: Sequence[RequestOption],
    path: str,
    method: str,
    headers: Optional[Mapping[str, str]] = None,
) -> List[RequestOption]:
    """Return a new option list: the base options, then path, method and headers.

    base_options is never modified. Headers are only appended when given.
    """
    options = list(base_options)
    options.append(PathOption(path))
    options.append(MethodOption(method))
    if headers is not None:
        options.append(HeadersOption(dict(headers)))
    return options
